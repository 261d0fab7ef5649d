"""Service layer exports."""

from .errors import InvalidChoiceError, NarrativeStateError, UnknownSessionError
from .narrative_engine import (
    ChoiceIgnoredEvent,
    ChoiceResult,
    CorruptionEvent,
    EndingReachedEvent,
    ItemAcquiredEvent,
    KingBefriendedEvent,
    MoralityChangedEvent,
    NarrativeEngine,
    RetreatEvent,
    SceneChangedEvent,
    StoryEvent,
    StoryView,
    available_choices,
)
from .session_service import SessionService

__all__ = [
    "InvalidChoiceError",
    "NarrativeStateError",
    "UnknownSessionError",
    "ChoiceIgnoredEvent",
    "ChoiceResult",
    "CorruptionEvent",
    "EndingReachedEvent",
    "ItemAcquiredEvent",
    "KingBefriendedEvent",
    "MoralityChangedEvent",
    "NarrativeEngine",
    "RetreatEvent",
    "SceneChangedEvent",
    "StoryEvent",
    "StoryView",
    "available_choices",
    "SessionService",
]
