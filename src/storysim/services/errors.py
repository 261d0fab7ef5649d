"""Service-layer exceptions."""
from __future__ import annotations

from typing import Sequence

from storysim.core.types import ChoiceType, SceneID


class InvalidChoiceError(ValueError):
    """Raised when a choice is not available in the current scene and state."""

    def __init__(self, scene: SceneID, choice: object, allowed: Sequence[ChoiceType]) -> None:
        self.scene = scene
        self.choice = choice
        self.allowed = tuple(allowed)
        allowed_names = ", ".join(item.name for item in self.allowed) or "none"
        choice_name = choice.name if isinstance(choice, ChoiceType) else repr(choice)
        super().__init__(
            f"Choice {choice_name} is not available in scene {scene.name} (allowed: {allowed_names})."
        )


class NarrativeStateError(RuntimeError):
    """Raised when the engine meets a scene or choice value it has no rule for."""


class UnknownSessionError(KeyError):
    """Raised when a session id does not refer to a live session."""
