"""Per-session narrative engines for hosts that serve several players."""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List

from storysim.core.types import ChoiceType
from storysim.services.errors import UnknownSessionError
from storysim.services.narrative_engine import ChoiceResult, NarrativeEngine, StoryView

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Session:
    engine: NarrativeEngine
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionService:
    """Maps session ids to isolated engines and serializes work per session."""

    def __init__(self) -> None:
        self._sessions: Dict[str, _Session] = {}
        self._registry_lock = threading.Lock()

    def create_session(self) -> str:
        session_id = uuid.uuid4().hex
        with self._registry_lock:
            self._sessions[session_id] = _Session(engine=NarrativeEngine())
        logger.info("Created session %s", session_id)
        return session_id

    def close_session(self, session_id: str) -> None:
        with self._registry_lock:
            if self._sessions.pop(session_id, None) is None:
                raise UnknownSessionError(session_id)
        logger.info("Closed session %s", session_id)

    def session_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._sessions)

    def view(self, session_id: str) -> StoryView:
        session = self._get(session_id)
        with session.lock:
            return session.engine.view()

    def apply_choice(self, session_id: str, choice: ChoiceType) -> ChoiceResult:
        """Apply a choice to one session; raises InvalidChoiceError like the engine."""
        session = self._get(session_id)
        with session.lock:
            return session.engine.apply_choice(choice)

    def reset(self, session_id: str) -> StoryView:
        session = self._get(session_id)
        with session.lock:
            session.engine.reset()
            return session.engine.view()

    def _get(self, session_id: str) -> _Session:
        with self._registry_lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise UnknownSessionError(session_id) from None
