"""In-memory registry of live editing sessions."""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict

from backend import config
from engine.editor.elements import create_session_state
from engine.editor.session import EditingSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Holds one EditingSession per session id.

    Sessions live only in process memory. When MAX_SESSIONS is reached the
    oldest session is evicted to make room for a new one.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._sessions: OrderedDict[str, EditingSession] = OrderedDict()
        self._max_sessions = max_sessions if max_sessions is not None else config.settings.MAX_SESSIONS

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, template_id: str = "basic") -> tuple[str, EditingSession]:
        """
        Start a session on the built-in templates, viewing `template_id`.

        Raises:
            ValueError: If template_id is not a built-in template
        """
        state = create_session_state(current_template_id=template_id)
        if state["current_template_id"] != template_id:
            raise ValueError(f"Unknown template: {template_id}")

        while self._max_sessions and len(self._sessions) >= self._max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted editing session %s (limit %d reached)", evicted_id, self._max_sessions)

        session_id = str(uuid.uuid4())
        self._sessions[session_id] = EditingSession(
            state,
            history_limit=config.settings.HISTORY_LIMIT,
            recent_kinds_limit=config.settings.RECENT_KINDS_LIMIT,
        )
        logger.info("Created editing session %s on template %s", session_id, template_id)
        return session_id, self._sessions[session_id]

    def get(self, session_id: str) -> EditingSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        """Drop a session. Returns False if it did not exist."""
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.info("Removed editing session %s", session_id)
        return True

    def clear(self) -> None:
        self._sessions.clear()


# Singleton instance
session_registry = SessionRegistry()
