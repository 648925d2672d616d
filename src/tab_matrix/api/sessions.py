"""In-memory store of analysis sessions for the API."""

import logging
from typing import Optional

from tab_matrix.pipeline import AnalysisSession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Map session IDs to ``AnalysisSession`` objects.

    One store lives on each application instance; nothing is persisted.
    """

    def __init__(self):
        self._sessions: dict[str, AnalysisSession] = {}

    def create(self) -> AnalysisSession:
        session = AnalysisSession()
        self._sessions[session.session_id] = session
        logger.info("Created session %s", session.session_id)
        return session

    def get(self, session_id: str) -> Optional[AnalysisSession]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.clear()
        return True

    def __len__(self) -> int:
        return len(self._sessions)
