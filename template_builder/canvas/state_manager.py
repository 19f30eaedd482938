"""
Canvas State Manager
====================

Keeps one in-memory canvas session per editor: element store, interaction
engine and the export submission gate.
"""

import logging
from typing import Optional, Dict
from datetime import datetime
import uuid

from .element_store import ElementStore
from .interaction import CanvasInteractionEngine
from ..models.canvas_models import CanvasState

logger = logging.getLogger(__name__)


class CanvasSession:
    """State owned by one editor session."""

    def __init__(self, session_id: str):
        self.id = session_id
        self.created_at = datetime.now()
        self.updated_at: Optional[datetime] = None
        self.store = ElementStore()
        self.engine = CanvasInteractionEngine(self.store)
        self.submission_in_progress = False

    def touch(self) -> None:
        self.updated_at = datetime.now()

    def snapshot(self) -> CanvasState:
        return CanvasState(
            session_id=self.id,
            elements=self.store.elements,
            selected_element_id=self.store.selected_id,
            canvas_height=self.engine.canvas_height,
        )


class StateManager:
    """Manages canvas sessions."""

    def __init__(self):
        self._sessions: Dict[str, CanvasSession] = {}
        logger.info("[STATE-MANAGER] Initialized")

    def create_session(self, session_id: Optional[str] = None) -> str:
        """Create a new session with optional ID."""
        if session_id is None:
            session_id = str(uuid.uuid4())

        if session_id not in self._sessions:
            self._sessions[session_id] = CanvasSession(session_id)
            logger.info(f"[STATE-MANAGER] Created session {session_id}")
        return session_id

    def get_session(self, session_id: str) -> Optional[CanvasSession]:
        """Get session state."""
        return self._sessions.get(session_id)

    def clear_session(self, session_id: str) -> bool:
        """Clear all elements and the selection; abandons any running gesture."""
        session = self.get_session(session_id)
        if not session:
            return False

        session.engine.cancel()
        session.store.clear()
        session.touch()
        return True

    def remove_session(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.engine.close()
        logger.info(f"[STATE-MANAGER] Removed session {session_id}")
        return True

    def close(self) -> None:
        for session in self._sessions.values():
            session.engine.close()
        self._sessions.clear()
