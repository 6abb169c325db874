"""
Session Store Service - In-memory storage for claim sessions with TTL.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from claimassist.core.config import settings
from claimassist.core.logging import logger


class SessionStore(ABC):
    """Abstract base class for claim session storage."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Any]:
        """Get a session by ID."""
        pass

    @abstractmethod
    def set(self, session_id: str, data: Any, ttl_hours: int = 24) -> None:
        """Set a session with TTL."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Delete a session."""
        pass


class InMemorySessionStore(SessionStore):
    """Process-local session store. Sessions are lost on restart."""

    def __init__(self):
        self._sessions: Dict[str, Any] = {}
        self._expiry: Dict[str, datetime] = {}

    def _cleanup_expired(self):
        """Remove expired sessions."""
        now = datetime.utcnow()
        expired = [k for k, v in self._expiry.items() if v < now]
        for key in expired:
            self._sessions.pop(key, None)
            self._expiry.pop(key, None)
        if expired:
            logger.debug(f"Expired {len(expired)} claim session(s)")

    def get(self, session_id: str) -> Optional[Any]:
        self._cleanup_expired()
        return self._sessions.get(session_id)

    def set(self, session_id: str, data: Any, ttl_hours: int = 24) -> None:
        self._sessions[session_id] = data
        self._expiry[session_id] = datetime.utcnow() + timedelta(hours=ttl_hours)

    def delete(self, session_id: str) -> bool:
        if session_id in self._sessions:
            del self._sessions[session_id]
            self._expiry.pop(session_id, None)
            return True
        return False


# Singleton session store instance
_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get the session store instance (creates if needed)."""
    global _session_store
    if _session_store is None:
        logger.info(f"Using in-memory session store (ttl={settings.SESSION_TTL_HOURS}h)")
        _session_store = InMemorySessionStore()
    return _session_store
