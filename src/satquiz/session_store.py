import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Dict, Iterator, Optional

import redis

from .config import settings
from .models import SessionData

logger = logging.getLogger(__name__)


# --- Strategy Pattern: Session Storage ---
class SessionStore(ABC):
    """Holds live sessions keyed by the id kept in the browser cookie."""

    def __init__(self, timeout_minutes: int = settings.SESSION_TIMEOUT_MINUTES):
        self.timeout = timedelta(minutes=timeout_minutes)

    @abstractmethod
    def get(self, session_id: str) -> Optional[SessionData]:
        pass

    @abstractmethod
    def save(self, session_id: str, session: SessionData):
        pass

    @abstractmethod
    def delete(self, session_id: str):
        pass

    @abstractmethod
    def lock(self, session_id: str):
        """Context manager serialising read-modify-write cycles on one session."""

    def _expired(self, session: SessionData) -> bool:
        return datetime.now() - session.created_at > self.timeout


class RedisSessionStore(SessionStore):
    LOCK_TIMEOUT_SECONDS = 10

    def __init__(self, url: str = settings.REDIS_URL, **kwargs):
        super().__init__(**kwargs)
        self.client = redis.from_url(url, decode_responses=True)

    def get(self, session_id: str) -> Optional[SessionData]:
        raw = self.client.get(session_id)
        if not raw:
            return None
        session = SessionData.model_validate_json(raw)
        if self._expired(session):
            self.delete(session_id)
            return None
        return session

    def save(self, session_id: str, session: SessionData):
        self.client.set(session_id, session.model_dump_json(), ex=self.timeout)

    def delete(self, session_id: str):
        self.client.delete(session_id)

    def lock(self, session_id: str):
        return self.client.lock(
            f"lock:{session_id}", timeout=self.LOCK_TIMEOUT_SECONDS
        )


class MemorySessionStore(SessionStore):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.sessions: Dict[str, SessionData] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, session_id: str) -> Optional[SessionData]:
        self._purge_expired()
        session = self.sessions.get(session_id)
        if session is None:
            return None
        return session.model_copy(deep=True)

    def save(self, session_id: str, session: SessionData):
        self._purge_expired()
        self.sessions[session_id] = session.model_copy(deep=True)

    def delete(self, session_id: str):
        with self._guard:
            self.sessions.pop(session_id, None)
            self._locks.pop(session_id, None)

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        with self._guard:
            session_lock = self._locks.setdefault(session_id, threading.Lock())
        with session_lock:
            yield

    def _purge_expired(self):
        with self._guard:
            expired = [sid for sid, s in self.sessions.items() if self._expired(s)]
            for sid in expired:
                del self.sessions[sid]
            for sid in [sid for sid in self._locks if sid not in self.sessions]:
                del self._locks[sid]
        if expired:
            logger.info(f"Dropped {len(expired)} expired sessions")


def create_session_store(backend: str = settings.SESSION_BACKEND) -> SessionStore:
    if backend == "memory":
        return MemorySessionStore()
    elif backend == "redis":
        return RedisSessionStore()
    raise ValueError(f"Unknown session backend: {backend}")
