"""Server-held visitor sessions with idle expiry and Redis fallback."""
from __future__ import annotations

import logging
import secrets
import time
from threading import Lock
from typing import Protocol

import redis

from app.core.config import settings

logger = logging.getLogger("tracking")


class SessionStore(Protocol):
    def load(self, session_id: str) -> dict[str, bytes] | None: ...
    def save(self, session_id: str, data: dict[str, bytes], ttl_seconds: int) -> None: ...
    def delete(self, session_id: str) -> None: ...


class InMemorySessionStore:
    def __init__(self):
        self._sessions: dict[str, tuple[dict[str, bytes], float]] = {}
        self._lock = Lock()

    def load(self, session_id: str) -> dict[str, bytes] | None:
        now = time.time()
        with self._lock:
            expired = [k for k, (_, exp) in self._sessions.items() if exp <= now]
            for k in expired:
                self._sessions.pop(k, None)
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            return dict(entry[0])

    def save(self, session_id: str, data: dict[str, bytes], ttl_seconds: int) -> None:
        with self._lock:
            self._sessions[session_id] = (dict(data), time.time() + ttl_seconds)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


class RedisSessionStore:
    def __init__(self, url: str):
        self.client = redis.from_url(
            url,
            decode_responses=False,
            socket_connect_timeout=1,
            socket_timeout=1,
        )

    def load(self, session_id: str) -> dict[str, bytes] | None:
        data = self.client.hgetall(f"session:{session_id}")
        if not data:
            return None
        return {key.decode("utf-8"): value for key, value in data.items()}

    def save(self, session_id: str, data: dict[str, bytes], ttl_seconds: int) -> None:
        key = f"session:{session_id}"
        pipe = self.client.pipeline()
        pipe.delete(key)
        if data:
            pipe.hset(key, mapping=data)
            pipe.expire(key, ttl_seconds)
        pipe.execute()

    def delete(self, session_id: str) -> None:
        self.client.delete(f"session:{session_id}")


class RequestSession:
    """The current visitor's session as seen by one request."""

    def __init__(self, store: SessionStore, session_id: str | None, idle_timeout: int):
        self.store = store
        self.idle_timeout = idle_timeout
        data = None
        if session_id:
            try:
                data = store.load(session_id)
            except Exception:
                logger.exception("session could not be loaded, starting a new one")
        self.is_new = data is None
        self.id = session_id if data is not None else secrets.token_urlsafe(32)
        self._data: dict[str, bytes] = dict(data or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def commit(self) -> bool:
        """Persist the session and slide its idle timeout.

        Returns True when the client has to be sent the session id.
        """
        if not self._data:
            return False
        self.store.save(self.id, self._data, self.idle_timeout)
        return self.is_new


def get_session_store() -> SessionStore:
    if settings.session_backend.lower() != "redis":
        return InMemorySessionStore()
    try:
        store = RedisSessionStore(settings.redis_url)
        store.client.ping()
        return store
    except Exception:
        logger.warning("redis unavailable, falling back to in-memory sessions")
        return InMemorySessionStore()


session_store: SessionStore = get_session_store()
