from __future__ import annotations

from typing import Protocol

SESSION_TRACKED_KEY = "CurrentSessionTracked"


class SessionData(Protocol):
    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...


class SessionGate:
    """Tells whether the current session has already been counted."""

    def __init__(self, session: SessionData):
        self.session = session

    def is_first_request_of_session(self) -> bool:
        return self.session.get(SESSION_TRACKED_KEY) is None

    def mark_session_started(self) -> None:
        self.session.set(SESSION_TRACKED_KEY, b"true")
