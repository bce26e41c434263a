"""Counter names and the pure increment/reset operations on a mapping."""
from __future__ import annotations

from typing import Mapping

TOTAL_SESSIONS = "totalSessions"
TOTAL_ACTIONS = "totalActions/"
SESSION_ACTIONS = "sessionActions/"


def total_actions_key(route_id: str) -> str:
    return f"{TOTAL_ACTIONS}{route_id}"


def session_actions_key(route_id: str) -> str:
    return f"{SESSION_ACTIONS}{route_id}"


def bump(mapping: Mapping[str, int], name: str) -> dict[str, int]:
    updated = dict(mapping)
    updated[name] = updated.get(name, 0) + 1
    return updated


def drop_namespace(mapping: Mapping[str, int], prefix: str) -> dict[str, int]:
    return {name: count for name, count in mapping.items() if not name.startswith(prefix)}
