"""JSON codec for the counter mapping carried in the tracking cookie."""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping

logger = logging.getLogger("tracking")


def _coerce_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        count = value
    elif isinstance(value, str):
        try:
            count = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return count if count >= 0 else None


def decode(raw: str | None) -> dict[str, int]:
    """Parse a cookie value into a counter mapping.

    Absent, unparsable or non-object input yields an empty mapping. Entries
    whose value is not a non-negative integer (or integer string) are dropped
    one by one so a single bad entry does not erase the others.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        logger.warning("counter cookie is not valid JSON, starting from zero")
        return {}
    if not isinstance(data, dict):
        logger.warning("counter cookie is not a JSON object, starting from zero")
        return {}
    mapping: dict[str, int] = {}
    dropped = []
    for name, value in data.items():
        count = _coerce_count(value)
        if count is None:
            dropped.append(name)
            continue
        mapping[name] = count
    if dropped:
        logger.warning(
            "dropped unreadable counters", extra={"event": {"counters": dropped}}
        )
    return mapping


def encode(mapping: Mapping[str, int]) -> str:
    return json.dumps(dict(mapping), sort_keys=True, separators=(",", ":"))
