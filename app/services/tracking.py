"""Per-request orchestration of session and action counting.

A request moves through two states. ``before_dispatch`` runs before the
downstream app sees the request and charges a new session against
``totalSessions``. ``before_send`` runs once, at the last point before the
response headers go out, when routing has already resolved which endpoint
served the request. Nothing here raises into the request pipeline.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, NamedTuple

from fastapi.routing import APIRoute

from app.services.counter_store import CounterStore
from app.services.counters import (
    SESSION_ACTIONS,
    TOTAL_SESSIONS,
    bump,
    drop_namespace,
    session_actions_key,
    total_actions_key,
)
from app.services.session_gate import SessionGate

logger = logging.getLogger("tracking")


class RouteId(NamedTuple):
    group: str
    action: str

    @property
    def key(self) -> str:
        return f"{self.group}/{self.action}"


def resolve_route_id(scope: Mapping[str, Any]) -> RouteId | None:
    """Identify the endpoint that served the request, if it is a tracked one.

    Tracked endpoints are FastAPI routes with at least one tag: the first tag
    is the group and the route name is the action. Untagged routes, mounts,
    unmatched paths and method mismatches (405) resolve to None.
    """
    route = scope.get("route")
    if not isinstance(route, APIRoute) or not route.tags:
        return None
    if scope.get("method") not in route.methods:
        return None
    group = route.tags[0]
    if not isinstance(group, str):
        group = getattr(group, "value", str(group))
    return RouteId(group, route.name)


class RequestTracker:
    PENDING = "pending"
    DISPATCHED = "dispatched"
    SENT = "sent"

    def __init__(
        self,
        counters: CounterStore,
        gate: SessionGate,
        *,
        reset_session_actions: bool = True,
    ):
        self.counters = counters
        self.gate = gate
        self.reset_session_actions = reset_session_actions
        self.state = self.PENDING
        self.session_started = False

    def before_dispatch(self) -> None:
        if self.state != self.PENDING:
            return
        self.state = self.DISPATCHED
        try:
            if not self.gate.is_first_request_of_session():
                return
            # One write: either the session charge and the reset both reach
            # the outgoing cookie, or neither does.
            mapping = bump(self.counters.read(), TOTAL_SESSIONS)
            if self.reset_session_actions:
                mapping = drop_namespace(mapping, SESSION_ACTIONS)
            self.counters.write(mapping)
            self.session_started = True
            logger.info("session started")
        except Exception:
            logger.exception("session tracking failed")

    def before_send(self, route_id: RouteId | None) -> None:
        if self.state == self.SENT:
            return
        if self.state == self.PENDING:
            self.before_dispatch()
        self.state = self.SENT
        if route_id is not None:
            try:
                self.counters.increment(
                    total_actions_key(route_id.key), session_actions_key(route_id.key)
                )
            except Exception:
                logger.exception(
                    "action tracking failed", extra={"event": {"route": route_id.key}}
                )
        if not self.session_started:
            return
        # The session charge is already in the outgoing cookie.
        try:
            self.gate.mark_session_started()
        except Exception:
            logger.exception("session could not be marked as started")
