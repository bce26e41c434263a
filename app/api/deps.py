from fastapi import HTTPException, Request, status

from app.core.config import settings
from app.core.cookies import ResponseCookieTransport
from app.services.counter_store import CounterStore


def get_counter_store(request: Request) -> CounterStore:
    counters = getattr(request.state, "counter_store", None)
    if counters is None:
        # Tracking middleware not installed: read-only view of the request cookie.
        counters = CounterStore(
            ResponseCookieTransport(request.cookies),
            cookie_name=settings.counter_cookie_name,
        )
    return counters


def require_action_count(counters: CounterStore, route_id: str) -> int:
    count = counters.get_action_count(route_id)
    if count is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Route never visited"
        )
    return count
