from app.schemas.page import PageOut
from app.services.counter_store import CounterStore
from app.services.counters import session_actions_key


def build_page(counters: CounterStore, route_id: str) -> PageOut:
    return PageOut(
        route=route_id,
        total_visits=counters.get_action_count(route_id),
        session_visits=counters.get(session_actions_key(route_id)),
    )
