from fastapi import APIRouter, Depends, Path

from app.api import deps
from app.api.responses import NOT_FOUND
from app.schemas.page import ActionCountOut
from app.services.counter_store import CounterStore

router = APIRouter(prefix="/actions", tags=["Actions"])

NAME_PATTERN = r"^[A-Za-z0-9_\-]+$"


@router.get(
    "/{group}/{action}",
    name="Count",
    response_model=ActionCountOut,
    responses=NOT_FOUND,
)
def action_count(
    group: str = Path(max_length=100, pattern=NAME_PATTERN),
    action: str = Path(max_length=100, pattern=NAME_PATTERN),
    counters: CounterStore = Depends(deps.get_counter_store),
):
    route_id = f"{group}/{action}"
    return ActionCountOut(
        route=route_id, count=deps.require_action_count(counters, route_id)
    )
