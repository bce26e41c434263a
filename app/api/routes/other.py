from fastapi import APIRouter, Depends

from app.api import deps
from app.api.pages import build_page
from app.schemas.page import PageOut
from app.services.counter_store import CounterStore

router = APIRouter(tags=["Other"])


@router.get("/other", name="Index", response_model=PageOut)
def index(counters: CounterStore = Depends(deps.get_counter_store)):
    return build_page(counters, "Other/Index")
