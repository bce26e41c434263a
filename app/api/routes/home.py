from fastapi import APIRouter, Depends

from app.api import deps
from app.api.pages import build_page
from app.schemas.page import PageOut
from app.services.counter_store import CounterStore

router = APIRouter(tags=["Home"])


@router.get("/", name="Index", response_model=PageOut)
def index(counters: CounterStore = Depends(deps.get_counter_store)):
    return build_page(counters, "Home/Index")


@router.get("/privacy", name="Privacy", response_model=PageOut)
def privacy(counters: CounterStore = Depends(deps.get_counter_store)):
    return build_page(counters, "Home/Privacy")
