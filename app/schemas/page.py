from pydantic import BaseModel


class PageOut(BaseModel):
    route: str
    # Counts as carried by the incoming request, before this visit is added.
    total_visits: int | None = None
    session_visits: int | None = None


class ActionCountOut(BaseModel):
    route: str
    count: int
