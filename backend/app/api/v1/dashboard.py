from __future__ import annotations

from fastapi import APIRouter

from app.api.deps import CurrentUser
from app.db import SessionDep
from app.schemas import DashboardRead
from app.services.dashboard import dashboard_for

router = APIRouter()


@router.get(
    "/",
    response_model=DashboardRead,
    response_model_exclude_none=True,
    summary="Get dashboard counters",
)
def read_dashboard(
    session: SessionDep,
    current_user: CurrentUser,
) -> DashboardRead:
    """Volunteers see their applied and upcoming events, managers their pending applications."""
    return DashboardRead.model_validate(dashboard_for(session, current_user))
