# backend/routes/stats.py

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.users import User, UserRole
from schemas.common import ActionResponse, ok
from schemas.stats import Dashboard, DailyCount
from utils.tokenJWT import get_current_user, role_required

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)


# === Endpoint 1: Dashboard for the caller's role ===

@router.get("/dashboard", response_model=ActionResponse[Dashboard])
def get_dashboard(
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(get_current_user),
):
    return ok(services.stats.dashboard(db, current_user))


# === Endpoint 2: Chart data, sign-ups per day ===

@router.get("/registrations", response_model=ActionResponse[List[DailyCount]])
def get_daily_registrations(
    days: int = Query(7, ge=1, le=90),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(role_required(UserRole.ADMINISTRATOR)),
):
    return ok(services.stats.daily_registrations(db, days))
