# backend/routes/logs.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.users import User, UserRole
from repositories.logs import LogFilters
from routes.deps import pagination_params
from schemas.common import ActionResponse, Page, PaginationParams, ok
from schemas.log import LogResponse
from utils.tokenJWT import role_required

router = APIRouter(prefix="/logs", tags=["Logs"])


def _parse_date(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    if not value:
        return None
    # Add 23:59:59 so a bare end date covers the whole day
    if end_of_day and len(value) == 10:
        value += " 23:59:59"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None  # Ignore malformed dates


@router.get("", response_model=ActionResponse[Page[LogResponse]])
def get_logs(
    action: Optional[str] = Query(None, description="Filter by action"),
    user_id: Optional[str] = Query(None, description="Filter by acting user id"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    date_from: Optional[str] = Query(None, description="Date from (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="Date to (YYYY-MM-DD)"),
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(role_required(UserRole.ADMINISTRATOR)),
):
    filters = LogFilters(
        action=action,
        resource=resource,
        user_id=user_id,
        status=status,
        date_from=_parse_date(date_from),
        date_to=_parse_date(date_to, end_of_day=True),
    )
    return ok(services.logs.find_many(db, pagination, filters))
