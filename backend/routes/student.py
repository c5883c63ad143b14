# backend/routes/student.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.application import ApplicationStatus
from models.users import User, UserRole
from repositories.applications import ApplicationFilters
from routes.deps import pagination_params
from schemas.application import ApplicationResponse, ApplicationSortField
from schemas.common import ActionResponse, Page, PaginationParams, ok
from schemas.completion import CompletionResponse
from utils.tokenJWT import role_required

router = APIRouter(prefix="/student", tags=["Student"])

student_required = role_required(UserRole.STUDENT)


@router.get("/applications", response_model=ActionResponse[Page[ApplicationResponse]])
def list_own_applications(
    status: Optional[ApplicationStatus] = Query(None),
    sort_by: ApplicationSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(student_required),
):
    filters = ApplicationFilters(status=status)
    return ok(services.applications.list_for_student(db, current_user, pagination, filters, sort_by, order))


@router.post("/applications/{application_id}/withdraw", response_model=ActionResponse[ApplicationResponse])
def withdraw_application(
    application_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(student_required),
):
    return ok(services.applications.withdraw(db, current_user, application_id))


# Completed projects the student shows in their portfolio
@router.get("/portfolio", response_model=ActionResponse[Page[CompletionResponse]])
def portfolio(
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(student_required),
):
    return ok(services.completions.portfolio(db, current_user, pagination))
