# backend/routes/coordinator.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.project import ProjectStatus
from models.users import User, UserRole
from repositories.projects import ProjectFilters
from routes.deps import pagination_params
from schemas.common import ActionResponse, Page, PaginationParams, ok
from schemas.project import ProjectRejectRequest, ProjectResponse, ProjectSortField, ProjectStatusChange
from utils.tokenJWT import role_required

router = APIRouter(prefix="/coordinator", tags=["Coordinator"])

coordinator_required = role_required(UserRole.COORDINATOR)


# Projects assigned to the current coordinator
@router.get("/projects", response_model=ActionResponse[Page[ProjectResponse]])
def list_assigned_projects(
    q: Optional[str] = Query(None, description="Search in title and description"),
    status: Optional[ProjectStatus] = Query(None),
    sort_by: ProjectSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(coordinator_required),
):
    filters = ProjectFilters(search=q, status=status)
    return ok(services.projects.list_for_coordinator(db, current_user, pagination, filters, sort_by, order))


# Projects waiting for a review, not yet assigned to anyone
@router.get("/projects/pending", response_model=ActionResponse[Page[ProjectResponse]])
def list_pending_projects(
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(coordinator_required),
):
    filters = ProjectFilters(status=ProjectStatus.PENDING_REVIEW)
    return ok(services.projects.list_projects(db, pagination, filters))


# Move an assigned project along its lifecycle (publish, start, complete)
@router.post("/projects/{project_id}/status", response_model=ActionResponse[ProjectResponse])
def change_project_status(
    project_id: str,
    payload: ProjectStatusChange,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(coordinator_required),
):
    return ok(services.projects.change_status(db, current_user, project_id, payload.status))


# Send a project under review back to its organization
@router.post("/projects/{project_id}/reject", response_model=ActionResponse[ProjectResponse])
def reject_project(
    project_id: str,
    payload: ProjectRejectRequest,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(coordinator_required),
):
    return ok(services.projects.reject(db, current_user, project_id, payload.reason))
