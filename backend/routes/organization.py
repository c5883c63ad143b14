# backend/routes/organization.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.application import ApplicationStatus
from models.project import ProjectCategory, ProjectStatus
from models.users import User, UserRole
from repositories.applications import ApplicationFilters
from repositories.projects import ProjectFilters
from routes.deps import pagination_params
from schemas.application import ApplicationResponse, ApplicationReview, ApplicationSortField
from schemas.common import ActionResponse, Page, PaginationParams, ok
from schemas.completion import CompletionCreate, CompletionResponse
from schemas.project import ProjectCreate, ProjectResponse, ProjectSortField, ProjectUpdate
from utils.audit import client_ip, write_log
from utils.tokenJWT import role_required

router = APIRouter(prefix="/organization", tags=["Organization"])

organization_required = role_required(UserRole.ORGANIZATION)


# --- Projects ---

# Own projects with filtering, sorting, and pagination
@router.get("/projects", response_model=ActionResponse[Page[ProjectResponse]])
def list_own_projects(
    q: Optional[str] = Query(None, description="Search in title and description"),
    status: Optional[ProjectStatus] = Query(None),
    category: Optional[ProjectCategory] = Query(None),
    sort_by: ProjectSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    filters = ProjectFilters(search=q, status=status, category=category)
    return ok(services.projects.list_for_organization(db, current_user, pagination, filters, sort_by, order))


@router.post("/projects", response_model=ActionResponse[ProjectResponse], status_code=201)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    return ok(services.projects.create_project(db, current_user, payload.model_dump()))


@router.get("/projects/{project_id}", response_model=ActionResponse[ProjectResponse])
def get_own_project(
    project_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    return ok(services.projects.get_visible_project(db, current_user, project_id))


@router.patch("/projects/{project_id}", response_model=ActionResponse[ProjectResponse])
def update_own_project(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    project = services.projects.update_project(db, current_user, project_id, payload.model_dump(exclude_unset=True))
    return ok(project)


@router.delete("/projects/{project_id}", response_model=ActionResponse[None])
def delete_own_project(
    project_id: str,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    services.projects.delete_project(db, current_user, project_id)
    write_log(db, user_id=current_user.id, action="DELETE", resource="projects", ip=client_ip(request),
              meta={"project_id": project_id})
    return ok()


# Send a draft to the administrators for review
@router.post("/projects/{project_id}/submit", response_model=ActionResponse[ProjectResponse])
def submit_project(
    project_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    return ok(services.projects.submit_for_review(db, current_user, project_id))


@router.post("/projects/{project_id}/archive", response_model=ActionResponse[ProjectResponse])
def archive_own_project(
    project_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    return ok(services.projects.archive(db, current_user, project_id))


# Record a student's finished work on a completed project
@router.post(
    "/projects/{project_id}/completions",
    response_model=ActionResponse[CompletionResponse],
    status_code=201,
)
def record_completion(
    project_id: str,
    payload: CompletionCreate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    return ok(services.completions.record_completion(db, current_user, project_id, payload.model_dump()))


# --- Applications ---

@router.get("/applications", response_model=ActionResponse[Page[ApplicationResponse]])
def list_applications(
    status: Optional[ApplicationStatus] = Query(None),
    project_id: Optional[str] = Query(None),
    sort_by: ApplicationSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    filters = ApplicationFilters(status=status, project_id=project_id)
    return ok(services.applications.list_for_organization(db, current_user, pagination, filters, sort_by, order))


@router.post("/applications/{application_id}/accept", response_model=ActionResponse[ApplicationResponse])
def accept_application(
    application_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    return ok(services.applications.accept(db, current_user, application_id))


@router.post("/applications/{application_id}/reject", response_model=ActionResponse[ApplicationResponse])
def reject_application(
    application_id: str,
    payload: Optional[ApplicationReview] = None,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(organization_required),
):
    reason = payload.reason if payload else None
    return ok(services.applications.reject(db, current_user, application_id, reason))
