# backend/routes/admin.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.application import ApplicationStatus
from models.project import ProjectCategory, ProjectStatus
from models.users import User, UserRole
from repositories.applications import ApplicationFilters
from repositories.completions import CompletionFilters
from repositories.projects import ProjectFilters
from repositories.users import UserFilters
from routes.deps import pagination_params
from schemas.application import AdminApplicationUpdate, ApplicationResponse, ApplicationSortField
from schemas.common import ActionResponse, Page, PaginationParams, ok
from schemas.completion import CompletionResponse, CompletionSortField, CompletionUpdate
from schemas.platform_config import AdminConfigResponse, ConfigUpdate
from schemas.project import AssignCoordinatorRequest, ProjectRejectRequest, ProjectResponse, ProjectSortField, ProjectUpdate
from schemas.user import (
    OrganizationWithUserResponse,
    SuspendRequest,
    UserResponse,
    UserWithProfileResponse,
    user_with_profile_response,
)
from utils.audit import client_ip, write_log
from utils.tokenJWT import role_required

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_required = role_required(UserRole.ADMINISTRATOR)


# --- Users ---

# Retrieve a list of users with filtering, sorting, and pagination
@router.get("/users", response_model=ActionResponse[Page[UserResponse]])
def list_users(
    q: Optional[str] = Query(None, description="Search in name and e-mail"),
    role: Optional[UserRole] = Query(None),
    is_suspended: Optional[bool] = Query(None),
    sort_by: Literal["created_at", "name", "email", "role"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    filters = UserFilters(search=q, role=role, is_suspended=is_suspended)
    return ok(services.users.list_users(db, pagination, filters, sort_by, order))


@router.get("/users/{user_id}", response_model=ActionResponse[UserWithProfileResponse])
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    return ok(user_with_profile_response(services.users.get_user_profile(db, user_id)))


@router.post("/users/{user_id}/suspend", response_model=ActionResponse[UserResponse])
def suspend_user(
    user_id: str,
    request: Request,
    payload: Optional[SuspendRequest] = None,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    user = services.users.suspend(db, current_user, user_id)
    write_log(db, user_id=current_user.id, action="SUSPEND", resource="users", ip=client_ip(request),
              meta={"target_user_id": user_id, "reason": payload.reason if payload else None})
    return ok(user)


@router.post("/users/{user_id}/unsuspend", response_model=ActionResponse[UserResponse])
def unsuspend_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    user = services.users.unsuspend(db, current_user, user_id)
    write_log(db, user_id=current_user.id, action="UNSUSPEND", resource="users", ip=client_ip(request),
              meta={"target_user_id": user_id})
    return ok(user)


@router.delete("/users/{user_id}", response_model=ActionResponse[None])
def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    services.users.delete_user(db, current_user, user_id)
    write_log(db, user_id=current_user.id, action="DELETE", resource="users", ip=client_ip(request),
              meta={"target_user_id": user_id})
    return ok()


# --- Organizations ---

@router.get("/organizations/pending", response_model=ActionResponse[List[OrganizationWithUserResponse]])
def pending_organizations(
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    return ok(services.organizations.get_pending_verifications(db))


@router.post("/organizations/{user_id}/verify", response_model=ActionResponse[OrganizationWithUserResponse])
def verify_organization(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    organization = services.organizations.verify(db, user_id)
    write_log(db, user_id=current_user.id, action="VERIFY", resource="organizations", ip=client_ip(request),
              meta={"organization_user_id": user_id})
    return ok(organization)


# --- Projects ---

@router.get("/projects", response_model=ActionResponse[Page[ProjectResponse]])
def list_projects(
    q: Optional[str] = Query(None, description="Search in title and description"),
    status: Optional[ProjectStatus] = Query(None),
    category: Optional[ProjectCategory] = Query(None),
    organization_id: Optional[str] = Query(None),
    coordinator_id: Optional[str] = Query(None),
    sort_by: ProjectSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    filters = ProjectFilters(
        search=q, status=status, category=category, organization_id=organization_id, coordinator_id=coordinator_id
    )
    return ok(services.projects.list_projects(db, pagination, filters, sort_by, order))


@router.patch("/projects/{project_id}", response_model=ActionResponse[ProjectResponse])
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    project = services.projects.update_project(db, current_user, project_id, payload.model_dump(exclude_unset=True))
    return ok(project)


@router.post("/projects/{project_id}/archive", response_model=ActionResponse[ProjectResponse])
def archive_project(
    project_id: str,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    project = services.projects.archive(db, current_user, project_id)
    write_log(db, user_id=current_user.id, action="ARCHIVE", resource="projects", ip=client_ip(request),
              meta={"project_id": project_id})
    return ok(project)


@router.post("/projects/{project_id}/assign-coordinator", response_model=ActionResponse[ProjectResponse])
def assign_coordinator(
    project_id: str,
    payload: AssignCoordinatorRequest,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    project = services.projects.assign_coordinator(db, current_user, project_id, payload.coordinator_user_id)
    return ok(project)


@router.post("/projects/{project_id}/reject", response_model=ActionResponse[ProjectResponse])
def reject_project(
    project_id: str,
    payload: ProjectRejectRequest,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    return ok(services.projects.reject(db, current_user, project_id, payload.reason))


@router.delete("/projects/{project_id}", response_model=ActionResponse[None])
def delete_project(
    project_id: str,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    services.projects.delete_project(db, current_user, project_id)
    write_log(db, user_id=current_user.id, action="DELETE", resource="projects", ip=client_ip(request),
              meta={"project_id": project_id})
    return ok()


# --- Applications ---

@router.get("/applications", response_model=ActionResponse[Page[ApplicationResponse]])
def list_applications(
    status: Optional[ApplicationStatus] = Query(None),
    project_id: Optional[str] = Query(None),
    student_id: Optional[str] = Query(None),
    organization_id: Optional[str] = Query(None),
    sort_by: ApplicationSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    filters = ApplicationFilters(
        status=status, project_id=project_id, student_id=student_id, organization_id=organization_id
    )
    return ok(services.applications.list_applications(db, pagination, filters, sort_by, order))


@router.patch("/applications/{application_id}", response_model=ActionResponse[ApplicationResponse])
def update_application(
    application_id: str,
    payload: AdminApplicationUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    application = services.applications.update_application(
        db, application_id, payload.model_dump(exclude_unset=True)
    )
    return ok(application)


@router.delete("/applications/{application_id}", response_model=ActionResponse[None])
def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    services.applications.delete_application(db, application_id)
    return ok()


# --- Completions ---

@router.get("/completions", response_model=ActionResponse[Page[CompletionResponse]])
def list_completions(
    project_id: Optional[str] = Query(None),
    student_id: Optional[str] = Query(None),
    organization_id: Optional[str] = Query(None),
    sort_by: CompletionSortField = "completed_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    filters = CompletionFilters(project_id=project_id, student_id=student_id, organization_id=organization_id)
    return ok(services.completions.list_completions(db, pagination, filters, sort_by, order))


@router.patch("/completions/{completion_id}", response_model=ActionResponse[CompletionResponse])
def update_completion(
    completion_id: str,
    payload: CompletionUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    completion = services.completions.update_completion(db, completion_id, payload.model_dump(exclude_unset=True))
    return ok(completion)


@router.delete("/completions/{completion_id}", response_model=ActionResponse[None])
def delete_completion(
    completion_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    services.completions.delete_completion(db, completion_id)
    return ok()


# --- Platform config ---

@router.patch("/config", response_model=ActionResponse[AdminConfigResponse])
def update_config(
    payload: ConfigUpdate,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    data = payload.model_dump(exclude_unset=True)
    config = services.config.update(db, data)
    write_log(db, user_id=current_user.id, action="CONFIG_UPDATE", resource="config", ip=client_ip(request),
              meta={"fields": sorted(k for k in data if k != "smtp_password")})
    return ok(config)


@router.get("/config", response_model=ActionResponse[AdminConfigResponse])
def get_config(
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(admin_required),
):
    return ok(services.config.get_config(db))
