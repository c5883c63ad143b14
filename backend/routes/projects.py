# backend/routes/projects.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.project import ProjectCategory
from models.users import User, UserRole
from repositories.projects import ProjectFilters
from routes.deps import get_optional_user, pagination_params
from schemas.application import ApplicationCreate, ApplicationResponse
from schemas.common import ActionResponse, Page, PaginationParams, ok
from schemas.project import ProjectResponse, ProjectSortField
from utils.tokenJWT import role_required

router = APIRouter(prefix="/projects", tags=["Projects"])


# Published projects open for applications
@router.get("", response_model=ActionResponse[Page[ProjectResponse]])
def list_published_projects(
    q: Optional[str] = Query(None, description="Search in title and description"),
    category: Optional[ProjectCategory] = Query(None),
    sort_by: ProjectSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    filters = ProjectFilters(search=q, category=category)
    return ok(services.projects.list_published(db, pagination, filters, sort_by, order))


@router.get("/{project_id}", response_model=ActionResponse[ProjectResponse])
def get_project(
    project_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: Optional[User] = Depends(get_optional_user),
):
    return ok(services.projects.get_visible_project(db, current_user, project_id))


@router.post("/{project_id}/apply", response_model=ActionResponse[ApplicationResponse], status_code=201)
def apply_to_project(
    project_id: str,
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(role_required(UserRole.STUDENT)),
):
    application = services.applications.apply(db, current_user, project_id, payload.motivation_statement)
    return ok(application)
