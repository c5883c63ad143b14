# backend/services/projects.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional, Set, Tuple

from sqlalchemy.orm import Session

from models.project import Project, ProjectStatus
from models.users import Coordinator, Organization, User, UserRole
from repositories.profiles import CoordinatorRepository, OrganizationRepository
from repositories.projects import ProjectFilters, ProjectRepository
from schemas.common import PageResult, PaginationParams
from utils.errors import AuthorizationError, BusinessRuleError, NotFoundError

logger = logging.getLogger(__name__)

# Who may act on a project
ADMIN = "admin"
OWNER = "owner"  # organization that created the project
ASSIGNED_COORDINATOR = "assigned_coordinator"
REVIEWER = "reviewer"  # any coordinator, for projects awaiting review

# Allowed status changes and who may perform them
TRANSITIONS: Dict[Tuple[ProjectStatus, ProjectStatus], FrozenSet[str]] = {
    (ProjectStatus.DRAFT, ProjectStatus.PENDING_REVIEW): frozenset({OWNER}),
    (ProjectStatus.PENDING_REVIEW, ProjectStatus.COORDINATOR_ASSIGNED): frozenset({ADMIN}),
    (ProjectStatus.PENDING_REVIEW, ProjectStatus.DRAFT): frozenset({ADMIN, REVIEWER}),
    (ProjectStatus.COORDINATOR_ASSIGNED, ProjectStatus.PUBLISHED): frozenset({ADMIN, ASSIGNED_COORDINATOR}),
    (ProjectStatus.PUBLISHED, ProjectStatus.IN_PROGRESS): frozenset({ADMIN, ASSIGNED_COORDINATOR}),
    (ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED): frozenset({ADMIN, ASSIGNED_COORDINATOR}),
}
for _status in ProjectStatus:
    if _status != ProjectStatus.ARCHIVED:
        TRANSITIONS[(_status, ProjectStatus.ARCHIVED)] = frozenset({ADMIN, OWNER})

# Targets that need extra data and have their own operation
DEDICATED_TARGETS = {
    ProjectStatus.COORDINATOR_ASSIGNED: "errors.project.use_assign_coordinator",
    ProjectStatus.DRAFT: "errors.project.use_reject",
}

# Field edits are refused once a project is finished or archived
LOCKED_STATUSES = (ProjectStatus.ARCHIVED, ProjectStatus.COMPLETED)

# Statuses anyone can see through the public listing
PUBLIC_STATUSES = (ProjectStatus.PUBLISHED, ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED)

# Timestamp set when a project enters a status
_TIMESTAMP_ON_ENTER = {
    ProjectStatus.PUBLISHED: "published_at",
    ProjectStatus.IN_PROGRESS: "started_at",
    ProjectStatus.COMPLETED: "completed_at",
}


class ProjectService:
    def __init__(
        self,
        projects: ProjectRepository,
        organizations: OrganizationRepository,
        coordinators: CoordinatorRepository,
    ):
        self.projects = projects
        self.organizations = organizations
        self.coordinators = coordinators

    # --- lookups ---

    def _organization_of(self, db: Session, actor: User) -> Organization:
        organization = self.organizations.get_by_user_id(db, actor.id)
        if organization is None:
            raise AuthorizationError("errors.auth.organization_required")
        return organization

    def _coordinator_of(self, db: Session, actor: User) -> Coordinator:
        coordinator = self.coordinators.get_by_user_id(db, actor.id)
        if coordinator is None:
            raise AuthorizationError("errors.auth.coordinator_required")
        return coordinator

    def get_project(self, db: Session, project_id: str) -> Project:
        project = self.projects.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError(self.projects.not_found_message)
        return project

    def capacities(self, actor: User, project: Project) -> Set[str]:
        roles = set()
        if actor.role == UserRole.ADMINISTRATOR:
            roles.add(ADMIN)
        elif actor.role == UserRole.ORGANIZATION:
            if project.organization is not None and project.organization.user_id == actor.id:
                roles.add(OWNER)
        elif actor.role == UserRole.COORDINATOR:
            roles.add(REVIEWER)
            if project.coordinator is not None and project.coordinator.user_id == actor.id:
                roles.add(ASSIGNED_COORDINATOR)
        return roles

    def get_visible_project(self, db: Session, actor: Optional[User], project_id: str) -> Project:
        """Public projects are visible to everyone, the rest only to the people working on them."""
        project = self.get_project(db, project_id)
        if project.status in PUBLIC_STATUSES:
            return project
        if actor is not None and self.capacities(actor, project) & {ADMIN, OWNER, ASSIGNED_COORDINATOR}:
            return project
        if actor is not None and actor.role == UserRole.COORDINATOR and project.status == ProjectStatus.PENDING_REVIEW:
            return project
        # Hidden projects look the same as missing ones
        raise NotFoundError(self.projects.not_found_message)

    # --- listings ---

    def list_projects(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[ProjectFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Project]:
        return self.projects.find_many(db, pagination, filters, sort_by, order)

    def list_published(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[ProjectFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Project]:
        filters = filters or ProjectFilters()
        filters.status = ProjectStatus.PUBLISHED
        filters.organization_id = None
        filters.coordinator_id = None
        return self.projects.find_many(db, pagination, filters, sort_by, order)

    def list_for_organization(
        self,
        db: Session,
        actor: User,
        pagination: PaginationParams,
        filters: Optional[ProjectFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Project]:
        filters = filters or ProjectFilters()
        filters.organization_id = self._organization_of(db, actor).id
        return self.projects.find_many(db, pagination, filters, sort_by, order)

    def list_for_coordinator(
        self,
        db: Session,
        actor: User,
        pagination: PaginationParams,
        filters: Optional[ProjectFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Project]:
        filters = filters or ProjectFilters()
        filters.coordinator_id = self._coordinator_of(db, actor).id
        return self.projects.find_many(db, pagination, filters, sort_by, order)

    def count_by_status(
        self, db: Session, organization_id: Optional[str] = None, coordinator_id: Optional[str] = None
    ) -> Dict[ProjectStatus, int]:
        return self.projects.count_by_status(db, organization_id=organization_id, coordinator_id=coordinator_id)

    # --- field changes ---

    def create_project(self, db: Session, actor: User, data: Dict[str, Any]) -> Project:
        organization = self._organization_of(db, actor)
        payload = dict(data)
        payload.update(organization_id=organization.id, status=ProjectStatus.DRAFT)
        project = self.projects.create(db, payload)
        logger.info(f"Project {project.id} created by organization {organization.id}")
        return self.get_project(db, project.id)

    def update_project(self, db: Session, actor: User, project_id: str, data: Dict[str, Any]) -> Project:
        project = self.get_project(db, project_id)
        if not self.capacities(actor, project) & {ADMIN, OWNER}:
            raise AuthorizationError("errors.project.not_owner")
        if project.status in LOCKED_STATUSES:
            raise BusinessRuleError("errors.project.not_editable")
        # Last write wins; concurrent edits are not detected
        return self.projects.update_obj(db, project, data)

    def delete_project(self, db: Session, actor: User, project_id: str) -> Project:
        project = self.get_project(db, project_id)
        if not self.capacities(actor, project) & {ADMIN, OWNER}:
            raise AuthorizationError("errors.project.not_owner")
        deleted = self.projects.delete(db, project_id)
        logger.info(f"Project {project_id} deleted by {actor.id}")
        return deleted

    # --- status changes ---

    def _transition(self, db: Session, actor: User, project: Project, target: ProjectStatus, extra=None) -> Project:
        allowed = TRANSITIONS.get((project.status, target))
        if allowed is None:
            raise BusinessRuleError("errors.project.invalid_transition")
        if not self.capacities(actor, project) & allowed:
            raise AuthorizationError("errors.project.transition_forbidden")

        changes = {"status": target}
        timestamp_field = _TIMESTAMP_ON_ENTER.get(target)
        if timestamp_field:
            changes[timestamp_field] = datetime.now(timezone.utc)
        if extra:
            changes.update(extra)

        previous = project.status
        project = self.projects.update_obj(db, project, changes)
        logger.info(f"Project {project.id} moved {previous.value} -> {target.value} by {actor.id}")
        return project

    def change_status(self, db: Session, actor: User, project_id: str, target: ProjectStatus) -> Project:
        if target in DEDICATED_TARGETS:
            raise BusinessRuleError(DEDICATED_TARGETS[target])
        project = self.get_project(db, project_id)
        return self._transition(db, actor, project, target)

    def submit_for_review(self, db: Session, actor: User, project_id: str) -> Project:
        project = self.get_project(db, project_id)
        organization = project.organization
        if organization is not None and organization.user_id == actor.id and not organization.is_verified:
            raise BusinessRuleError("errors.organization.not_verified")
        return self._transition(db, actor, project, ProjectStatus.PENDING_REVIEW, {"rejection_reason": None})

    def assign_coordinator(self, db: Session, actor: User, project_id: str, coordinator_user_id: str) -> Project:
        project = self.get_project(db, project_id)
        coordinator = self.coordinators.get_by_user_id(db, coordinator_user_id)
        if coordinator is None:
            raise NotFoundError("errors.coordinator.not_found")
        if coordinator.user is not None and coordinator.user.is_suspended:
            raise BusinessRuleError("errors.coordinator.suspended")
        project = self._transition(
            db, actor, project, ProjectStatus.COORDINATOR_ASSIGNED, {"coordinator_id": coordinator.id}
        )
        # Reload so the coordinator relation reflects the new id
        return self.get_project(db, project.id)

    def reject(self, db: Session, actor: User, project_id: str, reason: str) -> Project:
        project = self.get_project(db, project_id)
        return self._transition(db, actor, project, ProjectStatus.DRAFT, {"rejection_reason": reason})

    def archive(self, db: Session, actor: User, project_id: str) -> Project:
        project = self.get_project(db, project_id)
        if project.status == ProjectStatus.ARCHIVED:
            raise BusinessRuleError("errors.project.already_archived")
        return self._transition(db, actor, project, ProjectStatus.ARCHIVED)
