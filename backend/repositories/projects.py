# backend/repositories/projects.py
from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.project import Project, ProjectCategory, ProjectStatus
from models.users import Coordinator, Organization
from repositories.aggregation import count_by_category
from repositories.base import LIKE_ESCAPE, BaseRepository, apply_sort, contains_pattern, paginate
from schemas.common import PageResult, PaginationParams

PROJECT_SORT_FIELDS = ("created_at", "updated_at", "title", "status")


@dataclass
class ProjectFilters:
    search: Optional[str] = None
    status: Optional[ProjectStatus] = None
    category: Optional[ProjectCategory] = None
    organization_id: Optional[str] = None
    coordinator_id: Optional[str] = None


class ProjectRepository(BaseRepository[Project]):
    model = Project
    not_found_message = "errors.project.not_found"

    def get_by_id(self, db: Session, id: str) -> Optional[Project]:
        # Organization (with its account) is needed for ownership checks and display
        try:
            return (
                db.query(Project)
                .options(
                    joinedload(Project.organization).joinedload(Organization.user),
                    joinedload(Project.coordinator).joinedload(Coordinator.user),
                )
                .filter(Project.id == id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve project {id}: {e}")
            raise

    def find_many(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[ProjectFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Project]:
        filters = filters or ProjectFilters()
        try:
            query = db.query(Project).options(
                joinedload(Project.organization).joinedload(Organization.user),
                joinedload(Project.coordinator).joinedload(Coordinator.user),
            )

            # Search in title or description, case-insensitive
            if filters.search:
                like = contains_pattern(filters.search)
                query = query.filter(
                    or_(Project.title.ilike(like, escape=LIKE_ESCAPE), Project.description.ilike(like, escape=LIKE_ESCAPE))
                )
            if filters.status is not None:
                query = query.filter(Project.status == filters.status)
            if filters.category is not None:
                query = query.filter(Project.category == filters.category)
            if filters.organization_id:
                query = query.filter(Project.organization_id == filters.organization_id)
            if filters.coordinator_id:
                query = query.filter(Project.coordinator_id == filters.coordinator_id)

            sort_map = {field: getattr(Project, field) for field in PROJECT_SORT_FIELDS}
            query = apply_sort(query, sort_map, sort_by, order, default="created_at")
            return paginate(query, pagination)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to find projects: {e}")
            raise

    def count_by_status(
        self,
        db: Session,
        organization_id: Optional[str] = None,
        coordinator_id: Optional[str] = None,
    ) -> Dict[ProjectStatus, int]:
        criteria = []
        if organization_id:
            criteria.append(Project.organization_id == organization_id)
        if coordinator_id:
            criteria.append(Project.coordinator_id == coordinator_id)
        try:
            return count_by_category(db, Project.status, ProjectStatus, *criteria)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to count projects by status: {e}")
            raise
