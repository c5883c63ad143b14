# backend/repositories/completions.py
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.completion import ProjectCompletion
from models.project import Project
from models.users import Student
from repositories.base import BaseRepository, apply_sort, paginate
from schemas.common import PageResult, PaginationParams

COMPLETION_SORT_FIELDS = ("completed_at", "created_at")


@dataclass
class CompletionFilters:
    student_id: Optional[str] = None
    project_id: Optional[str] = None
    organization_id: Optional[str] = None
    visible_only: bool = False


class ProjectCompletionRepository(BaseRepository[ProjectCompletion]):
    model = ProjectCompletion
    not_found_message = "errors.completion.not_found"

    def get_by_project_and_student(self, db: Session, project_id: str, student_id: str) -> Optional[ProjectCompletion]:
        try:
            return (
                db.query(ProjectCompletion)
                .filter(ProjectCompletion.project_id == project_id, ProjectCompletion.student_id == student_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to check existing completion: {e}")
            raise

    def _filtered(self, db: Session, filters: CompletionFilters):
        query = db.query(ProjectCompletion)
        if filters.student_id:
            query = query.filter(ProjectCompletion.student_id == filters.student_id)
        if filters.project_id:
            query = query.filter(ProjectCompletion.project_id == filters.project_id)
        if filters.visible_only:
            query = query.filter(ProjectCompletion.is_visible_in_portfolio.is_(True))
        if filters.organization_id:
            query = query.join(Project, ProjectCompletion.project_id == Project.id).filter(
                Project.organization_id == filters.organization_id
            )
        return query

    def find_many(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[CompletionFilters] = None,
        sort_by: str = "completed_at",
        order: str = "desc",
    ) -> PageResult[ProjectCompletion]:
        filters = filters or CompletionFilters()
        try:
            query = self._filtered(db, filters).options(
                joinedload(ProjectCompletion.project),
                joinedload(ProjectCompletion.student).joinedload(Student.user),
            )
            sort_map = {field: getattr(ProjectCompletion, field) for field in COMPLETION_SORT_FIELDS}
            query = apply_sort(query, sort_map, sort_by, order, default="completed_at")
            return paginate(query, pagination)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to find project completions: {e}")
            raise

    def count(self, db: Session, organization_id: Optional[str] = None) -> int:
        try:
            return self._filtered(db, CompletionFilters(organization_id=organization_id)).count()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to count project completions: {e}")
            raise
