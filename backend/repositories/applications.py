# backend/repositories/applications.py
from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.application import Application, ApplicationStatus
from models.project import Project
from models.users import Student
from repositories.aggregation import count_by_category
from repositories.base import BaseRepository, apply_sort, paginate
from schemas.common import PageResult, PaginationParams

APPLICATION_SORT_FIELDS = ("created_at", "updated_at")


@dataclass
class ApplicationFilters:
    student_id: Optional[str] = None
    project_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    organization_id: Optional[str] = None


class ApplicationRepository(BaseRepository[Application]):
    model = Application
    not_found_message = "errors.application.not_found"

    def _with_details(self, db: Session):
        return db.query(Application).options(
            joinedload(Application.student).joinedload(Student.user),
            joinedload(Application.project),
        )

    def get_by_id(self, db: Session, id: str) -> Optional[Application]:
        try:
            return self._with_details(db).filter(Application.id == id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve application {id}: {e}")
            raise

    def get_by_student_and_project(self, db: Session, student_id: str, project_id: str) -> Optional[Application]:
        try:
            return (
                db.query(Application)
                .filter(Application.student_id == student_id, Application.project_id == project_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to check existing application: {e}")
            raise

    def find_many(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[ApplicationFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Application]:
        filters = filters or ApplicationFilters()
        try:
            query = self._with_details(db)

            if filters.student_id:
                query = query.filter(Application.student_id == filters.student_id)
            if filters.project_id:
                query = query.filter(Application.project_id == filters.project_id)
            if filters.status is not None:
                query = query.filter(Application.status == filters.status)
            # Organization scope goes through the project
            if filters.organization_id:
                query = query.join(Project, Application.project_id == Project.id).filter(
                    Project.organization_id == filters.organization_id
                )

            sort_map = {field: getattr(Application, field) for field in APPLICATION_SORT_FIELDS}
            query = apply_sort(query, sort_map, sort_by, order, default="created_at")
            return paginate(query, pagination)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to find applications: {e}")
            raise

    def count_by_status(
        self,
        db: Session,
        organization_id: Optional[str] = None,
        student_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> Dict[ApplicationStatus, int]:
        criteria = []
        joins = ()
        if project_id:
            criteria.append(Application.project_id == project_id)
        if organization_id:
            joins = (Application.project,)
            criteria.append(Project.organization_id == organization_id)
        if student_id:
            criteria.append(Application.student_id == student_id)
        try:
            return count_by_category(db, Application.status, ApplicationStatus, *criteria, joins=joins)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to count applications by status: {e}")
            raise
