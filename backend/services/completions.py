# backend/services/completions.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.application import ApplicationStatus
from models.completion import ProjectCompletion
from models.project import ProjectStatus
from models.users import User
from repositories.applications import ApplicationRepository
from repositories.completions import CompletionFilters, ProjectCompletionRepository
from repositories.profiles import StudentRepository
from repositories.projects import ProjectRepository
from schemas.common import PageResult, PaginationParams
from utils.errors import AuthorizationError, BusinessRuleError, ConflictError, NotFoundError
from utils.permissions import is_admin

logger = logging.getLogger(__name__)


class ProjectCompletionService:
    def __init__(
        self,
        completions: ProjectCompletionRepository,
        projects: ProjectRepository,
        applications: ApplicationRepository,
        students: StudentRepository,
    ):
        self.completions = completions
        self.projects = projects
        self.applications = applications
        self.students = students

    def get_completion(self, db: Session, completion_id: str) -> ProjectCompletion:
        completion = self.completions.get_by_id(db, completion_id)
        if completion is None:
            raise NotFoundError(self.completions.not_found_message)
        return completion

    def list_completions(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[CompletionFilters] = None,
        sort_by: str = "completed_at",
        order: str = "desc",
    ) -> PageResult[ProjectCompletion]:
        return self.completions.find_many(db, pagination, filters, sort_by, order)

    def portfolio(self, db: Session, actor: User, pagination: PaginationParams) -> PageResult[ProjectCompletion]:
        """Completions the student chose to show, newest first."""
        student = self.students.get_by_user_id(db, actor.id)
        if student is None:
            raise AuthorizationError("errors.auth.student_required")
        filters = CompletionFilters(student_id=student.id, visible_only=True)
        return self.completions.find_many(db, pagination, filters)

    def count(self, db: Session, organization_id: Optional[str] = None) -> int:
        return self.completions.count(db, organization_id=organization_id)

    def record_completion(self, db: Session, actor: User, project_id: str, data: Dict[str, Any]) -> ProjectCompletion:
        project = self.projects.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError(self.projects.not_found_message)
        if not is_admin(actor) and (
            project.organization is None or project.organization.user_id != actor.id
        ):
            raise AuthorizationError("errors.project.not_owner")
        if project.status != ProjectStatus.COMPLETED:
            raise BusinessRuleError("errors.completion.project_not_completed")

        payload = dict(data)
        student_id = payload.pop("student_id")
        application = self.applications.get_by_student_and_project(db, student_id, project.id)
        if application is None or application.status != ApplicationStatus.ACCEPTED:
            raise BusinessRuleError("errors.completion.student_not_accepted")
        if self.completions.get_by_project_and_student(db, project.id, student_id) is not None:
            raise ConflictError("errors.completion.already_recorded")

        payload.update(project_id=project.id, student_id=student_id)
        if project.completed_at is not None:
            payload.setdefault("completed_at", project.completed_at)
        try:
            completion = self.completions.create(db, payload)
        except IntegrityError:
            raise ConflictError("errors.completion.already_recorded")
        logger.info(f"Completion recorded for student {student_id} on project {project.id}")
        return self.get_completion(db, completion.id)

    def update_completion(self, db: Session, completion_id: str, data: Dict[str, Any]) -> ProjectCompletion:
        return self.completions.update(db, completion_id, data)

    def delete_completion(self, db: Session, completion_id: str) -> ProjectCompletion:
        return self.completions.delete(db, completion_id)
