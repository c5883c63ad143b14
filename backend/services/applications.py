# backend/services/applications.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.application import Application, ApplicationStatus
from models.project import ProjectStatus
from models.users import Student, User
from repositories.applications import ApplicationFilters, ApplicationRepository
from repositories.profiles import OrganizationRepository, StudentRepository
from repositories.projects import ProjectRepository
from schemas.common import PageResult, PaginationParams
from utils.errors import AuthorizationError, BusinessRuleError, ConflictError, NotFoundError
from utils.permissions import is_admin

logger = logging.getLogger(__name__)


class ApplicationService:
    def __init__(
        self,
        applications: ApplicationRepository,
        projects: ProjectRepository,
        students: StudentRepository,
        organizations: OrganizationRepository,
    ):
        self.applications = applications
        self.projects = projects
        self.students = students
        self.organizations = organizations

    def _student_of(self, db: Session, actor: User) -> Student:
        student = self.students.get_by_user_id(db, actor.id)
        if student is None:
            raise AuthorizationError("errors.auth.student_required")
        return student

    def get_application(self, db: Session, application_id: str) -> Application:
        application = self.applications.get_by_id(db, application_id)
        if application is None:
            raise NotFoundError(self.applications.not_found_message)
        return application

    def list_applications(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[ApplicationFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Application]:
        return self.applications.find_many(db, pagination, filters, sort_by, order)

    def list_for_student(
        self,
        db: Session,
        actor: User,
        pagination: PaginationParams,
        filters: Optional[ApplicationFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Application]:
        filters = filters or ApplicationFilters()
        filters.student_id = self._student_of(db, actor).id
        filters.organization_id = None
        return self.applications.find_many(db, pagination, filters, sort_by, order)

    def list_for_organization(
        self,
        db: Session,
        actor: User,
        pagination: PaginationParams,
        filters: Optional[ApplicationFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[Application]:
        organization = self.organizations.get_by_user_id(db, actor.id)
        if organization is None:
            raise AuthorizationError("errors.auth.organization_required")
        filters = filters or ApplicationFilters()
        filters.organization_id = organization.id
        return self.applications.find_many(db, pagination, filters, sort_by, order)

    def count_by_status(
        self, db: Session, organization_id: Optional[str] = None, student_id: Optional[str] = None
    ) -> Dict[ApplicationStatus, int]:
        return self.applications.count_by_status(db, organization_id=organization_id, student_id=student_id)

    # --- student actions ---

    def apply(self, db: Session, actor: User, project_id: str, motivation_statement: str) -> Application:
        student = self._student_of(db, actor)
        project = self.projects.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError(self.projects.not_found_message)
        if project.status != ProjectStatus.PUBLISHED:
            raise BusinessRuleError("errors.application.project_not_open")
        if self.applications.get_by_student_and_project(db, student.id, project.id) is not None:
            raise ConflictError("errors.application.already_applied")

        try:
            application = self.applications.create(
                db,
                {
                    "student_id": student.id,
                    "project_id": project.id,
                    "motivation_statement": motivation_statement,
                    "status": ApplicationStatus.PENDING,
                },
            )
        except IntegrityError:
            # Lost a race with a parallel request from the same student
            raise ConflictError("errors.application.already_applied")
        logger.info(f"Student {student.id} applied to project {project.id}")
        return self.get_application(db, application.id)

    def withdraw(self, db: Session, actor: User, application_id: str) -> Application:
        student = self._student_of(db, actor)
        application = self.get_application(db, application_id)
        if application.student_id != student.id:
            raise AuthorizationError("errors.application.not_owner")
        if application.status != ApplicationStatus.PENDING:
            raise BusinessRuleError("errors.application.not_pending")
        return self.applications.update_obj(db, application, {"status": ApplicationStatus.WITHDRAWN})

    # --- organization review ---

    def _reviewable(self, db: Session, actor: User, application_id: str) -> Application:
        application = self.get_application(db, application_id)
        if not is_admin(actor):
            organization = self.organizations.get_by_user_id(db, actor.id)
            if organization is None or application.project.organization_id != organization.id:
                raise AuthorizationError("errors.application.not_owner")
        if application.status != ApplicationStatus.PENDING:
            raise BusinessRuleError("errors.application.not_pending")
        return application

    def accept(self, db: Session, actor: User, application_id: str) -> Application:
        application = self._reviewable(db, actor, application_id)
        project = application.project
        taken = self.applications.count_by_status(db, project_id=project.id)[ApplicationStatus.ACCEPTED]
        if taken >= project.number_of_students:
            raise BusinessRuleError("errors.application.project_full")

        application = self.applications.update_obj(
            db,
            application,
            {
                "status": ApplicationStatus.ACCEPTED,
                "reviewed_by": actor.id,
                "reviewed_at": datetime.now(timezone.utc),
                "rejection_reason": None,
            },
        )
        logger.info(f"Application {application.id} accepted by {actor.id}")
        return application

    def reject(self, db: Session, actor: User, application_id: str, reason: Optional[str] = None) -> Application:
        application = self._reviewable(db, actor, application_id)
        application = self.applications.update_obj(
            db,
            application,
            {
                "status": ApplicationStatus.REJECTED,
                "reviewed_by": actor.id,
                "reviewed_at": datetime.now(timezone.utc),
                "rejection_reason": reason,
            },
        )
        logger.info(f"Application {application.id} rejected by {actor.id}")
        return application

    # --- moderation ---

    def update_application(self, db: Session, application_id: str, data: Dict[str, Any]) -> Application:
        return self.applications.update(db, application_id, data)

    def delete_application(self, db: Session, application_id: str) -> Application:
        return self.applications.delete(db, application_id)
