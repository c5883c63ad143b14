# backend/services/stats.py
from datetime import datetime, time, timedelta, timezone
from typing import List

from sqlalchemy.orm import Session

from models.users import User, UserRole
from schemas.stats import (
    AdminDashboard,
    CoordinatorDashboard,
    DailyCount,
    Dashboard,
    OrganizationDashboard,
    StudentDashboard,
)
from services.applications import ApplicationService
from services.completions import ProjectCompletionService
from services.profiles import OrganizationService, ProfileService
from services.projects import ProjectService
from services.users import UserService
from utils.errors import AuthorizationError


class StatsService:
    """Dashboard figures for the calling user's role."""

    def __init__(
        self,
        users: UserService,
        projects: ProjectService,
        applications: ApplicationService,
        completions: ProjectCompletionService,
        organizations: OrganizationService,
        coordinators: ProfileService,
        students: ProfileService,
    ):
        self.users = users
        self.projects = projects
        self.applications = applications
        self.completions = completions
        self.organizations = organizations
        self.coordinators = coordinators
        self.students = students

    def dashboard(self, db: Session, actor: User) -> Dashboard:
        if actor.role == UserRole.ADMINISTRATOR:
            return AdminDashboard(
                users_by_role=self.users.count_by_role(db),
                projects_by_status=self.projects.count_by_status(db),
                applications_by_status=self.applications.count_by_status(db),
                pending_organizations=len(self.organizations.get_pending_verifications(db)),
                completions=self.completions.count(db),
            )

        if actor.role == UserRole.ORGANIZATION:
            organization = self.organizations.get_profile(db, actor, actor.id)
            return OrganizationDashboard(
                projects_by_status=self.projects.count_by_status(db, organization_id=organization.id),
                applications_by_status=self.applications.count_by_status(db, organization_id=organization.id),
                completions=self.completions.count(db, organization_id=organization.id),
                is_verified=organization.is_verified,
            )

        if actor.role == UserRole.COORDINATOR:
            coordinator = self.coordinators.get_profile(db, actor, actor.id)
            return CoordinatorDashboard(
                projects_by_status=self.projects.count_by_status(db, coordinator_id=coordinator.id),
            )

        if actor.role == UserRole.STUDENT:
            student = self.students.get_profile(db, actor, actor.id)
            return StudentDashboard(
                applications_by_status=self.applications.count_by_status(db, student_id=student.id),
                portfolio_entries=sum(1 for c in student.completions if c.is_visible_in_portfolio),
            )

        raise AuthorizationError("errors.auth.forbidden")

    def daily_registrations(self, db: Session, days: int = 7) -> List[DailyCount]:
        """Sign-ups per day for the last `days` days, today included."""
        today = datetime.now(timezone.utc).date()
        first_day = today - timedelta(days=days - 1)
        per_day = self.users.count_created_per_day(db, datetime.combine(first_day, time.min))

        # Fill missing dates with zero
        result = []
        for i in range(days):
            current_date = (first_day + timedelta(days=i)).strftime("%Y-%m-%d")
            result.append(DailyCount(date=current_date, count=per_day.get(current_date, 0)))
        return result
