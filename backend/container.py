# backend/container.py
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Request

from config import settings
from repositories.applications import ApplicationRepository
from repositories.completions import ProjectCompletionRepository
from repositories.logs import LogRepository
from repositories.platform_config import ConfigCache, ConfigRepository
from repositories.profiles import (
    AdministratorRepository,
    CoordinatorRepository,
    OrganizationRepository,
    StudentRepository,
)
from repositories.projects import ProjectRepository
from repositories.tokens import TokenRepository
from repositories.users import UserRepository
from services.applications import ApplicationService
from services.auth import AuthService
from services.completions import ProjectCompletionService
from services.config import ConfigService
from services.profiles import OrganizationService, ProfileService
from services.projects import ProjectService
from services.stats import StatsService
from services.tokens import TokenService
from services.users import UserService
from utils.rate_limit import AuthRateLimits, build_auth_rate_limits


@dataclass
class Services:
    """Every service the API uses, wired once at startup and shared by all requests."""
    config: ConfigService
    auth: AuthService
    users: UserService
    students: ProfileService
    coordinators: ProfileService
    organizations: OrganizationService
    projects: ProjectService
    applications: ApplicationService
    completions: ProjectCompletionService
    stats: StatsService
    logs: LogRepository


def build_services(
    config_cache: Optional[ConfigCache] = None,
    rate_limits: Optional[AuthRateLimits] = None,
) -> Services:
    users = UserRepository()
    students = StudentRepository()
    coordinators = CoordinatorRepository()
    organizations = OrganizationRepository()
    administrators = AdministratorRepository()
    projects = ProjectRepository()
    applications = ApplicationRepository()
    completions = ProjectCompletionRepository()
    configs = ConfigRepository(cache=config_cache)

    token_service = TokenService(
        TokenRepository(),
        verification_ttl=timedelta(hours=settings.VERIFICATION_TOKEN_HOURS),
        password_reset_ttl=timedelta(hours=settings.PASSWORD_RESET_TOKEN_HOURS),
    )

    config_service = ConfigService(configs, users, administrators)
    user_service = UserService(users)
    student_service = ProfileService(students)
    coordinator_service = ProfileService(coordinators)
    organization_service = OrganizationService(organizations)
    project_service = ProjectService(projects, organizations, coordinators)
    application_service = ApplicationService(applications, projects, students, organizations)
    completion_service = ProjectCompletionService(completions, projects, applications, students)

    return Services(
        config=config_service,
        auth=AuthService(
            users,
            students,
            coordinators,
            organizations,
            config_service,
            token_service,
            rate_limits or build_auth_rate_limits(settings),
        ),
        users=user_service,
        students=student_service,
        coordinators=coordinator_service,
        organizations=organization_service,
        projects=project_service,
        applications=application_service,
        completions=completion_service,
        stats=StatsService(
            user_service,
            project_service,
            application_service,
            completion_service,
            organization_service,
            coordinator_service,
            student_service,
        ),
        logs=LogRepository(),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
