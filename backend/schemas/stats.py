# backend/schemas/stats.py
from typing import Dict, Literal, Union

from pydantic import BaseModel

from models.application import ApplicationStatus
from models.project import ProjectStatus
from models.users import UserRole


# Every map below lists all members of its enum, zero when nothing matches

class AdminDashboard(BaseModel):
    role: Literal["ADMINISTRATOR"] = "ADMINISTRATOR"
    users_by_role: Dict[UserRole, int]
    projects_by_status: Dict[ProjectStatus, int]
    applications_by_status: Dict[ApplicationStatus, int]
    pending_organizations: int
    completions: int


class OrganizationDashboard(BaseModel):
    role: Literal["ORGANIZATION"] = "ORGANIZATION"
    projects_by_status: Dict[ProjectStatus, int]
    applications_by_status: Dict[ApplicationStatus, int]
    completions: int
    is_verified: bool


class CoordinatorDashboard(BaseModel):
    role: Literal["COORDINATOR"] = "COORDINATOR"
    projects_by_status: Dict[ProjectStatus, int]


class StudentDashboard(BaseModel):
    role: Literal["STUDENT"] = "STUDENT"
    applications_by_status: Dict[ApplicationStatus, int]
    portfolio_entries: int


Dashboard = Union[AdminDashboard, OrganizationDashboard, CoordinatorDashboard, StudentDashboard]


# One point of a per-day chart; days without rows are reported with count 0
class DailyCount(BaseModel):
    date: str
    count: int
