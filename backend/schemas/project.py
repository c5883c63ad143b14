# backend/schemas/project.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from models.project import ProjectCategory, ProjectStatus
from schemas.common import ORMBase

ProjectSortField = Literal["created_at", "updated_at", "title", "status"]


# Fields shared by project creation and display
class ProjectBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: ProjectCategory
    required_skills: List[str] = []
    estimated_hours_per_week: Optional[int] = Field(None, ge=1)
    estimated_duration_weeks: Optional[int] = Field(None, ge=1)
    number_of_students: int = Field(1, ge=1)


# Schema for creating a project; new projects always start as DRAFT
class ProjectCreate(ProjectBase):
    pass


# Partial update of project fields (status changes go through transitions)
class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[ProjectCategory] = None
    required_skills: Optional[List[str]] = None
    estimated_hours_per_week: Optional[int] = Field(None, ge=1)
    estimated_duration_weeks: Optional[int] = Field(None, ge=1)
    number_of_students: Optional[int] = Field(None, ge=1)


class ProjectStatusChange(BaseModel):
    status: ProjectStatus


class AssignCoordinatorRequest(BaseModel):
    coordinator_user_id: str


class ProjectRejectRequest(BaseModel):
    reason: str = Field(..., min_length=1)


# Output schema for project details
class ProjectResponse(ORMBase):
    id: str
    title: str
    description: str
    category: ProjectCategory
    required_skills: List[str] = []
    estimated_hours_per_week: Optional[int] = None
    estimated_duration_weeks: Optional[int] = None
    number_of_students: int
    status: ProjectStatus
    rejection_reason: Optional[str] = None

    organization_id: str
    organization_name: Optional[str] = None
    coordinator_id: Optional[str] = None
    coordinator_name: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
