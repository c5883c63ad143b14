# backend/schemas/application.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from models.application import ApplicationStatus
from schemas.common import ORMBase

ApplicationSortField = Literal["created_at", "updated_at"]


# Schema for a student's application to a published project
class ApplicationCreate(BaseModel):
    motivation_statement: str = Field(..., min_length=10, max_length=5000)


# Optional reason given when an organization rejects an application
class ApplicationReview(BaseModel):
    reason: Optional[str] = None


# Administrative correction of an application
class AdminApplicationUpdate(BaseModel):
    status: Optional[ApplicationStatus] = None
    rejection_reason: Optional[str] = None
    motivation_statement: Optional[str] = Field(None, min_length=10, max_length=5000)


class ApplicationResponse(ORMBase):
    id: str
    student_id: str
    student_name: Optional[str] = None
    project_id: str
    project_title: Optional[str] = None
    motivation_statement: str
    status: ApplicationStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
