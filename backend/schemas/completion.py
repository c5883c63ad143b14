# backend/schemas/completion.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from models.completion import PerformanceRating
from schemas.common import ORMBase

CompletionSortField = Literal["completed_at", "created_at"]


# Schema for recording a student's finished work on a completed project
class CompletionCreate(BaseModel):
    student_id: str
    role_description: str = Field(..., min_length=1)
    key_achievements: List[str] = []
    skills_developed: List[str] = []
    actual_hours_worked: Optional[int] = Field(None, ge=0)
    actual_duration_weeks: Optional[int] = Field(None, ge=0)
    organization_performance_rating: PerformanceRating
    organization_written_evaluation: str = Field(..., min_length=1)
    is_visible_in_portfolio: bool = True


class CompletionUpdate(BaseModel):
    role_description: Optional[str] = Field(None, min_length=1)
    key_achievements: Optional[List[str]] = None
    skills_developed: Optional[List[str]] = None
    actual_hours_worked: Optional[int] = Field(None, ge=0)
    actual_duration_weeks: Optional[int] = Field(None, ge=0)
    organization_performance_rating: Optional[PerformanceRating] = None
    organization_written_evaluation: Optional[str] = Field(None, min_length=1)
    is_visible_in_portfolio: Optional[bool] = None


class CompletionResponse(ORMBase):
    id: str
    project_id: str
    project_title: Optional[str] = None
    student_id: str
    student_name: Optional[str] = None
    role_description: str
    key_achievements: List[str] = []
    skills_developed: List[str] = []
    actual_hours_worked: Optional[int] = None
    actual_duration_weeks: Optional[int] = None
    organization_performance_rating: PerformanceRating
    organization_written_evaluation: str
    is_visible_in_portfolio: bool
    completed_at: Optional[datetime] = None
