# backend/models/completion.py
import enum

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey, Enum, JSON, UniqueConstraint, func
from sqlalchemy.orm import relationship

from database import Base
from models.users import new_id


class PerformanceRating(str, enum.Enum):
    EXCELLENT = "EXCELLENT"
    VERY_GOOD = "VERY_GOOD"
    GOOD = "GOOD"
    SATISFACTORY = "SATISFACTORY"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"


# Record of a student's finished work on a project, shown in their portfolio
class ProjectCompletion(Base):
    __tablename__ = "project_completions"
    __table_args__ = (UniqueConstraint("project_id", "student_id", name="uq_completion_project_student"),)

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    role_description = Column(Text, nullable=False)
    key_achievements = Column(JSON, nullable=False, default=list)
    skills_developed = Column(JSON, nullable=False, default=list)
    actual_hours_worked = Column(Integer, nullable=True)
    actual_duration_weeks = Column(Integer, nullable=True)

    # Evaluation written by the organization
    organization_performance_rating = Column(Enum(PerformanceRating), nullable=False)
    organization_written_evaluation = Column(Text, nullable=False)

    is_visible_in_portfolio = Column(Boolean, nullable=False, default=True)
    completed_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="completions")
    student = relationship("Student", back_populates="completions")

    @property
    def project_title(self):
        return self.project.title if self.project is not None else None

    @property
    def student_name(self):
        if self.student is None or self.student.user is None:
            return None
        return self.student.user.name
