# backend/models/application.py
import enum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum, UniqueConstraint, func
from sqlalchemy.orm import relationship

from database import Base
from models.users import new_id


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


# A student's application to a project, at most one per (student, project)
class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("student_id", "project_id", name="uq_application_student_project"),)

    id = Column(String(36), primary_key=True, default=new_id)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    motivation_statement = Column(Text, nullable=False)
    status = Column(Enum(ApplicationStatus), nullable=False, default=ApplicationStatus.PENDING, index=True)

    # Review details, filled when the organization accepts or rejects
    reviewed_by = Column(String(36), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    student = relationship("Student", back_populates="applications")
    project = relationship("Project", back_populates="applications")

    @property
    def project_title(self):
        return self.project.title if self.project is not None else None

    @property
    def student_name(self):
        if self.student is None or self.student.user is None:
            return None
        return self.student.user.name
