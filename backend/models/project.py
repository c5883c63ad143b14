# backend/models/project.py
import enum

from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Enum, JSON, func
from sqlalchemy.orm import relationship

from database import Base
from models.users import new_id


# DRAFT -> PENDING_REVIEW -> COORDINATOR_ASSIGNED -> PUBLISHED -> IN_PROGRESS -> COMPLETED,
# ARCHIVED is terminal and reachable from every other state
class ProjectStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING_REVIEW = "PENDING_REVIEW"
    COORDINATOR_ASSIGNED = "COORDINATOR_ASSIGNED"
    PUBLISHED = "PUBLISHED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class ProjectCategory(str, enum.Enum):
    DIGITALIZATION = "DIGITALIZATION"
    COMMUNICATION = "COMMUNICATION"
    RESEARCH = "RESEARCH"
    COMMUNITY_SERVICES = "COMMUNITY_SERVICES"
    MARKETING = "MARKETING"
    DESIGN = "DESIGN"
    SOFTWARE_DEVELOPMENT = "SOFTWARE_DEVELOPMENT"
    DATA_ANALYSIS = "DATA_ANALYSIS"
    EVENT_MANAGEMENT = "EVENT_MANAGEMENT"
    OTHER = "OTHER"


# Project offered by an organization, optionally supervised by a coordinator
class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Enum(ProjectCategory), nullable=False, index=True)
    required_skills = Column(JSON, nullable=False, default=list)
    estimated_hours_per_week = Column(Integer, nullable=True)
    estimated_duration_weeks = Column(Integer, nullable=True)
    number_of_students = Column(Integer, nullable=False, default=1)

    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.DRAFT, index=True)
    rejection_reason = Column(Text, nullable=True)

    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    coordinator_id = Column(String(36), ForeignKey("coordinators.id", ondelete="SET NULL"), nullable=True, index=True)

    # Lifecycle timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    published_at = Column(DateTime(timezone=True), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    organization = relationship("Organization", back_populates="projects")
    coordinator = relationship("Coordinator", back_populates="projects")
    applications = relationship("Application", back_populates="project", cascade="all, delete-orphan")
    completions = relationship("ProjectCompletion", back_populates="project", cascade="all, delete-orphan")

    @property
    def organization_name(self):
        if self.organization is None or self.organization.user is None:
            return None
        return self.organization.user.name

    @property
    def coordinator_name(self):
        if self.coordinator is None or self.coordinator.user is None:
            return None
        return self.coordinator.user.name
