# backend/models/users.py
import enum
import uuid

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey, Enum, JSON, func
from sqlalchemy.orm import relationship

from database import Base


def new_id() -> str:
    return str(uuid.uuid4())


# Role discriminator: selects which profile relation is valid for a user
class UserRole(str, enum.Enum):
    STUDENT = "STUDENT"
    COORDINATOR = "COORDINATOR"
    ORGANIZATION = "ORGANIZATION"
    ADMINISTRATOR = "ADMINISTRATOR"


class OrganizationType(str, enum.Enum):
    NGO = "NGO"
    SMALL_BUSINESS = "SMALL_BUSINESS"
    STARTUP = "STARTUP"
    NON_PROFIT = "NON_PROFIT"
    SOCIAL_ENTERPRISE = "SOCIAL_ENTERPRISE"
    OTHER = "OTHER"


# Represents a user account with authentication details and system role.
# The role never changes after creation.
class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    email_verified = Column(DateTime(timezone=True), nullable=True)
    hashed_password = Column(String(255), nullable=True)
    role = Column(Enum(UserRole), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    profile_picture_url = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    is_suspended = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # One-to-one profiles, owned by the user (deleted along with it)
    student = relationship("Student", back_populates="user", uselist=False, cascade="all, delete-orphan")
    coordinator = relationship("Coordinator", back_populates="user", uselist=False, cascade="all, delete-orphan")
    organization = relationship("Organization", back_populates="user", uselist=False, cascade="all, delete-orphan")
    administrator = relationship("Administrator", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class Student(Base):
    __tablename__ = "students"
    kind = "STUDENT"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    study_program = Column(String, nullable=True, index=True)
    year_of_study = Column(Integer, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    resume_url = Column(String, nullable=True)

    user = relationship("User", back_populates="student")
    applications = relationship("Application", back_populates="student", cascade="all, delete-orphan")
    completions = relationship("ProjectCompletion", back_populates="student", cascade="all, delete-orphan")


class Coordinator(Base):
    __tablename__ = "coordinators"
    kind = "COORDINATOR"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    department = Column(String, nullable=True, index=True)
    title = Column(String, nullable=True)
    areas_of_expertise = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="coordinator")
    projects = relationship("Project", back_populates="coordinator")


class Organization(Base):
    __tablename__ = "organizations"
    kind = "ORGANIZATION"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    type = Column(Enum(OrganizationType), nullable=False, default=OrganizationType.OTHER, index=True)

    # Contact details
    contact_person = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    website_url = Column(String, nullable=True)
    facebook_url = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    country = Column(String, nullable=True)

    # Set by an administrator once the organization has been vetted
    is_verified = Column(Boolean, nullable=False, default=False, index=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="organization")
    projects = relationship("Project", back_populates="organization", cascade="all, delete-orphan")


class Administrator(Base):
    __tablename__ = "administrators"
    kind = "ADMINISTRATOR"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    user = relationship("User", back_populates="administrator")
