from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator

from models.users import OrganizationType, UserRole
from schemas.common import ORMBase

# bcrypt refuses passwords longer than 72 bytes (not characters)
PASSWORD_MAX_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must not exceed {PASSWORD_MAX_BYTES} bytes")
    return value


# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr


# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str


# Schema for self-registration requests; administrators are created by setup only
class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1)
    role: Literal["STUDENT", "COORDINATOR", "ORGANIZATION"] = "STUDENT"

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


# Base account fields a user may change on their own account
class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None


# Output schema for account details (never exposes the password hash)
class UserResponse(ORMBase):
    id: str
    email: str
    name: Optional[str] = None
    role: UserRole
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    is_suspended: bool = False
    email_verified: Optional[datetime] = None
    created_at: Optional[datetime] = None


# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Body of the resend-verification and password-reset requests
class EmailRequest(UserBase):
    pass


# One-time token received by e-mail
class TokenConfirm(BaseModel):
    token: str = Field(..., min_length=1)


class PasswordResetConfirm(TokenConfirm):
    password: str = Field(..., min_length=8)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


# Schema for JWT payload contents
class TokenData(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None


# --- Role profiles ---

class StudentProfileOut(ORMBase):
    kind: Literal["STUDENT"]
    id: str
    study_program: Optional[str] = None
    year_of_study: Optional[int] = None
    skills: List[str] = []
    interests: List[str] = []
    resume_url: Optional[str] = None


class StudentProfileUpdate(BaseModel):
    study_program: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=10)
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    resume_url: Optional[str] = None


class CoordinatorProfileOut(ORMBase):
    kind: Literal["COORDINATOR"]
    id: str
    department: Optional[str] = None
    title: Optional[str] = None
    areas_of_expertise: List[str] = []


class CoordinatorProfileUpdate(BaseModel):
    department: Optional[str] = None
    title: Optional[str] = None
    areas_of_expertise: Optional[List[str]] = None


class OrganizationProfileOut(ORMBase):
    kind: Literal["ORGANIZATION"]
    id: str
    type: OrganizationType
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    website_url: Optional[str] = None
    facebook_url: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    is_verified: bool = False
    verified_at: Optional[datetime] = None


# Verification fields are managed by administrators, not editable here
class OrganizationProfileUpdate(BaseModel):
    type: Optional[OrganizationType] = None
    contact_person: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    website_url: Optional[str] = None
    facebook_url: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class AdministratorProfileOut(ORMBase):
    kind: Literal["ADMINISTRATOR"]
    id: str


ProfileOut = Union[StudentProfileOut, CoordinatorProfileOut, OrganizationProfileOut, AdministratorProfileOut]


# User merged with the single profile matching its role
class UserWithProfileResponse(UserResponse):
    profile: Optional[ProfileOut] = None


# Organization profile listed together with its owning account
class OrganizationWithUserResponse(OrganizationProfileOut):
    user: UserResponse


# Schema for administrative suspension requests
class SuspendRequest(BaseModel):
    reason: Optional[str] = None


_PROFILE_OUT = {
    UserRole.STUDENT: StudentProfileOut,
    UserRole.COORDINATOR: CoordinatorProfileOut,
    UserRole.ORGANIZATION: OrganizationProfileOut,
    UserRole.ADMINISTRATOR: AdministratorProfileOut,
}


def user_with_profile_response(resolved) -> UserWithProfileResponse:
    """Serialize a resolved UserWithProfile, picking the profile schema from its kind."""
    profile = None
    if resolved.kind is not None and resolved.profile is not None:
        profile = _PROFILE_OUT[resolved.kind].model_validate(resolved.profile)
    account = UserResponse.model_validate(resolved.user).model_dump()
    return UserWithProfileResponse(**account, profile=profile)
