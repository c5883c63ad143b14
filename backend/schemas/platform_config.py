# backend/schemas/platform_config.py
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from schemas.common import ORMBase
from schemas.user import check_password_bytes

# {"light": {"primary": "#..."}, "dark": {...}}
ThemeColors = Dict[str, Dict[str, str]]


# Branding and registration policy, safe to show to anonymous visitors
class PublicConfigResponse(ORMBase):
    name: str
    logo: str
    theme_colors: ThemeColors = {}
    allow_public_registration: bool
    student_email_domain: Optional[str] = None
    staff_email_domain: Optional[str] = None
    updated_at: Optional[datetime] = None


# Administrator view; the SMTP password itself is never returned
class AdminConfigResponse(PublicConfigResponse):
    smtp_host: str
    smtp_port: int
    smtp_user: str
    email_from: str


class ConfigBase(BaseModel):
    name: str = Field(..., min_length=1)
    logo: str = ""
    theme_colors: ThemeColors = {}
    smtp_host: str = Field(..., min_length=1)
    smtp_port: int = Field(..., ge=1, le=65535)
    smtp_user: str
    smtp_password: str
    email_from: EmailStr
    allow_public_registration: bool = False
    student_email_domain: Optional[str] = None
    staff_email_domain: Optional[str] = None


# First administrator account created together with the config
class AdminAccountCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class SetupRequest(ConfigBase):
    admin: AdminAccountCreate


# Partial update; an empty smtp_password keeps the stored one
class ConfigUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    logo: Optional[str] = None
    theme_colors: Optional[ThemeColors] = None
    smtp_host: Optional[str] = Field(None, min_length=1)
    smtp_port: Optional[int] = Field(None, ge=1, le=65535)
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    email_from: Optional[EmailStr] = None
    allow_public_registration: Optional[bool] = None
    student_email_domain: Optional[str] = None
    staff_email_domain: Optional[str] = None


class SetupResponse(BaseModel):
    config: AdminConfigResponse
    admin_id: str
