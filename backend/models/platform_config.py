from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, func
from database import Base

GLOBAL_CONFIG_ID = "global_config"


# Platform-wide branding, SMTP and registration settings. At most one row exists;
# no row means the platform still has to go through setup.
class PlatformConfig(Base):
    __tablename__ = "config"

    id = Column(String(36), primary_key=True, default=GLOBAL_CONFIG_ID)
    name = Column(String, nullable=False, default="Example University")
    logo = Column(String, nullable=False, default="")
    theme_colors = Column(JSON, nullable=False, default=dict)  # {"light": {...}, "dark": {...}}

    smtp_host = Column(String, nullable=False)
    smtp_port = Column(Integer, nullable=False)
    smtp_user = Column(String, nullable=False)
    smtp_password = Column(String, nullable=False)  # Fernet token, never plain text
    email_from = Column(String, nullable=False)

    # Registration policy
    allow_public_registration = Column(Boolean, nullable=False, default=False)
    student_email_domain = Column(String, nullable=True)
    staff_email_domain = Column(String, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
