import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, func

from database import Base
from models.users import new_id


class TokenPurpose(str, enum.Enum):
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PASSWORD_RESET = "PASSWORD_RESET"


# One-time token mailed to a user. Issuing a new one replaces older tokens
# of the same purpose; a token is deleted once used or found expired.
class AuthToken(Base):
    __tablename__ = "auth_tokens"

    id = Column(String(36), primary_key=True, default=new_id)
    token = Column(String(128), unique=True, nullable=False, index=True)
    purpose = Column(Enum(TokenPurpose), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
