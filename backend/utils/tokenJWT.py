# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User, UserRole
from utils.errors import AuthenticationError, AuthorizationError

# Authorization scheme; a missing header is reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("errors.auth.invalid_token")


# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise AuthenticationError("errors.auth.not_authenticated")

    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub")
    # Ensure the user id is present in the token payload
    if user_id is None:
        raise AuthenticationError("errors.auth.invalid_token")

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("errors.auth.invalid_token")
    # Tokens issued before a suspension stop working immediately
    if user.is_suspended:
        raise AuthorizationError("errors.auth.account_suspended")
    return user


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles: UserRole):
    if len(allowed_roles) == 1:
        message = f"errors.auth.{allowed_roles[0].value.lower()}_required"
    else:
        message = "errors.auth.forbidden"

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if allowed_roles and current_user.role not in allowed_roles:
            raise AuthorizationError(message)
        return current_user
    return _checker
