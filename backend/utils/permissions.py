# utils/permissions.py
from models.users import User, UserRole
from utils.errors import AuthorizationError


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMINISTRATOR


def require_owner_or_admin(user: User, owner_user_id: str, message: str = "errors.auth.not_owner") -> None:
    """Allow the caller when it owns the resource or is an administrator."""
    if user.id != owner_user_id and not is_admin(user):
        raise AuthorizationError(message)
