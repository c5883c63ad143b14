# backend/services/users.py
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from models.users import User, UserRole
from repositories.users import UserFilters, UserRepository, UserWithProfile
from schemas.common import PageResult, PaginationParams
from utils.errors import BusinessRuleError, NotFoundError

logger = logging.getLogger(__name__)

# Base account fields a user may edit on their own account
SELF_EDITABLE_FIELDS = ("name", "bio", "profile_picture_url")


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    def get_user(self, db: Session, user_id: str) -> Optional[User]:
        return self.users.get_by_id(db, user_id)

    def get_user_profile(self, db: Session, user_id: str) -> UserWithProfile:
        resolved = self.users.get_by_id_with_profile(db, user_id)
        if resolved is None:
            raise NotFoundError("errors.auth.user_not_found")
        return resolved

    def list_users(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[UserFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[User]:
        return self.users.find_many(db, pagination, filters, sort_by, order)

    def count_by_role(self, db: Session) -> Dict[UserRole, int]:
        return self.users.count_by_role(db)

    def count_created_per_day(self, db: Session, since: datetime) -> Dict[str, int]:
        return self.users.count_created_per_day(db, since)

    def update_own_account(self, db: Session, user: User, data: Dict[str, Any]) -> User:
        changes = {key: value for key, value in data.items() if key in SELF_EDITABLE_FIELDS}
        if not changes:
            return user
        return self.users.update_obj(db, user, changes)

    def _set_suspended(self, db: Session, actor: User, target_user_id: str, suspended: bool) -> User:
        if actor.id == target_user_id:
            raise BusinessRuleError("errors.user.cannot_suspend_self")
        target = self.users.get_by_id(db, target_user_id)
        if target is None:
            raise NotFoundError("errors.auth.user_not_found")
        user = self.users.update_obj(db, target, {"is_suspended": suspended})
        logger.info(f"User {target_user_id} {'suspended' if suspended else 'unsuspended'} by {actor.id}")
        return user

    def suspend(self, db: Session, actor: User, target_user_id: str) -> User:
        return self._set_suspended(db, actor, target_user_id, True)

    def unsuspend(self, db: Session, actor: User, target_user_id: str) -> User:
        return self._set_suspended(db, actor, target_user_id, False)

    def delete_user(self, db: Session, actor: User, target_user_id: str) -> User:
        if actor.id == target_user_id:
            raise BusinessRuleError("errors.user.cannot_delete_self")
        return self.users.delete(db, target_user_id)
