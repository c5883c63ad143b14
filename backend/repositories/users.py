# backend/repositories/users.py
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Union

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.users import Administrator, Coordinator, Organization, Student, User, UserRole
from repositories.aggregation import count_by_category
from repositories.base import LIKE_ESCAPE, BaseRepository, apply_sort, contains_pattern, paginate
from schemas.common import PageResult, PaginationParams

Profile = Union[Student, Coordinator, Organization, Administrator]

# Relation to eager-load for each role
_PROFILE_RELATIONS = {
    UserRole.STUDENT: User.student,
    UserRole.COORDINATOR: User.coordinator,
    UserRole.ORGANIZATION: User.organization,
    UserRole.ADMINISTRATOR: User.administrator,
}

USER_SORT_FIELDS = ("created_at", "name", "email", "role")


@dataclass
class UserWithProfile:
    """A user together with the one profile its role selects.

    `kind` is the role the profile was resolved for, or None when the role is not
    one of the known profile roles (then `profile` is None as well). Branch on
    `kind` rather than probing attributes of `user`.
    """
    user: User
    kind: Optional[UserRole]
    profile: Optional[Profile]


@dataclass
class UserFilters:
    search: Optional[str] = None
    role: Optional[UserRole] = None
    is_suspended: Optional[bool] = None


class UserRepository(BaseRepository[User]):
    model = User
    not_found_message = "errors.auth.user_not_found"

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        try:
            return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve user by email: {e}")
            raise

    def get_by_id_with_profile(self, db: Session, id: str) -> Optional[UserWithProfile]:
        """
        Load a user and only the profile relation matching its role.

        The role is read first with a narrow query, then a second query joins
        exactly one profile table. Returns None when the user does not exist.
        """
        try:
            row = db.query(User.role).filter(User.id == id).first()
            if row is None:
                self.logger.debug("User profile lookup failed (user not found)", extra={"user_id": id})
                return None

            role = row.role
            relation = _PROFILE_RELATIONS.get(role)
            if relation is None:
                user = db.query(User).filter(User.id == id).first()
                return UserWithProfile(user=user, kind=None, profile=None)

            user = db.query(User).options(joinedload(relation)).filter(User.id == id).first()
            return UserWithProfile(user=user, kind=role, profile=getattr(user, relation.key))
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve user profile {id}: {e}")
            raise

    def find_many(
        self,
        db: Session,
        pagination: PaginationParams,
        filters: Optional[UserFilters] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> PageResult[User]:
        filters = filters or UserFilters()
        try:
            query = db.query(User)

            # Text search over name and e-mail
            if filters.search:
                like = contains_pattern(filters.search)
                query = query.filter(
                    or_(User.name.ilike(like, escape=LIKE_ESCAPE), User.email.ilike(like, escape=LIKE_ESCAPE))
                )
            if filters.role is not None:
                query = query.filter(User.role == filters.role)
            if filters.is_suspended is not None:
                query = query.filter(User.is_suspended == filters.is_suspended)

            sort_map = {field: getattr(User, field) for field in USER_SORT_FIELDS}
            query = apply_sort(query, sort_map, sort_by, order, default="created_at")
            return paginate(query, pagination)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to find users: {e}")
            raise

    def count_created_per_day(self, db: Session, since: datetime) -> Dict[str, int]:
        """Number of accounts created per calendar day (YYYY-MM-DD) from `since` on."""
        try:
            day = func.date(User.created_at)
            rows = (
                db.query(day.label("day"), func.count(User.id))
                .filter(User.created_at >= since)
                .group_by(day)
                .all()
            )
            return {str(row[0]): row[1] for row in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to count registrations per day: {e}")
            raise

    def count_by_role(self, db: Session) -> Dict[UserRole, int]:
        try:
            return count_by_category(db, User.role, UserRole)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to count users by role: {e}")
            raise
