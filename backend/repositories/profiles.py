# backend/repositories/profiles.py
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload

from models.users import Administrator, Coordinator, Organization, Student, User
from repositories.base import BaseRepository
from utils.errors import NotFoundError


class ProfileRepository(BaseRepository):
    """Profiles are one-to-one with users, so lookups and mutations go by user id."""

    not_found_message = "errors.profile.not_found"

    def get_by_user_id(self, db: Session, user_id: str):
        try:
            return (
                db.query(self.model)
                .options(joinedload(self.model.user))
                .filter(self.model.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve {self.entity} by user {user_id}: {e}")
            raise

    def update_by_user_id(self, db: Session, user_id: str, data: Dict[str, Any], *, commit: bool = True):
        profile = self.get_by_user_id(db, user_id)
        if profile is None:
            raise NotFoundError(self.not_found_message)
        return self.update_obj(db, profile, data, commit=commit)


class StudentRepository(ProfileRepository):
    model = Student


class CoordinatorRepository(ProfileRepository):
    model = Coordinator


class AdministratorRepository(ProfileRepository):
    model = Administrator


class OrganizationRepository(ProfileRepository):
    model = Organization

    def get_pending_verification(self, db: Session) -> List[Organization]:
        try:
            orgs = (
                db.query(Organization)
                .join(Organization.user)
                .options(contains_eager(Organization.user))
                .filter(Organization.is_verified.is_(False))
                .order_by(User.created_at.desc())
                .all()
            )
            self.logger.debug("Retrieved pending organizations", extra={"count": len(orgs)})
            return orgs
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve pending organizations: {e}")
            raise
