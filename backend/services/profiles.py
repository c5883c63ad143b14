# backend/services/profiles.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from models.users import Organization, User
from repositories.profiles import OrganizationRepository, ProfileRepository
from utils.errors import BusinessRuleError, NotFoundError
from utils.permissions import require_owner_or_admin

logger = logging.getLogger(__name__)


class ProfileService:
    """Read and update one role's profile; the owner or an administrator may do both."""

    repository: ProfileRepository

    def __init__(self, repository: ProfileRepository):
        self.repository = repository

    def get_profile(self, db: Session, actor: User, user_id: str):
        require_owner_or_admin(actor, user_id)
        profile = self.repository.get_by_user_id(db, user_id)
        if profile is None:
            raise NotFoundError(self.repository.not_found_message)
        return profile

    def update_profile(self, db: Session, actor: User, user_id: str, data: Dict[str, Any]):
        require_owner_or_admin(actor, user_id)
        # Last write wins; concurrent edits are not detected
        return self.repository.update_by_user_id(db, user_id, data)


class OrganizationService(ProfileService):
    repository: OrganizationRepository

    def verify(self, db: Session, user_id: str) -> Organization:
        organization = self.repository.get_by_user_id(db, user_id)
        if organization is None:
            raise NotFoundError(self.repository.not_found_message)
        if organization.is_verified:
            raise BusinessRuleError("errors.organization.already_verified")
        organization = self.repository.update_obj(
            db, organization, {"is_verified": True, "verified_at": datetime.now(timezone.utc)}
        )
        logger.info(f"Organization {organization.id} verified")
        return organization

    def get_pending_verifications(self, db: Session) -> List[Organization]:
        return self.repository.get_pending_verification(db)
