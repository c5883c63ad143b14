# backend/services/auth.py
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import transaction
from models.auth_token import AuthToken, TokenPurpose
from models.users import User, UserRole
from repositories.profiles import CoordinatorRepository, OrganizationRepository, StudentRepository
from repositories.users import UserRepository
from schemas.user import UserCreate
from services.config import ConfigService
from services.tokens import TokenService
from utils.errors import AuthenticationError, AuthorizationError, BusinessRuleError, ConflictError, RateLimitError
from utils.hashing import get_password_hash, verify_password
from utils.rate_limit import AuthRateLimits, RateLimiter
from utils.tokenJWT import create_access_token

logger = logging.getLogger(__name__)

# Roles allowed to self-register; administrators come from setup only
SELF_REGISTER_ROLES = (UserRole.STUDENT, UserRole.COORDINATOR, UserRole.ORGANIZATION)

# Rate-limit key for requests whose client address is unknown
UNKNOWN_CLIENT = "unknown"


def email_matches_domain(email: str, domain: str) -> bool:
    """Compare the e-mail's domain with a configured one ("uni.edu" or "@uni.edu")."""
    email_domain = email.rsplit("@", 1)[-1].lower()
    domain = domain.strip().lower()
    return email_domain == domain or "@" + email_domain == domain


def _enforce(limiter: RateLimiter, key: Optional[str]) -> None:
    if not limiter.hit(key or UNKNOWN_CLIENT):
        raise RateLimitError("errors.auth.rate_limit_exceeded")


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        students: StudentRepository,
        coordinators: CoordinatorRepository,
        organizations: OrganizationRepository,
        config_service: ConfigService,
        tokens: TokenService,
        limits: AuthRateLimits,
    ):
        self.users = users
        self.profile_repositories = {
            UserRole.STUDENT: students,
            UserRole.COORDINATOR: coordinators,
            UserRole.ORGANIZATION: organizations,
        }
        self.config_service = config_service
        self.tokens = tokens
        self.limits = limits

    def _check_registration_policy(self, db: Session, role: UserRole, email: str) -> None:
        config = self.config_service.find_config(db)
        if config is None:
            raise BusinessRuleError("errors.auth.config_missing")
        if config.allow_public_registration:
            return

        # Internal roles must use the institution's domains when those are set
        if role == UserRole.STUDENT and config.student_email_domain:
            if not email_matches_domain(email, config.student_email_domain):
                raise BusinessRuleError("errors.auth.invalid_student_domain")
        if role == UserRole.COORDINATOR and config.staff_email_domain:
            if not email_matches_domain(email, config.staff_email_domain):
                raise BusinessRuleError("errors.auth.invalid_staff_domain")

    def sign_up(self, db: Session, data: UserCreate, ip: Optional[str] = None) -> User:
        """
        Register a user with the profile of its role and issue an e-mail verification token.

        User, profile and token are created in one transaction.
        """
        _enforce(self.limits.signup, ip)

        role = UserRole(data.role)
        if role not in SELF_REGISTER_ROLES:
            raise BusinessRuleError("errors.auth.invalid_role")

        email = data.email.strip().lower()
        self._check_registration_policy(db, role, email)

        if self.users.get_by_email(db, email) is not None:
            logger.debug("Signup failed: email already exists")
            raise ConflictError("errors.auth.email_already_exists")

        try:
            with transaction(db):
                user = self.users.create(
                    db,
                    {
                        "email": email,
                        "hashed_password": get_password_hash(data.password),
                        "name": data.name,
                        "role": role,
                    },
                    commit=False,
                )
                self.profile_repositories[role].create(db, {"user_id": user.id}, commit=False)
                self.tokens.issue(db, user.id, TokenPurpose.EMAIL_VERIFICATION, commit=False)
        except IntegrityError:
            # A parallel sign-up took the address after the check above
            raise ConflictError("errors.auth.email_already_exists")

        db.refresh(user)
        logger.info(f"User {user.id} signed up as {role.value}")
        return user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        user: Optional[User] = self.users.get_by_email(db, email)
        if user is None or not user.hashed_password or not verify_password(password, user.hashed_password):
            logger.debug("Login failed: invalid credentials")
            raise AuthenticationError("errors.auth.invalid_credentials")
        if user.is_suspended:
            logger.info(f"Login refused for suspended user {user.id}")
            raise AuthorizationError("errors.auth.account_suspended")
        return user

    def sign_in(self, db: Session, email: str, password: str, ip: Optional[str] = None) -> Tuple[User, str]:
        _enforce(self.limits.login, ip)
        user = self.authenticate(db, email, password)
        return user, create_access_token(data={"sub": user.id, "role": user.role.value})

    # --- E-mail verification ---

    def verify_email(self, db: Session, token: str) -> User:
        record = self.tokens.check(db, token, TokenPurpose.EMAIL_VERIFICATION)
        with transaction(db):
            user = self.users.update(db, record.user_id, {"email_verified": self.tokens.now()}, commit=False)
            self.tokens.revoke(db, user.id, TokenPurpose.EMAIL_VERIFICATION, commit=False)

        db.refresh(user)
        logger.info(f"Email verified for user {user.id}")
        return user

    def resend_verification(self, db: Session, email: str) -> Optional[AuthToken]:
        """New verification token for an unverified account; None when there is nothing to send."""
        email = email.strip().lower()
        _enforce(self.limits.verification_resend, email)

        user = self.users.get_by_email(db, email)
        if user is None or user.email_verified is not None:
            logger.debug("Verification resend skipped: unknown or already verified address")
            return None
        return self.tokens.issue(db, user.id, TokenPurpose.EMAIL_VERIFICATION)

    # --- Password reset ---

    def request_password_reset(self, db: Session, email: str, ip: Optional[str] = None) -> Optional[AuthToken]:
        """
        Issue a password reset token for the account with this e-mail.

        Unknown addresses return None without an error; the route answers the
        same way in both cases.
        """
        _enforce(self.limits.password_reset, ip)

        user = self.users.get_by_email(db, email)
        if user is None:
            logger.debug("Password reset requested for unknown email")
            return None
        return self.tokens.issue(db, user.id, TokenPurpose.PASSWORD_RESET)

    def reset_password(self, db: Session, token: str, password: str) -> User:
        record = self.tokens.check(db, token, TokenPurpose.PASSWORD_RESET)
        with transaction(db):
            user = self.users.update(
                db, record.user_id, {"hashed_password": get_password_hash(password)}, commit=False
            )
            self.tokens.revoke(db, user.id, TokenPurpose.PASSWORD_RESET, commit=False)

        db.refresh(user)
        logger.info(f"Password reset for user {user.id}")
        return user
