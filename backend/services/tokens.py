# backend/services/tokens.py
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from models.auth_token import AuthToken, TokenPurpose
from repositories.tokens import TokenRepository
from utils.errors import BusinessRuleError

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32

# Error key for a token that does not exist (or was already used)
INVALID_TOKEN_KEYS = {
    TokenPurpose.EMAIL_VERIFICATION: "errors.auth.invalid_verification_token",
    TokenPurpose.PASSWORD_RESET: "errors.auth.invalid_reset_token",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class TokenService:
    """Issues and checks the one-time tokens for e-mail verification and password reset."""

    def __init__(
        self,
        tokens: TokenRepository,
        verification_ttl: timedelta,
        password_reset_ttl: timedelta,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.tokens = tokens
        self.lifetimes = {
            TokenPurpose.EMAIL_VERIFICATION: verification_ttl,
            TokenPurpose.PASSWORD_RESET: password_reset_ttl,
        }
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def issue(self, db: Session, user_id: str, purpose: TokenPurpose, *, commit: bool = True) -> AuthToken:
        token = self.tokens.replace_for_user(
            db,
            user_id,
            purpose,
            secrets.token_urlsafe(TOKEN_BYTES),
            self.now() + self.lifetimes[purpose],
            commit=commit,
        )
        logger.info(f"{purpose.value} token issued for user {user_id}")
        return token

    def check(self, db: Session, token: str, purpose: TokenPurpose) -> AuthToken:
        """
        Return the stored token when it exists and has not expired.

        An expired token is deleted before the error is raised, so it cannot be
        retried later.
        """
        record = self.tokens.get_by_token(db, token, purpose)
        if record is None:
            raise BusinessRuleError(INVALID_TOKEN_KEYS[purpose])
        if _as_utc(record.expires_at) <= self.now():
            user_id = record.user_id
            self.tokens.delete(db, record.id)
            logger.debug(f"Expired {purpose.value} token used for user {user_id}")
            raise BusinessRuleError("errors.auth.token_expired")
        return record

    def revoke(self, db: Session, user_id: str, purpose: TokenPurpose, *, commit: bool = True) -> None:
        self.tokens.delete_for_user(db, user_id, purpose, commit=commit)
