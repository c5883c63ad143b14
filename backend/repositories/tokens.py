# backend/repositories/tokens.py
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.auth_token import AuthToken, TokenPurpose
from repositories.base import BaseRepository


class TokenRepository(BaseRepository[AuthToken]):
    model = AuthToken
    not_found_message = "errors.auth.invalid_token"

    def get_by_token(self, db: Session, token: str, purpose: TokenPurpose) -> Optional[AuthToken]:
        try:
            return db.query(AuthToken).filter(AuthToken.token == token, AuthToken.purpose == purpose).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve {purpose.value} token: {e}")
            raise

    def delete_for_user(self, db: Session, user_id: str, purpose: TokenPurpose, *, commit: bool = True) -> int:
        try:
            deleted = (
                db.query(AuthToken)
                .filter(AuthToken.user_id == user_id, AuthToken.purpose == purpose)
                .delete(synchronize_session=False)
            )
            if commit:
                db.commit()
            else:
                db.flush()
            return deleted
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to delete {purpose.value} tokens of user {user_id}: {e}")
            if commit:
                db.rollback()
            raise

    def replace_for_user(
        self,
        db: Session,
        user_id: str,
        purpose: TokenPurpose,
        token: str,
        expires_at: datetime,
        *,
        commit: bool = True,
    ) -> AuthToken:
        """Drop the user's earlier tokens of this purpose and store the new one."""
        self.delete_for_user(db, user_id, purpose, commit=False)
        return self.create(
            db,
            {"token": token, "purpose": purpose, "user_id": user_id, "expires_at": expires_at},
            commit=commit,
        )
