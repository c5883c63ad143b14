# backend/utils/crypto.py
import base64
import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from config import settings

__all__ = ["SecretCipher", "InvalidToken"]


def _derive_key(secret: str) -> bytes:
    # Fernet wants 32 url-safe base64 encoded bytes
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class SecretCipher:
    """Symmetric encryption for secrets stored in the database (SMTP password)."""

    def __init__(self, key: Optional[str] = None):
        key = key if key is not None else settings.ENCRYPTION_KEY
        self._fernet = Fernet(key.encode("utf-8") if key else _derive_key(settings.SECRET_KEY))

    def encrypt(self, plain: str) -> str:
        return self._fernet.encrypt(plain.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str) -> str:
        """Raises InvalidToken when the value was not encrypted with this key."""
        return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")
