# backend/repositories/platform_config.py
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from models.platform_config import GLOBAL_CONFIG_ID, PlatformConfig
from repositories.base import BaseRepository
from utils.crypto import InvalidToken, SecretCipher
from utils.errors import NotFoundError


@dataclass
class ConfigSnapshot:
    """Detached, decrypted copy of the platform config row."""
    name: str
    logo: str
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    email_from: str
    allow_public_registration: bool
    student_email_domain: Optional[str] = None
    staff_email_domain: Optional[str] = None
    theme_colors: Dict[str, Any] = field(default_factory=dict)
    updated_at: Optional[datetime] = None


class ConfigCache:
    """
    Holds at most one ConfigSnapshot for `ttl_seconds`.

    Each invalidation bumps `generation`. A loader reads the generation before
    going to the database and passes it to `put`; a value loaded under an older
    generation is dropped, so a write racing a read cannot re-seed stale data.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: Optional[ConfigSnapshot] = None
        self._stored_at = 0.0
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def get(self) -> Optional[ConfigSnapshot]:
        with self._lock:
            if self._value is None:
                return None
            if self._clock() - self._stored_at >= self.ttl_seconds:
                self._value = None
                return None
            return self._value

    def put(self, value: ConfigSnapshot, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._value = value
            self._stored_at = self._clock()

    def invalidate(self) -> None:
        with self._lock:
            self._generation += 1
            self._value = None


class ConfigRepository(BaseRepository[PlatformConfig]):
    """Access to the single platform config row, read through a ConfigCache."""

    model = PlatformConfig
    not_found_message = "errors.config.not_configured"

    def __init__(self, cache: Optional[ConfigCache] = None, cipher: Optional[SecretCipher] = None):
        super().__init__()
        self.cache = cache or ConfigCache(settings.CONFIG_CACHE_TTL_SECONDS)
        self.cipher = cipher or SecretCipher()

    def _snapshot(self, row: PlatformConfig) -> ConfigSnapshot:
        try:
            smtp_password = self.cipher.decrypt(row.smtp_password) if row.smtp_password else ""
        except InvalidToken:
            # Key rotated or value written by hand; the rest of the config is still usable
            self.logger.error("Failed to decrypt the stored SMTP password, serving it empty")
            smtp_password = ""
        return ConfigSnapshot(
            name=row.name,
            logo=row.logo,
            theme_colors=dict(row.theme_colors or {}),
            smtp_host=row.smtp_host,
            smtp_port=row.smtp_port,
            smtp_user=row.smtp_user,
            smtp_password=smtp_password,
            email_from=row.email_from,
            allow_public_registration=row.allow_public_registration,
            student_email_domain=row.student_email_domain,
            staff_email_domain=row.staff_email_domain,
            updated_at=row.updated_at,
        )

    def _encrypt_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(data)
        if data.get("smtp_password"):
            data["smtp_password"] = self.cipher.encrypt(data["smtp_password"])
        else:
            # Empty password in an update means "keep the stored one"
            data.pop("smtp_password", None)
        return data

    def get_global_config(self, db: Session, use_cache: bool = True) -> Optional[ConfigSnapshot]:
        if use_cache:
            cached = self.cache.get()
            if cached is not None:
                return cached

        generation = self.cache.generation
        try:
            row = db.get(PlatformConfig, GLOBAL_CONFIG_ID)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve platform config: {e}")
            raise
        if row is None:
            return None

        snapshot = self._snapshot(row)
        self.cache.put(snapshot, generation)
        return snapshot

    def is_configured(self, db: Session) -> bool:
        return self.get_global_config(db) is not None

    def create_config(self, db: Session, data: Dict[str, Any], *, commit: bool = True) -> ConfigSnapshot:
        payload = self._encrypt_fields(data)
        payload["smtp_password"] = payload.get("smtp_password", "")
        payload["id"] = GLOBAL_CONFIG_ID
        row = self.create(db, payload, commit=commit)
        self.cache.invalidate()
        return self._snapshot(row)

    def update_config(self, db: Session, data: Dict[str, Any], *, commit: bool = True) -> ConfigSnapshot:
        row = self.get_by_id(db, GLOBAL_CONFIG_ID)
        if row is None:
            raise NotFoundError(self.not_found_message)
        try:
            row = self.update_obj(db, row, self._encrypt_fields(data), commit=commit)
        finally:
            self.cache.invalidate()
        return self._snapshot(row)

    def invalidate(self) -> None:
        self.cache.invalidate()
