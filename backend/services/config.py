# backend/services/config.py
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import transaction
from models.users import User, UserRole
from repositories.platform_config import ConfigRepository, ConfigSnapshot
from repositories.profiles import AdministratorRepository
from repositories.users import UserRepository
from schemas.platform_config import SetupRequest
from utils.errors import ConflictError, NotFoundError
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)


class ConfigService:
    def __init__(self, configs: ConfigRepository, users: UserRepository, administrators: AdministratorRepository):
        self.configs = configs
        self.users = users
        self.administrators = administrators

    def is_configured(self, db: Session) -> bool:
        return self.configs.is_configured(db)

    def find_config(self, db: Session) -> Optional[ConfigSnapshot]:
        return self.configs.get_global_config(db)

    def get_config(self, db: Session) -> ConfigSnapshot:
        config = self.find_config(db)
        if config is None:
            raise NotFoundError("errors.config.not_configured")
        return config

    def setup(self, db: Session, payload: SetupRequest) -> Tuple[ConfigSnapshot, User]:
        """
        First-run setup: store the platform config and create the first administrator.

        Allowed only while no config exists. Both rows are written in one transaction.
        """
        if self.configs.get_global_config(db, use_cache=False) is not None:
            raise ConflictError("errors.config.already_configured")

        admin_data = payload.admin
        if self.users.get_by_email(db, admin_data.email) is not None:
            raise ConflictError("errors.auth.email_already_exists")

        config_data = payload.model_dump(exclude={"admin"})
        try:
            with transaction(db):
                config = self.configs.create_config(db, config_data, commit=False)
                admin = self.users.create(
                    db,
                    {
                        "email": admin_data.email.strip().lower(),
                        "hashed_password": get_password_hash(admin_data.password),
                        "name": admin_data.name,
                        "role": UserRole.ADMINISTRATOR,
                    },
                    commit=False,
                )
                self.administrators.create(db, {"user_id": admin.id}, commit=False)
        except IntegrityError:
            # A parallel setup won: either the config row or the admin e-mail already exists
            if self.configs.get_global_config(db, use_cache=False) is not None:
                raise ConflictError("errors.config.already_configured")
            raise ConflictError("errors.auth.email_already_exists")
        finally:
            # Readers may have cached "not configured" while the transaction was open
            self.configs.invalidate()

        db.refresh(admin)
        logger.info(f"Platform configured, first administrator {admin.id} created")
        return config, admin

    def update(self, db: Session, data: Dict[str, Any]) -> ConfigSnapshot:
        config = self.configs.update_config(db, data)
        logger.info(f"Platform config updated: {sorted(k for k in data if k != 'smtp_password')}")
        return config
