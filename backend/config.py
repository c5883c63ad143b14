# backend/config.py
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

# Make .env values visible through os.environ as well
load_dotenv(env_path)


class Settings(BaseSettings):
    APP_NAME: str = "Placement Portal API"
    APP_VERSION: str = "1.0.0"

    DATABASE_URL: str = "sqlite:///./database_placement.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Fernet key used to encrypt the SMTP password stored in the platform config.
    # Empty means a key is derived from SECRET_KEY.
    ENCRYPTION_KEY: str = ""

    # How long the platform config may be served from memory
    CONFIG_CACHE_TTL_SECONDS: float = 60.0

    # Per-IP login attempts allowed in each window
    LOGIN_ATTEMPTS_PER_WINDOW: int = 5
    LOGIN_WINDOW_MINUTES: int = 15
    # Per-IP sign-ups and password reset requests, per-address verification resends
    SIGNUPS_PER_HOUR: int = 3
    PASSWORD_RESETS_PER_HOUR: int = 3
    VERIFICATION_RESENDS_PER_HOUR: int = 3

    # Lifetime of the one-time tokens sent by e-mail
    VERIFICATION_TOKEN_HOURS: int = 24
    PASSWORD_RESET_TOKEN_HOURS: int = 1

    FRONTEND_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
