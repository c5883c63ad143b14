import os

# Tests run against a private in-memory database; set before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
# Several tests register more accounts from one client than the production limit allows
os.environ.setdefault("SIGNUPS_PER_HOUR", "50")

import pytest
from fastapi.testclient import TestClient

from container import build_services
from database import Base, SessionLocal, engine, init_db
from main import app
from models.users import UserRole
from repositories.profiles import (
    AdministratorRepository,
    CoordinatorRepository,
    OrganizationRepository,
    StudentRepository,
)
from repositories.users import UserRepository
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

PASSWORD = "Secret123!"

CONFIG_DATA = {
    "name": "Test University",
    "logo": "",
    "theme_colors": {"light": {"primary": "#123456"}},
    "smtp_host": "smtp.test.edu",
    "smtp_port": 587,
    "smtp_user": "mailer",
    "smtp_password": "smtp-secret",
    "email_from": "noreply@test.edu",
    "allow_public_registration": True,
    "student_email_domain": None,
    "staff_email_domain": None,
}

_PROFILE_REPOSITORIES = {
    UserRole.STUDENT: StudentRepository(),
    UserRole.COORDINATOR: CoordinatorRepository(),
    UserRole.ORGANIZATION: OrganizationRepository(),
    UserRole.ADMINISTRATOR: AdministratorRepository(),
}


@pytest.fixture(autouse=True)
def fresh_database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def services():
    return build_services()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    """Create a user with the profile of its role; a password is only hashed when given."""
    users = UserRepository()
    counter = {"n": 0}

    def _make(role=UserRole.STUDENT, email=None, name="Test User", password=None, **profile):
        counter["n"] += 1
        user = users.create(
            db,
            {
                "email": email or f"user{counter['n']}@test.edu",
                "hashed_password": get_password_hash(password) if password else None,
                "name": name,
                "role": role,
            },
        )
        _PROFILE_REPOSITORIES[role].create(db, {"user_id": user.id, **profile})
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.id, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def configured(db, services):
    """Platform config row, as written by setup."""
    return services.config.configs.create_config(db, dict(CONFIG_DATA))
