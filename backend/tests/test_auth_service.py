from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from database import SessionLocal
from models.auth_token import AuthToken, TokenPurpose
from models.users import User, UserRole
from schemas.platform_config import SetupRequest
from schemas.user import UserCreate
from utils.errors import BusinessRuleError, ConflictError, RateLimitError
from utils.hashing import verify_password
from utils.rate_limit import RateLimiter

from conftest import CONFIG_DATA, PASSWORD


def _signup(email, role="STUDENT"):
    return UserCreate(email=email, password=PASSWORD, name="New User", role=role)


def _tokens(db, user_id, purpose):
    return db.query(AuthToken).filter(AuthToken.user_id == user_id, AuthToken.purpose == purpose).all()


def test_signup_issues_a_verification_token(db, services, configured):
    user = services.auth.sign_up(db, _signup("fresh@test.edu"))

    tokens = _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION)
    assert len(tokens) == 1
    assert user.email_verified is None


def test_parallel_signup_with_same_email_is_a_conflict(db, services, configured, make_user, monkeypatch):
    make_user(UserRole.STUDENT, email="race@test.edu")
    # The other request committed after this one checked the address
    monkeypatch.setattr(services.auth.users, "get_by_email", lambda db, email: None)

    with pytest.raises(ConflictError) as exc:
        services.auth.sign_up(db, _signup("race@test.edu"))

    assert exc.value.message == "errors.auth.email_already_exists"
    assert db.query(User).filter(User.email == "race@test.edu").count() == 1


def test_failed_profile_insert_leaves_no_user_behind(db, services, configured, monkeypatch):
    def failing_create(db, data, *, commit=True):
        raise OperationalError("INSERT INTO students", {}, Exception("disk I/O error"))

    monkeypatch.setattr(services.auth.profile_repositories[UserRole.STUDENT], "create", failing_create)

    with pytest.raises(OperationalError):
        services.auth.sign_up(db, _signup("atomic@test.edu"))

    other = SessionLocal()
    try:
        assert other.query(User).filter(User.email == "atomic@test.edu").count() == 0
    finally:
        other.close()


def test_parallel_setup_is_a_conflict(db, services, monkeypatch):
    other = SessionLocal()
    try:
        services.config.configs.create_config(other, dict(CONFIG_DATA))
    finally:
        other.close()

    configs = services.config.configs
    real_read = configs.get_global_config
    reads = []

    def first_read_misses(db, use_cache=True):
        reads.append(use_cache)
        if len(reads) == 1:
            return None
        return real_read(db, use_cache=use_cache)

    monkeypatch.setattr(configs, "get_global_config", first_read_misses)
    payload = SetupRequest(**CONFIG_DATA, admin={"email": "admin@test.edu", "password": PASSWORD, "name": "Admin"})

    with pytest.raises(ConflictError) as exc:
        services.config.setup(db, payload)

    assert exc.value.message == "errors.config.already_configured"
    assert db.query(User).filter(User.email == "admin@test.edu").count() == 0


def test_signup_limit_per_client(db, configured, services):
    services.auth.limits.signup = RateLimiter("signup", limit=1, interval_seconds=3600)
    services.auth.sign_up(db, _signup("first@test.edu"), ip="10.0.0.1")

    with pytest.raises(RateLimitError) as exc:
        services.auth.sign_up(db, _signup("second@test.edu"), ip="10.0.0.1")

    assert exc.value.message == "errors.auth.rate_limit_exceeded"
    services.auth.sign_up(db, _signup("third@test.edu"), ip="10.0.0.2")


def test_verify_email_sets_timestamp_and_consumes_token(db, services, configured):
    user = services.auth.sign_up(db, _signup("verify@test.edu"))
    token = _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION)[0].token

    verified = services.auth.verify_email(db, token)

    assert verified.email_verified is not None
    assert _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION) == []
    with pytest.raises(BusinessRuleError) as exc:
        services.auth.verify_email(db, token)
    assert exc.value.message == "errors.auth.invalid_verification_token"


def test_expired_token_is_refused_and_deleted(db, services, configured):
    user = services.auth.sign_up(db, _signup("late@test.edu"))
    record = _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION)[0]
    record.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    with pytest.raises(BusinessRuleError) as exc:
        services.auth.verify_email(db, record.token)

    assert exc.value.message == "errors.auth.token_expired"
    assert _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION) == []


def test_tokens_of_one_purpose_are_not_accepted_for_the_other(db, services, make_user):
    user = make_user(UserRole.STUDENT, email="mixup@test.edu", password=PASSWORD)
    reset = services.auth.request_password_reset(db, "mixup@test.edu")

    with pytest.raises(BusinessRuleError) as exc:
        services.auth.verify_email(db, reset.token)

    assert exc.value.message == "errors.auth.invalid_verification_token"
    assert len(_tokens(db, user.id, TokenPurpose.PASSWORD_RESET)) == 1


def test_resend_replaces_the_previous_verification_token(db, services, configured):
    user = services.auth.sign_up(db, _signup("again@test.edu"))
    first = _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION)[0].token

    resent = services.auth.resend_verification(db, "AGAIN@test.edu")

    assert resent.token != first
    assert [t.token for t in _tokens(db, user.id, TokenPurpose.EMAIL_VERIFICATION)] == [resent.token]


def test_resend_is_skipped_for_verified_and_unknown_addresses(db, services, make_user):
    user = make_user(UserRole.STUDENT, email="done@test.edu")
    user.email_verified = datetime.now(timezone.utc)
    db.commit()

    assert services.auth.resend_verification(db, "done@test.edu") is None
    assert services.auth.resend_verification(db, "nobody@test.edu") is None


def test_password_reset_rotates_the_hash(db, services, make_user):
    user = make_user(UserRole.STUDENT, email="forgot@test.edu", password=PASSWORD)
    token = services.auth.request_password_reset(db, "forgot@test.edu").token

    services.auth.reset_password(db, token, "BrandNew456!")

    db.refresh(user)
    assert verify_password("BrandNew456!", user.hashed_password)
    assert not verify_password(PASSWORD, user.hashed_password)
    with pytest.raises(BusinessRuleError) as exc:
        services.auth.reset_password(db, token, "Another789!")
    assert exc.value.message == "errors.auth.invalid_reset_token"


def test_password_reset_for_unknown_email_returns_nothing(db, services):
    assert services.auth.request_password_reset(db, "ghost@test.edu") is None
