import pytest
from cryptography.fernet import Fernet

from models.platform_config import GLOBAL_CONFIG_ID, PlatformConfig
from repositories.platform_config import ConfigCache, ConfigRepository, ConfigSnapshot
from utils.crypto import SecretCipher
from utils.errors import NotFoundError

from conftest import CONFIG_DATA


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _snapshot(name="Test University"):
    return ConfigSnapshot(
        name=name,
        logo="",
        smtp_host="smtp",
        smtp_port=25,
        smtp_user="u",
        smtp_password="p",
        email_from="a@b.c",
        allow_public_registration=True,
    )


def test_cache_expires_after_ttl():
    clock = FakeClock()
    cache = ConfigCache(ttl_seconds=60, clock=clock)
    cache.put(_snapshot(), cache.generation)

    clock.now += 59
    assert cache.get() is not None
    clock.now += 1
    assert cache.get() is None


def test_invalidate_clears_and_bumps_generation():
    cache = ConfigCache(ttl_seconds=60)
    cache.put(_snapshot(), cache.generation)
    before = cache.generation

    cache.invalidate()

    assert cache.get() is None
    assert cache.generation == before + 1


def test_value_loaded_before_invalidation_is_dropped():
    cache = ConfigCache(ttl_seconds=60)
    generation = cache.generation  # a reader starts loading
    cache.invalidate()  # a writer commits meanwhile

    cache.put(_snapshot("stale"), generation)

    assert cache.get() is None


@pytest.fixture
def repository():
    return ConfigRepository(cache=ConfigCache(ttl_seconds=60), cipher=SecretCipher(Fernet.generate_key().decode()))


def test_unconfigured_platform(db, repository):
    assert repository.get_global_config(db) is None
    assert repository.is_configured(db) is False


def test_smtp_password_is_encrypted_at_rest(db, repository):
    repository.create_config(db, dict(CONFIG_DATA))

    row = db.get(PlatformConfig, GLOBAL_CONFIG_ID)
    assert row.smtp_password != CONFIG_DATA["smtp_password"]
    assert repository.get_global_config(db).smtp_password == CONFIG_DATA["smtp_password"]


def test_reads_are_served_from_cache_until_a_write(db, repository):
    repository.create_config(db, dict(CONFIG_DATA))
    first = repository.get_global_config(db)

    # A change behind the repository's back is not seen while cached
    db.query(PlatformConfig).update({"name": "Changed directly"})
    db.commit()
    assert repository.get_global_config(db) is first
    assert repository.get_global_config(db, use_cache=False).name == "Changed directly"

    repository.update_config(db, {"name": "Changed via repository"})
    assert repository.get_global_config(db).name == "Changed via repository"


def test_empty_smtp_password_keeps_stored_one(db, repository):
    repository.create_config(db, dict(CONFIG_DATA))

    repository.update_config(db, {"smtp_password": "", "smtp_host": "mail.test.edu"})

    config = repository.get_global_config(db)
    assert config.smtp_password == CONFIG_DATA["smtp_password"]
    assert config.smtp_host == "mail.test.edu"


def test_undecryptable_password_is_served_empty(db, repository):
    repository.create_config(db, dict(CONFIG_DATA))
    db.query(PlatformConfig).update({"smtp_password": "not-a-fernet-token"})
    db.commit()

    config = repository.get_global_config(db, use_cache=False)

    assert config.smtp_password == ""
    assert config.name == CONFIG_DATA["name"]


def test_update_without_config_raises(db, repository):
    with pytest.raises(NotFoundError):
        repository.update_config(db, {"name": "x"})
