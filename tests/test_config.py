import pytest
from pydantic import ValidationError

from src.config import DEV_JWT_SECRET, load_settings

ENV_KEYS = (
    "APP_ENV", "JWT_SECRET", "CORS_ORIGINS", "RATE_LIMIT_ENABLED", "DB_POOL_SIZE",
    "DB_CREATE_ALL", "BCRYPT_ROUNDS", "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_production_requires_jwt_secret(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    with pytest.raises(ValidationError, match="JWT_SECRET"):
        load_settings(env_file=None)


def test_development_falls_back_to_dev_secret():
    settings = load_settings(env_file=None)

    assert settings.jwt_secret == DEV_JWT_SECRET
    assert not settings.is_production


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("DB_POOL_SIZE", "3")

    settings = load_settings(env_file=None)

    assert settings.is_production
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.rate_limit_enabled is False
    assert settings.db_pool_size == 3


def test_empty_values_keep_defaults(monkeypatch):
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.setenv("CORS_ORIGINS", "")

    settings = load_settings(env_file=None)

    assert settings.log_file is None
    assert settings.cors_origins == ["*"]


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("APP_ENV=test\nRATE_LIMIT_MAX=5\nUNRELATED_KEY=1\n")

    settings = load_settings(env_file=str(env_file))

    assert settings.environment == "test"
    assert settings.rate_limit_max == 5


@pytest.mark.parametrize("key, value, field", [
    ("RATE_LIMIT_ENABLED", "ture", "rate_limit_enabled"),
    ("DB_CREATE_ALL", "yes please", "db_create_all"),
    ("DB_POOL_SIZE", "ten", "db_pool_size"),
    ("BCRYPT_ROUNDS", "2", "bcrypt_rounds"),
])
def test_malformed_value_names_the_key(monkeypatch, key, value, field):
    monkeypatch.setenv(key, value)

    with pytest.raises(ValidationError) as exc_info:
        load_settings(env_file=None)

    assert field in str(exc_info.value)


def test_settings_are_frozen():
    settings = load_settings(env_file=None)

    with pytest.raises(ValidationError):
        settings.jwt_secret = "changed"
