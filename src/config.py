"""
Process configuration.

Every setting is read from the environment (or a ``.env`` file) under its
upper-cased field name, except ``environment`` which comes from ``APP_ENV``.
Bad values fail at startup with a validation error naming the key.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing_extensions import Annotated


DEV_JWT_SECRET = "pocket-ledger-dev-secret"


class Settings(BaseSettings):
    """Process configuration, read once from the environment at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "environment"),
        description="development, test or production",
    )

    # Database
    database_url: str = "sqlite:///pocket_ledger.db"
    db_pool_size: int = Field(default=10, ge=1)
    db_max_overflow: int = Field(default=5, ge=0)
    db_pool_timeout: int = Field(default=30, ge=1)
    sql_echo: bool = False
    db_create_all: bool = False

    # Auth
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = Field(default=7, ge=1)
    bcrypt_rounds: int = 10

    # Logging
    app_log_level: str = "INFO"
    third_party_log_level: str = "WARNING"
    log_file: Optional[str] = None

    # HTTP
    cors_origins: Annotated[List[str], NoDecode] = ["*"]
    rate_limit_enabled: bool = True
    rate_limit_max: int = Field(default=1000, ge=1)
    rate_limit_window_seconds: int = Field(default=900, ge=1)

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """CORS_ORIGINS is a comma-separated list; blank entries are dropped"""
        if isinstance(v, str):
            v = [origin.strip() for origin in v.split(",")]
            v = [origin for origin in v if origin]
        return v or ["*"]

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        if self.is_production and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def rate_limit(self) -> str:
        return f"{self.rate_limit_max} per {self.rate_limit_window_seconds} seconds"


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """
    Build Settings from environment variables and, when present, ``env_file``.

    Raises:
        pydantic.ValidationError: on a malformed value, or a missing
            JWT_SECRET in production
    """
    return Settings(_env_file=env_file)


@lru_cache
def get_settings() -> Settings:
    return load_settings()
