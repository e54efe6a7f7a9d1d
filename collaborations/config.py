from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"

DEFAULT_TENANT = ""


class DefaultSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", str(ENV_FILE_PATH)],
        extra="ignore",
        frozen=True,
        env_nested_delimiter="__",
    )


class OpenSearchSettings(DefaultSettings):
    """Opensearch settings"""
    model_config = SettingsConfigDict(
        env_file=[".env", str(ENV_FILE_PATH)],
        env_prefix="OPENSEARCH__",
        extra="ignore",
        frozen=True,
        case_sensitive=False,
    )

    host: str = "http://localhost:9200"
    index_name: str = ".opensearch-collaborations"
    operation_timeout_ms: int = 60000  # every blocking store call waits at most this long

    use_ssl: bool = False
    verify_certs: bool = False
    username: str = ""
    password: str = ""

    @field_validator("operation_timeout_ms")
    @classmethod
    def check_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("operation_timeout_ms must be positive")
        return value

    @property
    def operation_timeout_seconds(self) -> float:
        return self.operation_timeout_ms / 1000.0


class SecuritySettings(DefaultSettings):
    """Caller identity settings"""
    model_config = SettingsConfigDict(
        env_file=[".env", str(ENV_FILE_PATH)],
        env_prefix="SECURITY__",
        extra="ignore",
        frozen=True,
        case_sensitive=False,
    )

    # Forwarded by the security proxy as "name|backend_roles|roles|tenant"
    user_header: str = "X-Security-User-Info"
    default_tenant: str = DEFAULT_TENANT


class Settings(DefaultSettings):
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    service_name: str = "collaborations-api"
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"] = "INFO"

    opensearch: OpenSearchSettings = Field(default_factory=OpenSearchSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
