"""Client Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The API key comes from the environment or the caller (never hardcoded) and is a
      SecretStr: hidden from repr() and logs
    - get_settings() is cached (lru_cache) — single instance per process
    - OrbClient takes an explicit Settings; only OrbClient.from_env() reads get_settings()
    - log_level / log_format apply only when from_env(configure_logging=True)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: only ORB_API_KEY is required
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://api.billwithorb.com/v1"


class Settings(BaseSettings):
    """Client settings from ORB_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="ORB_", env_file=".env", case_sensitive=False, extra="ignore")

    api_key: SecretStr
    endpoint: str = DEFAULT_ENDPOINT

    # Transport
    timeout_seconds: float = Field(60.0, gt=0)

    # Retry
    max_retries: int = Field(3, ge=0)
    base_delay_ms: int = Field(1000, ge=0)
    max_delay_ms: int = Field(60_000, ge=0)
    max_elapsed_seconds: float = Field(300.0, gt=0)

    # Pagination
    page_size: int = Field(20, ge=1, le=500)

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("endpoint")
    @classmethod
    def normalize_endpoint(cls, v: str) -> str:
        """Base URL without trailing slash; request paths are joined as endpoint/path."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must be an http(s) URL")
        return v

    @field_validator("api_key")
    @classmethod
    def require_api_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("api_key must not be empty")
        return v

    @model_validator(mode="after")
    def check_delay_window(self):
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
