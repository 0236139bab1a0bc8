"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    Instances are treated as read-only once constructed.
    """

    # Application Config
    APP_NAME: str = "keyrelay"
    DEBUG: bool = False

    # Server Config
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Upstream credentials, JSON-encoded list, e.g. API_KEYS='["sk-ant-1", "sk-ant-2"]'
    API_KEYS: list[str]
    # Shared secret callers must send in the x-api-key header
    PROXY_KEY: str = Field(min_length=1)

    # Upstream Config
    UPSTREAM_URL: str = "https://api.anthropic.com/v1/complete"
    ANTHROPIC_VERSION: str = "2023-06-01"
    UPSTREAM_USER_AGENT: str = "Anthropic/Python 0.3.1"

    # HTTP Client Config
    # Read/write/pool timeout (seconds); applies per chunk while streaming
    HTTP_TIMEOUT: float = 600.0
    # Connect timeout (seconds)
    HTTP_CONNECT_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        frozen=True,
    )

    @field_validator("API_KEYS")
    @classmethod
    def _require_credentials(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("API_KEYS must contain at least one credential")
        if any(not key.strip() for key in value):
            raise ValueError("API_KEYS must not contain blank credentials")
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once. A missing or
    malformed credential list raises here, which aborts startup.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
