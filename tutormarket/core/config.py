from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    app_env: Literal["development", "production", "test"] = Field(default="development", validation_alias="APP_ENV")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", validation_alias="LOG_LEVEL")

    database_url: str = Field(validation_alias="DATABASE_URL")

    # Abort startup instead of running without storage-level meeting constraints.
    strict_constraint_bootstrap: bool = Field(default=False, validation_alias="STRICT_CONSTRAINT_BOOTSTRAP")


@lru_cache(1)
def get_settings() -> Settings:
    """Return cached settings instance to avoid reparsing env variables."""

    return Settings()  # type: ignore[call-arg]
