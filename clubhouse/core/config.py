"""Application settings and environment loading."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized application settings."""

    app_name: str = "Clubhouse Membership API"
    app_version: str = "1.0.0"
    app_env: Literal["development", "test", "production"] = "development"
    app_debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite:///./clubhouse.db"

    active_members_max: int = 200
    waitlist_max: int = 100
    session_ttl_hours: int = 24

    default_page_limit: int = 20
    max_page_limit: int = 100

    password_hash_rounds: int = 12

    admin_email: str = "admin@example.com"
    admin_password: str = "Change-me-now1!"
    admin_first_name: str = "Club"
    admin_last_name: str = "Administrator"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
