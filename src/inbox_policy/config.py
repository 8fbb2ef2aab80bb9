# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str = "sqlite+aiosqlite:///:memory:"
    environment: str = "production"
    log_level: str = "info"
    log_format: str = "json"
    database_pool_size: int = 20

    # Categories
    admin_category: str = "admin"
    # Category name -> boolean key in Actor.attrs.
    # Example: '{"member": "is_member", "moderator": "is_moderator"}'
    flag_categories: dict[str, str] = {}

    # Recipient search
    max_recipient_results: int = 200

    model_config = {"env_file": ".env"}

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Lazy-loaded to avoid import-time failures."""
    return Settings()
