"""
bugboard.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, service keys, encryption key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `BUGBOARD_`).

    Auth is optional piecewise: a shared `jwt_secret` enables HS256 bearer
    tokens, an `auth_url` enables key-set verification and cookie sessions.
    """

    model_config = SettingsConfigDict(env_prefix="BUGBOARD_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "bugboard-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./bugboard.db"

    # Backing auth service (Supabase GoTrue compatible)
    auth_url: str | None = None
    auth_anon_key: str | None = Field(default=None, repr=False)
    auth_service_role_key: str | None = Field(default=None, repr=False)
    session_cookie_name: str = "sb-access-token"

    # Bearer tokens
    jwt_secret: str | None = Field(default=None, repr=False)
    jwt_issuer: str | None = None
    jwt_audience: str = "authenticated"
    dev_jwt_ttl_minutes: int = 60

    # Base64 of a 32-byte AES key; only required once a secret is stored or read.
    encryption_key: str | None = Field(default=None, repr=False)

    @property
    def resolved_jwt_issuer(self) -> str | None:
        if self.jwt_issuer:
            return self.jwt_issuer.rstrip("/")
        if self.auth_url:
            return f"{self.auth_url.rstrip('/')}/auth/v1"
        return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other module depends on this one; keep field names stable since they map
# directly to deployment environment variables.
