"""Application settings via Pydantic BaseSettings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings

from erpgate.exceptions import ConfigError

DEFAULT_SIGN_IN_PATH = "/sign-in"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Identity: "header" trusts X-User-* headers from an upstream proxy,
    # "clerk" verifies a Bearer JWT against Clerk JWKS
    auth_mode: Literal["header", "clerk"] = "header"
    clerk_jwks_url: str | None = None
    clerk_issuer: str | None = None

    # Routing
    sign_in_path: str = DEFAULT_SIGN_IN_PATH

    # Store ownership collaborator
    ownership_backend: Literal["none", "memory", "rest"] = "none"
    ownership_map: dict[str, list[str]] = {}  # brand_id -> store ids (memory backend)
    data_api_url: str | None = None
    data_api_key: str | None = None
    ownership_timeout_seconds: float = 2.0

    # Trust X-Forwarded-For only when a known proxy fronts the service
    trust_forwarded_for: bool = False

    # Rate limiting (requests per window, per client IP)
    rate_limit_enabled: bool = True
    rate_limit_auth: int = 10
    rate_limit_auth_window: int = 900
    rate_limit_api: int = 100
    rate_limit_api_window: int = 60
    rate_limit_global: int = 300
    rate_limit_global_window: int = 60


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    settings = Settings()
    if settings.auth_mode == "clerk" and not settings.clerk_jwks_url:
        msg = "AUTH_MODE=clerk requires CLERK_JWKS_URL"
        raise ConfigError(msg)
    if settings.ownership_backend == "rest" and not settings.data_api_url:
        msg = "OWNERSHIP_BACKEND=rest requires DATA_API_URL"
        raise ConfigError(msg)
    if not settings.sign_in_path.startswith("/"):
        msg = "SIGN_IN_PATH must start with '/'"
        raise ConfigError(msg)
    return settings
