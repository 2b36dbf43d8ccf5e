"""Clerk JWT validation and JWKS key management."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import httpx
import jwt
import structlog

from erpgate.config.settings import get_settings
from erpgate.exceptions import ConfigError, IdentityError

logger = structlog.get_logger(__name__)

# JWKS cache TTL in seconds (1 hour)
_JWKS_CACHE_TTL = 3600

# Server-controlled claim containers searched for role and bindings, first hit
# wins. user_metadata is writable by the user and never consulted.
_METADATA_CLAIMS = ("metadata", "public_metadata", "app_metadata")


@dataclass
class _JWKSCache:
    """In-memory cache for Clerk JWKS keys."""

    keys: list[dict[str, Any]] = field(default_factory=list)
    fetched_at: float = 0.0

    @property
    def is_stale(self) -> bool:
        return time.monotonic() - self.fetched_at > _JWKS_CACHE_TTL


_cache = _JWKSCache()


async def _fetch_jwks(jwks_url: str) -> list[dict[str, Any]]:
    """Fetch JWKS from Clerk and update cache."""
    global _cache  # noqa: PLW0603
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.get(jwks_url)
            resp.raise_for_status()
            keys: list[dict[str, Any]] = resp.json().get("keys", [])
            _cache = _JWKSCache(keys=keys, fetched_at=time.monotonic())
            logger.debug("jwks_fetched", key_count=len(keys))
            return keys
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.warning("jwks_fetch_failed", error=str(exc))
        if _cache.keys:
            logger.info("jwks_using_stale_cache")
            return _cache.keys
        raise


async def _get_signing_keys() -> list[dict[str, Any]]:
    """Get JWKS keys, using cache when fresh."""
    settings = get_settings()
    jwks_url = settings.clerk_jwks_url
    if not jwks_url:
        msg = "CLERK_JWKS_URL is not configured"
        raise ConfigError(msg)

    if not _cache.is_stale and _cache.keys:
        return _cache.keys

    return await _fetch_jwks(jwks_url)


@dataclass(frozen=True, slots=True)
class ClerkClaims:
    """Identity and ERP bindings carried by a verified Clerk JWT."""

    sub: str  # Clerk user ID
    role: str
    email: str = ""
    company_id: str | None = None
    brand_id: str | None = None
    store_id: str | None = None


def _claim(payload: dict[str, Any], key: str) -> Any:
    for container in _METADATA_CLAIMS:
        section = payload.get(container)
        if isinstance(section, dict) and section.get(key):
            return section[key]
    return None


def claims_from_payload(payload: dict[str, Any]) -> ClerkClaims:
    """Map a decoded token payload to ``ClerkClaims``.

    Role and bindings are read only from the server-controlled metadata claims.
    """
    sub = payload.get("sub")
    if not sub:
        msg = "token has no subject"
        raise IdentityError(msg)

    def _optional(key: str) -> str | None:
        value = _claim(payload, key)
        return str(value) if value else None

    return ClerkClaims(
        sub=str(sub),
        role=str(_claim(payload, "role") or ""),
        email=str(payload.get("email", "")),
        company_id=_optional("company_id"),
        brand_id=_optional("brand_id"),
        store_id=_optional("store_id"),
    )


async def verify_clerk_token(token: str) -> ClerkClaims:
    """Verify a Clerk JWT and return parsed claims.

    Raises jwt.PyJWTError on invalid/expired tokens.
    """
    settings = get_settings()
    keys = await _get_signing_keys()

    signing_key = jwt.PyJWKSet.from_dict({"keys": keys})

    decode_options: dict[str, Any] = {
        "algorithms": ["RS256"],
        "options": {"verify_aud": False},
    }
    if settings.clerk_issuer:
        decode_options["issuer"] = settings.clerk_issuer

    # Try each key until one works
    last_error: Exception | None = None
    for jwk in signing_key.keys:
        try:
            payload: dict[str, Any] = jwt.decode(token, jwk.key, **decode_options)
            return claims_from_payload(payload)
        except jwt.PyJWTError as exc:
            last_error = exc
            continue

    if last_error:
        raise last_error
    msg = "No valid signing key found"
    raise jwt.InvalidTokenError(msg)
