"""Paths reachable without any authorization."""

from __future__ import annotations

from erpgate.routing.rewrite import split_path

PUBLIC_PATHS = frozenset({"/", "/about", "/contact", "/privacy", "/terms"})

PUBLIC_PREFIXES: tuple[str, ...] = (
    "/auth/",
    "/api/webhooks/",
    "/sign-in",
    "/sign-up",
)

# Served as-is on every host; never routed through role checks
INFRASTRUCTURE_PREFIXES: tuple[str, ...] = (
    "/_next/",
    "/favicon",
    "/public/",
    "/api/",
)


def is_public_path(path: str | None) -> bool:
    """True when no role needs to be consulted to serve ``path``."""
    clean, _, _ = split_path(path)
    if clean in PUBLIC_PATHS:
        return True
    return clean.startswith(PUBLIC_PREFIXES)


def is_infrastructure_path(path: str | None) -> bool:
    """True for build assets, static files and API routes.

    API routes authorize themselves; a final segment with a dot is a static file.
    """
    clean, _, _ = split_path(path)
    if clean.startswith(INFRASTRUCTURE_PREFIXES):
        return True
    return "." in clean.rsplit("/", 1)[-1]
