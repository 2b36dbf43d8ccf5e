"""Domain-prefix path rewriting.

A request for ``/orders`` on the creator host is served internally from
``/creator/orders``. The main host is never rewritten, and cross-tenant
infrastructure paths (auth callbacks, API routes, build assets) keep their
original location on every host.
"""

from __future__ import annotations

import re

from erpgate.routing.domain import DOMAIN_PREFIXES
from erpgate.types import DomainType

EXCLUDED_PREFIXES: tuple[str, ...] = (
    "/auth/",
    "/api/",
    "/_next/",
    "/favicon",
    "/public/",
)

_DASHBOARD_ALIASES = frozenset({"/", "/dashboard"})
_REPEATED_SLASHES = re.compile(r"/{2,}")


def split_path(raw: str | None) -> tuple[str, str, str]:
    """Split a raw request target into (path, query, fragment).

    The query keeps its leading ``?`` and the fragment its leading ``#`` so the
    three parts concatenate back verbatim. Only the path part is normalized.
    """
    path, hash_sep, fragment = (raw or "").partition("#")
    path, query_sep, query = path.partition("?")
    path = _REPEATED_SLASHES.sub("/", path)
    if not path.startswith("/"):
        path = "/" + path
    return path, query_sep + query, hash_sep + fragment


def normalize_path(raw: str | None) -> str:
    path, query, fragment = split_path(raw)
    return f"{path}{query}{fragment}"


def rewrite_path(
    path: str | None,
    domain: DomainType | str,
    base_url: str = "",  # reserved for absolute-URL rewriting
) -> str:
    """Map a raw request path to the canonical internal route for ``domain``.

    Idempotent: rewriting an already-rewritten path returns it unchanged.
    """
    clean, query, fragment = split_path(path)
    return f"{_rewrite(clean, _coerce_domain(domain))}{query}{fragment}"


def _rewrite(path: str, domain: DomainType) -> str:
    if domain == DomainType.MAIN:
        return path
    if path.startswith(EXCLUDED_PREFIXES):
        return path

    prefix = DOMAIN_PREFIXES[domain]
    if path == prefix or path.startswith(prefix + "/"):
        return path
    if path in _DASHBOARD_ALIASES:
        return f"{prefix}/dashboard"
    return f"{prefix}{path}"


def _coerce_domain(domain: DomainType | str) -> DomainType:
    try:
        return DomainType(domain)
    except ValueError:
        return DomainType.MAIN
