"""Host-based tenant domain classification."""

from __future__ import annotations

from erpgate.types import DomainType

# Checked in order; first substring hit wins
_HOST_MARKERS: tuple[tuple[str, DomainType], ...] = (
    ("crt.", DomainType.CREATOR),
    ("biz.", DomainType.BUSINESS),
    ("adm.", DomainType.ADMIN),
)

DOMAIN_PREFIXES: dict[DomainType, str] = {
    DomainType.MAIN: "",
    DomainType.CREATOR: "/creator",
    DomainType.BUSINESS: "/business",
    DomainType.ADMIN: "/admin",
}


def domain_from_host(host: str | None) -> str:
    """Strip a trailing ``:port`` from a Host header value.

    Bracketed IPv6 literals (``[::1]:3000``) keep their brackets.
    """
    if not host:
        return ""
    host = host.strip()
    if host.startswith("["):
        end = host.find("]")
        return host[: end + 1] if end != -1 else host
    name, sep, port = host.rpartition(":")
    if sep and port.isdigit():
        return name
    return host


def classify_domain(host: str | None) -> DomainType:
    """Map a raw Host header value to the tenant surface it serves.

    Never raises: empty, missing or unrecognised hosts are ``main``.
    """
    hostname = domain_from_host(host).lower()
    if not hostname:
        return DomainType.MAIN
    for marker, domain in _HOST_MARKERS:
        if marker in hostname:
            return domain
    return DomainType.MAIN


def domain_prefix(domain: DomainType) -> str:
    return DOMAIN_PREFIXES[domain]


def is_valid_domain(value: object) -> bool:
    try:
        DomainType(value)
    except ValueError:
        return False
    return True
