"""Enums and type aliases for erpgate."""

from collections.abc import Awaitable, Callable
from enum import StrEnum


class Role(StrEnum):
    SUPER_ADMIN = "super_admin"
    COMPANY_ADMIN = "company_admin"
    BRAND_ADMIN = "brand_admin"
    BRAND_STAFF = "brand_staff"
    STORE_MANAGER = "store_manager"
    STORE_STAFF = "store_staff"


class Tier(StrEnum):
    COMPANY = "company"
    BRAND = "brand"
    STORE = "store"


class DomainType(StrEnum):
    MAIN = "main"
    CREATOR = "creator"
    BUSINESS = "business"
    ADMIN = "admin"


class EntityType(StrEnum):
    BRAND = "brand"
    STORE = "store"


class Outcome(StrEnum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    DENY = "deny"


# (brand_id, store_id) -> does the store belong to the brand
StoreOwnershipLookup = Callable[[str, str], bool | Awaitable[bool]]
