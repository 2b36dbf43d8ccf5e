"""Exception hierarchy for erpgate."""


class ErpGateError(Exception):
    """Base exception for all erpgate errors."""


class ConfigError(ErpGateError):
    """Raised when configuration is invalid."""


class IdentityError(ErpGateError):
    """Raised when the caller's identity claims cannot be resolved."""


class OwnershipLookupError(ErpGateError):
    """Raised when the store-ownership collaborator cannot answer."""
