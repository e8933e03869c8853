"""Custom exception hierarchy for the Shopfloor layout service."""

from __future__ import annotations


class ShopfloorError(Exception):
    """Base exception for all Shopfloor-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ShopfloorError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(ShopfloorError):
    """Base class for validation errors."""
    pass


class MalformedInputError(ValidationError):
    """Raised when a payload cannot be interpreted as the expected structure."""
    pass


class ReferenceNotFoundError(ShopfloorError):
    """Base class for lookups that reference a missing record."""
    pass


class EquipmentNotFoundError(ReferenceNotFoundError):
    """Raised when an equipment id has no catalog record."""
    pass


class LayoutNotFoundError(ReferenceNotFoundError):
    """Raised when a layout is not found."""
    pass


class SessionNotFoundError(ReferenceNotFoundError):
    """Raised when a collision session is not found."""
    pass


class StorageError(ShopfloorError):
    """Raised when storage operations fail."""
    pass
