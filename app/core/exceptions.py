"""Domain-level exception hierarchy for service and repository layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""


class NotFoundError(DomainError):
    """Raised when a requested user does not exist."""


class ConflictError(DomainError):
    """Raised when a state conflict occurs (e.g. duplicate nickname)."""


class ValidationError(DomainError):
    """Raised when input is malformed or would break a user invariant."""


class InvalidSortError(ValidationError):
    """Raised when the listing sort token is not one of "", "asc", "desc"."""


class InternalError(DomainError):
    """Opaque wrapper for store failures that could not be classified."""


class InfrastructureError(InternalError):
    """Raised when the database is unavailable or did not answer in time."""
