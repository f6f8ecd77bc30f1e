"""
Custom exception classes for mirrah.

Every failure of a reflection helper surfaces as one of these, with the
offending type/field names in ``details`` and the underlying runtime error
chained as ``__cause__``.
"""

from typing import Any, Dict, Optional


class MirrahException(Exception):
    """
    Base exception class for all mirrah exceptions.

    Example:
        >>> raise FieldNotFoundError(
        ...     reason="No field named 'wings'",
        ...     details={"field": "wings", "type": "Car"}
        ... )
    """

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        self.details = details or {}
        message = f"{reason}"
        if self.details:
            message += f" - {self.details}"
        super().__init__(message)


class InstantiationError(MirrahException):
    """Raised when a class has no usable zero-argument constructor or construction fails."""

    pass


class TypeResolutionError(InstantiationError):
    """Raised when a qualified name does not resolve to a class."""

    pass


class FieldNotFoundError(MirrahException):
    """
    Raised when a named field is absent from a class hierarchy.

    For dotted paths ``details`` also carries the full ``path`` and the
    ``segment`` that failed.
    """

    pass


class FieldAccessError(MirrahException):
    """Raised when a read or write is rejected, even after the accessibility override."""

    pass


class TypeRegistryError(MirrahException):
    """Raised on duplicate or invalid type registrations."""

    pass
