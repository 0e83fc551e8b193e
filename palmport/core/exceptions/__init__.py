"""
PalmPort exception types.

Usage:
    from palmport.core.exceptions import NotFoundError, ValidationError

    raise ValidationError("Missing required fields", details={"missing": ["phone"]})
    raise NotFoundError("Order not found", details={"reference": reference})
"""
from palmport.core.exceptions.base import ProjectError
from palmport.core.exceptions.errors import (
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
    PaymentNotConfirmedError,
    PersistenceError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "ConfigurationError",
    "ValidationError",
    "InvalidStatusError",
    "PaymentNotConfirmedError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "UpstreamError",
    "PersistenceError",
]
