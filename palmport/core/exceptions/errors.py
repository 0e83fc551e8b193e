"""
Domain exception types with their HTTP status.
"""
from __future__ import annotations

from palmport.core.exceptions.base import ProjectError


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(ProjectError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class InvalidStatusError(ValidationError):
    """Unknown delivery/payment status, or a transition the policy forbids."""

    default_code = "INVALID_STATUS"
    default_http_status = 400


class PaymentNotConfirmedError(ProjectError):
    """The payment gateway did not report the transaction as successful."""

    default_code = "PAYMENT_NOT_CONFIRMED"
    default_http_status = 400


class NotFoundError(ProjectError):
    """Requested resource not found."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class UnauthorizedError(ProjectError):
    """Credential missing or rejected."""

    default_code = "UNAUTHORIZED"
    default_http_status = 401


class ForbiddenError(ProjectError):
    """Credential invalid/expired, or the role is not allowed."""

    default_code = "FORBIDDEN"
    default_http_status = 403


class ConflictError(ProjectError):
    """Resource state conflict (e.g. duplicate key)."""

    default_code = "CONFLICT"
    default_http_status = 409


class UpstreamError(ProjectError):
    """Payment gateway or image host call failed."""

    default_code = "UPSTREAM_ERROR"
    default_http_status = 500


class PersistenceError(ProjectError):
    """Database operation failed."""

    default_code = "PERSISTENCE_ERROR"
    default_http_status = 500
