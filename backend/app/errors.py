"""Domain exceptions raised by the services and rendered by app.main."""
from typing import Optional


class AppError(Exception):
    """Base class; carries the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(AppError):
    """Missing or inconsistent input (e.g. hospital visibility without a hospital)."""

    status_code = 400


class AuthorizationError(AppError):
    """Caller may not touch this resource (cross-hospital access, system rows)."""

    status_code = 403


class NotFoundError(AppError):
    """Entity does not exist or lies outside the caller's hospital scope."""

    status_code = 404


class ConflictError(AppError):
    """State changed under the caller: stale reorder batch, already reviewed, duplicates."""

    status_code = 409
