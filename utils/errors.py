"""
Typed application errors.

Each error carries the HTTP status and the stable error code used in the
JSON error envelope, so the API layer maps them without inspecting
storage-engine or crypto library details.
"""
from __future__ import annotations


class AppError(Exception):
    status = 500
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class ConflictError(AppError):
    # "email already taken" is a 400 on the public interface
    status = 400
    code = "CONFLICT"
    default_message = "Resource already exists"


class AuthenticationError(AppError):
    status = 401
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class AuthorizationError(AppError):
    status = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(AppError):
    status = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class InternalError(AppError):
    pass
