"""Domain errors raised by the service layer.

Each carries the HTTP status the API maps it to; handlers live in fieldservice.main.
"""

from __future__ import annotations


class FieldServiceError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FieldServiceError):
    status_code = 400
    default_message = "Invalid request"


class WeakCredential(ValidationError):
    default_message = "Password too short"


class InvalidCredential(FieldServiceError):
    # Same message for unknown email and wrong password
    status_code = 401
    default_message = "Invalid credentials"


class InvalidCapability(FieldServiceError):
    status_code = 401
    default_message = "Not authenticated"


class NotFound(FieldServiceError):
    status_code = 404
    default_message = "Not found"


class DuplicateIdentity(FieldServiceError):
    status_code = 409
    default_message = "Email already registered"


class StorageFailure(FieldServiceError):
    status_code = 500
    default_message = "Internal server error"


class RenderFailure(FieldServiceError):
    status_code = 500
    default_message = "Report rendering failed"
