# Overview: Domain exception hierarchy shared by services and routes.

"""
Domain errors

Every service failure a caller is expected to handle is one of these.
Each carries a human-readable message and the HTTP status the API layer
returns for it. There are no structured error codes.
"""


class DomainError(Exception):
    """Base class for expected business failures."""
    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationError(DomainError):
    """No authenticated user, or the credentials/session are not valid."""
    status_code = 401


class PermissionDeniedError(DomainError):
    """Authenticated user has the wrong role for the operation."""
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Operation not allowed in the entity's current state, or duplicate."""
    status_code = 409


class InsufficientStockError(ConflictError):
    """Requested quantity exceeds what the stock lot holds."""


class ValidationError(DomainError, ValueError):
    """400-level input problem (format or range violation)."""
    status_code = 400
