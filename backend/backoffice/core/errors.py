"""Domain failures raised by services and translated to HTTP responses in ``backoffice.main``."""

from __future__ import annotations


class DomainError(Exception):
    status_code = 400
    default_reason = "domain.error"

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason


class PermissionDenied(DomainError):
    status_code = 403
    default_reason = "permission.denied"


class NotFound(DomainError):
    status_code = 404
    default_reason = "entity.not_found"


class InvalidOperation(DomainError):
    status_code = 409
    default_reason = "operation.invalid"


class InvalidAssignment(InvalidOperation):
    default_reason = "assignment.invalid"


class ReferentialIntegrityError(DomainError):
    """Storage handed back data that breaks a relational invariant."""

    status_code = 500
    default_reason = "storage.integrity"
