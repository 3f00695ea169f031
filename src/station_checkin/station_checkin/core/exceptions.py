class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is one of the stable error codes reported to clients
    (``unauthorized``, ``not_found``, ``invalid_input``, ``conflict``,
    ``disabled``); ``reason`` narrows it down.
    """

    code = "error"
    http_status = 400

    def __init__(self, reason: str = "", message: str | None = None):
        self.reason = reason or self.code
        super().__init__(message or self.reason)


class UnauthorizedError(DomainError):
    """Raised when a kiosk key or admin credential is missing or invalid."""

    code = "unauthorized"
    http_status = 401


class NotFoundError(DomainError):
    """Raised when a row is absent or outside the caller's organisation/station."""

    code = "not_found"
    http_status = 404


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "invalid_input"
    http_status = 400


class ConflictError(DomainError):
    """Raised on unique-constraint clashes and state conflicts."""

    code = "conflict"
    http_status = 409


class DisabledError(DomainError):
    """Raised when a member exists but may not check in."""

    code = "disabled"
    http_status = 403
