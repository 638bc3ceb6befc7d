from typing import Any, Mapping, Optional


class CookSmartError(Exception):
    """Base class for errors the gateway knows how to report.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
        error_code: code reported when no specific ``code`` was given
    """

    http_status = 500
    error_code = "INTERNAL_ERROR"
    default_message = "Unexpected error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "message": self.message,
            "code": self.code or self.error_code,
        }
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(CookSmartError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    error_code = "SERVICE_VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFoundError(CookSmartError):
    """Raised when a requested resource was not found."""

    http_status = 404
    error_code = "NOT_FOUND"
    default_message = "Not found"


class UnauthorizedError(CookSmartError):
    """Raised when no user is signed in or the session is no longer valid."""

    http_status = 401
    error_code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class ForbiddenError(CookSmartError):
    """Raised when the signed-in user lacks the admin role."""

    http_status = 403
    error_code = "FORBIDDEN"
    default_message = "Forbidden"


class BackendError(CookSmartError):
    """An error reported by the hosted backend, or a network failure talking to it.

    ``status`` is the HTTP status of the response, or 0 when no response
    arrived at all (connection refused, reset, timed out).
    """

    http_status = 502
    error_code = "BACKEND_ERROR"
    default_message = "Backend request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
        status: int = 0,
    ):
        super().__init__(message, details=details, code=code)
        self.status = status

    @property
    def is_transient(self) -> bool:
        """Worth retrying: no response, or a server-side failure."""
        return self.status == 0 or self.status >= 500

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["status"] = self.status
        return payload


class StaleConnectionError(BackendError):
    """A remote call did not complete before its timeout."""

    default_message = "Request timed out (stale connection)"

    def __init__(self, message: Optional[str] = None, timeout: Optional[float] = None):
        details = {"timeout": timeout} if timeout is not None else None
        super().__init__(message, details=details, code="STALE_CONNECTION", status=0)
        self.timeout = timeout
