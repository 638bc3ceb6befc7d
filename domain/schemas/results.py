"""Outcome of a service write: never raised past the service boundary."""

from pydantic import BaseModel
from typing import Any, Dict, Optional

from app.exceptions import BackendError, CookSmartError


class ServiceResult(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    # Status the gateway answers with when this failure reaches a route
    http_status: int = 200

    @classmethod
    def ok(cls, data: Any = None) -> "ServiceResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        http_status: int = 400,
    ) -> "ServiceResult":
        return cls(
            success=False,
            error=error or "Request failed",
            code=code,
            details=details,
            http_status=http_status,
        )

    @classmethod
    def from_error(cls, exc: CookSmartError, prefix: Optional[str] = None) -> "ServiceResult":
        message = f"{prefix}: {exc.message}" if prefix else exc.message
        http_status = exc.http_status
        # The backend rejected the request itself, as opposed to being unreachable
        if isinstance(exc, BackendError) and not exc.is_transient:
            http_status = exc.status if exc.status in (401, 403, 404, 409) else 400
        return cls.fail(
            message,
            code=exc.code,
            details=dict(exc.details) if exc.details else None,
            http_status=http_status,
        )
