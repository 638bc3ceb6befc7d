"""
Consolidated middleware for the CookSmart gateway
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import BackendError, CookSmartError

logger = logging.getLogger("cooksmart.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert validation error payloads to JSON-serializable form"""
    if isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    elif isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    return obj


def error_body(code: str, message: str, details=None) -> dict:
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ============================================================================
# Request Logging Middleware
# ============================================================================


# Health probes are polled by the presentation layer; keep them out of INFO logs
QUIET_PATHS = ("/health-check", "/health/backend")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with an id and its duration, echoed back in headers"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        level = logging.DEBUG if request.url.path.endswith(QUIET_PATHS) else logging.INFO
        fields = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"{request.method} {request.url.path} failed after {elapsed_ms:.1f}ms",
                extra={**fields, "error": str(exc)},
                exc_info=True,
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)",
            extra={**fields, "status_code": response.status_code},
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return JSONResponse(
        status_code=422,
        content=error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            make_serializable(exc.errors()),
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
    )


async def cooksmart_exception_handler(request: Request, exc: CookSmartError):
    """Handle domain errors: validation, not found, auth guards, backend failures"""
    if isinstance(exc, BackendError):
        logger.error(f"Backend error on {request.url}: {exc}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url}: {exc}")

    payload = exc.to_dict()
    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(payload["code"], payload["message"], payload.get("details")),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
