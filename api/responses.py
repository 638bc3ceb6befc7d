"""
Standardized API response models and utilities.
Provides consistent response formatting across all endpoints.
"""

from typing import Generic, TypeVar, Optional, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from domain.schemas.results import ServiceResult

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class APIResponse(BaseModel, Generic[T]):
    """Generic API response wrapper"""

    success: bool = Field(..., description="Indicates if the operation was successful")
    message: Optional[str] = Field(None, description="Human-readable message")
    data: Optional[T] = Field(None, description="Response payload")
    timestamp: datetime = Field(default_factory=_now, description="Response timestamp")

    model_config = {"from_attributes": True}


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(default_factory=_now, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    timestamp: datetime = Field(default_factory=_now, description="Check timestamp")


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "message": message,
        "data": data,
        "timestamp": _now(),
    }


def error_response(code: str, message: str, details: dict = None) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details,
        },
        "timestamp": _now(),
    }


def result_response(
    result: ServiceResult, message: str = None, success_status: int = 200
) -> JSONResponse:
    """Turn a service write outcome into the success or error envelope"""
    if result.success:
        body = success_response(result.data, message)
        status_code = success_status
    else:
        body = error_response(result.code or "REQUEST_FAILED", result.error, result.details)
        status_code = result.http_status
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
