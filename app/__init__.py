"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    CookSmartError,
    ServiceValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    BackendError,
    StaleConnectionError,
)

__all__ = [
    "settings",
    "CookSmartError",
    "ServiceValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "BackendError",
    "StaleConnectionError",
]
