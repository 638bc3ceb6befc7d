"""
API dependencies for dependency injection and route guards
"""

from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status

from app.config import Settings
from app.container import Services
from app.exceptions import ForbiddenError, UnauthorizedError
from domain.enums import Language
from domain.schemas.profile_schemas import AuthUser
from services import LANGUAGE_COOKIE, SessionService, resolve_language


def get_services(request: Request) -> Services:
    """
    The service container built at startup.

    Usage:
        @router.get("/example")
        async def example(services: Services = Depends(get_services)):
            ...
    """
    return request.app.state.services


def get_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


async def get_session(
    services: Services = Depends(get_services),
    app_settings: Settings = Depends(get_settings),
) -> SessionService:
    """Session service once the initial session check has finished.

    Requests that arrive during startup wait for it rather than being
    answered as anonymous.
    """
    session = services.session
    if not await session.wait_until_ready(timeout=app_settings.request_timeout_sec):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session is still loading",
        )
    return session


async def get_optional_user_id(
    session: SessionService = Depends(get_session),
) -> Optional[str]:
    return session.current_user_id


async def require_user(session: SessionService = Depends(get_session)) -> AuthUser:
    if not session.is_authenticated:
        raise UnauthorizedError("Sign in required")
    return session.current_user


async def require_admin(
    user: AuthUser = Depends(require_user),
    session: SessionService = Depends(get_session),
) -> AuthUser:
    if not session.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def get_language(
    request: Request,
    lang: Optional[str] = Query(default=None, description="bg or en"),
    app_settings: Settings = Depends(get_settings),
) -> Language:
    """Explicit ``lang`` parameter, then the language cookie, then Accept-Language."""
    return resolve_language(
        lang,
        request.cookies.get(LANGUAGE_COOKIE),
        request.headers.get("accept-language"),
        app_settings.default_language,
    )
