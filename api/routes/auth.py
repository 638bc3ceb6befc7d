"""Sign-in, sign-up, session status and foreground handling"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from api.dependencies import get_services, get_session
from api.responses import result_response
from app.container import Services
from domain.schemas.profile_schemas import (
    SessionStatus,
    SignInRequest,
    SignUpRequest,
    VisibilityChange,
)
from services import SessionService

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("cooksmart.api.auth")


@router.get("/session", response_model=SessionStatus)
async def session_status(session: SessionService = Depends(get_session)):
    """Current user and profile once the initial session check is done."""
    return session.status()


@router.post("/sign-in")
async def sign_in(request: SignInRequest, session: SessionService = Depends(get_session)):
    return result_response(await session.sign_in(request.email, request.password))


@router.post("/sign-up")
async def sign_up(request: SignUpRequest, session: SessionService = Depends(get_session)):
    result = await session.sign_up(request.email, request.password, request.display_name)
    return result_response(result, success_status=201)


@router.post("/sign-out")
async def sign_out(session: SessionService = Depends(get_session)):
    return result_response(await session.sign_out())


@router.get("/oauth-url")
async def oauth_url(
    provider: Optional[str] = Query(default=None, description="OAuth provider"),
    redirect_to: Optional[str] = Query(default=None, description="Return URL"),
    services: Services = Depends(get_services),
):
    """Where to send the browser for redirect-based OAuth sign-in."""
    return {"url": services.session.oauth_url(provider, redirect_to)}


@router.post("/visibility")
async def visibility_change(
    change: VisibilityChange, session: SessionService = Depends(get_session)
):
    """Report that the client was hidden or came back to the foreground.

    Coming back probes the backend connection, recreates it if it went
    stale, and re-validates the session.
    """
    return await session.handle_visibility_change(change.visible)
