"""Profile routes for the signed-in user"""

from fastapi import APIRouter, Depends, File, UploadFile
import logging

from api.dependencies import get_session, require_user
from api.responses import result_response
from domain.schemas.profile_schemas import AuthUser, Profile, ProfileUpdate
from app.exceptions import NotFoundError
from services import SessionService

router = APIRouter(prefix="/profile", tags=["Profiles"])
logger = logging.getLogger("cooksmart.api.profiles")


@router.get("", response_model=Profile)
async def get_profile(
    user: AuthUser = Depends(require_user), session: SessionService = Depends(get_session)
):
    if session.current_profile is None:
        raise NotFoundError(f"Profile for user {user.id} not found")
    return session.current_profile


@router.patch("")
async def update_profile(
    updates: ProfileUpdate,
    user: AuthUser = Depends(require_user),
    session: SessionService = Depends(get_session),
):
    return result_response(await session.update_profile(updates))


@router.post("/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    user: AuthUser = Depends(require_user),
    session: SessionService = Depends(get_session),
):
    content = await file.read()
    result = await session.upload_avatar(file.filename or "", content, file.content_type)
    return result_response(result)
