"""Language preference, kept in a cookie"""

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_language
from domain.enums import Language
from domain.schemas.profile_schemas import LanguagePreference
from services.language_service import LANGUAGE_COOKIE, LANGUAGE_COOKIE_MAX_AGE

router = APIRouter(prefix="/preferences", tags=["Preferences"])


@router.get("/language", response_model=LanguagePreference)
async def get_language_preference(lang: Language = Depends(get_language)):
    return LanguagePreference(language=lang)


@router.put("/language", response_model=LanguagePreference)
async def set_language_preference(preference: LanguagePreference, response: Response):
    response.set_cookie(
        LANGUAGE_COOKIE,
        preference.language.value,
        max_age=LANGUAGE_COOKIE_MAX_AGE,
        samesite="lax",
    )
    return preference
