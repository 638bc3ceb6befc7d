"""Saved recipe routes (the signed-in user's favourites)"""

from fastapi import APIRouter, Depends
from typing import List, Optional

from api.dependencies import get_optional_user_id, get_services, require_user
from api.responses import result_response
from app.container import Services
from domain.schemas.profile_schemas import AuthUser
from domain.schemas.recipe_schemas import Recipe, SavedStatus

router = APIRouter(prefix="/saved-recipes", tags=["Saved recipes"])


@router.get("", response_model=List[Recipe])
async def list_saved(
    user: AuthUser = Depends(require_user), services: Services = Depends(get_services)
):
    return await services.saved.list_saved_recipes(user.id)


@router.get("/{recipe_id}", response_model=SavedStatus)
async def saved_status(
    recipe_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    services: Services = Depends(get_services),
):
    """Anonymous users get ``saved=false``."""
    saved = await services.saved.is_recipe_saved(user_id, recipe_id)
    return SavedStatus(recipe_id=recipe_id, saved=saved)


@router.put("/{recipe_id}")
async def save_recipe(
    recipe_id: str,
    user: AuthUser = Depends(require_user),
    services: Services = Depends(get_services),
):
    return result_response(await services.saved.save_recipe(user.id, recipe_id))


@router.delete("/{recipe_id}")
async def unsave_recipe(
    recipe_id: str,
    user: AuthUser = Depends(require_user),
    services: Services = Depends(get_services),
):
    return result_response(await services.saved.unsave_recipe(user.id, recipe_id))


@router.post("/{recipe_id}/toggle")
async def toggle_saved(
    recipe_id: str,
    user: AuthUser = Depends(require_user),
    services: Services = Depends(get_services),
):
    return result_response(await services.saved.toggle_saved(user.id, recipe_id))
