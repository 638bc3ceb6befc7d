"""Pantry routes - find recipes from the ingredients at hand"""

from fastapi import APIRouter, Depends
from typing import List
import logging

from api.dependencies import get_services
from app.container import Services
from domain.schemas.recipe_schemas import IngredientSearchRequest, Recipe

router = APIRouter(prefix="/pantry", tags=["Pantry"])
logger = logging.getLogger("cooksmart.api.pantry")


@router.post("/search", response_model=List[Recipe])
async def search_by_ingredients(
    request: IngredientSearchRequest, services: Services = Depends(get_services)
):
    """Recipes using the selected ingredients, best matches first."""
    recipes = await services.recipes.search_by_ingredients(request.ingredient_ids)
    logger.info(f"pantry_search ingredients={len(request.ingredient_ids)} results={len(recipes)}")
    return recipes
