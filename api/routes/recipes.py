"""
Recipe routes - browsing and the recipe detail page.
"""

from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, List, Optional
import logging

from api.dependencies import get_language, get_optional_user_id, get_services
from app.container import Services
from app.exceptions import NotFoundError
from domain.enums import Difficulty, Language, PrepTimeRange
from domain.labels import unit_label
from domain.schemas.recipe_schemas import Recipe, RecipeFilters, RecipeWithIngredients

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("cooksmart.api.recipes")


def recipe_detail(recipe: RecipeWithIngredients, lang: Language) -> Dict[str, Any]:
    """Recipe with each ingredient line named and unit-labelled in ``lang``."""
    body = recipe.model_dump(mode="json")
    for line, detail in zip(body["ingredients"], recipe.ingredients):
        line["name"] = detail.display_name(lang)
        try:
            line["unit_label"] = unit_label(detail.unit, lang)
        except ValueError:
            line["unit_label"] = detail.unit
    return body


@router.get("", response_model=List[Recipe])
async def list_recipes(
    difficulty: Optional[Difficulty] = Query(default=None, description="Difficulty filter"),
    prep_time: Optional[PrepTimeRange] = Query(default=None, description="Prep time bucket"),
    search: Optional[str] = Query(default=None, max_length=200, description="Title contains"),
    services: Services = Depends(get_services),
):
    """
    List recipes, newest first.

    - **difficulty**: Easy, Medium or Hard
    - **prep_time**: less_than_15, 15_to_30, 30_to_60 or more_than_60
    - **search**: case-insensitive substring of the title
    """
    filters = RecipeFilters(difficulty=difficulty, prep_time=prep_time, search=search)
    return await services.recipes.list_recipes(filters)


@router.get("/{slug}")
async def get_recipe(
    slug: str,
    lang: Language = Depends(get_language),
    user_id: Optional[str] = Depends(get_optional_user_id),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    """Recipe page: the recipe, its ingredients, and whether the user saved it."""
    recipe = await services.recipes.get_recipe_by_slug(slug)
    if recipe is None:
        raise NotFoundError(f"Recipe {slug} not found")

    body = recipe_detail(recipe, lang)
    body["saved"] = await services.saved.is_recipe_saved(user_id, recipe.id)
    return body
