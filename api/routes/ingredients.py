"""Ingredient catalogue routes, localized to the active language"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from api.dependencies import get_language, get_services
from app.container import Services
from app.exceptions import NotFoundError
from domain.enums import IngredientCategory, IngredientUnit, Language
from domain.labels import category_label, unit_label
from domain.schemas.ingredient_schemas import IngredientView

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])


@router.get("", response_model=List[IngredientView])
async def list_ingredients(
    q: Optional[str] = Query(default=None, max_length=100, description="Name contains"),
    lang: Language = Depends(get_language),
    services: Services = Depends(get_services),
):
    ingredients = await services.ingredients.search_ingredients(q or "", lang)
    return [IngredientView.from_ingredient(i, lang) for i in ingredients]


@router.get("/categories")
async def list_categories(lang: Language = Depends(get_language)):
    return [{"value": c.value, "label": category_label(c, lang)} for c in IngredientCategory]


@router.get("/units")
async def list_units(lang: Language = Depends(get_language)):
    return [{"value": u.value, "label": unit_label(u, lang)} for u in IngredientUnit]


@router.get("/{ingredient_id}", response_model=IngredientView)
async def get_ingredient(
    ingredient_id: str,
    lang: Language = Depends(get_language),
    services: Services = Depends(get_services),
):
    ingredient = await services.ingredients.get_ingredient(ingredient_id)
    if ingredient is None:
        raise NotFoundError(f"Ingredient {ingredient_id} not found")
    return IngredientView.from_ingredient(ingredient, lang)
