"""
Admin routes - dashboard, recipe and ingredient management, image upload.
Every route requires a signed-in user with the admin role.
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile
import logging

from api.dependencies import get_services, require_admin
from api.responses import result_response
from app.container import Services
from app.exceptions import NotFoundError
from domain.schemas.ingredient_schemas import IngredientCreate, IngredientUpdate
from domain.schemas.profile_schemas import AuthUser
from domain.schemas.recipe_schemas import (
    DashboardStats,
    RecipeCreate,
    RecipeUpdate,
    RecipeWithIngredients,
)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger("cooksmart.api.admin")


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(services: Services = Depends(get_services)):
    return await services.recipes.get_dashboard_stats()


# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------


@router.get("/recipes/{recipe_id}", response_model=RecipeWithIngredients)
async def get_recipe(recipe_id: str, services: Services = Depends(get_services)):
    """Recipe with ingredient lines, for the edit form."""
    recipe = await services.recipes.get_recipe_by_id(recipe_id)
    if recipe is None:
        raise NotFoundError(f"Recipe {recipe_id} not found")
    return recipe


@router.post("/recipes")
async def create_recipe(
    data: RecipeCreate,
    admin: AuthUser = Depends(require_admin),
    services: Services = Depends(get_services),
):
    result = await services.recipes.create_recipe(data, admin.id)
    if not result.success:
        logger.warning(f"recipe_create_failed code={result.code} error={result.error}")
    return result_response(result, success_status=201)


@router.put("/recipes/{recipe_id}")
async def update_recipe(
    recipe_id: str, updates: RecipeUpdate, services: Services = Depends(get_services)
):
    return result_response(await services.recipes.update_recipe(recipe_id, updates))


@router.delete("/recipes/{recipe_id}")
async def delete_recipe(recipe_id: str, services: Services = Depends(get_services)):
    return result_response(await services.recipes.delete_recipe(recipe_id))


@router.post("/images")
async def upload_recipe_image(
    file: UploadFile = File(...), services: Services = Depends(get_services)
):
    content = await file.read()
    result = await services.recipes.upload_recipe_image(
        file.filename or "", content, file.content_type
    )
    return result_response(result, success_status=201)


@router.delete("/images")
async def delete_recipe_image(
    path: str = Query(..., min_length=1, description="Object path in the image bucket"),
    services: Services = Depends(get_services),
):
    return result_response(await services.recipes.delete_recipe_image(path))


# ---------------------------------------------------------------------------
# Ingredients
# ---------------------------------------------------------------------------


@router.post("/ingredients")
async def create_ingredient(data: IngredientCreate, services: Services = Depends(get_services)):
    return result_response(await services.ingredients.create_ingredient(data), success_status=201)


@router.put("/ingredients/{ingredient_id}")
async def update_ingredient(
    ingredient_id: str, updates: IngredientUpdate, services: Services = Depends(get_services)
):
    return result_response(await services.ingredients.update_ingredient(ingredient_id, updates))


@router.delete("/ingredients/{ingredient_id}")
async def delete_ingredient(ingredient_id: str, services: Services = Depends(get_services)):
    return result_response(await services.ingredients.delete_ingredient(ingredient_id))
