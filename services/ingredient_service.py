"""Ingredient service - the bilingual ingredient catalogue."""

from typing import List, Optional
import logging

from adapters.backend_client import UNIQUE_VIOLATION_CODE
from app.exceptions import BackendError
from domain.enums import Language
from domain.schemas.ingredient_schemas import Ingredient, IngredientCreate, IngredientUpdate
from domain.schemas.results import ServiceResult
from repositories import IngredientRepository

logger = logging.getLogger("cooksmart.ingredient")

DUPLICATE_INGREDIENT = "DUPLICATE_INGREDIENT"


def sort_by_name(ingredients: List[Ingredient], lang: Language) -> List[Ingredient]:
    return sorted(ingredients, key=lambda i: i.display_name(lang).casefold())


class IngredientService:
    """Business logic for ingredient master data."""

    def __init__(self, ingredients: IngredientRepository):
        self.ingredients = ingredients

    async def list_ingredients(self, lang: Language = Language.BG) -> List[Ingredient]:
        """All ingredients, alphabetical in the active language."""
        try:
            rows = await self.ingredients.list()
        except BackendError as exc:
            logger.error(f"Error fetching ingredients: {exc}")
            return []
        return sort_by_name([Ingredient.model_validate(r) for r in rows], lang)

    async def search_ingredients(self, term: str, lang: Language = Language.BG) -> List[Ingredient]:
        if not term or not term.strip():
            return await self.list_ingredients(lang)
        try:
            rows = await self.ingredients.search(term.strip())
        except BackendError as exc:
            logger.error(f"Error searching ingredients for {term!r}: {exc}")
            return []
        return sort_by_name([Ingredient.model_validate(r) for r in rows], lang)

    async def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        try:
            row = await self.ingredients.get_by_id(ingredient_id)
        except BackendError as exc:
            logger.error(f"Error fetching ingredient {ingredient_id}: {exc}")
            return None
        return Ingredient.model_validate(row) if row else None

    async def create_ingredient(self, data: IngredientCreate) -> ServiceResult:
        """Create an ingredient unless one with the same name already exists.

        The name check is advisory; the unique constraint on the table is
        what actually prevents duplicates.
        """
        try:
            matches = await self.ingredients.find_by_names(data.name_bg, data.name_en)
        except BackendError as exc:
            logger.warning(f"Duplicate check failed, relying on constraint: {exc}")
            matches = []
        if matches:
            existing = Ingredient.model_validate(matches[0])
            return ServiceResult.fail(
                "An ingredient with this name already exists",
                code=DUPLICATE_INGREDIENT,
                http_status=409,
                details={"ingredient_id": existing.id},
            )

        try:
            row = await self.ingredients.create(data.model_dump(mode="json"))
        except BackendError as exc:
            if exc.code == UNIQUE_VIOLATION_CODE:
                return ServiceResult.fail(
                    "An ingredient with this name already exists", code=DUPLICATE_INGREDIENT, http_status=409
                )
            logger.error(f"Error creating ingredient {data.name_en}: {exc}")
            return ServiceResult.from_error(exc, prefix="Failed to create ingredient")

        ingredient = Ingredient.model_validate(row)
        logger.info(f"ingredient_created id={ingredient.id} name={ingredient.name_en}")
        return ServiceResult.ok(ingredient)

    async def update_ingredient(self, ingredient_id: str, updates: IngredientUpdate) -> ServiceResult:
        values = updates.model_dump(mode="json", exclude_unset=True)
        for key in ("name_bg", "name_en"):
            if key in values and values[key] is not None:
                values[key] = values[key].strip()
        if not values:
            return ServiceResult.fail("Nothing to update", code="EMPTY_UPDATE")

        try:
            row = await self.ingredients.update(ingredient_id, values)
        except BackendError as exc:
            if exc.code == UNIQUE_VIOLATION_CODE:
                return ServiceResult.fail(
                    "An ingredient with this name already exists", code=DUPLICATE_INGREDIENT, http_status=409
                )
            logger.error(f"Error updating ingredient {ingredient_id}: {exc}")
            return ServiceResult.from_error(exc, prefix="Failed to update ingredient")
        if row is None:
            return ServiceResult.fail(f"Ingredient {ingredient_id} not found", code="NOT_FOUND", http_status=404)
        return ServiceResult.ok(Ingredient.model_validate(row))

    async def delete_ingredient(self, ingredient_id: str) -> ServiceResult:
        try:
            await self.ingredients.delete(ingredient_id)
        except BackendError as exc:
            logger.error(f"Error deleting ingredient {ingredient_id}: {exc}")
            return ServiceResult.from_error(exc, prefix="Failed to delete ingredient")
        logger.info(f"ingredient_deleted id={ingredient_id}")
        return ServiceResult.ok()
