"""Recipe service - listing, detail, admin writes and pantry search."""

from typing import Any, Dict, List, Optional
from pathlib import PurePosixPath
from uuid import uuid4
import logging

from pydantic import ValidationError

from adapters.backend_client import UNIQUE_VIOLATION_CODE
from adapters.storage_client import StorageClient
from app.exceptions import BackendError, ServiceValidationError
from domain.schemas.recipe_schemas import (
    DashboardStats,
    Recipe,
    RecipeCreate,
    RecipeFilters,
    RecipeIngredientDetail,
    RecipeUpdate,
    RecipeWithIngredients,
)
from domain.schemas.results import ServiceResult
from domain.slug import slugify
from repositories import IngredientRepository, RecipeIngredientRepository, RecipeRepository

logger = logging.getLogger("cooksmart.recipe")

# Error codes callers can branch on
RECIPE_CREATE_FAILED = "RECIPE_CREATE_FAILED"
RECIPE_INGREDIENTS_FAILED = "RECIPE_INGREDIENTS_FAILED"
RECIPE_UPDATE_FAILED = "RECIPE_UPDATE_FAILED"
INGREDIENTS_DELETE_FAILED = "INGREDIENTS_DELETE_FAILED"
INGREDIENTS_INSERT_FAILED = "INGREDIENTS_INSERT_FAILED"
DUPLICATE_SLUG = "DUPLICATE_SLUG"
NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
NOT_FOUND = "NOT_FOUND"


def _clean_steps(steps: List[str]) -> List[str]:
    return [s.strip() for s in steps if s and s.strip()]


def _ingredient_detail(row: Dict[str, Any]) -> Optional[RecipeIngredientDetail]:
    """Flatten ``{quantity, unit, ingredient: {id, name_bg, name_en}}``."""
    ingredient = row.get("ingredient") or {}
    if not ingredient.get("id"):
        return None
    return RecipeIngredientDetail(
        id=ingredient["id"],
        name_bg=ingredient.get("name_bg") or "",
        name_en=ingredient.get("name_en") or "",
        quantity=row.get("quantity"),
        unit=row.get("unit") or "",
    )


class RecipeService:
    """Business logic for recipes.

    Reads never raise on backend failure: they log and fall back to an empty
    list or ``None``.  Writes return a ``ServiceResult``.
    """

    def __init__(
        self,
        recipes: RecipeRepository,
        recipe_ingredients: RecipeIngredientRepository,
        ingredients: Optional[IngredientRepository] = None,
        storage: Optional[StorageClient] = None,
        image_bucket: str = "recipe-images",
        transactional_writes: bool = False,
    ):
        self.recipes = recipes
        self.recipe_ingredients = recipe_ingredients
        self.ingredients = ingredients
        self.storage = storage
        self.image_bucket = image_bucket
        self.transactional_writes = transactional_writes

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def list_recipes(self, filters: Optional[RecipeFilters] = None) -> List[Recipe]:
        try:
            rows = await self.recipes.list(filters)
        except BackendError as exc:
            logger.error("Error fetching recipes (filters=%s): %s", filters, exc)
            return []
        return [Recipe.model_validate(r) for r in rows]

    async def get_recipe_by_id(self, recipe_id: str) -> Optional[RecipeWithIngredients]:
        """Recipe with its ingredient lines, as loaded by the admin edit form."""
        try:
            row = await self.recipes.get_by_id(recipe_id)
            if row is None:
                return None
            ingredient_rows = await self.recipe_ingredients.list_for_recipe(recipe_id)
        except BackendError as exc:
            logger.error("Error fetching recipe %s: %s", recipe_id, exc)
            return None

        details = [d for d in (_ingredient_detail(r) for r in ingredient_rows) if d]
        return RecipeWithIngredients(**{**row, "ingredients": details})

    async def get_recipe_by_slug(self, slug: str) -> Optional[RecipeWithIngredients]:
        """Recipe page data from the ``get_recipe_with_ingredients`` procedure."""
        try:
            data = await self.recipes.get_with_ingredients_by_slug(slug)
        except BackendError as exc:
            logger.error("Error fetching recipe by slug %s: %s", slug, exc)
            return None

        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            return None

        # The procedure returns {recipe: {...}, ingredients: [...]}
        if isinstance(data, dict) and "recipe" in data and "ingredients" in data:
            if not data["recipe"]:
                return None
            data = {**data["recipe"], "ingredients": data["ingredients"] or []}

        try:
            return RecipeWithIngredients.model_validate(data)
        except ValidationError as exc:
            logger.error("Malformed recipe payload for slug %s: %s", slug, exc)
            return None

    async def search_by_ingredients(self, ingredient_ids: List[str]) -> List[Recipe]:
        """Recipes matching the selected pantry ingredients, in server order."""
        unique_ids = list(dict.fromkeys(i for i in ingredient_ids if i))
        if not unique_ids:
            return []
        try:
            rows = await self.recipes.search_by_ingredients(unique_ids)
        except BackendError as exc:
            logger.error("Error searching recipes by ingredients: %s", exc)
            return []
        return [Recipe.model_validate(r) for r in rows]

    async def get_dashboard_stats(self) -> DashboardStats:
        total_recipes = 0
        total_ingredients = 0
        try:
            total_recipes = await self.recipes.count()
            if self.ingredients is not None:
                total_ingredients = await self.ingredients.count()
        except BackendError as exc:
            logger.error("Error loading dashboard stats: %s", exc)
        return DashboardStats(
            total_recipes=total_recipes, total_ingredients=total_ingredients
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    @staticmethod
    def validate_new_recipe(data: RecipeCreate) -> None:
        if not data.title.strip():
            raise ServiceValidationError("Title is required", code="TITLE_REQUIRED")
        if not data.ingredients:
            raise ServiceValidationError(
                "At least one ingredient is required", code="INGREDIENTS_REQUIRED"
            )
        if not _clean_steps(data.steps):
            raise ServiceValidationError(
                "At least one step is required", code="STEPS_REQUIRED"
            )

    async def create_recipe(self, data: RecipeCreate, author_id: Optional[str]) -> ServiceResult:
        """Insert the recipe, then its ingredient rows.

        The two inserts are not atomic.  If the second one fails the recipe
        row stays behind without ingredients and the result is a failure
        with code ``RECIPE_INGREDIENTS_FAILED`` and the orphan's id.
        """
        self.validate_new_recipe(data)
        if not author_id:
            return ServiceResult.fail("User not authenticated", code=NOT_AUTHENTICATED, http_status=401)

        slug = slugify(data.slug or data.title)
        if not slug:
            raise ServiceValidationError(
                "Title must contain letters or digits", code="INVALID_TITLE"
            )

        row = {
            # Chosen here so a retried insert can recognise its own row
            "id": str(uuid4()),
            "title": data.title.strip(),
            "slug": slug,
            "description": data.description,
            "image_url": data.image_url,
            "prep_time": data.prep_time,
            "servings": data.servings,
            "difficulty": data.difficulty.value,
            "steps": _clean_steps(data.steps),
            "author_id": author_id,
        }

        if self.transactional_writes:
            return await self._save_transactional(row, data.ingredients, None)

        logger.info("Creating recipe %s with %d ingredients", slug, len(data.ingredients))
        try:
            created = Recipe.model_validate(await self.recipes.create(row))
        except BackendError as exc:
            created = await self._find_saved_insert(exc, row)
            if created is None:
                return self._create_failure(exc)

        join_rows = [i.to_row(created.id) for i in data.ingredients]
        try:
            await self.recipe_ingredients.insert_many(join_rows)
        except BackendError as exc:
            logger.error(
                "Recipe %s created but its %d ingredients failed; left for cleanup: %s",
                created.id,
                len(join_rows),
                exc,
            )
            return ServiceResult.fail(
                f"Recipe created but ingredients failed: {exc.message}",
                code=RECIPE_INGREDIENTS_FAILED,
                details={"recipe_id": created.id, "slug": created.slug},
                http_status=502,
            )

        logger.info("Recipe %s created", created.id)
        return ServiceResult.ok(created)

    async def _find_saved_insert(
        self, exc: BackendError, row: Dict[str, Any]
    ) -> Optional[Recipe]:
        """The recipe an earlier attempt of this insert already wrote, if any.

        A timed-out insert may have been committed; its retry then fails
        with a unique violation on our own slug.
        """
        if exc.code != UNIQUE_VIOLATION_CODE:
            return None
        try:
            existing = await self.recipes.get_by_slug(row["slug"])
        except BackendError as lookup_exc:
            logger.error("Error looking up recipe %s after conflict: %s", row["slug"], lookup_exc)
            return None
        if not existing or existing.get("id") != row["id"]:
            return None
        logger.warning("Recipe %s was saved by an earlier attempt", row["id"])
        return Recipe.model_validate(existing)

    @staticmethod
    def _create_failure(exc: BackendError) -> ServiceResult:
        if exc.code == UNIQUE_VIOLATION_CODE:
            return ServiceResult.fail(
                "A recipe with this title already exists", code=DUPLICATE_SLUG, http_status=409
            )
        logger.error("Error creating recipe: %s", exc)
        return ServiceResult.from_error(exc, prefix="Failed to create recipe").model_copy(
            update={"code": RECIPE_CREATE_FAILED}
        )

    async def update_recipe(self, recipe_id: str, updates: RecipeUpdate) -> ServiceResult:
        """Update the recipe row, then replace its ingredients if a list was given.

        Replacement deletes every ingredient row of the recipe and inserts
        the new ones, so a concurrent reader can briefly see none.  The slug
        is kept when the title changes so existing links stay valid.
        """
        values = updates.model_dump(mode="json", exclude_unset=True, exclude={"ingredients"})
        if "steps" in values:
            values["steps"] = _clean_steps(values["steps"] or [])
            if not values["steps"]:
                raise ServiceValidationError(
                    "At least one step is required", code="STEPS_REQUIRED"
                )
        if "title" in values:
            values["title"] = values["title"].strip()

        if self.transactional_writes:
            return await self._save_transactional(values, updates.ingredients, recipe_id)

        updated: Optional[Recipe] = None
        if values:
            try:
                row = await self.recipes.update(recipe_id, values)
            except BackendError as exc:
                logger.error("Error updating recipe %s: %s", recipe_id, exc)
                result = ServiceResult.from_error(exc, prefix="Failed to update recipe")
                return result.model_copy(update={"code": RECIPE_UPDATE_FAILED})
            if row is None:
                return ServiceResult.fail(f"Recipe {recipe_id} not found", code=NOT_FOUND, http_status=404)
            updated = Recipe.model_validate(row)

        if updates.ingredients is not None:
            try:
                await self.recipe_ingredients.delete_for_recipe(recipe_id)
            except BackendError as exc:
                logger.error("Error deleting ingredients of %s: %s", recipe_id, exc)
                result = ServiceResult.from_error(exc, prefix="Failed to delete ingredients")
                return result.model_copy(update={"code": INGREDIENTS_DELETE_FAILED})

            join_rows = [i.to_row(recipe_id) for i in updates.ingredients]
            try:
                await self.recipe_ingredients.insert_many(join_rows)
            except BackendError as exc:
                logger.error(
                    "Ingredients of %s deleted but re-insert failed: %s", recipe_id, exc
                )
                result = ServiceResult.from_error(exc, prefix="Failed to insert ingredients")
                return result.model_copy(
                    update={"code": INGREDIENTS_INSERT_FAILED, "details": {"recipe_id": recipe_id}}
                )

        logger.info("Recipe %s updated", recipe_id)
        return ServiceResult.ok(updated)

    async def _save_transactional(self, values, ingredients, recipe_id) -> ServiceResult:
        rows = None
        if ingredients is not None:
            rows = [
                {"ingredient_id": i.ingredient_id, "quantity": i.quantity, "unit": i.unit.value}
                for i in ingredients
            ]
        try:
            saved = await self.recipes.save_with_ingredients(values, rows, recipe_id)
        except BackendError as exc:
            if recipe_id is None:
                # The transaction commits the ingredients with the row
                created = await self._find_saved_insert(exc, values)
                if created is not None:
                    return ServiceResult.ok(created)
                return self._create_failure(exc)
            logger.error("Error saving recipe %s: %s", recipe_id, exc)
            result = ServiceResult.from_error(exc, prefix="Failed to update recipe")
            return result.model_copy(update={"code": RECIPE_UPDATE_FAILED})
        return ServiceResult.ok(Recipe.model_validate(saved) if saved else None)

    async def delete_recipe(self, recipe_id: str) -> ServiceResult:
        try:
            await self.recipes.delete(recipe_id)
        except BackendError as exc:
            logger.error("Error deleting recipe %s: %s", recipe_id, exc)
            return ServiceResult.from_error(exc, prefix="Failed to delete recipe")
        logger.info("Recipe %s deleted", recipe_id)
        return ServiceResult.ok()

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    async def upload_recipe_image(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> ServiceResult:
        """Store an image under a fresh path and return its public URL."""
        if self.storage is None:
            return ServiceResult.fail("Image storage is not configured")
        if not content:
            raise ServiceValidationError("Image file is empty", code="EMPTY_FILE")

        suffix = PurePosixPath(filename or "").suffix.lower()
        path = f"recipes/{uuid4().hex}{suffix}"
        result = await self.storage.upload(self.image_bucket, path, content, content_type)
        if not result.ok:
            logger.error("Error uploading recipe image: %s", result.error)
            return ServiceResult.from_error(result.error, prefix="Failed to upload image")
        return ServiceResult.ok(
            {"path": path, "url": self.storage.get_public_url(self.image_bucket, path)}
        )

    async def delete_recipe_image(self, path: str) -> ServiceResult:
        if self.storage is None:
            return ServiceResult.fail("Image storage is not configured")
        result = await self.storage.remove(self.image_bucket, path)
        if not result.ok:
            return ServiceResult.from_error(result.error, prefix="Failed to delete image")
        return ServiceResult.ok()
