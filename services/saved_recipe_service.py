from typing import List, Optional
import logging

from adapters.backend_client import UNIQUE_VIOLATION_CODE
from app.exceptions import BackendError
from domain.schemas.recipe_schemas import Recipe, SavedStatus
from domain.schemas.results import ServiceResult
from repositories import SavedRecipeRepository

logger = logging.getLogger("cooksmart.saved")


class SavedRecipeService:
    """A user's saved (favourite) recipes.

    At most one row exists per (user, recipe); a second save that hits the
    unique constraint counts as success.
    """

    def __init__(self, saved: SavedRecipeRepository):
        self.saved = saved

    async def save_recipe(self, user_id: Optional[str], recipe_id: str) -> ServiceResult:
        if not user_id:
            return ServiceResult.fail("User not authenticated", code="NOT_AUTHENTICATED", http_status=401)
        try:
            await self.saved.add(user_id, recipe_id)
        except BackendError as exc:
            if exc.code == UNIQUE_VIOLATION_CODE:
                logger.info(f"Recipe {recipe_id} already saved by {user_id}")
                return ServiceResult.ok(SavedStatus(recipe_id=recipe_id, saved=True))
            logger.error(f"Error saving recipe {recipe_id}: {exc}")
            return ServiceResult.from_error(exc, prefix="Failed to save recipe")
        return ServiceResult.ok(SavedStatus(recipe_id=recipe_id, saved=True))

    async def unsave_recipe(self, user_id: Optional[str], recipe_id: str) -> ServiceResult:
        if not user_id:
            return ServiceResult.fail("User not authenticated", code="NOT_AUTHENTICATED", http_status=401)
        try:
            await self.saved.remove(user_id, recipe_id)
        except BackendError as exc:
            logger.error(f"Error unsaving recipe {recipe_id}: {exc}")
            return ServiceResult.from_error(exc, prefix="Failed to unsave recipe")
        return ServiceResult.ok(SavedStatus(recipe_id=recipe_id, saved=False))

    async def is_recipe_saved(self, user_id: Optional[str], recipe_id: str) -> bool:
        """``False`` for anonymous users and when the lookup fails."""
        if not user_id:
            return False
        try:
            return await self.saved.find(user_id, recipe_id) is not None
        except BackendError as exc:
            logger.error(f"Error checking saved state of {recipe_id}: {exc}")
            return False

    async def toggle_saved(self, user_id: Optional[str], recipe_id: str) -> ServiceResult:
        if not user_id:
            return ServiceResult.fail("User not authenticated", code="NOT_AUTHENTICATED", http_status=401)
        try:
            existing = await self.saved.find(user_id, recipe_id)
        except BackendError as exc:
            logger.error(f"Error checking saved state of {recipe_id}: {exc}")
            return ServiceResult.from_error(exc, prefix="Failed to update saved recipes")
        if existing:
            return await self.unsave_recipe(user_id, recipe_id)
        return await self.save_recipe(user_id, recipe_id)

    async def list_saved_recipes(self, user_id: Optional[str]) -> List[Recipe]:
        if not user_id:
            return []
        try:
            rows = await self.saved.list_for_user(user_id)
        except BackendError as exc:
            logger.error(f"Error fetching saved recipes: {exc}")
            return []
        # Rows whose recipe was deleted come back with recipes=null
        return [Recipe.model_validate(r["recipes"]) for r in rows if r.get("recipes")]
