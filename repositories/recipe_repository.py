"""
Recipe Repository - Data access for recipes, their ingredient rows and the recipe RPCs.
"""

from typing import Any, Dict, List, Optional

from domain.enums import PrepTimeRange
from domain.schemas.recipe_schemas import RecipeFilters
from repositories.base import BaseRepository, escape_like


class RecipeRepository(BaseRepository):
    """
    Repository for the ``recipes`` table and the two read procedures built on it.
    """

    table = "recipes"

    async def list(self, filters: Optional[RecipeFilters] = None) -> List[Dict[str, Any]]:
        """List recipes newest first.

        Args:
            filters: difficulty, prep time bucket and title substring

        Returns:
            List of recipe rows
        """
        query = self.query().order("created_at", ascending=False)
        filters = filters or RecipeFilters()

        if filters.difficulty:
            query.eq("difficulty", filters.difficulty.value)

        if filters.prep_time == PrepTimeRange.LESS_THAN_15:
            query.lt("prep_time", 15)
        elif filters.prep_time == PrepTimeRange.FROM_15_TO_30:
            query.gte("prep_time", 15).lte("prep_time", 30)
        elif filters.prep_time == PrepTimeRange.FROM_30_TO_60:
            query.gte("prep_time", 30).lte("prep_time", 60)
        elif filters.prep_time == PrepTimeRange.MORE_THAN_60:
            query.gt("prep_time", 60)

        if filters.search and filters.search.strip():
            query.ilike("title", f"%{escape_like(filters.search.strip())}%")

        return await self._select("list", query)

    async def get_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return await self._select_one("get_by_slug", self.query().eq("slug", slug))

    async def get_with_ingredients_by_slug(self, slug: str) -> Any:
        """Call ``get_recipe_with_ingredients``; returns the raw procedure result."""
        return await self._execute(
            "get_with_ingredients",
            lambda: self.provider.current.rpc(
                "get_recipe_with_ingredients", {"recipe_slug": slug}
            ),
        )

    async def search_by_ingredients(self, ingredient_ids: List[str]) -> List[Dict[str, Any]]:
        """Call ``search_recipes_by_ingredients``; ranking is done server-side."""
        data = await self._execute(
            "search_by_ingredients",
            lambda: self.provider.current.rpc(
                "search_recipes_by_ingredients", {"ingredient_ids": list(ingredient_ids)}
            ),
        )
        return list(data or [])

    async def save_with_ingredients(
        self,
        recipe: Dict[str, Any],
        ingredients: Optional[List[Dict[str, Any]]],
        recipe_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Insert or update a recipe and replace its ingredients in one transaction.

        ``ingredients=None`` keeps the existing ingredient rows.
        """
        data = await self._execute(
            "save_with_ingredients",
            lambda: self.provider.current.rpc(
                "save_recipe_with_ingredients",
                {"recipe_id": recipe_id, "recipe": recipe, "ingredients": ingredients},
            ),
        )
        if isinstance(data, list):
            return data[0] if data else {}
        return data or {}


class RecipeIngredientRepository(BaseRepository):
    """Repository for the ``recipe_ingredients`` join table."""

    table = "recipe_ingredients"

    async def list_for_recipe(self, recipe_id: str) -> List[Dict[str, Any]]:
        """Join rows for a recipe with the ingredient names embedded."""
        query = self.query(
            "quantity,unit,ingredient:ingredients(id,name_bg,name_en)"
        ).eq("recipe_id", recipe_id)
        return await self._select("list_for_recipe", query)

    async def list_ids_for_recipe(self, recipe_id: str) -> List[Dict[str, Any]]:
        query = self.query().eq("recipe_id", recipe_id)
        return await self._select("list_ids_for_recipe", query)

    async def insert_many(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []
        data = await self._execute(
            "insert_many", lambda: self.provider.current.insert(self.table, rows)
        )
        return list(data or [])

    async def delete_for_recipe(self, recipe_id: str) -> None:
        query = self.query().eq("recipe_id", recipe_id)
        await self._execute(
            "delete_for_recipe", lambda: self.provider.current.delete(query)
        )
