"""
Saved Recipe Repository - Data access for the ``saved_recipes`` favourites table.
"""

from typing import Any, Dict, List, Optional

from repositories.base import BaseRepository


class SavedRecipeRepository(BaseRepository):
    table = "saved_recipes"

    async def find(self, user_id: str, recipe_id: str) -> Optional[Dict[str, Any]]:
        query = self.query("id").eq("user_id", user_id).eq("recipe_id", recipe_id)
        return await self._select_one("find", query)

    async def add(self, user_id: str, recipe_id: str) -> Dict[str, Any]:
        return await self.create({"user_id": user_id, "recipe_id": recipe_id})

    async def remove(self, user_id: str, recipe_id: str) -> None:
        query = self.query().eq("recipe_id", recipe_id).eq("user_id", user_id)
        await self._execute("remove", lambda: self.provider.current.delete(query))

    async def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Saved rows with the recipe embedded, most recently saved first."""
        query = (
            self.query("recipe_id,saved_at,recipes(*)")
            .eq("user_id", user_id)
            .order("saved_at", ascending=False)
        )
        return await self._select("list_for_user", query)
