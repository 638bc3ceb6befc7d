"""
Ingredient Repository - Data access for the ingredient catalogue.
"""

from typing import Any, Dict, List

from repositories.base import BaseRepository, escape_like


class IngredientRepository(BaseRepository):
    table = "ingredients"

    async def list(self, order_by: str = "name_bg") -> List[Dict[str, Any]]:
        return await self.get_all(order_by=order_by)

    async def search(self, term: str) -> List[Dict[str, Any]]:
        """Ingredients whose Bulgarian or English name contains ``term``."""
        pattern = f"%{escape_like(term)}%"
        query = (
            self.query()
            .or_([("name_bg", "ilike", pattern), ("name_en", "ilike", pattern)])
            .order("name_bg")
        )
        return await self._select("search", query)

    async def find_by_names(self, name_bg: str, name_en: str) -> List[Dict[str, Any]]:
        """Case-insensitive exact match on either name."""
        query = self.query().or_(
            [
                ("name_bg", "ilike", escape_like(name_bg)),
                ("name_en", "ilike", escape_like(name_en)),
            ]
        )
        return await self._select("find_by_names", query)
