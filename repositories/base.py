"""
Base repository for data access against the hosted backend.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging

from adapters.backend_client import NO_ROWS_CODE, BackendClientProvider, Query
from adapters.resilience import RetryPolicy, resilient_call
from app.exceptions import BackendError

logger = logging.getLogger("cooksmart.repository")


def escape_like(value: str) -> str:
    """Escape pattern metacharacters so ``value`` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BaseRepository:
    """
    Base repository providing common CRUD operations on one table.

    Every remote call is routed through the resilience wrapper, so reads and
    writes alike get the timeout, retry and reconnect behaviour.  Errors are
    raised as ``BackendError``; turning them into results is the services' job.
    """

    table: str = ""

    def __init__(self, provider: BackendClientProvider, policy: Optional[RetryPolicy] = None):
        self.provider = provider
        self.policy = policy or RetryPolicy()

    def query(self, columns: str = "*") -> Query:
        return Query(self.table, columns)

    async def _execute(self, name: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        result = await resilient_call(
            operation,
            self.policy,
            self.provider.reinitialize,
            name=f"{self.table}.{name}",
        )
        return result.unwrap()

    async def _select(self, name: str, query: Query) -> List[Dict[str, Any]]:
        data = await self._execute(name, lambda: self.provider.current.select(query))
        return list(data or [])

    async def _select_one(self, name: str, query: Query) -> Optional[Dict[str, Any]]:
        """Single-row read; ``None`` when no row matched."""
        try:
            return await self._execute(
                name, lambda: self.provider.current.select(query, single=True)
            )
        except BackendError as exc:
            if exc.code == NO_ROWS_CODE:
                return None
            raise

    async def get_by_id(self, entity_id: str) -> Optional[Dict[str, Any]]:
        return await self._select_one("get_by_id", self.query().eq("id", entity_id))

    async def get_all(
        self, order_by: Optional[str] = None, ascending: bool = True
    ) -> List[Dict[str, Any]]:
        query = self.query()
        if order_by:
            query = query.order(order_by, ascending=ascending)
        return await self._select("get_all", query)

    async def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored (with generated id)."""
        data = await self._execute(
            "create", lambda: self.provider.current.insert(self.table, values)
        )
        if isinstance(data, list):
            if not data:
                raise BackendError(f"Insert into {self.table} returned no row")
            return data[0]
        return data

    async def update(self, entity_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        query = self.query().eq("id", entity_id)
        data = await self._execute(
            "update", lambda: self.provider.current.update(query, values)
        )
        if isinstance(data, list):
            return data[0] if data else None
        return data

    async def delete(self, entity_id: str) -> None:
        query = self.query().eq("id", entity_id)
        await self._execute("delete", lambda: self.provider.current.delete(query))

    async def count(self) -> int:
        query = self.query("id").limit(0)
        return await self._execute("count", lambda: self.provider.current.count(query))
