"""
Profile Repository - Data access for user profiles.
"""

from typing import Any, Dict, Optional

from adapters.resilience import RetryPolicy, resilient_call
from repositories.base import BaseRepository


class ProfileRepository(BaseRepository):
    table = "profiles"

    async def get_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.get_by_id(user_id)

    async def probe(self, timeout: float) -> None:
        """One cheap read with a short timeout and no retries.

        Raises ``StaleConnectionError`` if the connection does not answer in
        time, ``BackendError`` for any other failure.
        """
        query = self.query("id").limit(1)
        result = await resilient_call(
            lambda: self.provider.current.select(query),
            RetryPolicy(max_retries=0, timeout=timeout),
            name="profiles.probe",
        )
        result.unwrap()
