"""File storage adapter (``/storage/v1``): upload, public URL, delete."""

from typing import Optional
from urllib.parse import quote
import logging

from adapters.backend_client import BackendClientProvider, BackendResult, to_result
from adapters.resilience import RetryPolicy, resilient_call

logger = logging.getLogger("cooksmart.storage")


class StorageClient:
    def __init__(
        self,
        provider: BackendClientProvider,
        policy: RetryPolicy = RetryPolicy(),
        cache_control: str = "3600",
    ):
        self.provider = provider
        self.policy = policy
        self.cache_control = cache_control

    @staticmethod
    def _object_path(bucket: str, path: str) -> str:
        return f"{quote(bucket)}/{quote(path.lstrip('/'))}"

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: Optional[str] = None,
        upsert: bool = False,
    ) -> BackendResult:
        headers = {
            "Content-Type": content_type or "application/octet-stream",
            "cache-control": f"max-age={self.cache_control}",
            "x-upsert": "true" if upsert else "false",
        }
        object_path = self._object_path(bucket, path)

        async def operation():
            response = await self.provider.current.send(
                "POST", f"/storage/v1/object/{object_path}", content=content, headers=headers
            )
            return to_result(response)

        result = await resilient_call(
            operation, self.policy, self.provider.reinitialize, name="storage.upload"
        )
        if result.ok:
            logger.info("Uploaded %s/%s (%d bytes)", bucket, path, len(content))
        return result

    def get_public_url(self, bucket: str, path: str) -> str:
        base_url = self.provider.current.base_url
        return f"{base_url}/storage/v1/object/public/{self._object_path(bucket, path)}"

    async def remove(self, bucket: str, path: str) -> BackendResult:
        async def operation():
            response = await self.provider.current.send(
                "DELETE",
                f"/storage/v1/object/{quote(bucket)}",
                json={"prefixes": [path.lstrip("/")]},
                headers={"Content-Type": "application/json"},
            )
            return to_result(response)

        return await resilient_call(
            operation, self.policy, self.provider.reinitialize, name="storage.remove"
        )
