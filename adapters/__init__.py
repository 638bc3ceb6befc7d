"""
Adapters package - Connections to the hosted backend.
REST/RPC client, auth, storage, and the resilience wrapper every call goes through.
"""

from adapters.backend_client import (
    BackendClient,
    BackendClientProvider,
    BackendResult,
    Query,
    create_backend_client,
)
from adapters.resilience import RetryPolicy, with_retry, resilient_call
from adapters.auth_client import AuthClient, SessionStore
from adapters.storage_client import StorageClient

__all__ = [
    "BackendClient",
    "BackendClientProvider",
    "BackendResult",
    "Query",
    "create_backend_client",
    "RetryPolicy",
    "with_retry",
    "resilient_call",
    "AuthClient",
    "SessionStore",
    "StorageClient",
]
