"""
Client for the hosted backend's REST and RPC endpoints.

Every call resolves to a ``BackendResult`` envelope: an error reported by the
backend (any non-2xx response) is returned as ``result.error`` rather than
raised.  Network-layer failures (connection refused, reset, read errors) are
not converted here and propagate as ``httpx.HTTPError`` so the resilience
wrapper can classify and retry them.

Filters are encoded with the backend's query-string dialect:

    /rest/v1/recipes?select=*&difficulty=eq.Easy&prep_time=gte.15&order=created_at.desc
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging

import httpx

from app.exceptions import BackendError

logger = logging.getLogger("cooksmart.backend")

OBJECT_ACCEPT = "application/vnd.pgrst.object+json"

# Error codes the services branch on
NO_ROWS_CODE = "PGRST116"
UNIQUE_VIOLATION_CODE = "23505"

TokenSource = Callable[[], Optional[str]]


@dataclass
class BackendResult:
    """Result-or-error pair returned by every remote call."""

    data: Any = None
    error: Optional[BackendError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return ``data`` or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.data


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _quote_list_item(value: Any) -> str:
    text = _format_value(value)
    if any(ch in text for ch in ',()"'):
        return '"' + text.replace('"', '\\"') + '"'
    return text


class Query:
    """Builder for a filtered request against one table.

    Methods return ``self`` so filters chain the way the backend SDK reads:

        Query("recipes").eq("difficulty", "Easy").gte("prep_time", 15).order("created_at", ascending=False)
    """

    def __init__(self, table: str, columns: str = "*"):
        self.table = table
        self.columns = columns
        self._filters: List[Tuple[str, str]] = []
        self._order: List[str] = []
        self._limit: Optional[int] = None

    def _add(self, column: str, op: str, value: Any) -> "Query":
        self._filters.append((column, f"{op}.{_format_value(value)}"))
        return self

    def eq(self, column: str, value: Any) -> "Query":
        return self._add(column, "eq", value)

    def neq(self, column: str, value: Any) -> "Query":
        return self._add(column, "neq", value)

    def lt(self, column: str, value: Any) -> "Query":
        return self._add(column, "lt", value)

    def lte(self, column: str, value: Any) -> "Query":
        return self._add(column, "lte", value)

    def gt(self, column: str, value: Any) -> "Query":
        return self._add(column, "gt", value)

    def gte(self, column: str, value: Any) -> "Query":
        return self._add(column, "gte", value)

    def ilike(self, column: str, pattern: str) -> "Query":
        """Case-insensitive pattern match; ``%`` is the wildcard."""
        return self._add(column, "ilike", pattern)

    def in_(self, column: str, values: Iterable[Any]) -> "Query":
        items = ",".join(_quote_list_item(v) for v in values)
        self._filters.append((column, f"in.({items})"))
        return self

    def or_(self, conditions: Sequence[Tuple[str, str, Any]]) -> "Query":
        """Match any of ``(column, op, value)``."""
        parts = ",".join(
            f"{column}.{op}.{_quote_list_item(value)}" for column, op, value in conditions
        )
        self._filters.append(("or", f"({parts})"))
        return self

    def order(self, column: str, ascending: bool = True) -> "Query":
        self._order.append(f"{column}.{'asc' if ascending else 'desc'}")
        return self

    def limit(self, count: int) -> "Query":
        self._limit = int(count)
        return self

    @property
    def filters(self) -> List[Tuple[str, str]]:
        return list(self._filters)

    def to_params(self, include_select: bool = True) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = []
        if include_select:
            params.append(("select", self.columns))
        params.extend(self._filters)
        if self._order:
            params.append(("order", ",".join(self._order)))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        return params

    def __repr__(self) -> str:
        return f"Query({self.table!r}, {self.to_params()!r})"


def error_from_response(response: httpx.Response) -> BackendError:
    """Build a ``BackendError`` from a non-2xx response body."""
    try:
        body = response.json()
    except ValueError:
        body = None

    code = None
    details = None
    if isinstance(body, dict):
        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or body.get("error")
        )
        raw_code = body.get("code") or body.get("error_code")
        code = str(raw_code) if raw_code is not None else None
        extra = {k: body[k] for k in ("details", "hint") if body.get(k)}
        details = extra or None
    else:
        message = response.text

    if not message:
        message = response.reason_phrase or "Request failed"
    return BackendError(str(message), details=details, code=code, status=response.status_code)


def content_range_total(value: Optional[str]) -> Optional[int]:
    """Total from a ``Content-Range`` header such as ``0-9/42`` or ``*/42``."""
    if not value or "/" not in value:
        return None
    total = value.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


def to_result(response: httpx.Response) -> BackendResult:
    if not response.is_success:
        return BackendResult(error=error_from_response(response))
    if response.status_code == 204 or not response.content:
        return BackendResult(data=None)
    try:
        return BackendResult(data=response.json())
    except ValueError:
        return BackendResult(data=response.text)


class BackendClient:
    """One transport handle to the hosted backend.

    Instances are never mutated after construction; a stale handle is
    replaced as a whole by ``BackendClientProvider.reinitialize``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        token_source: Optional[TokenSource] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._token_source = token_source
        self.http = httpx.AsyncClient(
            base_url=self.base_url, transport=transport, timeout=timeout
        )

    @property
    def rest_url(self) -> str:
        return f"{self.base_url}/rest/v1"

    def auth_headers(self, access_token: Optional[str] = None) -> dict:
        """``apikey`` plus a bearer token: the user's when signed in, else the public key."""
        token = access_token
        if token is None and self._token_source is not None:
            token = self._token_source()
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
        }

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Union[Mapping[str, Any], Sequence[Tuple[str, str]]]] = None,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> httpx.Response:
        merged = self.auth_headers(access_token)
        if headers:
            merged.update(headers)
        logger.debug("%s %s params=%s", method, path, params)
        return await self.http.request(
            method, path, params=params, json=json, content=content, headers=merged
        )

    async def select(self, query: Query, single: bool = False) -> BackendResult:
        headers = {"Accept": OBJECT_ACCEPT} if single else None
        response = await self.send(
            "GET", f"/rest/v1/{query.table}", params=query.to_params(), headers=headers
        )
        return to_result(response)

    async def count(self, query: Query) -> BackendResult:
        """Exact number of rows matching ``query``, read from ``Content-Range``.

        Pass a query with ``limit(0)`` so no rows come back with the count.
        """
        response = await self.send(
            "GET",
            f"/rest/v1/{query.table}",
            params=query.to_params(),
            headers={"Prefer": "count=exact"},
        )
        if not response.is_success:
            return BackendResult(error=error_from_response(response))
        total = content_range_total(response.headers.get("Content-Range"))
        if total is None:
            return BackendResult(
                error=BackendError(
                    f"No row count for {query.table}",
                    code="NO_COUNT",
                    status=response.status_code,
                )
            )
        return BackendResult(data=total)

    async def insert(
        self,
        table: str,
        rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        returning: bool = True,
        single: bool = False,
    ) -> BackendResult:
        headers = {
            "Content-Type": "application/json",
            "Prefer": "return=representation" if returning else "return=minimal",
        }
        if single:
            headers["Accept"] = OBJECT_ACCEPT
        response = await self.send(
            "POST", f"/rest/v1/{table}", json=rows, headers=headers
        )
        return to_result(response)

    async def update(self, query: Query, values: Mapping[str, Any]) -> BackendResult:
        response = await self.send(
            "PATCH",
            f"/rest/v1/{query.table}",
            params=query.to_params(include_select=False),
            json=dict(values),
            headers={"Content-Type": "application/json", "Prefer": "return=representation"},
        )
        return to_result(response)

    async def delete(self, query: Query) -> BackendResult:
        if not query.filters:
            # An unfiltered delete would empty the table
            raise ValueError(f"Refusing to delete from {query.table} without filters")
        response = await self.send(
            "DELETE",
            f"/rest/v1/{query.table}",
            params=query.to_params(include_select=False),
        )
        return to_result(response)

    async def rpc(self, name: str, args: Optional[Mapping[str, Any]] = None) -> BackendResult:
        response = await self.send(
            "POST",
            f"/rest/v1/rpc/{name}",
            json=dict(args or {}),
            headers={"Content-Type": "application/json"},
        )
        return to_result(response)

    async def aclose(self) -> None:
        await self.http.aclose()


class BackendClientProvider:
    """Owns the live ``BackendClient`` and replaces it when it goes stale.

    Callers read ``current`` at the moment they issue a request, so a retry
    that follows ``reinitialize`` picks up the fresh handle.  The replaced
    client is retired rather than closed immediately because other requests
    may still be in flight on it.
    """

    def __init__(self, factory: Callable[[], BackendClient], keep_retired: int = 1):
        self._factory = factory
        self._client = factory()
        self._retired: List[BackendClient] = []
        self._keep_retired = keep_retired
        self.generation = 0

    @property
    def current(self) -> BackendClient:
        return self._client

    async def reinitialize(self) -> BackendClient:
        old = self._client
        self._client = self._factory()
        self.generation += 1
        self._retired.append(old)
        logger.info("Backend client reinitialized (generation %d)", self.generation)

        while len(self._retired) > self._keep_retired:
            stale = self._retired.pop(0)
            try:
                await stale.aclose()
            except Exception:
                logger.exception("Error closing retired backend client")
        return self._client

    async def aclose(self) -> None:
        for client in [*self._retired, self._client]:
            try:
                await client.aclose()
            except Exception:
                logger.exception("Error closing backend client")
        self._retired = []


def create_backend_client(
    settings,
    token_source: Optional[TokenSource] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BackendClient:
    """Build a client from application settings."""
    return BackendClient(
        base_url=settings.backend_url,
        api_key=settings.backend_key,
        token_source=token_source,
        transport=transport,
    )
