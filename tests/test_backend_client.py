"""
Tests for the REST/RPC client, the query builder and the client provider.
"""

import httpx
import pytest

from adapters.backend_client import (
    NO_ROWS_CODE,
    BackendClient,
    BackendClientProvider,
    Query,
    content_range_total,
    error_from_response,
)
from test_fixtures import ANON_KEY, BACKEND_URL, FakeBackend


def make_client(backend, token=None):
    return BackendClient(BACKEND_URL, ANON_KEY, token_source=lambda: token, transport=backend.transport())


# =============================================================================
# QUERY BUILDER
# =============================================================================


def test_query_encodes_filters_order_and_limit():
    query = (
        Query("recipes")
        .eq("difficulty", "Easy")
        .gte("prep_time", 15)
        .lte("prep_time", 30)
        .order("created_at", ascending=False)
        .limit(10)
    )
    assert query.to_params() == [
        ("select", "*"),
        ("difficulty", "eq.Easy"),
        ("prep_time", "gte.15"),
        ("prep_time", "lte.30"),
        ("order", "created_at.desc"),
        ("limit", "10"),
    ]


def test_query_in_and_or_quote_reserved_characters():
    query = Query("ingredients").in_("id", ["a", "b,c"]).or_(
        [("name_bg", "ilike", "%сол%"), ("name_en", "ilike", "%salt%")]
    )
    assert query.filters == [
        ("id", 'in.(a,"b,c")'),
        ("or", "(name_bg.ilike.%сол%,name_en.ilike.%salt%)"),
    ]


def test_update_and_delete_params_omit_select():
    query = Query("recipes", "id,title").eq("id", "r1")
    assert query.to_params(include_select=False) == [("id", "eq.r1")]


# =============================================================================
# ERRORS
# =============================================================================


def test_error_from_response_reads_rest_error_body():
    response = httpx.Response(
        409, json={"code": "23505", "message": "duplicate key", "details": "Key (slug)=(x)"}
    )
    error = error_from_response(response)
    assert error.code == "23505"
    assert error.status == 409
    assert error.message == "duplicate key"
    assert error.details == {"details": "Key (slug)=(x)"}
    assert not error.is_transient


def test_error_from_response_reads_auth_error_body():
    response = httpx.Response(
        400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
    )
    assert error_from_response(response).message == "Invalid login credentials"


# =============================================================================
# CLIENT AGAINST THE FAKE BACKEND
# =============================================================================


@pytest.mark.anyio
async def test_single_select_without_rows_reports_no_rows_code():
    backend = FakeBackend()
    client = make_client(backend)

    result = await client.select(Query("recipes").eq("slug", "missing"), single=True)

    assert not result.ok
    assert result.error.code == NO_ROWS_CODE
    await client.aclose()


@pytest.mark.anyio
async def test_insert_then_select_round_trip(catalogue, backend):
    client = make_client(backend)

    result = await client.select(Query("recipes").eq("slug", "banitsa"), single=True)

    assert result.ok
    assert result.data["title"] == "Баница"
    await client.aclose()


@pytest.mark.anyio
async def test_count_reads_content_range_without_rows():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[], headers={"Content-Range": "*/42"})

    client = BackendClient(BACKEND_URL, ANON_KEY, transport=httpx.MockTransport(handler))

    result = await client.count(Query("recipes", "id").limit(0))

    assert result.data == 42
    assert seen[0].headers["Prefer"] == "count=exact"
    assert seen[0].url.params["limit"] == "0"
    await client.aclose()


@pytest.mark.anyio
async def test_count_without_content_range_is_an_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    client = BackendClient(BACKEND_URL, ANON_KEY, transport=transport)

    result = await client.count(Query("recipes", "id").limit(0))

    assert result.error.code == "NO_COUNT"
    assert not result.error.is_transient
    await client.aclose()


@pytest.mark.parametrize(
    "value, expected",
    [("0-9/42", 42), ("*/0", 0), ("0-9/*", None), (None, None)],
)
def test_content_range_total(value, expected):
    assert content_range_total(value) == expected


@pytest.mark.anyio
async def test_delete_without_filters_is_refused():
    client = make_client(FakeBackend())
    with pytest.raises(ValueError):
        await client.delete(Query("recipes"))
    await client.aclose()


def test_auth_headers_prefer_user_token():
    backend = FakeBackend()
    anonymous = make_client(backend)
    signed_in = make_client(backend, token="user-token")

    assert anonymous.auth_headers()["Authorization"] == f"Bearer {ANON_KEY}"
    assert signed_in.auth_headers()["Authorization"] == "Bearer user-token"
    assert signed_in.auth_headers()["apikey"] == ANON_KEY


# =============================================================================
# PROVIDER
# =============================================================================


@pytest.mark.anyio
async def test_reinitialize_returns_new_client_and_closes_old_ones():
    backend = FakeBackend()
    provider = BackendClientProvider(lambda: make_client(backend), keep_retired=1)
    first = provider.current

    second = await provider.reinitialize()
    third = await provider.reinitialize()

    assert first is not second and second is not third
    assert provider.current is third
    assert provider.generation == 2
    # Only the most recently retired client is kept open
    assert first.http.is_closed
    assert not second.http.is_closed

    await provider.aclose()
    assert second.http.is_closed and third.http.is_closed
