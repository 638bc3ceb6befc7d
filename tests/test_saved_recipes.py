"""Tests for saving and unsaving recipes."""

import pytest

from test_fixtures import make_services

pytestmark = pytest.mark.anyio

USER = "user-1"


async def test_save_unsave_save_leaves_one_row(backend, catalogue):
    services = make_services(backend)
    recipe_id = catalogue["banitsa"]["id"]

    assert (await services.saved.save_recipe(USER, recipe_id)).success
    assert (await services.saved.unsave_recipe(USER, recipe_id)).success
    assert (await services.saved.save_recipe(USER, recipe_id)).success

    assert len(backend.rows("saved_recipes", user_id=USER, recipe_id=recipe_id)) == 1


async def test_saving_twice_is_not_an_error(backend, catalogue):
    services = make_services(backend)
    recipe_id = catalogue["banitsa"]["id"]

    await services.saved.save_recipe(USER, recipe_id)
    second = await services.saved.save_recipe(USER, recipe_id)

    assert second.success
    assert second.data.saved is True
    assert len(backend.rows("saved_recipes", user_id=USER)) == 1


async def test_is_recipe_saved(backend, catalogue):
    services = make_services(backend)
    recipe_id = catalogue["shopska"]["id"]

    assert await services.saved.is_recipe_saved(USER, recipe_id) is False
    await services.saved.save_recipe(USER, recipe_id)
    assert await services.saved.is_recipe_saved(USER, recipe_id) is True
    # Anonymous users never have saved recipes, and no call is made for them
    calls = len(backend.calls)
    assert await services.saved.is_recipe_saved(None, recipe_id) is False
    assert len(backend.calls) == calls


async def test_toggle_flips_state(backend, catalogue):
    services = make_services(backend)
    recipe_id = catalogue["mekitsi"]["id"]

    first = await services.saved.toggle_saved(USER, recipe_id)
    second = await services.saved.toggle_saved(USER, recipe_id)

    assert first.data.saved is True
    assert second.data.saved is False
    assert backend.rows("saved_recipes", user_id=USER) == []


async def test_list_saved_most_recent_first(backend, catalogue):
    services = make_services(backend)
    await services.saved.save_recipe(USER, catalogue["banitsa"]["id"])
    await services.saved.save_recipe(USER, catalogue["mekitsi"]["id"])
    await services.saved.save_recipe("someone-else", catalogue["shopska"]["id"])

    recipes = await services.saved.list_saved_recipes(USER)

    assert [r.slug for r in recipes] == ["mekitsi", "banitsa"]


async def test_anonymous_save_fails_without_call(backend, catalogue):
    services = make_services(backend)

    result = await services.saved.save_recipe(None, catalogue["banitsa"]["id"])

    assert not result.success
    assert result.http_status == 401
    assert backend.calls == []


async def test_lookup_failure_reads_as_not_saved(backend, catalogue):
    services = make_services(backend)
    backend.fail("GET", "/rest/v1/saved_recipes", status=500, times=2)

    assert await services.saved.is_recipe_saved(USER, catalogue["banitsa"]["id"]) is False
