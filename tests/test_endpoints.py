"""
Endpoint tests through the FastAPI app, wired to the in-memory backend.

The client is used as a context manager so the lifespan runs: services are
built and the session is initialized before the first request.
"""

import pytest

from test_fixtures import make_client, sign_in


@pytest.fixture
def client(backend, catalogue):
    with make_client(backend) as test_client:
        yield test_client


def slugs(response):
    return [r["slug"] for r in response.json()]


# =============================================================================
# HEALTH
# =============================================================================


def test_health_check(client):
    response = client.get("/health-check")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Process-Time" in response.headers


def test_request_id_is_echoed(client):
    response = client.get("/recipes", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_backend_health_reports_probe(client):
    response = client.get("/health/backend")

    assert response.status_code == 200
    assert response.json() == {"backend": "ok", "client_generation": 0, "session_ready": True}


# =============================================================================
# BROWSING
# =============================================================================


def test_list_recipes_with_filters(client):
    assert slugs(client.get("/recipes")) == ["mekitsi", "shopska-salata", "banitsa"]
    assert slugs(client.get("/recipes", params={"difficulty": "Easy"})) == ["shopska-salata"]
    assert slugs(client.get("/recipes", params={"prep_time": "30_to_60"})) == ["mekitsi", "banitsa"]
    assert slugs(client.get("/recipes", params={"search": "мек"})) == ["mekitsi"]


def test_unknown_filter_value_is_rejected(client):
    response = client.get("/recipes", params={"difficulty": "Impossible"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_recipe_detail_is_localized(client):
    response = client.get("/recipes/banitsa", params={"lang": "en"})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Баница"
    assert body["saved"] is False
    lines = {line["name"]: line for line in body["ingredients"]}
    assert set(lines) == {"Eggs", "White cheese", "Flour"}
    assert lines["White cheese"]["unit_label"] == "gram (g)"

    bulgarian = client.get("/recipes/banitsa").json()
    assert {line["name"] for line in bulgarian["ingredients"]} == {"Яйца", "Сирене", "Брашно"}


def test_default_language_comes_from_app_settings(backend, catalogue):
    with make_client(backend, default_language="en", app_name="CookSmart EN") as client:
        body = client.get("/recipes/banitsa").json()
        health = client.get("/health-check").json()

    assert {line["name"] for line in body["ingredients"]} == {"Eggs", "White cheese", "Flour"}
    assert health["service"] == "CookSmart EN"


def test_missing_recipe_is_404(client):
    response = client.get("/recipes/no-such-dish")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_pantry_search(client, catalogue):
    response = client.post(
        "/pantry/search",
        json={"ingredient_ids": [catalogue["tomato"]["id"], catalogue["cheese"]["id"]]},
    )

    assert response.status_code == 200
    assert slugs(response) == ["shopska-salata", "banitsa"]
    assert client.post("/pantry/search", json={"ingredient_ids": []}).json() == []


# =============================================================================
# INGREDIENTS AND LANGUAGE
# =============================================================================


def test_ingredients_follow_language_cookie(client):
    assert client.get("/preferences/language").json() == {"language": "bg"}

    response = client.put("/preferences/language", json={"language": "en"})
    assert response.status_code == 200
    assert "cooksmart_language=en" in response.headers["set-cookie"]

    names = [i["name"] for i in client.get("/ingredients").json()]
    assert names == ["Cucumber", "Eggs", "Flour", "Tomato", "White cheese"]
    # An explicit parameter wins over the cookie
    names = [i["name"] for i in client.get("/ingredients", params={"lang": "bg"}).json()]
    assert names[0] == "Брашно"


def test_language_from_accept_language_header(client):
    response = client.get(
        "/preferences/language", headers={"Accept-Language": "de-DE,en;q=0.8,bg;q=0.5"}
    )
    assert response.json() == {"language": "en"}


def test_ingredient_search_and_detail(client, catalogue):
    found = client.get("/ingredients", params={"q": "дом", "lang": "en"}).json()
    assert [i["name"] for i in found] == ["Tomato"]
    assert found[0]["category_label"] == "Vegetables"

    detail = client.get(f"/ingredients/{catalogue['eggs']['id']}", params={"lang": "bg"})
    assert detail.json()["name"] == "Яйца"
    assert client.get("/ingredients/missing").status_code == 404


def test_category_and_unit_labels(client):
    categories = client.get("/ingredients/categories", params={"lang": "bg"}).json()
    units = client.get("/ingredients/units", params={"lang": "en"}).json()

    assert {"value": "other", "label": "Други"} in categories
    assert len(units) == 31
    assert {"value": "tbsp", "label": "tablespoon (tbsp)"} in units


# =============================================================================
# AUTH, SAVED RECIPES, PROFILE
# =============================================================================


def test_session_sign_in_and_out(client, backend):
    assert client.get("/auth/session").json()["state"] == "anonymous"

    sign_in(client, backend, "cook@example.com")
    session = client.get("/auth/session").json()
    assert session["state"] == "authenticated"
    assert session["profile"]["email"] == "cook@example.com"

    response = client.post("/auth/sign-out")
    assert response.json()["data"] == {"remote_sign_out": True}
    assert client.get("/auth/session").json()["is_authenticated"] is False


def test_bad_credentials(client, backend):
    backend.add_user("cook@example.com")

    response = client.post(
        "/auth/sign-in", json={"email": "cook@example.com", "password": "not-it-at-all"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid login credentials"


def test_sign_up_returns_created(client):
    response = client.post(
        "/auth/sign-up",
        json={"email": "new@example.com", "password": "secret123", "display_name": "Ана"},
    )

    assert response.status_code == 201
    assert response.json()["data"]["confirmation_required"] is False


def test_saved_recipes_require_sign_in(client, catalogue):
    recipe_id = catalogue["banitsa"]["id"]

    assert client.get("/saved-recipes").status_code == 401
    assert client.put(f"/saved-recipes/{recipe_id}").status_code == 401
    # Reading the saved flag is allowed anonymously
    assert client.get(f"/saved-recipes/{recipe_id}").json() == {
        "recipe_id": recipe_id, "saved": False
    }


def test_save_and_list(client, backend, catalogue):
    sign_in(client, backend, "cook@example.com")
    recipe_id = catalogue["shopska"]["id"]

    assert client.put(f"/saved-recipes/{recipe_id}").status_code == 200
    assert slugs(client.get("/saved-recipes")) == ["shopska-salata"]
    assert client.get("/recipes/shopska-salata").json()["saved"] is True

    toggled = client.post(f"/saved-recipes/{recipe_id}/toggle").json()
    assert toggled["data"] == {"recipe_id": recipe_id, "saved": False}
    assert client.get("/saved-recipes").json() == []


def test_profile_update_and_avatar(client, backend):
    assert client.get("/profile").status_code == 401
    sign_in(client, backend, "cook@example.com")

    updated = client.patch("/profile", json={"display_name": "Мария"})
    assert updated.status_code == 200
    assert updated.json()["data"]["display_name"] == "Мария"

    avatar = client.post(
        "/profile/avatar", files={"file": ("me.png", b"\x89PNG", "image/png")}
    )
    assert avatar.status_code == 200
    assert "/storage/v1/object/public/avatars/" in avatar.json()["data"]["avatar_url"]
    assert client.get("/profile").json()["avatar_url"] == avatar.json()["data"]["avatar_url"]


def test_visibility_change(client, backend):
    sign_in(client, backend, "cook@example.com")

    response = client.post("/auth/visibility", json={"visible": True})

    assert response.json() == {"probed": True, "reconnected": False, "session_valid": True}


def test_oauth_url(client):
    response = client.get("/auth/oauth-url", params={"redirect_to": "http://app.test/"})

    assert response.json()["url"].startswith("http://backend.test/auth/v1/authorize?provider=google")


# =============================================================================
# ADMIN
# =============================================================================


def test_admin_routes_need_admin_role(client, backend):
    assert client.get("/admin/stats").status_code == 401

    sign_in(client, backend, "cook@example.com")
    response = client.get("/admin/stats")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_admin_creates_and_edits_recipe(client, backend, catalogue):
    sign_in(client, backend, "admin@example.com", role="admin")
    payload = {
        "title": "Таратор",
        "prep_time": 15,
        "difficulty": "Easy",
        "steps": ["Grate the cucumber", "Mix"],
        "ingredients": [{"ingredient_id": catalogue["cucumber"]["id"], "quantity": 1, "unit": "piece"}],
    }

    created = client.post("/admin/recipes", json=payload)
    assert created.status_code == 201, created.text
    recipe = created.json()["data"]
    assert recipe["slug"] == "tarator"

    duplicate = client.post("/admin/recipes", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "DUPLICATE_SLUG"

    updated = client.put(f"/admin/recipes/{recipe['id']}", json={"servings": 6})
    assert updated.json()["data"]["servings"] == 6

    edit_form = client.get(f"/admin/recipes/{recipe['id']}").json()
    assert [line["id"] for line in edit_form["ingredients"]] == [catalogue["cucumber"]["id"]]

    assert client.get("/admin/stats").json() == {"total_recipes": 4, "total_ingredients": 5}
    assert client.delete(f"/admin/recipes/{recipe['id']}").status_code == 200
    assert client.get("/recipes/tarator").status_code == 404


def test_admin_image_upload(client, backend):
    sign_in(client, backend, "admin@example.com", role="admin")

    response = client.post(
        "/admin/images", files={"file": ("dish.jpg", b"\xff\xd8", "image/jpeg")}
    )

    assert response.status_code == 201
    path = response.json()["data"]["path"]
    assert client.delete("/admin/images", params={"path": path}).status_code == 200
    assert backend.objects == {}


def test_admin_ingredient_management(client, backend, catalogue):
    sign_in(client, backend, "admin@example.com", role="admin")

    created = client.post("/admin/ingredients", json={"name_bg": "Чесън", "name_en": "Garlic"})
    assert created.status_code == 201
    ingredient_id = created.json()["data"]["id"]

    duplicate = client.post("/admin/ingredients", json={"name_bg": "ЧЕСЪН", "name_en": "Other"})
    assert duplicate.status_code == 409

    renamed = client.put(f"/admin/ingredients/{ingredient_id}", json={"category": "vegetables"})
    assert renamed.json()["data"]["category"] == "vegetables"
    assert client.delete(f"/admin/ingredients/{ingredient_id}").status_code == 200
