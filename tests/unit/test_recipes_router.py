from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncIterator, Optional
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from src.app.deps import CurrentUser, get_current_user, get_http_client, get_recipe_repository, get_supabase
from src.app.domain.errors import RecipeRepositoryError
from src.app.domain.models import Ingredient, Provider, RecipeRecord
from src.app.infra.db.base import RecipeRepository
from src.app.main import app
from src.services.ingredients import TAG_OPTIONS, UNIT_OPTIONS

OG_PAGE = """
<html><head>
  <meta property="og:title" content="Grandma's curry">
  <meta property="og:description" content="A family recipe">
  <meta property="og:image" content="https://blog.example.com/curry.jpg">
</head></html>
"""


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self) -> None:
        self.records: dict[tuple[str, str], RecipeRecord] = {}
        self.should_fail = False

    def get_recipe(self, owner_id: str, recipe_id: str) -> Optional[RecipeRecord]:
        if self.should_fail:
            raise RecipeRepositoryError("get_recipe", "Simulated failure")
        return self.records.get((owner_id, recipe_id))

    def upsert_recipe(self, record: RecipeRecord) -> None:
        if self.should_fail:
            raise RecipeRepositoryError("upsert_recipe", "Simulated failure")
        self.records[(record.uid, record.canonical_hash)] = record

    def list_recipes(
        self,
        owner_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[RecipeRecord], int]:
        owned = [record for (uid, _), record in self.records.items() if uid == owner_id]
        return owned[offset:offset + limit], len(owned)


def blog_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text=OG_PAGE)


def unreachable_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("unreachable", request=request)


def override_http_client(handler):
    async def _client() -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            yield client

    return _client


@pytest.fixture
def repo() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def client(repo: InMemoryRecipeRepository):
    app.dependency_overrides[get_supabase] = lambda: MagicMock()
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1", email="cook@example.com")
    app.dependency_overrides[get_recipe_repository] = lambda: repo
    app.dependency_overrides[get_http_client] = override_http_client(blog_handler)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def draft_payload(**overrides) -> dict:
    draft = {
        "url": "https://blog.example.com/curry?utm_source=x",
        "urlFinal": "https://blog.example.com/curry?utm_source=x",
        "canonicalUrl": "https://blog.example.com/curry",
        "provider": "web",
        "title": "Grandma's curry",
        "tags": ["鍋", "時短"],
        "ingredientsBase": [{"name": "onion", "amount": "1 1/2", "unit": "つ"}],
    }
    draft.update(overrides)
    return {"draft": draft}


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestPreviewEndpoint:
    def test_returns_preview(self, client: TestClient) -> None:
        response = client.post("/recipes/preview", json={"url": "https://blog.example.com/curry?utm_source=x"})

        assert response.status_code == 200
        body = response.json()
        assert body["canonicalUrl"] == "https://blog.example.com/curry"
        assert body["provider"] == "web"
        assert body["title"] == "Grandma's curry"
        assert body["imageUrl"] == "https://blog.example.com/curry.jpg"
        assert body["embedHtml"] is None

    def test_invalid_url_is_bad_request(self, client: TestClient) -> None:
        response = client.post("/recipes/preview", json={"url": "ftp://blog.example.com/curry"})

        assert response.status_code == 400

    def test_unreachable_url_is_bad_gateway(self, client: TestClient) -> None:
        app.dependency_overrides[get_http_client] = override_http_client(unreachable_handler)

        response = client.post("/recipes/preview", json={"url": "https://blog.example.com/curry"})

        assert response.status_code == 502


class TestSaveEndpoint:
    def test_saves_and_returns_id(self, client: TestClient, repo: InMemoryRecipeRepository) -> None:
        response = client.post("/recipes", json=draft_payload())

        assert response.status_code == 200
        recipe_id = response.json()["id"]
        assert len(recipe_id) == 64
        stored = repo.records[("user-1", recipe_id)]
        assert stored.tags == ["鍋", "時短"]
        assert stored.ingredients_base[0].amount == "1 1/2"

    def test_missing_canonical_url_is_bad_request(self, client: TestClient, repo: InMemoryRecipeRepository) -> None:
        response = client.post("/recipes", json=draft_payload(canonicalUrl=""))

        assert response.status_code == 400
        assert repo.records == {}

    def test_invalid_amount_is_bad_request(self, client: TestClient, repo: InMemoryRecipeRepository) -> None:
        payload = draft_payload(ingredientsBase=[{"name": "onion", "amount": "1/0", "unit": "つ"}])

        response = client.post("/recipes", json=payload)

        assert response.status_code == 400
        assert repo.records == {}

    def test_repository_failure_is_server_error(self, client: TestClient, repo: InMemoryRecipeRepository) -> None:
        repo.should_fail = True

        response = client.post("/recipes", json=draft_payload())

        assert response.status_code == 500

    def test_requires_token(self, client: TestClient) -> None:
        del app.dependency_overrides[get_current_user]

        response = client.post("/recipes", json=draft_payload())

        assert response.status_code == 401


class TestReadEndpoints:
    def test_get_saved_recipe(self, client: TestClient) -> None:
        recipe_id = client.post("/recipes", json=draft_payload()).json()["id"]

        response = client.get(f"/recipes/{recipe_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == recipe_id
        assert body["url"] == "https://blog.example.com/curry?utm_source=x"
        assert body["createdAt"] == body["updatedAt"]

    def test_get_unknown_recipe_is_not_found(self, client: TestClient) -> None:
        response = client.get(f"/recipes/{'0' * 64}")

        assert response.status_code == 404

    def test_list_recipes(self, client: TestClient) -> None:
        client.post("/recipes", json=draft_payload())
        client.post("/recipes", json=draft_payload(canonicalUrl="https://blog.example.com/stew"))

        response = client.get("/recipes", params={"limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert len(body["items"]) == 1
        assert body["limit"] == 1

    def test_options(self, client: TestClient) -> None:
        response = client.get("/recipes/options")

        assert response.status_code == 200
        assert response.json() == {"units": list(UNIT_OPTIONS), "tags": list(TAG_OPTIONS)}

    def test_stored_amounts_are_returned_as_is(self, client: TestClient, repo: InMemoryRecipeRepository) -> None:
        recipe_id = "c" * 64
        stamp = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
        repo.records[("user-1", recipe_id)] = RecipeRecord(
            uid="user-1",
            id=recipe_id,
            url_raw="https://blog.example.com/old",
            url_final="https://blog.example.com/old",
            canonical_url="https://blog.example.com/old",
            canonical_hash=recipe_id,
            provider=Provider.WEB,
            created_at=stamp,
            updated_at=stamp,
            ingredients_base=[
                Ingredient(name="onion", amount="1/0", unit="つ"),
                Ingredient(name="rice", amount="1-2", unit="人分"),
            ],
        )

        listed = client.get("/recipes")
        single = client.get(f"/recipes/{recipe_id}")

        assert listed.status_code == 200
        assert single.status_code == 200
        assert [item["amount"] for item in listed.json()["items"][0]["ingredientsBase"]] == ["1/0", "1-2"]
        assert [item["amount"] for item in single.json()["ingredientsBase"]] == ["1/0", "1-2"]
