from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from src.app.domain.errors import RecipeRepositoryError
from src.app.domain.models import Ingredient, Provider, RecipeRecord
from src.app.infra.db.base import RecipeRepository

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "recipes"
CONFLICT_COLUMNS = "uid,canonical_hash"

_STORAGE_ERRORS = (APIError, httpx.HTTPError, ConnectionError, TimeoutError)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
            return datetime.fromisoformat(normalized)
        except ValueError:
            pass
    return _now_utc()


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _parse_provider(value: object) -> Provider | None:
    try:
        return Provider(str(value)) if value else None
    except ValueError:
        return None


def _row_to_ingredient(entry: dict[str, Any]) -> Ingredient:
    return Ingredient(
        name=str(entry.get("name") or ""),
        amount=str(entry.get("amount") or ""),
        unit=str(entry.get("unit") or ""),
        note=str(entry.get("note") or ""),
    )


def _row_to_record(row: dict[str, Any]) -> RecipeRecord:
    tags = row.get("tags") if isinstance(row.get("tags"), list) else []
    ingredients = row.get("ingredients_base") if isinstance(row.get("ingredients_base"), list) else []
    return RecipeRecord(
        uid=str(row["uid"]),
        id=str(row.get("id") or row["canonical_hash"]),
        url_raw=str(row.get("url_raw") or ""),
        url_final=str(row.get("url_final") or ""),
        canonical_url=str(row.get("canonical_url") or ""),
        canonical_hash=str(row["canonical_hash"]),
        provider=_parse_provider(row.get("provider")) or Provider.WEB,
        created_at=_parse_datetime(row.get("createdAt")),
        updated_at=_parse_datetime(row.get("updatedAt")),
        provider_id=_safe_str(row.get("provider_id")),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        tags=[str(tag) for tag in tags],
        image_url=_safe_str(row.get("image_url")),
        embed_html=_safe_str(row.get("embed_html")),
        embed_provider=_parse_provider(row.get("embed_provider")),
        ingredients_base=[_row_to_ingredient(item) for item in ingredients if isinstance(item, dict)],
    )


def _create_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


class SupabaseRecipeRepository(RecipeRepository):
    def __init__(self, client: Client | None = None, table_name: str = DEFAULT_TABLE_NAME):
        self._client = client or _create_supabase_client()
        self._table_name = table_name

    def _table(self):
        return self._client.table(self._table_name)

    def get_recipe(self, owner_id: str, recipe_id: str) -> RecipeRecord | None:
        try:
            result = (
                self._table()
                .select("*")
                .eq("uid", owner_id)
                .eq("canonical_hash", recipe_id)
                .limit(1)
                .execute()
            )
        except _STORAGE_ERRORS as error:
            logger.error("Error reading recipe %s for %s: %s", recipe_id, owner_id, error)
            raise RecipeRepositoryError("get_recipe", str(error)) from error

        rows = result.data or []
        return _row_to_record(rows[0]) if rows else None

    def upsert_recipe(self, record: RecipeRecord) -> None:
        try:
            self._table().upsert(record.to_row(), on_conflict=CONFLICT_COLUMNS).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error writing recipe %s for %s: %s", record.id, record.uid, error)
            raise RecipeRepositoryError("upsert_recipe", str(error)) from error

        logger.info("Upserted recipe: id=%s, uid=%s", record.id, record.uid)

    def list_recipes(
        self,
        owner_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[RecipeRecord], int]:
        end = offset + limit - 1
        try:
            response = (
                self._table()
                .select("*", count="exact")
                .eq("uid", owner_id)
                .order("updatedAt", desc=True)
                .range(offset, end)
                .execute()
            )
        except _STORAGE_ERRORS as error:
            logger.error("Error listing recipes for %s: %s", owner_id, error)
            raise RecipeRepositoryError("list_recipes", str(error)) from error

        records = [_row_to_record(row) for row in response.data or []]
        total = getattr(response, "count", None)
        if total is None:
            total = len(records)
        return records, total
