from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from src.app.domain.errors import InvalidDraftError, RecipeNotFoundError
from src.app.domain.models import Ingredient, RecipeDraft, RecipeRecord
from src.app.infra.db.base import RecipeRepository

from .ids import canonical_hash, is_recipe_id
from .ingredients import is_valid_amount, normalize_amount, normalize_tags
from .metadata import strip_scripts

logger = logging.getLogger(__name__)

REQUIRED_DRAFT_FIELDS = ("url", "url_final", "canonical_url")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _validate_draft(draft: RecipeDraft) -> None:
    for name in REQUIRED_DRAFT_FIELDS:
        value = getattr(draft, name, None)
        if not isinstance(value, str) or not value.strip():
            raise InvalidDraftError(f"draft is invalid: {name} is required", field=name)


def _clean_amount(raw: object, position: int) -> str:
    amount = normalize_amount("" if raw is None else str(raw))
    if not is_valid_amount(amount):
        raise InvalidDraftError(
            f"draft is invalid: ingredient {position} amount {raw!r} must be a number, "
            "a fraction like 1/2 or a mixed fraction like 1 1/2",
            field="ingredients_base",
        )
    return amount


def _clean_ingredients(items: list[Ingredient]) -> list[Ingredient]:
    return [
        Ingredient(
            name=str(item.name or ""),
            amount=_clean_amount(item.amount, position),
            unit=str(item.unit or ""),
            note=str(item.note or ""),
        )
        for position, item in enumerate(items)
    ]


def _build_record(
    owner_id: str,
    recipe_id: str,
    draft: RecipeDraft,
    created_at: datetime,
    updated_at: datetime,
    ingredients: list[Ingredient],
) -> RecipeRecord:
    return RecipeRecord(
        uid=owner_id,
        id=recipe_id,
        url_raw=draft.url,
        url_final=draft.url_final,
        canonical_url=draft.canonical_url,
        canonical_hash=recipe_id,
        provider=draft.provider,
        created_at=created_at,
        updated_at=updated_at,
        provider_id=draft.provider_id or None,
        title=draft.title or "",
        description=draft.description or "",
        tags=normalize_tags(draft.tags or []),
        image_url=draft.image_url or None,
        embed_html=strip_scripts(draft.embed_html) or None,
        embed_provider=draft.embed_provider or None,
        ingredients_base=ingredients,
    )


def save_recipe(
    repo: RecipeRepository,
    owner_id: str,
    draft: RecipeDraft,
    *,
    now: Optional[datetime] = None,
) -> str:
    """
    Create or merge the owner's recipe for the draft's canonical URL.

    The id is the SHA-256 of ``canonical_url``, so saving the same URL again
    updates the same record. ``created_at`` is carried over from the stored
    record when one exists; ``updated_at`` is always the current time.

    Returns:
        The recipe id (canonical hash)

    Raises:
        InvalidDraftError: If url, url_final or canonical_url is missing,
            or an ingredient amount is not a valid quantity
        RecipeRepositoryError: If the read or the write fails
    """
    _validate_draft(draft)
    ingredients = _clean_ingredients(draft.ingredients_base or [])

    recipe_id = canonical_hash(draft.canonical_url)
    timestamp = now or _now_utc()

    existing = repo.get_recipe(owner_id, recipe_id)
    created_at = existing.created_at if existing else timestamp

    record = _build_record(owner_id, recipe_id, draft, created_at, timestamp, ingredients)
    repo.upsert_recipe(record)

    logger.info(
        "Saved recipe: id=%s, uid=%s, provider=%s, created=%s",
        recipe_id,
        owner_id,
        record.provider.value,
        existing is None,
    )
    return recipe_id


def get_recipe(repo: RecipeRepository, owner_id: str, recipe_id: str) -> RecipeRecord:
    if not is_recipe_id(recipe_id):
        raise RecipeNotFoundError(recipe_id)

    record = repo.get_recipe(owner_id, recipe_id)
    if record is None:
        raise RecipeNotFoundError(recipe_id)
    return record


def list_recipes(
    repo: RecipeRepository,
    owner_id: str,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[RecipeRecord], int]:
    return repo.list_recipes(owner_id, limit=limit, offset=offset)
