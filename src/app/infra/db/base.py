# src/app/infra/db/base.py
"""
Abstract base class for the recipe document store.
This interface allows easy swapping between different storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from src.app.domain.models import RecipeRecord


class RecipeRepository(ABC):
    """
    Owner-scoped keyed store of saved recipes.

    Records are addressed by ``(owner_id, canonical_hash)``.

    Implementations:
    - SupabaseRecipeRepository: Postgres table accessed through Supabase
    """

    @abstractmethod
    def get_recipe(
        self,
        owner_id: str,
        recipe_id: str,
    ) -> Optional[RecipeRecord]:
        """
        Read one recipe owned by ``owner_id``.

        Returns:
            The record, or None if the owner has no recipe with that id
        """
        pass

    @abstractmethod
    def upsert_recipe(self, record: RecipeRecord) -> None:
        """
        Create or replace the record keyed by ``(record.uid, record.canonical_hash)``.
        Exactly one write.
        """
        pass

    @abstractmethod
    def list_recipes(
        self,
        owner_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[RecipeRecord], int]:
        """
        List an owner's recipes, most recently updated first.

        Returns:
            (page of records, total count for the owner)
        """
        pass
