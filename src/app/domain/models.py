# src/app/domain/models.py
"""
Domain models for link previews and saved recipes.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class Provider(str, Enum):
    """Originating platform detected from a canonical URL."""
    VIDEO = "video"
    SOCIAL = "social"
    SHORT_VIDEO = "short-video"
    WEB = "web"


@dataclass(frozen=True)
class CanonicalUrl:
    """Result of canonicalizing a resolved URL."""
    canonical_url: str
    provider: Provider
    provider_id: Optional[str] = None


@dataclass
class PreviewMetadata:
    """
    Best-effort metadata returned by one metadata source.

    Empty strings (or None for embed fields) mark a field as unavailable.
    When the whole source failed, ``unavailable_reason`` says why.
    """
    title: str = ""
    description: str = ""
    image_url: str = ""
    embed_html: Optional[str] = None
    embed_provider: Optional[Provider] = None
    unavailable_reason: Optional[str] = None

    @classmethod
    def unavailable(cls, reason: str) -> "PreviewMetadata":
        return cls(unavailable_reason=reason)

    @property
    def is_available(self) -> bool:
        return self.unavailable_reason is None

    @property
    def needs_fallback(self) -> bool:
        """True when any of the text fields is still empty."""
        return not (self.title and self.description and self.image_url)

    def fill_missing(self, other: "PreviewMetadata") -> "PreviewMetadata":
        """Keep present values, take the other source's value for empty ones."""
        return replace(
            self,
            title=self.title or other.title,
            description=self.description or other.description,
            image_url=self.image_url or other.image_url,
            embed_html=self.embed_html or other.embed_html,
            embed_provider=self.embed_provider or other.embed_provider,
        )


@dataclass
class PreviewResult:
    """Unified preview returned to the client for one submitted URL."""
    url_final: str
    canonical_url: str
    provider: Provider
    provider_id: Optional[str]
    title: str = ""
    description: str = ""
    image_url: Optional[str] = None
    embed_html: Optional[str] = None
    embed_provider: Optional[Provider] = None


@dataclass
class Ingredient:
    name: str
    amount: str = ""
    unit: str = ""
    note: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "note": self.note,
        }


@dataclass
class RecipeDraft:
    """Preview output after user edits, as submitted by the save action."""
    url: str
    url_final: str
    canonical_url: str
    provider: Provider = Provider.WEB
    provider_id: Optional[str] = None
    title: str = ""
    description: str = ""
    image_url: Optional[str] = None
    embed_html: Optional[str] = None
    embed_provider: Optional[Provider] = None
    tags: list[str] = field(default_factory=list)
    ingredients_base: list[Ingredient] = field(default_factory=list)


@dataclass
class RecipeRecord:
    """
    Persisted recipe, one per (owner, canonical URL).
    ``id`` and ``canonical_hash`` are the same value.
    """
    uid: str
    id: str
    url_raw: str
    url_final: str
    canonical_url: str
    canonical_hash: str
    provider: Provider
    created_at: datetime
    updated_at: datetime
    provider_id: Optional[str] = None
    title: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    image_url: Optional[str] = None
    embed_html: Optional[str] = None
    embed_provider: Optional[Provider] = None
    ingredients_base: list[Ingredient] = field(default_factory=list)

    def to_row(self) -> dict[str, Any]:
        """Stable on-disk layout."""
        return {
            "uid": self.uid,
            "id": self.id,
            "url_raw": self.url_raw,
            "url_final": self.url_final,
            "canonical_url": self.canonical_url,
            "canonical_hash": self.canonical_hash,
            "provider": self.provider.value,
            "provider_id": self.provider_id,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "image_url": self.image_url,
            "embed_html": self.embed_html,
            "embed_provider": self.embed_provider.value if self.embed_provider else None,
            "ingredients_base": [item.to_dict() for item in self.ingredients_base],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
