from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from src.app.domain.models import (
    Ingredient,
    PreviewResult,
    Provider,
    RecipeDraft,
    RecipeRecord,
)

ProviderName = Literal["video", "social", "short-video", "web"]
EmbedProviderName = Literal["social", "short-video"]


class IngredientOut(BaseModel):
    name: str = ""
    amount: str = ""
    unit: str = ""
    note: str = ""


class IngredientItem(IngredientOut):
    # amount e normalizado e validado no servico (erro 400)
    note: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value: object) -> str:
        return "" if value is None else str(value)

    def to_domain(self) -> Ingredient:
        return Ingredient(name=self.name, amount=self.amount, unit=self.unit, note=self.note or "")


class PreviewRequest(BaseModel):
    url: str


class PreviewResponse(BaseModel):
    urlFinal: str
    canonicalUrl: str
    provider: ProviderName
    providerId: Optional[str] = None
    title: str = ""
    description: str = ""
    imageUrl: Optional[str] = None
    embedHtml: Optional[str] = None
    embedProvider: Optional[EmbedProviderName] = None

    @classmethod
    def from_result(cls, result: PreviewResult) -> "PreviewResponse":
        return cls(
            urlFinal=result.url_final,
            canonicalUrl=result.canonical_url,
            provider=result.provider.value,
            providerId=result.provider_id,
            title=result.title,
            description=result.description,
            imageUrl=result.image_url,
            embedHtml=result.embed_html,
            embedProvider=result.embed_provider.value if result.embed_provider else None,
        )


class RecipeDraftIn(BaseModel):
    # url, urlFinal e canonicalUrl sao validados no servico (erro 400)
    url: str = ""
    urlFinal: str = ""
    canonicalUrl: str = ""
    provider: ProviderName = "web"
    providerId: Optional[str] = None
    title: str = ""
    description: str = ""
    imageUrl: Optional[str] = None
    embedHtml: Optional[str] = None
    embedProvider: Optional[EmbedProviderName] = None
    tags: list[str] = Field(default_factory=list)
    ingredientsBase: list[IngredientItem] = Field(default_factory=list)

    def to_domain(self) -> RecipeDraft:
        return RecipeDraft(
            url=self.url,
            url_final=self.urlFinal,
            canonical_url=self.canonicalUrl,
            provider=Provider(self.provider),
            provider_id=self.providerId,
            title=self.title,
            description=self.description,
            image_url=self.imageUrl,
            embed_html=self.embedHtml,
            embed_provider=Provider(self.embedProvider) if self.embedProvider else None,
            tags=list(self.tags),
            ingredients_base=[item.to_domain() for item in self.ingredientsBase],
        )


class SaveRecipeRequest(BaseModel):
    draft: RecipeDraftIn


class SaveRecipeResponse(BaseModel):
    id: str


class RecipeResponse(BaseModel):
    id: str
    url: str
    urlFinal: str
    canonicalUrl: str
    provider: ProviderName
    providerId: Optional[str] = None
    title: str = ""
    description: str = ""
    imageUrl: Optional[str] = None
    embedHtml: Optional[str] = None
    embedProvider: Optional[EmbedProviderName] = None
    tags: list[str] = Field(default_factory=list)
    ingredientsBase: list[IngredientOut] = Field(default_factory=list)
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_record(cls, record: RecipeRecord) -> "RecipeResponse":
        return cls(
            id=record.id,
            url=record.url_raw,
            urlFinal=record.url_final,
            canonicalUrl=record.canonical_url,
            provider=record.provider.value,
            providerId=record.provider_id,
            title=record.title,
            description=record.description,
            imageUrl=record.image_url,
            embedHtml=record.embed_html,
            embedProvider=record.embed_provider.value if record.embed_provider else None,
            tags=list(record.tags),
            ingredientsBase=[IngredientOut(**item.to_dict()) for item in record.ingredients_base],
            createdAt=record.created_at.isoformat(),
            updatedAt=record.updated_at.isoformat(),
        )


class RecipeListResponse(BaseModel):
    items: list[RecipeResponse]
    total: int
    limit: int
    offset: int


class RecipeOptionsResponse(BaseModel):
    units: list[str]
    tags: list[str]
