from __future__ import annotations

from datetime import datetime, timezone

from src.app.domain.models import (
    CanonicalUrl,
    Ingredient,
    PreviewMetadata,
    Provider,
    RecipeRecord,
)


class TestProvider:
    def test_provider_values(self) -> None:
        assert Provider.VIDEO.value == "video"
        assert Provider.SOCIAL.value == "social"
        assert Provider.SHORT_VIDEO.value == "short-video"
        assert Provider.WEB.value == "web"

    def test_provider_is_string_enum(self) -> None:
        assert isinstance(Provider.VIDEO, str)
        assert Provider("short-video") == Provider.SHORT_VIDEO


class TestCanonicalUrl:
    def test_provider_id_defaults_to_none(self) -> None:
        canonical = CanonicalUrl("https://example.com/", Provider.WEB)

        assert canonical.provider_id is None


class TestPreviewMetadata:
    def test_unavailable_marker(self) -> None:
        metadata = PreviewMetadata.unavailable("HTTP 404")

        assert not metadata.is_available
        assert metadata.unavailable_reason == "HTTP 404"
        assert metadata.needs_fallback

    def test_complete_metadata_needs_no_fallback(self) -> None:
        metadata = PreviewMetadata(title="t", description="d", image_url="https://img/x.jpg")

        assert metadata.is_available
        assert not metadata.needs_fallback

    def test_fill_missing_never_overrides_present_values(self) -> None:
        primary = PreviewMetadata(
            title="oEmbed title",
            image_url="https://img/oembed.jpg",
            embed_html="<blockquote></blockquote>",
            embed_provider=Provider.SHORT_VIDEO,
        )
        fallback = PreviewMetadata(title="OG title", description="OG description", image_url="https://img/og.jpg")

        merged = primary.fill_missing(fallback)

        assert merged.title == "oEmbed title"
        assert merged.image_url == "https://img/oembed.jpg"
        assert merged.description == "OG description"
        assert merged.embed_html == "<blockquote></blockquote>"
        assert merged.embed_provider == Provider.SHORT_VIDEO

    def test_fill_missing_from_unavailable_source_keeps_values(self) -> None:
        primary = PreviewMetadata(title="kept")

        merged = primary.fill_missing(PreviewMetadata.unavailable("timeout"))

        assert merged.title == "kept"
        assert merged.description == ""


class TestRecipeRecord:
    def test_to_row_uses_stable_layout(self) -> None:
        created = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
        updated = datetime(2024, 1, 16, 9, 0, tzinfo=timezone.utc)
        record = RecipeRecord(
            uid="user-1",
            id="h" * 64,
            url_raw="https://x.com/user/status/1",
            url_final="https://x.com/user/status/1",
            canonical_url="https://twitter.com/user/status/1",
            canonical_hash="h" * 64,
            provider=Provider.SOCIAL,
            created_at=created,
            updated_at=updated,
            embed_html="<blockquote></blockquote>",
            embed_provider=Provider.SOCIAL,
            ingredients_base=[Ingredient(name="salt", amount="", unit="適量")],
        )

        row = record.to_row()

        assert set(row) == {
            "uid", "id", "url_raw", "url_final", "canonical_url", "canonical_hash",
            "provider", "provider_id", "title", "description", "tags", "image_url",
            "embed_html", "embed_provider", "ingredients_base", "createdAt", "updatedAt",
        }
        assert row["provider"] == "social"
        assert row["embed_provider"] == "social"
        assert row["tags"] == []
        assert row["ingredients_base"] == [{"name": "salt", "amount": "", "unit": "適量", "note": ""}]
        assert row["createdAt"] == "2024-01-15T09:00:00+00:00"
        assert row["updatedAt"] == "2024-01-16T09:00:00+00:00"
