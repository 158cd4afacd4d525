from __future__ import annotations

import logging
from typing import Awaitable, Callable

import httpx

from src.app.domain.models import CanonicalUrl, PreviewMetadata, PreviewResult, Provider

from .canonical import canonicalize
from .errors import ServiceError
from .metadata import (
    fetch_ogp_metadata,
    fetch_short_video_metadata,
    fetch_social_metadata,
    fetch_video_metadata,
)
from .resolver import resolve_final_url

logger = logging.getLogger(__name__)

MetadataHandler = Callable[[httpx.AsyncClient, CanonicalUrl], Awaitable[PreviewMetadata]]


async def _video(client: httpx.AsyncClient, canonical: CanonicalUrl) -> PreviewMetadata:
    return await fetch_video_metadata(client, canonical.provider_id or "")


async def _social(client: httpx.AsyncClient, canonical: CanonicalUrl) -> PreviewMetadata:
    return await fetch_social_metadata(client, canonical.canonical_url)


async def _short_video(client: httpx.AsyncClient, canonical: CanonicalUrl) -> PreviewMetadata:
    return await fetch_short_video_metadata(client, canonical.canonical_url)


PROVIDER_HANDLERS: dict[Provider, MetadataHandler] = {
    Provider.VIDEO: _video,
    Provider.SOCIAL: _social,
    Provider.SHORT_VIDEO: _short_video,
}


async def _attempt(source: str, call: Awaitable[PreviewMetadata]) -> PreviewMetadata:
    try:
        return await call
    except ServiceError as error:
        logger.warning("preview.metadata_unavailable source=%s error=%s", source, error)
        return PreviewMetadata.unavailable(str(error))


async def _provider_metadata(client: httpx.AsyncClient, canonical: CanonicalUrl) -> PreviewMetadata:
    handler = PROVIDER_HANDLERS.get(canonical.provider)
    if handler is None:
        return PreviewMetadata.unavailable(f"no oembed handler for {canonical.provider.value}")
    return await _attempt(canonical.provider.value, handler(client, canonical))


async def build_preview(raw_url: str, client: httpx.AsyncClient) -> PreviewResult:
    """
    Resolve, canonicalize and describe a submitted URL.

    Only the redirect resolution may raise. Provider oEmbed and the OGP
    fallback degrade to empty fields; OGP fills gaps but never overrides
    values already supplied by the provider.
    """
    url_final = await resolve_final_url(raw_url, client)
    canonical = canonicalize(url_final)

    metadata = await _provider_metadata(client, canonical)

    if metadata.needs_fallback:
        ogp = await _attempt("ogp", fetch_ogp_metadata(client, canonical.canonical_url))
        if not (metadata.is_available or ogp.is_available):
            logger.warning(
                "preview.no_metadata url=%s provider=%s reason=%s",
                canonical.canonical_url,
                canonical.provider.value,
                ogp.unavailable_reason,
            )
        metadata = metadata.fill_missing(ogp)

    return PreviewResult(
        url_final=url_final,
        canonical_url=canonical.canonical_url,
        provider=canonical.provider,
        provider_id=canonical.provider_id,
        title=metadata.title,
        description=metadata.description,
        image_url=metadata.image_url or None,
        embed_html=metadata.embed_html or None,
        embed_provider=metadata.embed_provider,
    )
