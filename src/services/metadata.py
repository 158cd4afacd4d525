from __future__ import annotations

import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup

from src.app.domain.models import PreviewMetadata, Provider

from .errors import MetadataUnavailableError

logger = logging.getLogger(__name__)

YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
TWITTER_OEMBED_URL = "https://publish.twitter.com/oembed"
TIKTOK_OEMBED_URL = "https://www.tiktok.com/oembed"

HTML_PARSER = "html.parser"


def strip_scripts(html: str | None) -> str:
    """Remove every <script> element from embeddable markup."""
    if not html:
        return ""
    soup = BeautifulSoup(html, HTML_PARSER)
    for tag in soup.find_all("script"):
        tag.decompose()
    return str(soup)


def _as_text(value: object) -> str:
    if value is None or value == "":
        return ""
    return str(value)


async def _get(client: httpx.AsyncClient, source: str, url: str, params: dict[str, str] | None = None) -> httpx.Response:
    try:
        response = await client.get(url, params=params, follow_redirects=True)
    except httpx.TimeoutException as error:
        raise MetadataUnavailableError(source, f"timeout: {error}") from error
    except (httpx.HTTPError, httpx.InvalidURL) as error:
        raise MetadataUnavailableError(source, f"network error: {error}") from error

    if not response.is_success:
        raise MetadataUnavailableError(source, f"HTTP {response.status_code}")
    return response


async def _fetch_oembed(
    client: httpx.AsyncClient,
    source: str,
    endpoint: str,
    params: dict[str, str],
) -> dict[str, Any]:
    response = await _get(client, source, endpoint, params)
    try:
        payload = response.json()
    except ValueError as error:
        raise MetadataUnavailableError(source, "oembed response is not JSON") from error

    if not isinstance(payload, dict):
        raise MetadataUnavailableError(source, "unexpected oembed payload")
    return payload


async def fetch_video_metadata(client: httpx.AsyncClient, video_id: str) -> PreviewMetadata:
    payload = await _fetch_oembed(
        client,
        Provider.VIDEO.value,
        YOUTUBE_OEMBED_URL,
        {"format": "json", "url": YOUTUBE_WATCH_URL.format(video_id=video_id)},
    )
    # O embed do video e montado pelo cliente a partir do id
    return PreviewMetadata(
        title=_as_text(payload.get("title")),
        image_url=_as_text(payload.get("thumbnail_url")),
    )


async def fetch_social_metadata(client: httpx.AsyncClient, canonical_url: str) -> PreviewMetadata:
    payload = await _fetch_oembed(
        client,
        Provider.SOCIAL.value,
        TWITTER_OEMBED_URL,
        {"omit_script": "1", "url": canonical_url},
    )
    return PreviewMetadata(
        embed_html=strip_scripts(_as_text(payload.get("html"))),
        embed_provider=Provider.SOCIAL,
    )


async def fetch_short_video_metadata(client: httpx.AsyncClient, canonical_url: str) -> PreviewMetadata:
    payload = await _fetch_oembed(
        client,
        Provider.SHORT_VIDEO.value,
        TIKTOK_OEMBED_URL,
        {"url": canonical_url},
    )
    author = _as_text(payload.get("author_name"))
    return PreviewMetadata(
        title=_as_text(payload.get("title")),
        description=f"by {author}" if author else "",
        image_url=_as_text(payload.get("thumbnail_url")),
        embed_html=strip_scripts(_as_text(payload.get("html"))),
        embed_provider=Provider.SHORT_VIDEO,
    )


def _meta_content(soup: BeautifulSoup, key: str) -> str:
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: key})
        if tag is None:
            continue
        content = tag.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
    return ""


def _document_title(soup: BeautifulSoup) -> str:
    if soup.title is None:
        return ""
    return soup.title.get_text(strip=True)


def parse_ogp(html: str) -> PreviewMetadata:
    """Extract Open Graph style fields from page markup, with plain HTML fallbacks."""
    soup = BeautifulSoup(html or "", HTML_PARSER)
    return PreviewMetadata(
        title=_meta_content(soup, "og:title") or _document_title(soup),
        description=_meta_content(soup, "og:description") or _meta_content(soup, "description"),
        image_url=_meta_content(soup, "og:image") or _meta_content(soup, "twitter:image"),
    )


async def fetch_ogp_metadata(client: httpx.AsyncClient, canonical_url: str) -> PreviewMetadata:
    response = await _get(client, "ogp", canonical_url)
    return parse_ogp(response.text)
