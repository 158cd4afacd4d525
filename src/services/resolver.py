from __future__ import annotations

import logging
import re

import httpx

from .errors import FetchFailedError, InvalidURLError, NetworkTimeoutError

logger = logging.getLogger(__name__)

URL_SCHEME_PATTERN = re.compile(r"^https?://")


def validate_url(raw_url: str) -> str:
    url = (raw_url or "").strip()
    if not URL_SCHEME_PATTERN.match(url):
        raise InvalidURLError(f"URL precisa comecar com http:// ou https://: {raw_url!r}")
    return url


async def resolve_final_url(raw_url: str, client: httpx.AsyncClient) -> str:
    """Follow redirects and return the URL the final response was served from."""
    url = validate_url(raw_url)

    try:
        response = await client.get(url, follow_redirects=True)
    except httpx.TimeoutException as error:
        raise NetworkTimeoutError(url, client.timeout.read or 0) from error
    except (httpx.HTTPError, httpx.InvalidURL) as error:
        raise FetchFailedError(f"Erro de rede ao resolver URL: {error}") from error

    final_url = str(response.url)
    if final_url != url:
        logger.debug("resolver.redirected from=%s to=%s hops=%d", url, final_url, len(response.history))
    return final_url
