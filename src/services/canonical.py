from __future__ import annotations

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.app.domain.models import CanonicalUrl, Provider

logger = logging.getLogger(__name__)

TRACKING_PREFIXES = ("utm_",)
TRACKING_KEYS = frozenset({"fbclid", "gclid", "igshid", "s", "si"})

VIDEO_SHORT_HOST = "youtu.be"
VIDEO_MAIN_DOMAIN = "youtube.com"
VIDEO_CANONICAL_HOST = "www.youtube.com"
VIDEO_CANONICAL_PATH = "/watch"

SOCIAL_SHORT_HOST = "x.com"
SOCIAL_LEGACY_DOMAIN = "twitter.com"

SHORT_VIDEO_DOMAIN = "tiktok.com"


def _is_tracking_key(key: str) -> bool:
    return key.startswith(TRACKING_PREFIXES) or key in TRACKING_KEYS


def _matches_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith(f".{domain}")


def _comparable_host(hostname: str) -> str:
    host = hostname.lower()
    return host[4:] if host.startswith("www.") else host


def _clean_query(query: str) -> list[tuple[str, str]]:
    params = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if _is_tracking_key(key):
            continue
        params[key] = value
    return sorted(params.items(), key=lambda item: item[0])


def _netloc(hostname: str, port: int | None, userinfo: str = "") -> str:
    # literais IPv6 voltam com colchetes
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port:
        host = f"{host}:{port}"
    return f"{userinfo}@{host}" if userinfo else host


def _userinfo(netloc: str) -> str:
    return netloc.rpartition("@")[0]


def _extract_video_id(host: str, path: str, params: list[tuple[str, str]]) -> str | None:
    if host == VIDEO_SHORT_HOST:
        segment = path.lstrip("/").split("/", 1)[0]
        return segment or None
    for key, value in params:
        if key == "v" and value:
            return value
    return None


def canonicalize(url: str) -> CanonicalUrl:
    """
    Normalize a resolved URL into its identity form and detect the provider.

    Pure function: fragment and tracking parameters are dropped, the remaining
    query is sorted by key, and known providers are rewritten to a single
    canonical host. Provider checks run in a fixed order and the first match wins.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    hostname = (parts.hostname or "").lower()
    path = parts.path or "/"
    params = _clean_query(parts.query)
    netloc = _netloc(hostname, parts.port, _userinfo(parts.netloc))
    host = _comparable_host(hostname)

    if host == VIDEO_SHORT_HOST or _matches_domain(host, VIDEO_MAIN_DOMAIN):
        video_id = _extract_video_id(host, path, params)
        if video_id:
            canonical_url = urlunsplit(
                (scheme, VIDEO_CANONICAL_HOST, VIDEO_CANONICAL_PATH, urlencode({"v": video_id}), "")
            )
            return CanonicalUrl(canonical_url, Provider.VIDEO, video_id)
        logger.debug("canonical.video_without_id url=%s", url)

    elif host == SOCIAL_SHORT_HOST or _matches_domain(host, SOCIAL_LEGACY_DOMAIN):
        canonical_url = urlunsplit(
            (scheme, _netloc(SOCIAL_LEGACY_DOMAIN, parts.port), path, urlencode(params), "")
        )
        return CanonicalUrl(canonical_url, Provider.SOCIAL)

    elif _matches_domain(host, SHORT_VIDEO_DOMAIN):
        canonical_url = urlunsplit((scheme, netloc, path, urlencode(params), ""))
        return CanonicalUrl(canonical_url, Provider.SHORT_VIDEO)

    canonical_url = urlunsplit((scheme, netloc, path, urlencode(params), ""))
    return CanonicalUrl(canonical_url, Provider.WEB)
