"""HTTP fetch-and-parse collaborator.

Every call builds its own domain allow-list and its own ``httpx`` client
(unless one is injected), so no crawl state survives from one fetch target
to the next.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from policywatch.config import settings
from policywatch.scraper.models import (
    DisallowedDomainError,
    Element,
    FetchedPage,
    InvalidURLError,
    MaxDepthExceededError,
    TransportError,
    iter_soup_elements,
)

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (compatible; PolicyWatch-Bot/1.0; +https://github.com/policywatch)"
    )
}


def _host_of(url: str) -> str:
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise InvalidURLError(url) from exc
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidURLError(url)
    return parsed.hostname.lower()


def allowed_domains_for(url: str) -> Tuple[str, str]:
    """Return ``(host, "www." + host)`` for *url*, normalising any ``www.`` prefix.

    Raises:
        InvalidURLError: If *url* has no http(s) scheme or no host.
    """
    host = _host_of(url)
    bare = host[4:] if host.startswith("www.") else host
    return host, "www." + bare


def fetch_page(
    url: str,
    allowed_domains: Optional[Iterable[str]] = None,
    depth: int = 1,
    max_depth: Optional[int] = None,
    client: Optional[httpx.Client] = None,
) -> FetchedPage:
    """Fetch *url* and return a :class:`FetchedPage`.

    Args:
        url: Absolute http(s) URL.
        allowed_domains: Hosts the fetch may touch.  ``None`` means any host.
            Redirects that leave the allow-list are rejected as well.
        depth: Hop count of *url* from the crawl entry point (entry is 1).
        max_depth: Deepest hop allowed.  Defaults to ``settings.max_crawl_depth``.
        client: Optional pre-built client; a fresh one is opened otherwise.

    Raises:
        InvalidURLError, DisallowedDomainError, MaxDepthExceededError,
        TransportError: all subclasses of :class:`FetchError`.
    """
    limit = settings.max_crawl_depth if max_depth is None else max_depth
    host = _host_of(url)
    allowed = {d.lower() for d in allowed_domains} if allowed_domains is not None else None

    if allowed is not None and host not in allowed:
        raise DisallowedDomainError(url, host)
    if depth > limit:
        raise MaxDepthExceededError(url, depth, limit)

    owns_client = client is None
    if client is None:
        client = httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=settings.request_timeout,
            follow_redirects=True,
        )
    try:
        response = client.get(url)
        response.raise_for_status()
    except (httpx.InvalidURL, ValueError) as exc:
        # httpx rejects control characters; idna rejects empty or oversized labels.
        raise InvalidURLError(url) from exc
    except httpx.HTTPError as exc:
        raise TransportError(url, str(exc) or exc.__class__.__name__) from exc
    finally:
        if owns_client:
            client.close()

    final_host = (response.url.host or host).lower()
    if allowed is not None and final_host not in allowed:
        raise DisallowedDomainError(str(response.url), final_host)

    return FetchedPage(
        url=str(response.url),
        html=response.text,
        status_code=response.status_code,
        depth=depth,
    )


def iter_elements(html: str) -> Iterator[Element]:
    """Yield every element of *html* lazily, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    yield from iter_soup_elements(soup)


def fetch_elements(
    url: str,
    allowed_domains: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
    client: Optional[httpx.Client] = None,
) -> Iterator[Element]:
    """Fetch *url* as a crawl entry point and return its elements.

    Only the entry page (hop 1) is fetched; no links are followed, so
    *max_depth* just has to admit that first hop.  The fetch happens eagerly
    so failures surface here, before iteration.
    """
    page = fetch_page(
        url,
        allowed_domains=allowed_domains,
        depth=1,
        max_depth=max_depth,
        client=client,
    )
    return iter_elements(page.html)
