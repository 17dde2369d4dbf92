"""Discovery crawl: homepage -> login page -> policy pages.

Independent of the ingestion pipeline.  Nothing here is filtered or
deduplicated; each policy page's full body text is printed as found.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import httpx

from policywatch.config import settings
from policywatch.scraper.fetcher import allowed_domains_for, fetch_page
from policywatch.scraper.models import FetchError

LOGIN_MARKERS = ("login", "signin")
POLICY_MARKERS = ("terms", "policy", "privacy")

START_MARKER = "----- Start of Policy Content -----"
END_MARKER = "----- End of Policy Content -----"


@dataclass
class DiscoveredPolicy:
    login_url: str
    policy_url: str
    text: str


def _matching_links(hrefs: List[Tuple[str, str]], markers: tuple) -> List[str]:
    """Return absolute URLs whose raw href (not the resolved URL) has a marker."""
    seen: set[str] = set()
    out: List[str] = []
    for href, link in hrefs:
        lowered = href.lower()
        if any(m in lowered for m in markers) and link not in seen:
            seen.add(link)
            out.append(link)
    return out


def discover(
    homepage_url: str,
    echo: Callable[[str], None] = print,
    client: Optional[httpx.Client] = None,
) -> List[DiscoveredPolicy]:
    """Crawl *homepage_url* for login pages and print their policy pages.

    The homepage is hop 1 and each login page is hop 2, both restricted to
    their own host pair.  Policy links found on a login page are fetched
    without a domain restriction.  Every failure is echoed and skipped.
    """
    found: List[DiscoveredPolicy] = []

    try:
        home = fetch_page(
            homepage_url,
            allowed_domains=allowed_domains_for(homepage_url),
            depth=1,
            client=client,
        )
    except FetchError as exc:
        echo(f"[DISCOVERY] ✗ Failed to visit homepage: {exc}")
        return found

    echo(f"[DISCOVERY] Scanning homepage: {home.url}")
    for login_url in _matching_links(home.hrefs(), LOGIN_MARKERS):
        echo(f"[DISCOVERY] Found login/signin page: {login_url}")
        found.extend(_scan_login_page(login_url, echo, client))

    echo(f"[DISCOVERY] Done — {len(found)} policy page(s) printed.")
    return found


def _scan_login_page(
    login_url: str,
    echo: Callable[[str], None],
    client: Optional[httpx.Client],
) -> List[DiscoveredPolicy]:
    found: List[DiscoveredPolicy] = []
    try:
        login = fetch_page(
            login_url,
            allowed_domains=allowed_domains_for(login_url),
            depth=2,
            max_depth=settings.max_crawl_depth,
            client=client,
        )
    except FetchError as exc:
        echo(f"[DISCOVERY] ✗ Failed to visit login page: {exc}")
        return found

    for policy_url in _matching_links(login.hrefs(), POLICY_MARKERS):
        echo(f"[DISCOVERY] Found policy link on login page: {policy_url}")
        try:
            page = fetch_page(policy_url, client=client)
        except FetchError as exc:
            echo(f"[DISCOVERY] ✗ Failed to visit policy page: {exc}")
            continue
        text = page.body_text()
        echo(START_MARKER)
        echo(text)
        echo(END_MARKER)
        found.append(DiscoveredPolicy(login_url=login_url, policy_url=page.url, text=text))
    return found
