"""Scraper package — page fetching, relevance filtering and discovery."""

from policywatch.scraper.discovery import DiscoveredPolicy, discover
from policywatch.scraper.fetcher import (
    allowed_domains_for,
    fetch_elements,
    fetch_page,
    iter_elements,
)
from policywatch.scraper.models import Element, FetchedPage, FetchError
from policywatch.scraper.relevance import classify, filter_elements, render_fragments

__all__ = [
    "fetch_page",
    "fetch_elements",
    "iter_elements",
    "allowed_domains_for",
    "classify",
    "filter_elements",
    "render_fragments",
    "discover",
    "DiscoveredPolicy",
    "Element",
    "FetchedPage",
    "FetchError",
]
