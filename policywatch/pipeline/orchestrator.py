"""Scrape orchestrator: turns queued records into processed ones.

One call to :meth:`ScrapeOrchestrator.run_pass` drains the store, fetches
every policy link of every claimed record, filters each page down to its
policy-looking text, and hands the records back marked processed.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, List, Optional

from policywatch.config import settings
from policywatch.scraper.fetcher import allowed_domains_for, fetch_elements
from policywatch.scraper.models import Element, FetchError
from policywatch.scraper.relevance import filter_elements, render_fragments
from policywatch.store.models import ProcessingState, Record
from policywatch.store.records import RecordStore

# (url, allowed_domains, max_depth) -> elements; raises FetchError on failure.
ElementFetcher = Callable[[str, Iterable[str], int], Iterator[Element]]


def _default_fetcher(
    url: str, allowed_domains: Iterable[str], max_depth: int
) -> Iterator[Element]:
    return fetch_elements(url, allowed_domains=allowed_domains, max_depth=max_depth)


class ScrapeOrchestrator:
    """Run scrape passes over a :class:`RecordStore`.

    Args:
        store: The store to drain and requeue into.
        fetcher: Fetch-and-parse callable.  Defaults to the ``httpx`` +
            BeautifulSoup collaborator in :mod:`policywatch.scraper.fetcher`.
        max_workers: Per-record fetch fan-out.  Defaults to
            ``settings.max_concurrent_fetches``.
        pass_deadline: Seconds a pass may spend before remaining links are
            skipped.  Defaults to ``settings.pass_deadline``.
    """

    def __init__(
        self,
        store: RecordStore,
        fetcher: Optional[ElementFetcher] = None,
        max_workers: Optional[int] = None,
        pass_deadline: Optional[float] = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher or _default_fetcher
        self.max_workers = max_workers or settings.max_concurrent_fetches
        self.pass_deadline = (
            settings.pass_deadline if pass_deadline is None else pass_deadline
        )

    # ------------------------------------------------------------------
    # Per-link
    # ------------------------------------------------------------------
    def scrape_link(self, url: str, deadline: Optional[float] = None) -> str:
        """Fetch *url* and return its filtered policy text, or ``""``.

        Never raises: a failure of any kind for this link, or a page with no
        relevant content, is printed and contributes nothing.
        """
        if deadline is not None and time.monotonic() > deadline:
            print(f"[SCRAPING] ✗ Skipped {url!r}: pass deadline exceeded")
            return ""

        print(f"[SCRAPING] {url}")
        try:
            domains = allowed_domains_for(url)
            elements = self.fetcher(url, domains, settings.max_crawl_depth)
            text = render_fragments(filter_elements(elements))
        except FetchError as exc:
            print(f"[SCRAPING] ✗ Failed {url!r}: {exc}")
            return ""
        except Exception as exc:
            print(f"[SCRAPING] ✗ Failed {url!r}: {exc.__class__.__name__}: {exc}")
            return ""

        if not text:
            print(f"[SCRAPING] ✗ No relevant policy content found for {url!r}")
            return ""

        print(f"[SCRAPING] ✓ {url} ({len(text)} chars)")
        return text.strip()

    # ------------------------------------------------------------------
    # Per-record
    # ------------------------------------------------------------------
    def process_record(self, record: Record, deadline: Optional[float] = None) -> Record:
        """Scrape every link of *record* and mark it processed.

        Links are fetched concurrently but joined in their original order,
        one blank line apart.  All fetches finish before the record changes.
        """
        print(f"[SCRAPING] Processing record: {record.source_url}")
        links = list(record.policy_links)
        workers = max(1, min(self.max_workers, len(links)))

        with ThreadPoolExecutor(max_workers=workers) as pool:
            texts = list(pool.map(lambda link: self.scrape_link(link, deadline), links))

        record.extracted_text = "\n\n".join(t for t in texts if t).strip()
        record.state = ProcessingState.PROCESSED
        return record

    # ------------------------------------------------------------------
    # Per-pass
    # ------------------------------------------------------------------
    def run_pass(self) -> List[Record]:
        """Drain the store, process every claimed record, and requeue it.

        Returns the records processed in this pass (possibly empty).
        """
        batch = self.store.drain_unprocessed()
        if not batch:
            return []

        deadline = time.monotonic() + self.pass_deadline
        print(f"[SCRAPING] Pass started — {len(batch)} record(s) claimed.")
        processed: List[Record] = []
        for record in batch:
            try:
                processed.append(self.process_record(record, deadline))
            finally:
                self.store.requeue(record)
        print(f"[SCRAPING] Pass finished — {len(processed)} record(s) processed.")
        return processed
