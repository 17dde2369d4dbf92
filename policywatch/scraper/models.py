"""Data models and error types for the fetch-and-parse layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class Element:
    """One DOM element as seen by the relevance filter.

    ``attrs`` is a flat lookup: multi-valued attributes such as ``class`` are
    joined with single spaces.  ``text`` is the element's flattened inner
    text, whitespace untouched.
    """

    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    text: str = ""

    def attr(self, name: str) -> str:
        """Return attribute *name*, or an empty string when it is absent."""
        return self.attrs.get(name, "")


@dataclass
class FetchedPage:
    """The raw HTTP response for a single successful fetch."""

    url: str
    html: str
    status_code: int
    depth: int = 1

    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def hrefs(self) -> List[Tuple[str, str]]:
        """Return ``(raw_href, absolute_url)`` for every ``<a>`` tag, in document order.

        Relative hrefs are resolved against the page URL.  Empty and
        fragment-only hrefs are skipped.
        """
        out: List[Tuple[str, str]] = []
        for a in self.soup().find_all("a", href=True):
            href = a["href"].strip()
            if not href or href.startswith("#"):
                continue
            out.append((href, urljoin(self.url, href)))
        return out

    def links(self) -> List[str]:
        """Return the absolute URLs of :meth:`hrefs`."""
        return [absolute for _, absolute in self.hrefs()]

    def body_text(self) -> str:
        """Return the stripped inner text of ``<body>`` (or the whole document)."""
        soup = self.soup()
        container = soup.body or soup
        return container.get_text().strip()


def element_from_tag(tag: Tag) -> Element:
    attrs: Dict[str, str] = {}
    for name, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attrs[name] = str(value)
    return Element(tag=tag.name or "", attrs=attrs, text=tag.get_text())


def iter_soup_elements(soup: BeautifulSoup) -> Iterator[Element]:
    for node in soup.descendants:
        if isinstance(node, Tag):
            yield element_from_tag(node)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class FetchError(Exception):
    """Base class for every reason a page could not be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class InvalidURLError(FetchError):
    def __init__(self, url: str) -> None:
        super().__init__(url, "invalid URL")


class DisallowedDomainError(FetchError):
    def __init__(self, url: str, host: str) -> None:
        super().__init__(url, f"domain {host!r} is not allowed")
        self.host = host


class MaxDepthExceededError(FetchError):
    def __init__(self, url: str, depth: int, max_depth: int) -> None:
        super().__init__(url, f"depth {depth} exceeds max depth {max_depth}")
        self.depth = depth
        self.max_depth = max_depth


class TransportError(FetchError):
    """Network failure or a 4xx/5xx response."""
