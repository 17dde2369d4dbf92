"""Content relevance filter: keeps the policy-looking text of a page.

This is a best-effort heuristic, not a classifier.  Every check is a plain
substring match on lower-cased strings, so an incidental "facebook.com"
inside genuine policy prose will drop that paragraph, and the brace
stripping is greedy rather than balanced.  Both behaviours are intentional.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from policywatch.config import settings
from policywatch.scraper.models import Element

# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

# Only block-level text containers are considered; script, style, meta,
# nav, header, footer and every other tag are dropped.
_CONTENT_TAGS = frozenset({"p", "section", "article", "div"})

# Matched against tag, class and id.
_STRUCTURAL_PATTERNS = ("nav", "footer", "menu", "banner", "signup", "cookie-consent")

EXCLUDED_PHRASES = (
    "create an account",
    "sign up",
    "back to top",
    "equal opportunity",
    "cookie preferences",
    "socialitems",
    "facebook",
    "linkedin",
    "twitter",
    "instagram",
    "--rg-gradient",
    "data-eb-",
    "contact us",
    "support ticket",
    "accessibility",
)

POLICY_PHRASES = (
    "personal information",
    "data collection",
    "third party",
    "third-party",
    "privacy",
    "policy",
    "terms",
    "data",
    "cookies",
    "legal",
    "retention",
    "security",
    "access",
    "children",
    "location of",
    "use personal",
    "share personal",
    "data privacy",
    "information collected",
)

_WHITESPACE_RE = re.compile(r"\s+")
_STYLE_FRAGMENT_RE = re.compile(r"--rg-gradient[^}]*}")
_DATA_ATTR_RE = re.compile(r"\[data-eb-[^\]]*\]")
# Greedy on purpose: first "{" through last "}".
_BRACE_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------

def is_structurally_excluded(element: Element) -> bool:
    tag = element.tag.lower()
    if tag not in _CONTENT_TAGS:
        return True
    for value in (tag, element.attr("class").lower(), element.attr("id").lower()):
        if any(pattern in value for pattern in _STRUCTURAL_PATTERNS):
            return True
    return False


def has_excluded_phrase(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in EXCLUDED_PHRASES)


def has_policy_phrase(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in POLICY_PHRASES)


def clean_text(text: str) -> str:
    """Collapse whitespace and strip inline style, selector and JSON-like debris."""
    cleaned = _WHITESPACE_RE.sub(" ", text).strip()
    cleaned = _STYLE_FRAGMENT_RE.sub("", cleaned)
    cleaned = _DATA_ATTR_RE.sub("", cleaned)
    cleaned = _BRACE_BLOCK_RE.sub("", cleaned, count=1)
    return cleaned.strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify(element: Element, min_length: Optional[int] = None) -> Optional[str]:
    """Return the cleaned policy text of *element*, or ``None`` to drop it.

    Checks run in a fixed order: structural exclusion, excluded phrases,
    policy phrases, cleaning, then the minimum length gate
    (``settings.min_fragment_length`` unless *min_length* is given).
    """
    if is_structurally_excluded(element):
        return None
    if has_excluded_phrase(element.text):
        return None
    if not has_policy_phrase(element.text):
        return None

    cleaned = clean_text(element.text)
    limit = settings.min_fragment_length if min_length is None else min_length
    if len(cleaned) < limit:
        return None
    return cleaned


def filter_elements(
    elements: Iterable[Element], min_length: Optional[int] = None
) -> Iterator[str]:
    """Yield kept fragments of *elements* in traversal order."""
    for element in elements:
        fragment = classify(element, min_length=min_length)
        if fragment is not None:
            yield fragment


def render_fragments(fragments: Iterable[str]) -> str:
    """Join *fragments*, each terminated by a single newline."""
    return "".join(f"{fragment}\n" for fragment in fragments)
