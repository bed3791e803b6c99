"""Text helpers shared by the scrapers and the aggregator."""

import re
from urllib.parse import unquote

from bs4 import BeautifulSoup


_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")
_TAGS = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Create a URL-friendly slug from text.

    Lowercases, strips everything but word characters, whitespace and
    hyphens, and collapses separators into single hyphens. Applying it to
    its own output returns the same slug.
    """
    slug = _NON_WORD.sub("", text.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def strip_tags(markup: str) -> str:
    """Remove HTML tags, e.g. the ``searchmatch`` spans in API snippets."""
    return _TAGS.sub("", markup or "")


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, max_length: int) -> str:
    return text[:max_length] + "..." if len(text) > max_length else text


def extract_excerpt(soup: BeautifulSoup, selector: str, max_length: int = 200) -> str:
    """Plain text of the first non-empty element matching ``selector``, shortened."""
    for element in soup.select(selector):
        text = normalize_whitespace(element.get_text())
        if text:
            return truncate(text, max_length)
    return ""


def title_from_identifier(identifier: str) -> str:
    """Turn a slug or URL-encoded path segment into a page title.

    ``Yog%C4%81c%C4%81ra`` becomes ``Yogācāra`` and ``quantum-computing``
    becomes ``quantum computing``.
    """
    return unquote(identifier).replace("-", " ").replace("_", " ").strip()


def wiki_path(title: str) -> str:
    """Title as it appears after ``/wiki/`` (spaces become underscores)."""
    return _WHITESPACE.sub("_", title.strip())
