"""Wikipedia scraper: search, article fetch and HTML normalization."""

import html
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup, Tag

from ..core.config import Config
from ..languages import is_valid_language_code
from ..models import Article, SearchResult
from ..processing.images import first_image, proxy_images, to_absolute_url
from ..processing.references import (
    extract_reference_sections,
    extract_references,
    rewrite_wiki_link,
    should_skip_section,
)
from ..processing.sections import extract_sections
from ..processing.text import (
    extract_excerpt,
    slugify,
    strip_tags,
    title_from_identifier,
    wiki_path,
)
from .base import FEATURED, RANDOM, BaseScraper


logger = logging.getLogger(__name__)

CONTENT_SELECTOR = "#mw-content-text .mw-parser-output"
INFOBOX_SELECTOR = ".infobox, .infobox-image, table.infobox"

# Removed from the content root before anything is extracted.
UNWANTED_SELECTOR = (
    "script, style, nav, header, footer, aside, .mw-editsection, .reference, .navbox, "
    ".infobox, .sidebar, .advertisement, .cookie-notice, "
    '[role="navigation"], [aria-label="navigation"]'
)

HEADING_TAGS = ("h2", "h3", "h4", "h5", "h6")
BODY_TAGS = ("p", "ul", "ol", "blockquote", "figure", "table")

EXCERPT_LENGTH = 300
MAX_SEARCH_LIMIT = 500
_URL_SAFE = "!*'()"  # kept literal in article URLs
MAX_IMAGES = 10
MAX_KEYWORDS = 10
LAST_EDITED_PREFIX = "This page was last edited on"

# Best-effort language guessing. Short function words overlap between
# languages ("la", "in", "de"), so this only picks a default edition.
_FRENCH_WORDS = re.compile(
    r"\b(le|la|les|un|une|des|et|est|pour|dans|avec|sur|par|plus|comme|mais|son|ses|ce|cette"
    r"|qui|tout|tous|faire|être|avoir|dit)\b", re.IGNORECASE)
_GERMAN_WORDS = re.compile(
    r"\b(der|die|das|ein|eine|und|ist|für|in|mit|auf|von|den|dem|zu|sich|nicht|auch|oder|als"
    r"|des|im|zum|zur)\b", re.IGNORECASE)
_SPANISH_WORDS = re.compile(
    r"\b(el|la|los|las|un|una|de|del|y|en|es|por|para|con|que|su|al|como|más|pero|sus|le|ya"
    r"|todo|esta|este)\b", re.IGNORECASE)
_ITALIAN_WORDS = re.compile(
    r"\b(il|lo|la|i|gli|le|un|uno|una|di|da|in|con|su|per|tra|fra|a|come|più|che|non|nel"
    r"|della|alla|dal|al)\b", re.IGNORECASE)
_FRENCH_CHARS = re.compile(r"[àâäéèêëïîôùûüÿœæç]", re.IGNORECASE)
_GERMAN_CHARS = re.compile(r"[äöüß]", re.IGNORECASE)
_SPANISH_CHARS = re.compile(r"[áéíóúüñ¿¡]", re.IGNORECASE)


class WikipediaScraper(BaseScraper):
    """Scraper for one Wikipedia language edition."""

    capabilities = frozenset({FEATURED, RANDOM})

    def __init__(self, language: str = "en", config: Optional[Config] = None,
                 session: Optional[requests.Session] = None):
        if not is_valid_language_code(language):
            raise ValueError(f"Invalid Wikipedia language code: {language!r}")
        super().__init__("Wikipedia", f"https://{language}.wikipedia.org", config, session)
        self.language = language

    @staticmethod
    def detect_language(query: str) -> str:
        """
        Guess the Wikipedia edition a query is written for.

        This is a heuristic over stop-words and accented characters for
        French, German, Spanish and Italian, defaulting to English. It is
        not authoritative: an explicit language from the caller always wins.
        """
        if _FRENCH_WORDS.search(query) or _FRENCH_CHARS.search(query):
            return "fr"
        if _GERMAN_WORDS.search(query) or _GERMAN_CHARS.search(query):
            return "de"
        if _SPANISH_WORDS.search(query) or _SPANISH_CHARS.search(query):
            return "es"
        if _ITALIAN_WORDS.search(query):
            return "it"
        return "en"

    def _api(self, params: Dict[str, Any]) -> Any:
        return self.client.get_json("/w/api.php", {**params, "format": "json"})

    def _article_url(self, title: str) -> str:
        return f"{self.base_url}/wiki/{quote(wiki_path(title), safe=_URL_SAFE)}"

    def _result(self, title: str, url: Optional[str] = None, excerpt: str = "",
                score: Optional[float] = None) -> SearchResult:
        return SearchResult(
            title=title,
            excerpt=excerpt,
            slug=slugify(title),
            source=self.source_name,
            url=url or self._article_url(title),
            relevance_score=score,
        )

    def search(self, query: str, limit: int = 50) -> List[SearchResult]:
        """
        Search by title first, then by full text.

        Title matches score ``2.0 - i/n`` by rank; full-text matches that
        are not already present score ``1.0 + wordcount/10000``. If the
        full-text phase fails the title matches are still returned.

        Args:
            query: Search query
            limit: Maximum results per phase (capped at 500)

        Returns:
            List of search results, empty on failure
        """
        limit = min(limit, MAX_SEARCH_LIMIT, self.config.max_search_limit)

        try:
            data = self._api({
                "action": "opensearch",
                "search": query,
                "limit": limit,
                "namespace": 0,
            })
            titles = data[1] if len(data) > 1 else []
            excerpts = data[2] if len(data) > 2 else []
            urls = data[3] if len(data) > 3 else []

            results: List[SearchResult] = []
            for i, title in enumerate(titles):
                results.append(self._result(
                    title,
                    url=urls[i] if i < len(urls) else None,
                    excerpt=(excerpts[i] if i < len(excerpts) else "") or "",
                    score=2.0 - (i / len(titles)),
                ))
        except Exception as e:
            logger.error("Wikipedia search error for %r: %s", query, e)
            return []

        try:
            data = self._api({
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": limit,
                "srnamespace": 0,
                "srprop": "snippet|titlesnippet|sectionsnippet|wordcount",
            })
            seen = {r.title.lower() for r in results}
            for hit in data.get("query", {}).get("search", []):
                title = hit["title"]
                if title.lower() in seen:
                    continue
                seen.add(title.lower())
                results.append(self._result(
                    title,
                    excerpt=strip_tags(hit.get("snippet", "")),
                    score=1.0 + (hit.get("wordcount") or 0) / 10000,
                ))
        except Exception as e:
            logger.warning("Full-text search failed, using title search only: %s", e)

        return results

    def resolve_title(self, title: str) -> Optional[str]:
        """
        Best-effort canonical title for ``title``.

        Tries the edition's title search first, then the English
        interlanguage link. Returns ``None`` when neither knows the title.
        """
        try:
            data = self._api({
                "action": "opensearch",
                "search": title,
                "limit": 1,
                "namespace": 0,
            })
            titles = data[1] if len(data) > 1 else []
            if titles:
                return titles[0]

            data = self._api({
                "action": "query",
                "titles": title,
                "prop": "langlinks",
                "lllang": "en",
            })
            for page in data.get("query", {}).get("pages", {}).values():
                langlinks = page.get("langlinks") or []
                if langlinks:
                    return langlinks[0]["*"]
        except Exception as e:
            logger.warning("Could not resolve title %r: %s", title, e)
        return None

    def normalize_title(self, title: str) -> str:
        """Follow redirects and apply the wiki's title normalization."""
        try:
            data = self._api({"action": "query", "titles": title, "redirects": 1})
            pages = data["query"]["pages"]
            page_id = next(iter(pages))
            if page_id != "-1" and pages[page_id].get("title"):
                return pages[page_id]["title"]
        except Exception as e:
            logger.debug("Title normalization skipped for %r: %s", title, e)
        return title

    def scrape_article(self, identifier: str) -> Optional[Article]:
        """
        Fetch and normalize an article.

        Args:
            identifier: Slug, title or URL-encoded title

        Returns:
            The article, or ``None`` when the page has no title heading
            (not found) or anything goes wrong upstream
        """
        try:
            title = title_from_identifier(identifier)
            title = self.resolve_title(title) or title
            title = self.normalize_title(title)

            url = self._article_url(title)
            page = self.client.get_text(url)
            return self.parse_article(page, url)
        except Exception as e:
            logger.error("Wikipedia scrape error for %r: %s", identifier, e)
            return None

    def parse_article(self, page: str, url: str) -> Optional[Article]:
        """Turn a rendered ``/wiki/<Title>`` page into an ``Article``."""
        soup = BeautifulSoup(page, "html.parser")

        heading = soup.select_one("#firstHeading")
        page_title = heading.get_text().strip() if heading else ""
        if not page_title:
            return None

        proxy_path = self.config.proxy_image_path
        infobox_image = first_image(soup, INFOBOX_SELECTOR, proxy_path=proxy_path)

        content = soup.select_one(CONTENT_SELECTOR)
        if content is not None:
            self._clean_content(content)
            proxy_images(content, proxy_path=proxy_path)

        sections = extract_sections(soup, CONTENT_SELECTOR, self.language)
        body = self._render_body(content) if content is not None else ""

        images = []
        if content is not None:
            for img in content.find_all("img"):
                src = img.get("src")
                if src and src.startswith(proxy_path) and src not in images:
                    images.append(src)

        references = extract_references(soup)
        reference_sections = extract_reference_sections(
            soup, self.language, self.config.article_route
        )

        return Article(
            title=page_title,
            content=body,
            excerpt=self._excerpt(soup),
            sections=sections,
            source=self.source_name,
            url=url,
            last_updated=self._last_updated(soup),
            images=images[:MAX_IMAGES],
            infobox_image=infobox_image,
            keywords=self._keywords(soup),
            references=references or None,
            reference_sections=reference_sections or None,
        )

    def _clean_content(self, content: Tag) -> None:
        for el in content.select(UNWANTED_SELECTOR):
            el.extract()

        for link in content.find_all("a"):
            if rewrite_wiki_link(link, self.config.article_route) is not None:
                continue
            href = link.get("href")
            if href and href.startswith("/") and not href.startswith("//"):
                link["href"] = self.base_url + href

        for img in content.find_all("img"):
            src = img.get("src")
            if src:
                img["src"] = to_absolute_url(src, self.base_url)

    def _render_body(self, content: Tag) -> str:
        """
        Serialize the article body in document order.

        Emission stops for good at the first reference-class heading, so
        references, "See also" and external links never reach the body;
        they are exposed through ``reference_sections`` instead.
        """
        parts: List[str] = []
        stopped = False

        def process(el: Tag, depth: int = 0) -> None:
            nonlocal stopped
            if stopped or not isinstance(el, Tag):
                return

            tag = el.name.lower()
            if tag in HEADING_TAGS:
                title = el.get_text().strip()
                if should_skip_section(title, self.language):
                    stopped = True
                    return
                section_id = el.get("id") or slugify(title)
                parts.append(
                    f'<{tag} data-section-id="{html.escape(section_id)}">'
                    f"{html.escape(title, quote=False)}</{tag}>"
                )
            elif tag in BODY_TAGS:
                parts.append(str(el))
            elif tag == "div" and depth == 0:
                for child in el.find_all(recursive=False):
                    process(child, depth + 1)
                    if stopped:
                        return

        for child in content.find_all(recursive=False):
            process(child)
            if stopped:
                break

        return "".join(parts)

    def _excerpt(self, soup: BeautifulSoup) -> str:
        return extract_excerpt(soup, f"{CONTENT_SELECTOR} > p", EXCERPT_LENGTH)

    def _last_updated(self, soup: BeautifulSoup) -> Optional[str]:
        footer = soup.select_one("#footer-info-lastmod")
        if footer is None:
            return None
        text = footer.get_text().replace(LAST_EDITED_PREFIX, "").strip()
        return text or None

    def _keywords(self, soup: BeautifulSoup) -> List[str]:
        keywords = [a.get_text().strip() for a in soup.select(".mw-normal-catlinks ul li a")]
        return keywords[:MAX_KEYWORDS]

    def _listing(self, items: List[Dict[str, Any]]) -> List[SearchResult]:
        return [self._result(item["title"]) for item in items]

    def get_featured_articles(self, limit: int = 10) -> List[SearchResult]:
        """Members of ``Category:Featured_articles``."""
        try:
            data = self._api({
                "action": "query",
                "list": "categorymembers",
                "cmtitle": "Category:Featured_articles",
                "cmlimit": limit,
            })
            return self._listing(data["query"]["categorymembers"])
        except Exception as e:
            logger.error("Wikipedia featured articles error: %s", e)
            return []

    def get_random_articles(self, limit: int = 5) -> List[SearchResult]:
        """Random main-namespace articles."""
        try:
            data = self._api({
                "action": "query",
                "list": "random",
                "rnnamespace": 0,
                "rnlimit": limit,
            })
            return self._listing(data["query"]["random"])
        except Exception as e:
            logger.error("Wikipedia random articles error: %s", e)
            return []
