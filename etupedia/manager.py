"""Aggregation of search and article scraping across sources."""

from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import requests

from .api.base import FEATURED, RANDOM, BaseScraper
from .api.wikipedia import WikipediaScraper
from .cache import TTLCache
from .core.config import Config
from .languages import is_valid_language_code
from .models import Article, SearchResult


logger = logging.getLogger(__name__)

# Estimated size of English Wikipedia.
ESTIMATED_ARTICLE_COUNT = 6_500_000

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_DISAMBIGUATOR = re.compile(r"\s*\([^)]*\)\s*$")

ScraperFactory = Callable[[str], BaseScraper]


def are_titles_similar(title1: str, title2: str) -> bool:
    """
    Whether two result titles are trivial variants of each other.

    Titles are lowercased and stripped of non-alphanumerics. They are
    similar when equal, or when one contains the other and the lengths
    differ by fewer than 5 characters. A bare title also matches its own
    disambiguated form: "France" and "France (country)" are similar, while
    "Mercury (planet)" and "Mercury (element)" are not, nor are "France"
    and "France in World War II".
    """
    t1 = _normalize_title(title1)
    t2 = _normalize_title(title2)

    if t1 == t2:
        return True
    if t1 in t2 or t2 in t1:
        if abs(len(t1) - len(t2)) < 5:
            return True

    return (_normalize_title(_strip_disambiguator(title1)) == t2
            or _normalize_title(_strip_disambiguator(title2)) == t1)


def _strip_disambiguator(title: str) -> str:
    return _DISAMBIGUATOR.sub("", title) or title


def _normalize_title(title: str) -> str:
    return _NON_ALNUM.sub("", title.lower()).strip()


def calculate_relevance_score(query: str, result: SearchResult, original_score: float) -> float:
    """
    Rescore a search result against the query.

    Exact title match +10, title starting with the query +5, title
    containing it +3; plus 2 x the fraction of query words (longer than two
    characters) found in the title; minus 0.5 for titles more than five
    times as long as the query.
    """
    query_lower = query.lower().strip()
    title_lower = result.title.lower()
    words = query_lower.split() or [query_lower]

    score = original_score

    if title_lower == query_lower:
        score += 10
    elif title_lower.startswith(query_lower):
        score += 5
    elif query_lower in title_lower:
        score += 3

    matching = sum(1 for word in words if len(word) > 2 and word in title_lower)
    score += (matching / len(words)) * 2

    if len(title_lower) > len(query_lower) * 5:
        score -= 0.5

    return score


def matches_all_keywords(query: str, result: SearchResult) -> bool:
    """Every whitespace-separated query word occurs in the title or excerpt."""
    keywords = query.lower().split()
    searchable = f"{result.title} {result.excerpt or ''}".lower()
    return all(keyword in searchable for keyword in keywords)


class ScraperManager:
    """
    Runs searches and article scrapes against the registered sources.

    Build one per process and hand it to whatever serves requests (the CLI,
    the web app). Results are cached in memory for ``config.cache_ttl``
    seconds.
    """

    def __init__(self, config: Optional[Config] = None,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time,
                 register_defaults: bool = True):
        self.config = config or Config()
        self.session = session
        self.cache = TTLCache(self.config.cache_ttl, clock=clock)
        self.scrapers: Dict[str, BaseScraper] = {}
        self._factories: Dict[str, ScraperFactory] = {}
        self._language_scrapers: Dict[Tuple[str, str], BaseScraper] = {}

        if register_defaults:
            self._register_builtin_sources()

    def _register_builtin_sources(self) -> None:
        for name in self.config.sources:
            if name == "wikipedia":
                self.register_scraper(
                    name,
                    WikipediaScraper(self.config.default_language, self.config, self.session),
                    factory=lambda language: WikipediaScraper(language, self.config, self.session),
                )
            else:
                logger.warning("Unknown source in configuration: %s", name)

    def register_scraper(self, name: str, scraper: BaseScraper,
                         factory: Optional[ScraperFactory] = None) -> None:
        """
        Register a source.

        Args:
            name: Source name used in ``sources`` lists
            scraper: Default instance
            factory: Builds a language-specific instance; sources without
                one ignore the requested language
        """
        self.scrapers[name] = scraper
        if factory is not None:
            self._factories[name] = factory
        else:
            self._factories.pop(name, None)
        for key in [k for k in self._language_scrapers if k[0] == name]:
            del self._language_scrapers[key]

    def get_scraper(self, source: str, language: Optional[str] = None) -> Optional[BaseScraper]:
        """
        The scraper for ``source``, specialised to ``language`` when possible.

        Returns ``None`` for unknown sources and for language codes that
        cannot name a Wikipedia edition.
        """
        scraper = self.scrapers.get(source)
        if scraper is None:
            return None
        factory = self._factories.get(source)
        if factory is None or language is None:
            return scraper

        if not is_valid_language_code(language):
            logger.warning("Rejected language code %r for %s", language, source)
            return None

        key = (source, language)
        if key not in self._language_scrapers:
            self._language_scrapers[key] = factory(language)
        return self._language_scrapers[key]

    def _search_source(self, source: str, query: str, language: str) -> List[SearchResult]:
        scraper = self.get_scraper(source, language)
        if scraper is None:
            logger.warning("Scraper not found: %s", source)
            return []
        try:
            return scraper.search(query, self.config.search_limit)
        except Exception as e:
            logger.error("Error searching %s: %s", source, e)
            return []

    def search(self, query: str, sources: Optional[Sequence[str]] = None,
               language: Optional[str] = None) -> List[SearchResult]:
        """
        Search every requested source and merge the results.

        Sources are queried concurrently and a failing source contributes
        nothing. Multi-word queries keep only results containing every
        word; the rest are rescored, sorted and deduplicated by title.

        Args:
            query: Search query
            sources: Source names (default: all registered)
            language: Wikipedia edition (default: guessed from the query)

        Returns:
            Results sorted by descending relevance, without a count cap
        """
        lang = language or WikipediaScraper.detect_language(query)
        search_sources = list(sources) if sources else list(self.scrapers)

        cache_key = f"search:{query}:{','.join(search_sources)}:{lang}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit: %s", cache_key)
            return cached

        if not search_sources:
            return []

        workers = max(1, min(len(search_sources), self.config.max_workers))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            per_source = list(pool.map(
                lambda source: self._search_source(source, query, lang), search_sources
            ))

        flat = [result for results in per_source for result in results]

        if len(query.split()) > 1:
            flat = [r for r in flat if matches_all_keywords(query, r)]

        for result in flat:
            result.relevance_score = calculate_relevance_score(
                query, result, result.relevance_score or 0
            )

        flat.sort(key=lambda r: r.relevance_score or 0, reverse=True)

        results: List[SearchResult] = []
        for result in flat:
            if not any(are_titles_similar(result.title, seen.title) for seen in results):
                results.append(result)

        self.cache.set(cache_key, results)
        return results

    def scrape_article(self, slug: str, source: str = "wikipedia",
                       language: str = "en") -> Optional[Article]:
        """
        Scrape one article, served from cache when fresh.

        Returns ``None`` for unknown sources, missing articles and upstream
        failures; only successful results are cached.
        """
        cache_key = f"article:{source}:{language}:{slug}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit: %s", cache_key)
            return cached

        scraper = self.get_scraper(source, language)
        if scraper is None:
            logger.error("Scraper not found: %s", source)
            return None

        try:
            article = scraper.scrape_article(slug)
        except Exception as e:
            logger.error("Error scraping article from %s: %s", source, e)
            return None

        if article is not None:
            self.cache.set(cache_key, article)
        return article

    def _listing(self, capability: str, source: str, limit: int,
                 language: Optional[str]) -> List[SearchResult]:
        scraper = self.get_scraper(source, language)
        if scraper is None or not scraper.supports(capability):
            return []

        cache_key = f"{capability}:{source}:{language or ''}:{limit}"
        # random listings are not cached
        if capability != RANDOM:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        try:
            if capability == FEATURED:
                results = scraper.get_featured_articles(limit)
            else:
                results = scraper.get_random_articles(limit)
        except Exception as e:
            logger.error("Error getting %s articles from %s: %s", capability, source, e)
            return []

        if capability != RANDOM and results:
            self.cache.set(cache_key, results)
        return results

    def get_featured_articles(self, source: str = "wikipedia", limit: int = 10,
                              language: Optional[str] = None) -> List[SearchResult]:
        """Featured articles, or ``[]`` when the source has none."""
        return self._listing(FEATURED, source, limit, language)

    def get_random_articles(self, source: str = "wikipedia", limit: int = 5,
                            language: Optional[str] = None) -> List[SearchResult]:
        """Random articles, or ``[]`` when the source cannot provide them."""
        return self._listing(RANDOM, source, limit, language)

    def get_article_count(self) -> int:
        """Estimated number of articles reachable through the sources."""
        return ESTIMATED_ARTICLE_COUNT

    def get_available_scrapers(self) -> List[str]:
        return list(self.scrapers)

    def clear_cache(self) -> None:
        self.cache.clear()
