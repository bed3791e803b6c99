"""Base class for article sources."""

from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional

import requests

from ..core.config import Config
from ..models import Article, SearchResult
from .http import HttpClient


# Optional capabilities a scraper may declare in ``capabilities``.
FEATURED = "featured"
RANDOM = "random"


class BaseScraper(ABC):
    """
    A source of articles (Wikipedia, ...).

    Subclasses implement ``search`` and ``scrape_article`` and must not let
    network or parse errors escape them: failures become ``[]``/``None``.
    Optional operations are advertised through ``capabilities`` rather
    than discovered by probing for methods.
    """

    capabilities: FrozenSet[str] = frozenset()

    def __init__(self, source_name: str, base_url: str, config: Optional[Config] = None,
                 session: Optional[requests.Session] = None):
        self.source_name = source_name
        self.base_url = base_url
        self.config = config or Config()
        self.client = HttpClient(base_url, self.config, session=session)

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities

    @abstractmethod
    def search(self, query: str, limit: int = 50) -> List[SearchResult]:
        """Search for articles matching the query."""

    @abstractmethod
    def scrape_article(self, identifier: str) -> Optional[Article]:
        """Scrape a single article by identifier (title, slug, URL...)."""

    def get_featured_articles(self, limit: int = 10) -> List[SearchResult]:
        raise NotImplementedError(f"{self.source_name} has no featured articles")

    def get_random_articles(self, limit: int = 5) -> List[SearchResult]:
        raise NotImplementedError(f"{self.source_name} has no random articles")
