"""etupedia: Search and read Wikipedia articles in any language, cleaned up."""

from .api import BaseScraper, WikipediaScraper
from .cache import TTLCache
from .core import Config
from .manager import ScraperManager, are_titles_similar, calculate_relevance_score
from .models import (
    Article,
    Reference,
    ReferenceSection,
    SearchResult,
    Section,
)

__all__ = [
    "BaseScraper",
    "WikipediaScraper",
    "ScraperManager",
    "TTLCache",
    "Config",
    "are_titles_similar",
    "calculate_relevance_score",
    "Article",
    "Reference",
    "ReferenceSection",
    "SearchResult",
    "Section",
]

__version__ = "0.1.0"
