"""Article sources and the HTTP plumbing they share."""

from .base import FEATURED, RANDOM, BaseScraper
from .http import HttpClient, retry_request
from .wikipedia import WikipediaScraper

__all__ = [
    "BaseScraper",
    "FEATURED",
    "RANDOM",
    "HttpClient",
    "retry_request",
    "WikipediaScraper",
]
