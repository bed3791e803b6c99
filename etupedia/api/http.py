"""HTTP session and retry helpers shared by all scrapers."""

import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar

import requests

from ..core.config import Config
from ..errors import UpstreamError


logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_request(fn: Callable[[], T], max_retries: int = 3, delay: float = 1.0,
                  sleep: Callable[[float], None] = time.sleep) -> T:
    """
    Call ``fn`` until it succeeds, backing off exponentially.

    Waits ``delay * 2**attempt`` seconds between attempts and re-raises the
    last exception once ``max_retries`` attempts have failed.

    Args:
        fn: Zero-argument callable performing the request
        max_retries: Total number of attempts
        delay: Base delay in seconds
        sleep: Sleep function (replaced in tests)

    Returns:
        Whatever ``fn`` returns
    """
    for attempt in range(max_retries):
        try:
            return fn()
        except (requests.RequestException, UpstreamError) as e:
            if attempt == max_retries - 1:
                raise
            wait = delay * (2 ** attempt)
            logger.debug("Request failed (%s); retrying in %.1fs", e, wait)
            sleep(wait)
    raise UpstreamError("<request>", "max retries exceeded")


class HttpClient:
    """Thin wrapper around ``requests.Session`` bound to one base URL."""

    def __init__(self, base_url: str, config: Optional[Config] = None,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.base_url = base_url.rstrip("/")
        self.config = config or Config()
        self.sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.config.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        })

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return self.base_url + path

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = self._url(path)

        def attempt() -> requests.Response:
            response = self.session.get(url, params=params, timeout=self.config.request_timeout)
            response.raise_for_status()
            return response

        return retry_request(attempt, self.config.max_retries, self.config.retry_delay,
                             sleep=self.sleep)

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``path`` and decode the JSON body."""
        response = self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(self._url(path), f"invalid JSON: {e}") from e

    def get_text(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """GET ``path`` and return the decoded body."""
        return self._get(path, params).text
