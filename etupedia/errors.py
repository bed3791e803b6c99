"""Exception types raised inside etupedia.

None of these escape ``ScraperManager``: scrapers and the manager catch them,
log them and hand back an empty result instead.
"""


class EtupediaError(Exception):
    """Base class for etupedia errors."""


class UpstreamError(EtupediaError):
    """A remote request failed or returned something unusable."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url

