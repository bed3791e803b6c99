"""Image URL rewriting.

Browsers must never fetch Wikimedia images directly (cross-origin resource
policy breaks them), so every Wikipedia/Wikimedia ``src`` is routed through
the local image proxy, upgraded to the original upload instead of a
thumbnail.
"""

import re
from typing import Optional
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag


DEFAULT_PROXY_PATH = "/api/proxy-image"

# /thumb/a/ab/File.jpg/220px-File.jpg -> /a/ab/File.jpg
_THUMB_PATH = re.compile(r"/thumb/([^/]+/[^/]+/[^/]+)/\d+px-[^/]+$")
_THUMB_PREFIX = re.compile(r"/thumb/")
_WIDTH_PREFIX = re.compile(r"/\d+px-")


def to_absolute_url(src: str, base_url: Optional[str] = None) -> str:
    """Make protocol-relative (and, given ``base_url``, root-relative) URLs absolute."""
    if src.startswith("//"):
        return "https:" + src
    if base_url and src.startswith("/"):
        return base_url.rstrip("/") + src
    return src


def is_wikimedia_url(url: str) -> bool:
    return "wikipedia" in url or "wikimedia" in url


def upgrade_thumbnail_url(url: str) -> str:
    """Strip Wikimedia's thumbnail path so the full-resolution file is served.

    URLs outside ``/thumb/`` are returned unchanged.
    """
    if "/thumb/" not in url:
        return url
    upgraded = _THUMB_PATH.sub(r"/\1", url, count=1)
    if "/thumb/" in upgraded:
        upgraded = _THUMB_PREFIX.sub("/", upgraded, count=1)
        upgraded = _WIDTH_PREFIX.sub("/", upgraded, count=1)
    return upgraded


def is_proxied(src: str, proxy_path: str = DEFAULT_PROXY_PATH) -> bool:
    return src.startswith(proxy_path + "?")


def proxy_image_url(src: str, high_quality: bool = True,
                    proxy_path: str = DEFAULT_PROXY_PATH) -> str:
    """Rewrite an image URL to go through the image proxy.

    Non-Wikimedia URLs are only made absolute. Already proxied URLs are
    returned unchanged, so rewriting twice is harmless.
    """
    if is_proxied(src, proxy_path):
        return src

    full_url = to_absolute_url(src)
    if not is_wikimedia_url(full_url):
        return full_url

    if high_quality:
        full_url = upgrade_thumbnail_url(full_url)
    return f"{proxy_path}?url={quote(full_url, safe='')}"


def proxy_images(root: Tag, proxy_path: str = DEFAULT_PROXY_PATH) -> int:
    """Rewrite ``src`` of every remote image under ``root`` in place.

    ``srcset`` is dropped since it would point the browser back at
    Wikimedia. Returns the number of rewritten images.
    """
    count = 0
    for img in root.find_all("img"):
        src = img.get("src")
        if not src or not (src.startswith("https:") or src.startswith("//")):
            continue
        img["src"] = proxy_image_url(src, proxy_path=proxy_path)
        if img.has_attr("srcset"):
            del img["srcset"]
        count += 1
    return count


def first_image(soup: BeautifulSoup, selector: str,
                proxy_path: str = DEFAULT_PROXY_PATH) -> Optional[str]:
    """Proxied URL of the first image inside the first ``selector`` match."""
    for container in soup.select(selector):
        img = container.find("img")
        if img is not None and img.get("src"):
            return proxy_image_url(img["src"], proxy_path=proxy_path)
    return None
