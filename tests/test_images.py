"""Tests for image URL rewriting."""

from urllib.parse import parse_qs, quote, urlsplit

from bs4 import BeautifulSoup

from etupedia.processing.images import (
    first_image,
    is_proxied,
    proxy_image_url,
    proxy_images,
    to_absolute_url,
    upgrade_thumbnail_url,
)


THUMB = "//upload.wikimedia.org/wikipedia/commons/thumb/a/ab/Foo.jpg/220px-Foo.jpg"
ORIGINAL = "https://upload.wikimedia.org/wikipedia/commons/a/ab/Foo.jpg"


def _original(src):
    """URL carried in a proxied ``src``."""
    return parse_qs(urlsplit(src).query)["url"][0]


def test_to_absolute_url():
    assert to_absolute_url("//example.org/x.png") == "https://example.org/x.png"
    assert to_absolute_url("/static/x.png", "https://en.wikipedia.org") == \
        "https://en.wikipedia.org/static/x.png"
    assert to_absolute_url("/static/x.png") == "/static/x.png"


def test_upgrade_thumbnail_url():
    assert upgrade_thumbnail_url("https:" + THUMB) == ORIGINAL
    assert upgrade_thumbnail_url(ORIGINAL) == ORIGINAL


def test_upgrade_leaves_non_thumbnails_alone():
    url = "https://upload.wikimedia.org/wikipedia/commons/a/ab/300px-Foo.jpg"
    assert upgrade_thumbnail_url(url) == url


def test_upgrade_irregular_thumbnail_path():
    url = "https://upload.wikimedia.org/wikipedia/commons/thumb/ab/300px-Foo.jpg"
    assert upgrade_thumbnail_url(url) == \
        "https://upload.wikimedia.org/wikipedia/commons/ab/Foo.jpg"


def test_upgrade_strips_only_first_width_prefix():
    url = "https://upload.wikimedia.org/wikipedia/commons/thumb/ab/300px-Foo.jpg/120px-x"
    assert upgrade_thumbnail_url(url) == \
        "https://upload.wikimedia.org/wikipedia/commons/ab/Foo.jpg/120px-x"


def test_proxy_thumbnail():
    proxied = proxy_image_url(THUMB)
    assert proxied == "/api/proxy-image?url=" + quote(ORIGINAL, safe="")
    assert _original(proxied) == ORIGINAL


def test_proxy_low_quality_keeps_thumbnail():
    proxied = proxy_image_url(THUMB, high_quality=False)
    assert _original(proxied) == "https:" + THUMB


def test_proxy_is_idempotent():
    once = proxy_image_url(THUMB)
    assert proxy_image_url(once) == once
    assert is_proxied(once)


def test_non_wikimedia_url_not_proxied():
    assert proxy_image_url("//cdn.example.org/a.png") == "https://cdn.example.org/a.png"
    assert not is_proxied("https://cdn.example.org/a.png")


def test_custom_proxy_path():
    assert proxy_image_url(THUMB, proxy_path="/img").startswith("/img?url=")


def test_proxy_images_in_tree():
    soup = BeautifulSoup(
        f'<div><img src="{THUMB}" srcset="a 1.5x"><img src="/local.png">'
        '<img src="https://cdn.example.org/b.png"></div>',
        "html.parser",
    )
    assert proxy_images(soup.div) == 2

    wiki, local, other = soup.find_all("img")
    assert is_proxied(wiki["src"])
    assert not wiki.has_attr("srcset")
    assert local["src"] == "/local.png"
    assert other["src"] == "https://cdn.example.org/b.png"


def test_first_image():
    soup = BeautifulSoup(
        f'<table class="infobox"><tr><td><img src="{THUMB}"></td></tr></table>',
        "html.parser",
    )
    assert _original(first_image(soup, ".infobox")) == ORIGINAL
    assert first_image(soup, ".sidebar") is None
