"""HTML extraction utilities: sections, references, images and text."""

from .images import proxy_image_url, upgrade_thumbnail_url
from .references import (
    REFERENCE_SECTION_TRANSLATIONS,
    extract_reference_sections,
    extract_references,
    get_reference_section_titles,
    should_skip_section,
)
from .sections import build_section_hierarchy, extract_sections
from .text import slugify

__all__ = [
    "REFERENCE_SECTION_TRANSLATIONS",
    "build_section_hierarchy",
    "extract_reference_sections",
    "extract_references",
    "extract_sections",
    "get_reference_section_titles",
    "proxy_image_url",
    "should_skip_section",
    "slugify",
    "upgrade_thumbnail_url",
]
