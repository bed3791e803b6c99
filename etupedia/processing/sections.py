"""Table-of-contents extraction from rendered article HTML."""

from typing import Iterable, List

from bs4 import BeautifulSoup

from ..models import Section
from .references import should_skip_section
from .text import slugify


HEADING_SELECTOR = "h2, h3, h4, h5, h6"


def build_section_hierarchy(sections: Iterable[Section]) -> List[Section]:
    """
    Nest a flat, document-ordered list of sections into a forest.

    Each incoming section pops every open section whose level is greater
    than or equal to its own, then becomes a child of whatever is left on
    top of the stack (or a root when the stack is empty). Skipped heading
    levels therefore attach to the nearest shallower heading: h2 -> h4
    makes the h4 a direct child of the h2.

    Args:
        sections: Sections in document order; ``subsections`` is ignored
            and rebuilt.

    Returns:
        Root sections whose pre-order traversal matches the input order.
    """
    hierarchy: List[Section] = []
    stack: List[Section] = []

    for section in sections:
        while stack and stack[-1].level >= section.level:
            stack.pop()

        if not stack:
            hierarchy.append(section)
        else:
            parent = stack[-1]
            if parent.subsections is None:
                parent.subsections = []
            parent.subsections.append(section)

        stack.append(section)

    return hierarchy


def extract_sections(soup: BeautifulSoup, content_selector: str,
                     language_code: str = "en") -> List[Section]:
    """
    Build the table of contents of an article.

    Collection stops at the first heading that names a reference-class
    section ("References", "Références", "Weblinks", ...); everything after
    it is references, navigation or external links.
    """
    root = soup.select_one(content_selector)
    if root is None:
        return []

    flat: List[Section] = []
    for heading in root.select(HEADING_SELECTOR):
        title = heading.get_text().strip()
        if should_skip_section(title, language_code):
            break

        level = int(heading.name[1]) - 1  # h2 = 1, h3 = 2, etc.
        section_id = heading.get("id") or slugify(title)
        flat.append(Section(id=section_id, title=title, level=level))

    return build_section_hierarchy(flat)
