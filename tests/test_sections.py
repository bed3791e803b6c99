"""Tests for table-of-contents extraction."""

from bs4 import BeautifulSoup

from etupedia.models import Section
from etupedia.processing.sections import build_section_hierarchy, extract_sections


CONTENT = "#mw-content-text .mw-parser-output"


def _page(body: str) -> BeautifulSoup:
    html = f'<div id="mw-content-text"><div class="mw-parser-output">{body}</div></div>'
    return BeautifulSoup(html, "html.parser")


def _flatten(forest):
    for section in forest:
        yield from section.walk()


class TestBuildSectionHierarchy:
    """Test nesting of flat sections."""

    def test_nesting(self):
        flat = [
            Section("a", "A", 1),
            Section("b", "B", 2),
            Section("c", "C", 3),
            Section("d", "D", 2),
            Section("e", "E", 1),
        ]
        forest = build_section_hierarchy(flat)

        assert [s.id for s in forest] == ["a", "e"]
        a = forest[0]
        assert [s.id for s in a.subsections] == ["b", "d"]
        assert [s.id for s in a.subsections[0].subsections] == ["c"]
        assert forest[1].subsections is None

    def test_preorder_matches_input(self):
        levels = [1, 3, 2, 2, 4, 1, 1, 5]
        flat = [Section(str(i), str(i), level) for i, level in enumerate(levels)]
        forest = build_section_hierarchy(flat)
        assert [s.id for s in _flatten(forest)] == [s.id for s in flat]

    def test_skipped_level_attaches_to_nearest_shallower(self):
        forest = build_section_hierarchy([Section("a", "A", 1), Section("b", "B", 3)])
        assert forest[0].subsections[0].id == "b"

    def test_deeper_first_heading_is_root(self):
        forest = build_section_hierarchy([Section("x", "X", 3), Section("y", "Y", 1)])
        assert [s.id for s in forest] == ["x", "y"]

    def test_empty(self):
        assert build_section_hierarchy([]) == []


class TestExtractSections:
    """Test heading extraction from article HTML."""

    def test_levels_and_ids(self):
        soup = _page(
            '<h2 id="History">History</h2><p>..</p>'
            "<h3>Early period</h3>"
            '<h4 id="Rome">Rome</h4>'
            "<h2>Geography</h2>"
        )
        forest = extract_sections(soup, CONTENT)

        assert [s.title for s in forest] == ["History", "Geography"]
        history = forest[0]
        assert history.level == 1
        early = history.subsections[0]
        assert (early.id, early.level) == ("early-period", 2)
        assert early.subsections[0].id == "Rome"
        assert forest[1].id == "geography"

    def test_stops_at_reference_heading(self):
        soup = _page(
            "<h2>Life</h2><h2>References</h2><h2>Legacy</h2>"
        )
        assert [s.title for s in extract_sections(soup, CONTENT)] == ["Life"]

    def test_localized_stop(self):
        soup = _page("<h2>Biographie</h2><h2>Références</h2><h2>Héritage</h2>")
        assert [s.title for s in extract_sections(soup, CONTENT, "fr")] == ["Biographie"]

    def test_english_titles_stop_other_editions(self):
        soup = _page("<h2>Leben</h2><h2>See also</h2><h2>Werk</h2>")
        assert [s.title for s in extract_sections(soup, CONTENT, "de")] == ["Leben"]

    def test_prefix_is_not_a_match(self):
        soup = _page("<h2>Notes on grammar</h2><h2>Usage</h2>")
        assert len(extract_sections(soup, CONTENT)) == 2

    def test_missing_content_root(self):
        soup = BeautifulSoup("<h2>Orphan</h2>", "html.parser")
        assert extract_sections(soup, CONTENT) == []
