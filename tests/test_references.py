"""Tests for reference-section detection and extraction."""

from bs4 import BeautifulSoup

from etupedia.processing.references import (
    REFERENCE_SECTION_TRANSLATIONS,
    extract_reference_sections,
    extract_references,
    get_reference_section_titles,
    rewrite_wiki_link,
    should_skip_section,
)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _heading(level: int, title: str, anchor: str = None) -> str:
    anchor = anchor or title.replace(" ", "_")
    return (f'<div class="mw-heading mw-heading{level}">'
            f'<h{level} id="{anchor}">{title}</h{level}>'
            f'<span class="mw-editsection">[edit]</span></div>')


class TestTitleTable:
    """Test the localized title table."""

    def test_known_language(self):
        assert "Références" in get_reference_section_titles("fr")
        assert "Einzelnachweise" in get_reference_section_titles("de")

    def test_unknown_language_uses_default(self):
        assert get_reference_section_titles("xx") == REFERENCE_SECTION_TRANSLATIONS["_default"]

    def test_should_skip_section(self):
        assert should_skip_section("References", "en")
        assert should_skip_section("  references ", "en")
        assert should_skip_section("Références", "fr")
        assert should_skip_section("External links", "fr")
        assert should_skip_section("Navigation", "ja")
        assert should_skip_section("Explanatory notes", "en")
        assert not should_skip_section("Notes on grammar", "en")
        assert not should_skip_section("Références", "en")


class TestExtractReferenceSections:
    """Test structured reference extraction."""

    def test_simple_section(self):
        soup = _soup(
            _heading(2, "References")
            + '<div class="reflist"><ol class="references">'
            '<li id="cite_note-1"><span class="mw-cite-backlink"><a href="#cite_ref-1">^</a></span>'
            '<cite><a href="https://example.org/paper">A paper</a></cite></li>'
            '<li id="cite_note-2"><cite>See <a href="/wiki/Paris">Paris</a></cite></li>'
            "</ol></div>"
        )
        sections = extract_reference_sections(soup, "en")

        assert len(sections) == 1
        section = sections[0]
        assert (section.title, section.id) == ("References", "References")
        first, second = section.items
        assert (first.number, second.number) == (1, 2)
        assert first.text == "A paper"
        assert first.url == "https://example.org/paper"
        assert 'target="_blank"' in first.html
        assert "^" not in first.html
        assert second.is_wikipedia_link is True
        assert second.wikipedia_slug == "Paris"
        assert 'href="/article/Paris"' in second.html

    def test_source_tree_is_not_modified(self):
        soup = _soup(
            _heading(2, "References")
            + '<ol><li><span class="mw-cite-backlink">^</span>Ref</li></ol>'
        )
        extract_reference_sections(soup, "en")
        assert soup.select_one(".mw-cite-backlink") is not None

    def test_french_cutoff(self):
        soup = _soup(
            _heading(2, "Histoire") + "<ul><li>Pas une référence</li></ul>"
            + _heading(2, "Références", "Références")
            + '<ol class="references"><li>Source un</li><li>Source deux</li></ol>'
            + _heading(2, "Liens externes")
            + '<ul><li><a href="https://fr.example.org">Site</a></li></ul>'
        )
        sections = extract_reference_sections(soup, "fr")

        assert [s.title for s in sections] == ["Références", "Liens externes"]
        assert [r.text for r in sections[0].items] == ["Source un", "Source deux"]
        assert sections[1].items[0].url == "https://fr.example.org"

    def test_english_fallback_for_other_editions(self):
        soup = _soup(
            _heading(2, "See also") + '<ul><li><a href="/wiki/Lyon">Lyon</a></li></ul>'
        )
        sections = extract_reference_sections(soup, "fr")
        assert [s.title for s in sections] == ["See also"]
        assert sections[0].items[0].wikipedia_slug == "Lyon"

    def test_subsections_are_not_double_counted(self):
        soup = _soup(
            _heading(2, "References")
            + _heading(3, "Notes")
            + '<div class="reflist"><ol class="references"><li>Note one</li></ol></div>'
            + _heading(3, "Citations")
            + '<div class="reflist"><ol class="references">'
            "<li>Citation one</li><li>Citation two</li></ol></div>"
        )
        sections = extract_reference_sections(soup, "en")

        titles = [s.title for s in sections]
        assert titles == ["Notes", "Citations"]
        assert [len(s.items) for s in sections] == [1, 2]

    def test_h4_under_h3_is_walked_through(self):
        soup = _soup(
            _heading(3, "Sources")
            + "<ul><li>Primary</li></ul>"
            + _heading(4, "Secondary sources")
            + "<ul><li>Secondary</li></ul>"
            + _heading(2, "Legacy")
            + "<ul><li>Not a source</li></ul>"
        )
        sections = extract_reference_sections(soup, "en")
        assert [r.text for r in sections[0].items] == ["Primary", "Secondary"]

    def test_legacy_heading_markup(self):
        soup = _soup(
            '<h2><span class="mw-headline" id="References">References</span></h2>'
            "<ol><li>Old style</li></ol>"
            "<h2>Other</h2><ol><li>Unrelated</li></ol>"
        )
        sections = extract_reference_sections(soup, "en")
        assert sections[0].title == "References"
        assert [r.text for r in sections[0].items] == ["Old style"]

    def test_empty_items_skipped(self):
        soup = _soup(
            _heading(2, "Notes")
            + '<ol><li><span class="mw-cite-backlink">^</span></li><li>Real</li></ol>'
        )
        items = extract_reference_sections(soup, "en")[0].items
        assert [(r.number, r.text) for r in items] == [(1, "Real")]

    def test_no_sections(self):
        assert extract_reference_sections(_soup("<p>No references</p>"), "en") == []


class TestRewriteWikiLink:
    """Test Wikipedia link rewriting."""

    def _link(self, href):
        return _soup(f'<a href="{href}">x</a>').a

    def test_relative_wiki_link(self):
        link = self._link("/wiki/Albert_Einstein")
        assert rewrite_wiki_link(link) == "Albert_Einstein"
        assert link["href"] == "/article/Albert_Einstein"
        assert link["data-etupedia-link"] == "Albert_Einstein"

    def test_absolute_wiki_link(self):
        link = self._link("https://fr.wikipedia.org/wiki/Paris#Histoire")
        assert rewrite_wiki_link(link, "/read") == "Paris"
        assert link["href"] == "/read/Paris"

    def test_rewrite_twice_keeps_slug(self):
        link = self._link("/wiki/Rome")
        rewrite_wiki_link(link)
        assert rewrite_wiki_link(link) == "Rome"
        assert link["href"] == "/article/Rome"

    def test_external_link(self):
        link = self._link("https://example.org")
        assert rewrite_wiki_link(link) is None
        assert link["target"] == "_blank"
        assert link["href"] == "https://example.org"

    def test_fragment_link_untouched(self):
        link = self._link("#cite_ref-1")
        assert rewrite_wiki_link(link) is None
        assert link["href"] == "#cite_ref-1"


def test_extract_references_flat_list():
    soup = _soup(
        '<ol class="references">'
        '<li><span class="mw-cite-backlink">^</span><a href="https://a.example">A</a></li>'
        "<li>B</li></ol>"
    )
    references = extract_references(soup)
    assert [(r.number, r.text, r.url) for r in references] == [
        (1, "A", "https://a.example"),
        (2, "B", None),
    ]
