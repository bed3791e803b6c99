"""Reference-section detection and extraction for Wikipedia article HTML."""

import copy
import re
from typing import Dict, List, Optional, Set

from bs4 import BeautifulSoup, Tag

from ..models import Reference, ReferenceSection
from .text import slugify


# Localized titles of "References"/"See also"-class sections. Every edition
# missing from this table falls back to ``_default``.
REFERENCE_SECTION_TRANSLATIONS: Dict[str, List[str]] = {
    # English
    "en": ["Notes", "References", "Citations", "Sources", "Sources used", "Bibliography",
           "Further reading", "External links", "See also"],

    # Major European languages
    "fr": ["Notes", "Références", "Citations", "Sources", "Bibliographie",
           "Lectures complémentaires", "Pour en savoir plus", "Liens externes", "Voir aussi",
           "Articles connexes"],
    "de": ["Anmerkungen", "Einzelnachweise", "Referenzen", "Literatur", "Quellen", "Weblinks",
           "Siehe auch", "Weiterführende Literatur"],
    "es": ["Notas", "Referencias", "Citas", "Fuentes", "Bibliografía", "Lectura adicional",
           "Enlaces externos", "Véase también"],
    "it": ["Note", "Riferimenti", "Citazioni", "Fonti", "Bibliografia", "Letture ulteriori",
           "Collegamenti esterni", "Vedi anche"],
    "pt": ["Notas", "Referências", "Citações", "Fontes", "Bibliografia", "Leitura adicional",
           "Ligações externas", "Ver também"],
    "ru": ["Примечания", "Сноски", "Ссылки", "Источники", "Литература", "Библиография",
           "Внешние ссылки", "См. также"],
    "nl": ["Noten", "Referenties", "Bronnen", "Literatuur", "Bibliografie", "Externe links",
           "Zie ook"],
    "pl": ["Przypisy", "Uwagi", "Bibliografia", "Źródła", "Linki zewnętrzne", "Zobacz też"],
    "sv": ["Noter", "Referenser", "Källor", "Litteratur", "Externa länkar", "Se även"],
    "cs": ["Poznámky", "Reference", "Literatura", "Externí odkazy", "Související články"],
    "hu": ["Jegyzetek", "Hivatkozások", "Források", "Irodalom", "Külső hivatkozások",
           "Lásd még"],
    "fi": ["Viitteet", "Lähteet", "Kirjallisuutta", "Aiheesta muualla", "Katso myös"],
    "da": ["Noter", "Referencer", "Kilder", "Litteratur", "Eksterne links", "Se også"],
    "no": ["Notater", "Referanser", "Kilder", "Litteratur", "Eksterne lenker", "Se også"],
    "ro": ["Note", "Referințe", "Bibliografie", "Legături externe", "Vezi și"],
    "el": ["Σημειώσεις", "Παραπομπές", "Βιβλιογραφία", "Εξωτερικοί σύνδεσμοι", "Δείτε επίσης"],
    "bg": ["Бележки", "Източници", "Литература", "Външни препратки", "Вижте също"],
    "hr": ["Bilješke", "Reference", "Literatura", "Vanjske poveznice", "Također pogledajte"],
    "sk": ["Poznámky", "Referencie", "Literatúra", "Externé odkazy", "Pozri aj"],
    "sr": ["Напомене", "Референце", "Литература", "Спољашње везе", "Такође погледајте"],
    "sl": ["Opombe", "Sklici", "Literatura", "Zunanje povezave", "Glej tudi"],
    "lt": ["Pastabos", "Šaltiniai", "Nuorodos", "Literatūra", "Taip pat skaitykite"],
    "lv": ["Piezīmes", "Atsauces", "Literatūra", "Ārējās saites", "Skatīt arī"],
    "et": ["Märkused", "Viited", "Kirjandus", "Välislingid", "Vaata ka"],

    # Asian languages
    "ja": ["注釈", "脚注", "出典", "参考文献", "関連項目", "外部リンク"],
    "zh": ["注释", "註釋", "参考文献", "參考文獻", "来源", "參考資料", "外部链接", "外部連結",
           "参见", "參見", "相关条目"],
    "ko": ["주석", "각주", "참고 문헌", "참고자료", "외부 링크", "같이 보기"],
    "ar": ["ملاحظات", "مراجع", "المراجع", "مصادر", "المصادر", "ببليوغرافيا", "وصلات خارجية",
           "انظر أيضا", "انظر أيضًا"],
    "th": ["หมายเหตุ", "อ้างอิง", "บรรณานุกรม", "แหล่งข้อมูลอื่น", "ดูเพิ่ม"],
    "vi": ["Chú thích", "Tham khảo", "Nguồn", "Thư mục", "Liên kết ngoài", "Xem thêm"],
    "id": ["Catatan", "Referensi", "Daftar pustaka", "Pranala luar", "Lihat pula"],
    "fa": ["یادداشت‌ها", "منابع", "پانویس", "کتابنامه", "پیوند به بیرون", "جستارهای وابسته"],
    "he": ["הערות", "הערות שוליים", "קישורים חיצוניים", "ראו גם", "ביבליוגרפיה"],
    "hi": ["टिप्पणी", "सन्दर्भ", "ग्रन्थसूची", "बाहरी कड़ियाँ", "इन्हें भी देखें"],
    "bn": ["টীকা", "তথ্যসূত্র", "গ্রন্থপঞ্জি", "বহিঃসংযোগ", "আরও দেখুন"],
    "ta": ["குறிப்புகள்", "மேற்கோள்கள்", "நூற்பட்டியல்", "வெளி இணைப்புகள்", "மேலும் காண்க"],
    "te": ["గమనికలు", "ఉల్లేఖనాలు", "గ్రంథ పట్టిక", "బయటి లింకులు", "ఇవి కూడా చూడండి"],
    "ml": ["കുറിപ്പുകൾ", "അവലംബം", "ഗ്രന്ഥസൂചി", "പുറത്തേയ്ക്കുള്ള കണ്ണികൾ", "ഇതും കാണുക"],
    "ur": ["نوٹ", "حوالہ جات", "کتابیات", "بیرونی روابط", "مزید دیکھیے"],

    # Regional European languages
    "ca": ["Notes", "Referències", "Bibliografia", "Enllaços externs", "Vegeu també"],
    "eu": ["Oharrak", "Erreferentziak", "Bibliografia", "Kanpo estekak", "Ikus ere"],
    "gl": ["Notas", "Referencias", "Bibliografía", "Ligazóns externas", "Véxase tamén"],
    "cy": ["Nodiadau", "Cyfeiriadau", "Llyfryddiaeth", "Dolenni allanol", "Gweler hefyd"],
    "af": ["Notas", "Verwysings", "Bibliografie", "Eksterne skakels", "Sien ook"],
    "ms": ["Nota", "Rujukan", "Bibliografi", "Pautan luar", "Lihat juga"],
    "sw": ["Maelezo", "Marejeo", "Viungo vya nje", "Tazama pia"],
    "tr": ["Notlar", "Kaynakça", "Dipnotlar", "Referanslar", "Dış bağlantılar",
           "Ayrıca bakınız"],
    "uk": ["Примітки", "Посилання", "Джерела", "Література", "Бібліографія",
           "Зовнішні посилання", "Див. також"],

    # Central/Eastern European
    "be": ["Заўвагі", "Спасылкі", "Крыніцы", "Літаратура", "Вонкавыя спасылкі", "Гл. таксама"],
    "bs": ["Bilješke", "Reference", "Literatura", "Vanjske poveznice", "Također pogledajte"],
    "mk": ["Белешки", "Наводи", "Литература", "Надворешни врски", "Поврзано"],

    # Nordic languages
    "is": ["Tilvísanir", "Heimildir", "Tenglar", "Sjá einnig"],
    "nn": ["Kjelder", "Referansar", "Litteratur", "Eksterne lenkjer", "Sjå òg"],

    "_default": ["Notes", "References", "Citations", "Sources", "Bibliography",
                 "Further reading", "External links", "See also"],
}

# Never part of the table of contents, whatever the language.
GENERIC_SKIP_TITLES = ["navigation", "menu", "explanatory notes", "general bibliography"]

REFERENCE_LIST_CLASSES = ("reflist", "references", "refbegin", "div-col")
MAX_SIBLING_HOPS = 50
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

_WIKI_PATH = re.compile(r"/wiki/([^#?]+)")


def get_reference_section_titles(language_code: str) -> List[str]:
    """Return the localized reference-section titles for a language."""
    return REFERENCE_SECTION_TRANSLATIONS.get(
        language_code, REFERENCE_SECTION_TRANSLATIONS["_default"]
    )


def should_skip_section(title: str, language_code: str = "en") -> bool:
    """Whether a heading starts the references/navigation tail of an article.

    Only exact (case-insensitive, trimmed) matches count, so "Notes on
    grammar" is kept while "Notes" is not.
    """
    skip_titles = list(get_reference_section_titles(language_code))
    if language_code != "en":
        skip_titles.extend(get_reference_section_titles("en"))
    skip_titles.extend(GENERIC_SKIP_TITLES)

    normalized = title.strip().lower()
    return any(normalized == skip.lower() for skip in skip_titles)


def extract_references(soup: BeautifulSoup) -> List[Reference]:
    """Legacy flat reference list, kept for older consumers."""
    references: List[Reference] = []

    for li in soup.select(".references li, .reflist li, .refbegin li"):
        references.extend(_flat_reference(li, len(references) + 1))

    if not references:
        for li in soup.select("#References ~ ol li, #Citations ~ ol li, #Notes ~ ol li"):
            references.extend(_flat_reference(li, len(references) + 1))

    return references


def _flat_reference(li: Tag, number: int) -> List[Reference]:
    item = copy.copy(li)
    for el in item.select(".mw-cite-backlink"):
        el.decompose()
    text = item.get_text().strip()
    if not text:
        return []
    link = item.select_one('a[href^="http"]')
    return [Reference(number=number, text=text, url=link.get("href") if link else None)]


def extract_reference_sections(soup: BeautifulSoup, language_code: str = "en",
                               article_route: str = "/article") -> List[ReferenceSection]:
    """Extract structured reference sections from a rendered Wikipedia page.

    Wikipedia wraps each heading in ``div.mw-heading``; the lists belong to
    the wrapper's following siblings, not to the heading itself::

        <div class="mw-heading mw-heading2"><h2 id="References">References</h2></div>
        <div class="mw-heading mw-heading3"><h3 id="Notes">Notes</h3></div>
        <div class="reflist"><ol class="references"><li>...</li></ol></div>

    An h2 followed directly by an h3 wrapper is not emitted itself; the h3
    is looked up under its own title and carries the items instead.
    """
    titles = list(get_reference_section_titles(language_code))
    if language_code != "en":
        for title in get_reference_section_titles("en"):
            if title not in titles:
                titles.append(title)

    sections: List[ReferenceSection] = []
    seen: Set[int] = set()

    for section_title in titles:
        heading = _find_heading(soup, section_title)
        if heading is None or id(heading) in seen:
            continue
        seen.add(id(heading))

        heading_text = heading.get_text().strip()
        heading_id = heading.get("id") or slugify(heading_text)
        items, has_subsections = _collect_section_items(heading, article_route)

        if items and not has_subsections:
            sections.append(ReferenceSection(title=heading_text, id=heading_id, items=items))

    return sections


def _find_heading(soup: BeautifulSoup, section_title: str) -> Optional[Tag]:
    search_id = re.sub(r"\s+", "_", section_title)
    anchor = soup.find(id=search_id)
    if anchor is not None:
        if anchor.name in HEADING_TAGS:
            return anchor
        # older markup: <h2><span class="mw-headline" id="References">
        enclosing = anchor.find_parent(HEADING_TAGS)
        if enclosing is not None:
            return enclosing

    wanted = section_title.lower()
    for candidate in soup.find_all(["h2", "h3"]):
        if candidate.get_text().strip().lower() == wanted:
            return candidate
    return None


def _heading_wrapper(heading: Tag) -> Tag:
    parent = heading.parent
    if isinstance(parent, Tag) and "mw-heading" in (parent.get("class") or []):
        return parent
    return heading


def _heading_level(element: Tag) -> Optional[int]:
    """Level of a heading tag or ``mw-headingN`` wrapper, else ``None``."""
    if element.name in HEADING_TAGS:
        return int(element.name[1])
    classes = element.get("class") or []
    if "mw-heading" in classes:
        for cls in classes:
            match = re.fullmatch(r"mw-heading([1-6])", cls)
            if match:
                return int(match.group(1))
    return None


def _collect_section_items(heading: Tag, article_route: str):
    level = _heading_level(heading) or 2
    wrapper = _heading_wrapper(heading)

    items: List[Reference] = []
    has_subsections = False
    sibling = wrapper.find_next_sibling()
    hops = 0

    while sibling is not None and hops < MAX_SIBLING_HOPS:
        hops += 1
        sibling_level = _heading_level(sibling)

        if sibling_level is not None:
            if sibling_level <= level:
                break
            if level == 2 and sibling_level == 3:
                # the h3 is extracted under its own title
                has_subsections = True
                break
            # deeper headings (h4 under h3) are walked through

        _extract_list_items(sibling, items, article_route)
        sibling = sibling.find_next_sibling()

    return items, has_subsections


def _extract_list_items(element: Tag, items: List[Reference], article_route: str) -> None:
    if element.name in ("style", "link", "script"):
        return

    classes = element.get("class") or []
    if element.name in ("ol", "ul") or any(c in classes for c in REFERENCE_LIST_CLASSES):
        for li in element.find_all("li"):
            reference = _process_list_item(li, len(items) + 1, article_route)
            if reference is not None:
                items.append(reference)


def _process_list_item(li: Tag, number: int, article_route: str) -> Optional[Reference]:
    item = copy.copy(li)
    for el in item.select(".mw-cite-backlink, .mw-editsection"):
        el.decompose()

    wikipedia_slug = None
    external_url = None
    for link in item.find_all("a"):
        slug = rewrite_wiki_link(link, article_route)
        if slug is not None:
            wikipedia_slug = wikipedia_slug or slug
        elif external_url is None and (link.get("href") or "").startswith("http"):
            external_url = link["href"]

    text = item.get_text().strip()
    if not text:
        return None

    return Reference(
        number=number,
        text=text,
        html=item.decode_contents(),
        url=external_url,
        is_wikipedia_link=True if wikipedia_slug else None,
        wikipedia_slug=wikipedia_slug,
    )


def rewrite_wiki_link(link: Tag, article_route: str = "/article") -> Optional[str]:
    """Point a Wikipedia link at the local article route.

    Returns the article slug for internal links. External ``http`` links are
    marked to open in a new tab and ``None`` is returned.
    """
    existing = link.get("data-etupedia-link")
    if existing:
        return existing

    href = link.get("href")
    if not href:
        return None

    slug = None
    if href.startswith("/wiki/"):
        slug = href[len("/wiki/"):]
    elif "wikipedia.org/wiki/" in href or "wikipedia.org/w/" in href:
        match = _WIKI_PATH.search(href)
        if match:
            slug = match.group(1)
    elif href.startswith("http"):
        link["target"] = "_blank"
        link["rel"] = "noopener noreferrer"
        return None

    if slug is None:
        return None

    link["data-etupedia-link"] = slug
    link["href"] = f"{article_route}/{slug}"
    return slug
