"""Wikipedia language editions offered to readers."""

import re
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class WikipediaLanguage:
    code: str
    name: str
    native_name: str
    dir: str = "ltr"


# Shape of a Wikipedia subdomain such as "en", "simple" or "zh-yue".
LANGUAGE_CODE = re.compile(r"[a-z][a-z0-9-]*")

WIKIPEDIA_LANGUAGES: List[WikipediaLanguage] = [
    # Largest editions
    WikipediaLanguage("en", "English", "English"),
    WikipediaLanguage("de", "German", "Deutsch"),
    WikipediaLanguage("fr", "French", "Français"),
    WikipediaLanguage("nl", "Dutch", "Nederlands"),
    WikipediaLanguage("sv", "Swedish", "Svenska"),
    WikipediaLanguage("ru", "Russian", "Русский"),
    WikipediaLanguage("es", "Spanish", "Español"),
    WikipediaLanguage("it", "Italian", "Italiano"),
    WikipediaLanguage("pl", "Polish", "Polski"),
    WikipediaLanguage("ja", "Japanese", "日本語"),
    WikipediaLanguage("pt", "Portuguese", "Português"),
    WikipediaLanguage("zh", "Chinese", "中文"),
    WikipediaLanguage("ar", "Arabic", "العربية", "rtl"),
    WikipediaLanguage("uk", "Ukrainian", "Українська"),
    WikipediaLanguage("fa", "Persian", "فارسی", "rtl"),
    WikipediaLanguage("ca", "Catalan", "Català"),
    WikipediaLanguage("sr", "Serbian", "Српски"),
    WikipediaLanguage("id", "Indonesian", "Bahasa Indonesia"),
    WikipediaLanguage("ko", "Korean", "한국어"),
    WikipediaLanguage("no", "Norwegian", "Norsk"),
    WikipediaLanguage("fi", "Finnish", "Suomi"),
    WikipediaLanguage("hu", "Hungarian", "Magyar"),
    WikipediaLanguage("cs", "Czech", "Čeština"),
    WikipediaLanguage("tr", "Turkish", "Türkçe"),
    WikipediaLanguage("ro", "Romanian", "Română"),
    WikipediaLanguage("vi", "Vietnamese", "Tiếng Việt"),
    WikipediaLanguage("he", "Hebrew", "עברית", "rtl"),
    WikipediaLanguage("da", "Danish", "Dansk"),
    WikipediaLanguage("bg", "Bulgarian", "Български"),
    WikipediaLanguage("el", "Greek", "Ελληνικά"),
    WikipediaLanguage("th", "Thai", "ไทย"),
    WikipediaLanguage("hi", "Hindi", "हिन्दी"),
    WikipediaLanguage("bn", "Bengali", "বাংলা"),
    WikipediaLanguage("ta", "Tamil", "தமிழ்"),
    WikipediaLanguage("ur", "Urdu", "اردو", "rtl"),
    WikipediaLanguage("ms", "Malay", "Bahasa Melayu"),
    WikipediaLanguage("sk", "Slovak", "Slovenčina"),
    WikipediaLanguage("sl", "Slovenian", "Slovenščina"),
    WikipediaLanguage("hr", "Croatian", "Hrvatski"),
    WikipediaLanguage("lt", "Lithuanian", "Lietuvių"),
    WikipediaLanguage("lv", "Latvian", "Latviešu"),
    WikipediaLanguage("et", "Estonian", "Eesti"),
    WikipediaLanguage("eu", "Basque", "Euskara"),
    WikipediaLanguage("gl", "Galician", "Galego"),
    WikipediaLanguage("hy", "Armenian", "Հայերեն"),
    WikipediaLanguage("kk", "Kazakh", "Қазақша"),
    WikipediaLanguage("eo", "Esperanto", "Esperanto"),
    WikipediaLanguage("la", "Latin", "Latina"),
    WikipediaLanguage("simple", "Simple English", "Simple English"),
    WikipediaLanguage("af", "Afrikaans", "Afrikaans"),
    WikipediaLanguage("sq", "Albanian", "Shqip"),
    WikipediaLanguage("az", "Azerbaijani", "Azərbaycanca"),
    WikipediaLanguage("be", "Belarusian", "Беларуская"),
]


def get_language_by_code(code: str) -> Optional[WikipediaLanguage]:
    for language in WIKIPEDIA_LANGUAGES:
        if language.code == code:
            return language
    return None


def get_language_name(code: str, use_native: bool = True) -> str:
    """Native (or English) name of a language; the code itself if unknown."""
    language = get_language_by_code(code)
    if language is None:
        return code
    return language.native_name if use_native else language.name


def is_supported_language(code: str) -> bool:
    return get_language_by_code(code) is not None


def resolve_language(code: Optional[str], default: str = "en") -> str:
    """``code`` normalized to a supported edition, else ``default``.

    Accepts locale tags such as ``fr-CA``.
    """
    if not code:
        return default
    base = code.split("-")[0].strip().lower()
    return base if is_supported_language(base) else default


def is_valid_language_code(code: str) -> bool:
    """Whether ``code`` can safely name a ``<code>.wikipedia.org`` host."""
    return bool(LANGUAGE_CODE.fullmatch(code or ""))
