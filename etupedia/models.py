"""Core data models for scraped articles and search results."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
import json


@dataclass
class Section:
    """A heading in an article's table of contents."""
    id: str
    title: str
    level: int = 1  # 1 = h2, 2 = h3, etc.
    subsections: Optional[List["Section"]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "level": self.level,
        }
        if self.subsections:
            result["subsections"] = [s.to_dict() for s in self.subsections]
        return result

    def walk(self):
        """Yield this section and all nested sections in document order."""
        yield self
        for child in self.subsections or []:
            yield from child.walk()


@dataclass
class Reference:
    """A single citation entry from a reference list."""
    number: int
    text: str
    html: Optional[str] = None
    url: Optional[str] = None
    is_wikipedia_link: Optional[bool] = None
    wikipedia_slug: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {"number": self.number, "text": self.text}
        if self.html is not None:
            result["html"] = self.html
        if self.url is not None:
            result["url"] = self.url
        if self.is_wikipedia_link is not None:
            result["isWikipediaLink"] = self.is_wikipedia_link
        if self.wikipedia_slug is not None:
            result["wikipediaSlug"] = self.wikipedia_slug
        return result


@dataclass
class ReferenceSection:
    """References grouped under one "Notes"/"References"/... heading."""
    title: str
    id: str
    items: List[Reference] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass
class SearchResult:
    """One hit from a source search.

    ``relevance_score`` is mutable: the manager recomputes it after merging
    results from every source.
    """
    title: str
    slug: str
    source: str
    url: str
    excerpt: str = ""
    relevance_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "title": self.title,
            "excerpt": self.excerpt,
            "slug": self.slug,
            "source": self.source,
            "url": self.url,
        }
        if self.relevance_score is not None:
            result["relevanceScore"] = self.relevance_score
        return result


@dataclass
class Article:
    """A scraped and normalized article."""
    title: str
    content: str  # sanitized HTML, body only
    excerpt: str
    url: str
    source: str
    sections: List[Section] = field(default_factory=list)
    last_updated: Optional[str] = None
    images: List[str] = field(default_factory=list)
    infobox_image: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    references: Optional[List[Reference]] = None  # legacy flat list
    reference_sections: Optional[List[ReferenceSection]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "sections": [s.to_dict() for s in self.sections],
            "source": self.source,
            "url": self.url,
        }
        if self.last_updated:
            result["lastUpdated"] = self.last_updated
        if self.images:
            result["images"] = self.images
        if self.infobox_image:
            result["infoboxImage"] = self.infobox_image
        if self.keywords:
            result["keywords"] = self.keywords
        if self.references:
            result["references"] = [r.to_dict() for r in self.references]
        if self.reference_sections:
            result["referenceSections"] = [s.to_dict() for s in self.reference_sections]
        return result

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
