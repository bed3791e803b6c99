"""Configuration management for etupedia."""

from dataclasses import dataclass, field
from typing import Annotated, List, Optional, Dict, Any
from pathlib import Path
import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Etupedia/1.0; +https://etupedia.com)"


class EnvSettings(BaseSettings):
    """``ETUPEDIA_*`` environment overrides; unset fields stay ``None``."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="ETUPEDIA_",
                                      case_sensitive=False, extra="ignore")

    default_language: Optional[str] = None
    sources: Annotated[Optional[List[str]], NoDecode] = None
    search_limit: Optional[int] = None
    max_search_limit: Optional[int] = None
    request_timeout: Optional[float] = None
    max_retries: Optional[int] = None
    retry_delay: Optional[float] = None
    cache_ttl: Optional[float] = None
    user_agent: Optional[str] = None
    proxy_image_path: Optional[str] = None
    article_route: Optional[str] = None
    max_workers: Optional[int] = None

    @field_validator("sources", mode="before")
    @classmethod
    def split_sources(cls, value: Any) -> Any:
        # comma-separated, e.g. ETUPEDIA_SOURCES=wikipedia,other
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@dataclass
class Config:
    """Configuration for scraping, caching and serving."""

    default_language: str = "en"
    sources: List[str] = field(default_factory=lambda: ["wikipedia"])
    search_limit: int = 50
    max_search_limit: int = 500
    request_timeout: float = 15.0
    max_retries: int = 3
    retry_delay: float = 1.0
    cache_ttl: float = 3600.0  # seconds
    user_agent: str = DEFAULT_USER_AGENT
    proxy_image_path: str = "/api/proxy-image"
    article_route: str = "/article"
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be positive")

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        return cls(**data)

    @classmethod
    def from_env(cls, base: Optional["Config"] = None) -> "Config":
        """Overlay ``ETUPEDIA_<FIELD>`` environment variables on ``base``."""
        data = (base or cls()).to_dict()
        data.update(EnvSettings().model_dump(exclude_none=True))
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "default_language": self.default_language,
            "sources": list(self.sources),
            "search_limit": self.search_limit,
            "max_search_limit": self.max_search_limit,
            "request_timeout": self.request_timeout,
            "max_retries": self.max_retries,
            "retry_delay": self.retry_delay,
            "cache_ttl": self.cache_ttl,
            "user_agent": self.user_agent,
            "proxy_image_path": self.proxy_image_path,
            "article_route": self.article_route,
            "max_workers": self.max_workers,
        }
