"""FastAPI application exposing search, article and stats endpoints."""

import logging
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from . import __version__
from .core.config import Config
from .languages import resolve_language
from .manager import ScraperManager


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["articles"])


def get_manager(request: Request) -> ScraperManager:
    return request.app.state.manager


Manager = Annotated[ScraperManager, Depends(get_manager)]


@router.get("/search")
def search(
    manager: Manager,
    q: Optional[str] = None,
    sources: Optional[str] = None,
    lang: Optional[str] = None,
) -> Dict[str, Any]:
    """Search every requested source; ``sources`` is comma-separated."""
    if not q:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="Query parameter 'q' is required")

    source_list = [s.strip() for s in sources.split(",") if s.strip()] if sources else None
    language = resolve_language(lang, manager.config.default_language) if lang else None
    results = manager.search(q, source_list, language)

    return {
        "results": [r.to_dict() for r in results],
        "count": len(results),
        "sources": source_list or manager.get_available_scrapers(),
    }


@router.get("/article/{slug}")
def article(
    manager: Manager,
    slug: str,
    source: str = "wikipedia",
    url: Optional[str] = None,
    lang: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Fetch one article.

    When ``url`` is given the named source is asked for it first; Wikipedia
    is tried with ``slug`` if that yields nothing.
    """
    language = resolve_language(lang, manager.config.default_language)

    result = None
    if url:
        result = manager.scrape_article(url, source, language)
    if result is None:
        result = manager.scrape_article(slug, "wikipedia", language)

    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return result.to_dict()


@router.get("/stats")
def stats(manager: Manager) -> Dict[str, Any]:
    return {
        "articleCount": manager.get_article_count(),
        "sources": manager.get_available_scrapers(),
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/featured")
def featured(manager: Manager, source: str = "wikipedia", limit: int = 10,
             lang: Optional[str] = None) -> Dict[str, Any]:
    language = resolve_language(lang, manager.config.default_language) if lang else None
    results = manager.get_featured_articles(source, limit, language)
    return {"results": [r.to_dict() for r in results], "count": len(results)}


def create_app(manager: Optional[ScraperManager] = None,
               config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The manager is built once here (or passed in) and shared by every
    request through ``app.state``.
    """
    application = FastAPI(title="Etupedia", version=__version__)
    if manager is None:
        manager = ScraperManager(config or Config.from_env())
    application.state.manager = manager
    application.include_router(router)

    @application.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @application.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @application.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return application
