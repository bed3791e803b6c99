"""Command line interface for etupedia."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click

from .core.config import Config
from .languages import WIKIPEDIA_LANGUAGES, get_language_name, resolve_language
from .manager import ScraperManager


def _split(values: Optional[str]):
    if not values:
        return None
    return [v.strip() for v in values.split(",") if v.strip()] or None


def _dump(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(package_name="etupedia")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Configuration YAML file")
@click.option("-v", "--verbose", count=True, help="Log more (-vv for debug)")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: int) -> None:
    """Read Wikipedia in any language, cleaned up."""
    level = logging.WARNING - 10 * min(verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if ctx.obj is None:
        config = Config.from_file(Path(config_path)) if config_path else Config()
        ctx.obj = ScraperManager(Config.from_env(base=config))


@cli.command()
@click.argument("query")
@click.option("--sources", help="Comma-separated sources (default: all)")
@click.option("--lang", help="Wikipedia language code (default: guessed from the query)")
@click.option("--limit", default=20, show_default=True, help="Results to show")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_obj
def search(manager: ScraperManager, query: str, sources: Optional[str], lang: Optional[str],
           limit: int, as_json: bool) -> None:
    """Search articles across sources."""
    source_list = _split(sources)
    language = resolve_language(lang, manager.config.default_language) if lang else None
    results = manager.search(query, source_list, language)

    if as_json:
        _dump({
            "results": [r.to_dict() for r in results[:limit]],
            "count": len(results),
            "sources": source_list or manager.get_available_scrapers(),
        })
        return

    if not results:
        click.echo("No results")
        return
    for result in results[:limit]:
        click.echo(f"{result.relevance_score or 0:6.2f}  {result.title}  [{result.slug}]")
        if result.excerpt:
            click.echo(f"        {result.excerpt}")
    click.echo(f"{len(results)} results")


@cli.command()
@click.argument("slug")
@click.option("--source", default="wikipedia", show_default=True, help="Source name")
@click.option("--lang", default=None, help="Wikipedia language code")
@click.option("--out", type=click.Path(dir_okay=False), help="Write article JSON to a file")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_obj
def article(manager: ScraperManager, slug: str, source: str, lang: Optional[str],
            out: Optional[str], as_json: bool) -> None:
    """Fetch one article and show its outline."""
    language = resolve_language(lang, manager.config.default_language)
    result = manager.scrape_article(slug, source, language)

    if result is None:
        click.echo(f"Error: article not found: {slug}", err=True)
        raise click.Abort()

    if out:
        output_path = Path(out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result.to_json())
        click.echo(f"✓ Article written to {out}")
        return

    if as_json:
        click.echo(result.to_json())
        return

    click.echo(result.title)
    click.echo(f"{result.url} ({get_language_name(language)})")
    if result.excerpt:
        click.echo("")
        click.echo(result.excerpt)
    if result.sections:
        click.echo("")
        click.echo("Contents:")
        for section in result.sections:
            for node in section.walk():
                click.echo(f"{'  ' * node.level}{node.title}")
    for ref_section in result.reference_sections or []:
        click.echo(f"{ref_section.title}: {len(ref_section.items)} entries")


@cli.command()
@click.pass_obj
def stats(manager: ScraperManager) -> None:
    """Show article count and available sources."""
    _dump({
        "articleCount": manager.get_article_count(),
        "sources": manager.get_available_scrapers(),
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    })


@cli.command()
@click.option("--source", default="wikipedia", show_default=True, help="Source name")
@click.option("--lang", default=None, help="Wikipedia language code")
@click.option("--limit", default=10, show_default=True)
@click.pass_obj
def featured(manager: ScraperManager, source: str, lang: Optional[str], limit: int) -> None:
    """List featured articles."""
    language = resolve_language(lang, manager.config.default_language) if lang else None
    for result in manager.get_featured_articles(source, limit, language):
        click.echo(f"{result.title}  [{result.slug}]")


@cli.command(name="random")
@click.option("--source", default="wikipedia", show_default=True, help="Source name")
@click.option("--lang", default=None, help="Wikipedia language code")
@click.option("--limit", default=5, show_default=True)
@click.pass_obj
def random_articles(manager: ScraperManager, source: str, lang: Optional[str],
                    limit: int) -> None:
    """List random articles."""
    language = resolve_language(lang, manager.config.default_language) if lang else None
    for result in manager.get_random_articles(source, limit, language):
        click.echo(f"{result.title}  [{result.slug}]")


@cli.command()
def languages() -> None:
    """List supported Wikipedia editions."""
    for language in WIKIPEDIA_LANGUAGES:
        click.echo(f"{language.code:4} {language.name} ({language.native_name})")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True)
@click.pass_obj
def serve(manager: ScraperManager, host: str, port: int) -> None:
    """Serve the JSON API."""
    import uvicorn

    from .web import create_app

    uvicorn.run(create_app(manager), host=host, port=port)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
