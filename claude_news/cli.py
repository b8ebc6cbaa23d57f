"""
Command-line interface for claude-news.

Uses Typer to expose the service operations: a one-shot refresh, queries
against the persisted snapshot, stats, categories, and a long-running
``run`` command that keeps the snapshot fresh on a schedule.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
import typer

from .config import AppConfig, load_config
from .core.types import Article, ConcurrentRefreshRejected
from .logging_utils import setup_logging
from .query import list_categories
from .service import NewsService

app = typer.Typer(add_completion=False, help="Claude Code news aggregator.")
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")
LogLevelOption = typer.Option(None, "--log-level", help="Logging level.")


def _build_service(config: Path | None, log_level: str | None) -> NewsService:
    load_dotenv()
    cfg: AppConfig = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging)
    return NewsService(cfg)


def _print_articles(articles: list[Article], title: str) -> None:
    table = Table(title=title, show_lines=False)
    table.add_column("Rel", justify="right")
    table.add_column("Category")
    table.add_column("Title", overflow="fold")
    table.add_column("Source")
    table.add_column("Published")
    for article in articles:
        table.add_row(
            str(article.relevance),
            article.category,
            article.title,
            article.source,
            article.pub_date.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def refresh(
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
):
    """Run one ingestion cycle and persist the new snapshot."""
    service = _build_service(config, log_level)
    service.load()
    result = asyncio.run(service.trigger_refresh())
    if isinstance(result, ConcurrentRefreshRejected):
        console.print(f"[yellow]{result.message}[/yellow]")
        raise typer.Exit(code=1)
    console.print(
        f"[bold]Refresh complete[/bold]: total={result.total_articles}, new={result.new_count}, "
        f"sources_ok={len(result.sources_ok)}, sources_failed={len(result.sources_failed)}"
    )
    if not result.saved:
        console.print("[red]Snapshot was not saved to disk[/red]")


@app.command()
def query(
    page: int = typer.Option(1, "--page", "-p"),
    limit: int = typer.Option(20, "--limit", "-l"),
    category: str | None = typer.Option(None, "--category"),
    search: str | None = typer.Option(None, "--search", "-s"),
    min_relevance: int | None = typer.Option(None, "--min-relevance"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON."),
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
):
    """Query the current snapshot."""
    service = _build_service(config, log_level)
    service.load()
    result = service.query_articles(
        page=page,
        limit=limit,
        category=category,
        search=search,
        min_relevance=min_relevance,
    )
    if as_json:
        console.print_json(json.dumps(result.to_dict()))
        return
    _print_articles(
        result.articles,
        f"Page {result.page}/{result.total_pages} ({result.total} matching)",
    )


@app.command()
def featured(
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
):
    """Show the top articles."""
    service = _build_service(config, log_level)
    service.load()
    _print_articles(service.get_featured(), "Featured")


@app.command()
def stats(
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
):
    """Print snapshot statistics and scheduler status as JSON."""
    service = _build_service(config, log_level)
    service.load()
    console.print_json(json.dumps(service.get_stats().to_dict()))


@app.command()
def categories():
    """Print the category list."""
    console.print_json(
        json.dumps([category.to_dict() for category in list_categories()])
    )


@app.command()
def run(
    config: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
):
    """Keep the snapshot fresh until interrupted."""
    service = _build_service(config, log_level)
    try:
        asyncio.run(_run_forever(service))
    except KeyboardInterrupt:
        console.print("Shutting down...")


async def _run_forever(service: NewsService) -> None:
    await service.bootstrap()
    status = service.scheduler.status()
    console.print(f"Scheduler armed, next run at {status.next_run}")
    try:
        await asyncio.Event().wait()
    finally:
        await service.aclose()


if __name__ == "__main__":
    app()
