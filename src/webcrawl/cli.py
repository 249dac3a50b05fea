"""CLI interface using typer."""

import asyncio
import time

import typer

from .config import settings
from .core import HttpFetcher
from .errors import CrawlError
from .events import EchoSink, fan_out

app = typer.Typer(
    name="webcrawl",
    help="Depth-bounded concurrent web crawler",
    no_args_is_help=True,
)


def _seed(url: str):
    """Parse a seed URL or fail as a bad CLI parameter."""
    from .crawl import parse_seed

    try:
        return parse_seed(url)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="URL")


def _fail(error: CrawlError):
    typer.echo(f"Crawl failed: {error}", err=True)
    if error.__cause__ is not None:
        typer.echo(f"  Caused by: {error.__cause__}", err=True)
    raise typer.Exit(code=1)


async def _page_links(url):
    """Fetch one page and return its resolved links."""
    from .crawl import CrawlerEngine, CrawlStep

    fetcher = HttpFetcher.from_settings(settings)
    try:
        engine = CrawlerEngine(fetcher)
        return await engine.crawl_page(url, CrawlStep((url,), depth=1, max_depth=1))
    finally:
        await fetcher.close()


@app.command()
def crawl(
    start_url: str = typer.Argument(..., help="Seed URL for the crawl"),
    max_depth: int = typer.Argument(..., min=0, max=255, help="Maximum link depth (the seed is depth 1)"),
    concurrency: int = typer.Option(settings.concurrency, "--concurrency", "-c", min=1, help="Concurrent requests"),
    keep_going: bool = typer.Option(
        settings.keep_going, "--keep-going/--fail-fast", help="Skip pages that fail instead of aborting"
    ),
    events: str = typer.Option(None, "--events", help="Write crawl events to this file (JSONL)"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Do not print frontiers and link lists"),
):
    """Crawl links from a URL up to a maximum depth."""
    from .crawl import run_crawl
    from .output import JsonlEventWriter

    seed = str(_seed(start_url))
    echo = EchoSink(verbose=not quiet)

    start_time = time.time()
    try:
        if events:
            with JsonlEventWriter(events) as writer:
                stats = asyncio.run(run_crawl(
                    start_url=seed,
                    max_depth=max_depth,
                    concurrency=concurrency,
                    keep_going=keep_going,
                    observer=fan_out(echo, writer),
                ))
            typer.echo(f"Events saved to {events}")
        else:
            stats = asyncio.run(run_crawl(
                start_url=seed,
                max_depth=max_depth,
                concurrency=concurrency,
                keep_going=keep_going,
                observer=echo,
            ))
    except CrawlError as e:
        _fail(e)
    elapsed = time.time() - start_time

    typer.echo(
        f"\nCrawl complete: {stats.pages_fetched} pages, "
        f"{stats.links_discovered} links over {stats.levels} levels in {elapsed:.1f}s"
    )
    if stats.pages_failed or stats.links_skipped:
        typer.echo(f"  Failed pages: {stats.pages_failed}, skipped links: {stats.links_skipped}")


@app.command()
def links(
    url: str = typer.Argument(..., help="Page to list links for"),
):
    """List the resolved links of a single page."""
    seed = _seed(url)

    try:
        page = asyncio.run(_page_links(seed))
    except CrawlError as e:
        _fail(e)

    for link in page.links:
        typer.echo(str(link))
    for error in page.skipped:
        typer.echo(f"Skipped: {error}", err=True)


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"webcrawl {__version__}")


if __name__ == "__main__":
    app()
