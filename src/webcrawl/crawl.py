"""Crawler engine with level-by-level async fan-out."""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from .config import settings
from .core import Fetcher, HttpFetcher, fetch_body
from .errors import CrawlError, JoinError, ResolutionError
from .events import CrawlEvent, CrawlObserver, EventKind, null_observer
from .extract import extract_page_hrefs
from .links import resolve_links

WEB_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class CrawlStep:
    """A frontier of URLs together with the depth it is crawled at."""
    frontier: tuple[httpx.URL, ...]
    depth: int
    max_depth: int

    @property
    def done(self) -> bool:
        return self.depth > self.max_depth

    def next(self, links: Iterable[httpx.URL]) -> "CrawlStep":
        """Step for the links found at this depth."""
        return CrawlStep(tuple(links), self.depth + 1, self.max_depth)


@dataclass
class PageLinks:
    """Outcome of crawling a single page."""
    url: httpx.URL
    links: list[httpx.URL] = field(default_factory=list)
    skipped: list[ResolutionError] = field(default_factory=list)


@dataclass
class CrawlStats:
    """Totals for a finished crawl."""
    levels: int = 0
    pages_fetched: int = 0
    pages_failed: int = 0
    links_discovered: int = 0
    links_skipped: int = 0


class CrawlerEngine:
    """
    Depth-bounded crawler.

    Every URL of a level is fetched concurrently (at most ``concurrency``
    at a time), its anchors are resolved against the page's own URL, and all
    links found on the level become the frontier of the next one. URLs are
    never deduplicated: a page reachable twice is fetched twice.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        concurrency: int = 10,
        keep_going: bool = False,
        observer: CrawlObserver | None = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.fetcher = fetcher
        self.concurrency = concurrency
        self.keep_going = keep_going
        self.observer = observer or null_observer

    def _emit(self, kind: EventKind, step: CrawlStep, **kwargs):
        self.observer(CrawlEvent(kind=kind, depth=step.depth, max_depth=step.max_depth, **kwargs))

    async def crawl_page(self, url: httpx.URL, step: CrawlStep) -> PageLinks:
        """Fetch one page and resolve the links it contains."""
        self._emit(EventKind.FETCH_STARTED, step, url=str(url))
        try:
            body = await fetch_body(self.fetcher, str(url))
        except CrawlError as e:
            self._emit(EventKind.FETCH_FAILED, step, url=str(url), detail=str(e))
            raise
        self._emit(EventKind.FETCH_COMPLETED, step, url=str(url), detail=f"{len(body)} chars")

        links, skipped = resolve_links(url, extract_page_hrefs(body))
        for error in skipped:
            self._emit(EventKind.LINK_SKIPPED, step, url=str(url), detail=str(error))
        self._emit(
            EventKind.LINKS_DISCOVERED,
            step,
            url=str(url),
            urls=tuple(str(link) for link in links),
        )
        return PageLinks(url=url, links=links, skipped=skipped)

    async def crawl_level(self, step: CrawlStep, semaphore: asyncio.Semaphore) -> list[PageLinks | CrawlError]:
        """
        Crawl every URL of a step and wait for all of them.

        Returns the per-page outcome in frontier order. Failed branches are
        returned as their CrawlError; anything else a branch raises is
        re-raised once the whole level has finished.
        """
        async def branch(url: httpx.URL) -> PageLinks:
            async with semaphore:
                return await self.crawl_page(url, step)

        tasks = [asyncio.create_task(branch(url)) for url in step.frontier]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, CrawlError):
                raise result
        return results

    async def crawl(
        self,
        frontier: Iterable[httpx.URL],
        depth: int = 1,
        max_depth: int = 1,
    ) -> CrawlStats:
        """
        Crawl from a frontier until the depth limit.

        Raises:
            JoinError: a page could not be fetched or decoded (unless
                ``keep_going`` is set). The branch failure is the cause.
        """
        semaphore = asyncio.Semaphore(self.concurrency)
        stats = CrawlStats()
        step = CrawlStep(tuple(frontier), depth, max_depth)

        while not step.done:
            if not step.frontier:
                return stats
            self._emit(EventKind.LEVEL_ENTERED, step, urls=tuple(str(url) for url in step.frontier))
            stats.levels += 1

            outcomes = await self.crawl_level(step, semaphore)

            failure: tuple[httpx.URL, CrawlError] | None = None
            next_links: list[httpx.URL] = []
            for url, outcome in zip(step.frontier, outcomes):
                if isinstance(outcome, CrawlError):
                    stats.pages_failed += 1
                    if failure is None:
                        failure = (url, outcome)
                    continue
                stats.pages_fetched += 1
                stats.links_discovered += len(outcome.links)
                stats.links_skipped += len(outcome.skipped)
                next_links.extend(outcome.links)

            self._emit(
                EventKind.LEVEL_JOINED,
                step,
                detail="failed" if failure and not self.keep_going else None,
            )
            if failure is not None and not self.keep_going:
                url, error = failure
                raise JoinError(str(url), step.depth) from error

            step = step.next(next_links)

        self._emit(EventKind.MAX_DEPTH_REACHED, step)
        return stats


async def crawl(
    frontier: Iterable[httpx.URL],
    depth: int,
    max_depth: int,
    fetcher: Fetcher,
    concurrency: int = 10,
    keep_going: bool = False,
    observer: CrawlObserver | None = None,
) -> CrawlStats:
    """Crawl ``frontier`` starting at ``depth`` up to ``max_depth`` inclusive."""
    engine = CrawlerEngine(
        fetcher=fetcher,
        concurrency=concurrency,
        keep_going=keep_going,
        observer=observer,
    )
    return await engine.crawl(frontier, depth=depth, max_depth=max_depth)


def parse_seed(seed: str) -> httpx.URL:
    """Parse the seed URL, which must be an absolute http(s) URL."""
    try:
        url = httpx.URL(seed.strip())
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid seed URL {seed!r}: {e}") from e

    if url.scheme not in WEB_SCHEMES or not url.host:
        raise ValueError(f"Seed URL must be an absolute http(s) URL: {seed!r}")
    return url


async def run_crawl(
    start_url: str,
    max_depth: int,
    concurrency: int | None = None,
    keep_going: bool | None = None,
    observer: CrawlObserver | None = None,
) -> CrawlStats:
    """Crawl from a seed URL with an HTTP fetcher built from settings."""
    seed = parse_seed(start_url)

    fetcher = HttpFetcher.from_settings(settings)
    try:
        return await crawl(
            [seed],
            depth=1,
            max_depth=max_depth,
            fetcher=fetcher,
            concurrency=settings.concurrency if concurrency is None else concurrency,
            keep_going=settings.keep_going if keep_going is None else keep_going,
            observer=observer,
        )
    finally:
        await fetcher.close()
