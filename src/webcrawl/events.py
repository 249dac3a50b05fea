"""Structured crawl events and the sinks that consume them."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import typer


class EventKind(str, Enum):
    LEVEL_ENTERED = "level_entered"
    MAX_DEPTH_REACHED = "max_depth_reached"
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"
    LINKS_DISCOVERED = "links_discovered"
    LINK_SKIPPED = "link_skipped"
    LEVEL_JOINED = "level_joined"


@dataclass(frozen=True)
class CrawlEvent:
    """Something observable that happened during a crawl."""
    kind: EventKind
    depth: int
    max_depth: int
    url: str | None = None
    urls: tuple[str, ...] = field(default_factory=tuple)
    detail: str | None = None

    def to_dict(self) -> dict:
        """Plain dict representation for serialization."""
        return {
            "event": self.kind.value,
            "depth": self.depth,
            "max_depth": self.max_depth,
            "url": self.url,
            "urls": list(self.urls),
            "detail": self.detail,
        }


CrawlObserver = Callable[[CrawlEvent], None]


def null_observer(event: CrawlEvent) -> None:
    """Observer that ignores every event."""


def fan_out(*observers: CrawlObserver) -> CrawlObserver:
    """Combine several observers into one, called in order."""
    def observe(event: CrawlEvent) -> None:
        for observer in observers:
            observer(event)
    return observe


class EchoSink:
    """Prints human-readable progress lines for crawl events."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def __call__(self, event: CrawlEvent):
        kind = event.kind

        if kind is EventKind.LEVEL_ENTERED:
            typer.echo(f"Current Depth: {event.depth}, Max Depth: {event.max_depth}")
            if self.verbose:
                typer.echo(f"Crawling: {list(event.urls)}")
        elif kind is EventKind.MAX_DEPTH_REACHED:
            typer.echo("Reached Max Depth!!")
        elif kind is EventKind.FETCH_STARTED:
            typer.echo(f"Getting: {event.url}")
        elif kind is EventKind.LINKS_DISCOVERED:
            if self.verbose:
                typer.echo(f"Following: {list(event.urls)}")
            else:
                typer.echo(f"  {len(event.urls)} links on {event.url}")
        elif kind is EventKind.LINK_SKIPPED:
            typer.echo(f"  Skipped link on {event.url}: {event.detail}", err=True)
        elif kind is EventKind.FETCH_FAILED:
            typer.echo(f"  Error fetching {event.url}: {event.detail}", err=True)
