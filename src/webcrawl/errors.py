"""Error taxonomy for the crawl engine."""


class CrawlError(Exception):
    """Base class for all crawl failures."""


class FetchError(CrawlError):
    """Transport failure while fetching a single URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class BodyDecodeError(CrawlError):
    """Response body could not be read as text."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not decode body of {url}: {reason}")
        self.url = url
        self.reason = reason


class ResolutionError(CrawlError):
    """An href could not be turned into an absolute URL."""

    def __init__(self, raw: str, base: str, reason: str):
        super().__init__(f"Malformed link {raw!r} on {base}: {reason}")
        self.raw = raw
        self.base = base
        self.reason = reason


class JoinError(CrawlError):
    """A branch of a crawl level terminated with an error.

    The branch failure is available as ``__cause__``.
    """

    def __init__(self, url: str, depth: int):
        super().__init__(f"Branch {url} failed at depth {depth}")
        self.url = url
        self.depth = depth
