"""Resolution of raw hrefs into absolute URLs."""

import re
from collections.abc import Iterable

import httpx

from .errors import ResolutionError

# Schemes whose URLs are meaningless without a host.
HOST_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

# Leading/trailing C0 controls and spaces, plus tabs and newlines anywhere,
# are not part of an href's value.
_EDGE_JUNK = "".join(chr(i) for i in range(0x21))
_INNER_JUNK = re.compile(r"[\t\n\r]")

# Characters that cannot appear in a domain name. httpx percent-encodes some
# of them, so a "%" in the parsed host means the href had one.
_FORBIDDEN_HOST_CHARS = re.compile(r"[\x00-\x20#%/:<>?@\[\\\]^|\x7f]")


def origin(url: httpx.URL) -> httpx.URL:
    """Reduce a URL to scheme and authority (path "/", no query or fragment)."""
    return url.copy_with(path="/", query=None, fragment=None)


def _check_host(url: httpx.URL, raw: str, base: httpx.URL):
    host = url.raw_host.decode("ascii")
    if not host:
        raise ResolutionError(raw, str(base), "empty host")
    # IPv6 literals are validated by httpx and are the only hosts with ":"
    if ":" not in host and _FORBIDDEN_HOST_CHARS.search(host):
        raise ResolutionError(raw, str(base), f"invalid host {host!r}")


def parse_href(raw: str) -> httpx.URL:
    """Parse an href on its own, without any base."""
    return httpx.URL(_INNER_JUNK.sub("", raw.strip(_EDGE_JUNK)))


def resolve(base: httpx.URL, raw: str) -> httpx.URL:
    """
    Resolve a raw href found on the page at ``base``.

    Hrefs with their own scheme are returned as-is, whatever the base.
    Relative references, including scheme-relative ``//host/path`` ones, are
    joined onto the origin of ``base``, so the base page's own path and query
    never take part in the result.

    Raises:
        ResolutionError: the href is neither a valid absolute URL nor a
            valid relative reference.
    """
    try:
        parsed = parse_href(raw)
    except httpx.InvalidURL as e:
        raise ResolutionError(raw, str(base), str(e)) from e

    if parsed.scheme:
        if parsed.scheme in HOST_SCHEMES:
            _check_host(parsed, raw, base)
        return parsed

    try:
        joined = origin(base).join(parsed)
    except httpx.InvalidURL as e:
        raise ResolutionError(raw, str(base), str(e)) from e

    # scheme-relative hrefs bring their own host
    if joined.scheme in HOST_SCHEMES:
        _check_host(joined, raw, base)
    return joined


def resolve_links(
    base: httpx.URL, hrefs: Iterable[str]
) -> tuple[list[httpx.URL], list[ResolutionError]]:
    """Resolve every href of a page, setting aside the ones that fail."""
    resolved: list[httpx.URL] = []
    skipped: list[ResolutionError] = []

    for raw in hrefs:
        try:
            resolved.append(resolve(base, raw))
        except ResolutionError as e:
            skipped.append(e)

    return resolved, skipped
