"""Protocol definitions for crawler components."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_CHARSET = "utf-8"


@dataclass
class Response:
    """HTTP response container.

    ``encoding`` is the charset declared by the server. Fetchers that know it
    pass it in; otherwise it is read from the Content-Type header.
    """

    url: str
    status: int
    content: bytes
    headers: dict[str, str]
    encoding: str | None = None

    def __post_init__(self):
        if self.encoding is None:
            # header names are matched case-insensitively by httpx
            self.encoding = httpx.Response(self.status, headers=self.headers).charset_encoding

    def decode(self) -> str:
        """Decode content strictly using the declared charset, UTF-8 if none.

        Raises UnicodeDecodeError or LookupError when the body is not valid
        text in that charset.
        """
        return self.content.decode(self.encoding or DEFAULT_CHARSET)


class Fetcher(Protocol):
    """Protocol for URL fetchers."""

    async def fetch(self, url: str) -> Response:
        """Fetch a URL and return the response."""
        ...
