"""Link extraction from HTML markup."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from html.parser import HTMLParser

ANCHOR_TAG = "a"
HREF_ATTR = "href"


class TokenKind(str, Enum):
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    TEXT = "text"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    """A single markup token in document order."""
    kind: TokenKind
    name: str = ""
    attrs: tuple[tuple[str, str | None], ...] = field(default_factory=tuple)
    data: str = ""


class _TokenCollector(HTMLParser):
    """Records tokenizer callbacks as Token values."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.tokens: list[Token] = []

    def handle_starttag(self, tag, attrs):
        self.tokens.append(Token(kind=TokenKind.START_TAG, name=tag, attrs=tuple(attrs)))

    def handle_endtag(self, tag):
        self.tokens.append(Token(kind=TokenKind.END_TAG, name=tag))

    def handle_data(self, data):
        self.tokens.append(Token(kind=TokenKind.TEXT, data=data))

    def handle_comment(self, data):
        self.tokens.append(Token(kind=TokenKind.COMMENT, data=data))

    def drain(self) -> list[Token]:
        tokens, self.tokens = self.tokens, []
        return tokens


def tokenize(html: str, chunk_size: int = 8192) -> Iterator[Token]:
    """
    Turn HTML into a stream of tokens in document order.

    Tokenizing only: no tree is built, so misnested or unclosed tags are
    reported exactly as written and never repaired or duplicated. Tag and
    attribute names are lowercased, attribute values have character
    references decoded, and valueless attributes carry ``None``.
    """
    collector = _TokenCollector()
    for start in range(0, len(html), chunk_size):
        collector.feed(html[start:start + chunk_size])
        yield from collector.drain()
    collector.close()
    yield from collector.drain()


def extract_hrefs(tokens: Iterable[Token]) -> Iterator[str]:
    """Yield every anchor href value exactly as written, duplicates included."""
    for token in tokens:
        if token.kind is not TokenKind.START_TAG or token.name != ANCHOR_TAG:
            continue
        for name, value in token.attrs:
            if name == HREF_ATTR:
                # <a href> with no value
                yield value if value is not None else ""


def extract_page_hrefs(html: str) -> Iterator[str]:
    """Raw anchor hrefs of one HTML page."""
    return extract_hrefs(tokenize(html))
