"""Tests for URL resolution module."""

import httpx
import pytest

from webcrawl.errors import ResolutionError
from webcrawl.links import origin, resolve, resolve_links


@pytest.fixture
def base():
    return httpx.URL("https://example.com/api?q=1")


class TestOrigin:
    def test_drops_path_and_query(self, base):
        """Origin should keep only scheme and host."""
        assert str(origin(base)) == "https://example.com/"

    def test_drops_fragment(self):
        """Origin should not keep the fragment."""
        assert str(origin(httpx.URL("http://example.com/a/b#top"))) == "http://example.com/"

    def test_keeps_port(self):
        """A non-default port is part of the origin."""
        assert str(origin(httpx.URL("http://localhost:8000/x?y=1"))) == "http://localhost:8000/"


class TestResolveRelative:
    def test_root_relative(self, base):
        """Path and query of the base should be discarded before joining."""
        assert str(resolve(base, "/docs")) == "https://example.com/docs"

    def test_path_relative_joins_onto_origin(self):
        """Relative paths resolve against the origin, not the page directory."""
        page = httpx.URL("https://example.com/a/b/c.html?x=1")
        assert str(resolve(page, "docs/page")) == "https://example.com/docs/page"

    def test_dot_segments(self):
        """Dot segments should not climb above the root."""
        page = httpx.URL("https://example.com/a/b/")
        assert str(resolve(page, "../up")) == "https://example.com/up"

    def test_query_only(self):
        """A query-only reference should attach to the origin."""
        page = httpx.URL("https://example.com/list?page=1")
        assert str(resolve(page, "?page=2")) == "https://example.com/?page=2"

    def test_scheme_relative(self):
        """Scheme-relative references take the base scheme."""
        page = httpx.URL("http://example.com/")
        assert str(resolve(page, "//cdn.example.org/lib.js")) == "http://cdn.example.org/lib.js"

    def test_empty_href_is_origin(self, base):
        """An empty href resolves to the origin itself."""
        assert str(resolve(base, "")) == "https://example.com/"

    def test_strips_surrounding_whitespace(self, base):
        """Whitespace around the href is not part of it."""
        assert str(resolve(base, "  /docs\n")) == "https://example.com/docs"

    def test_removes_embedded_newlines(self, base):
        """Tabs and newlines inside the href are dropped."""
        assert str(resolve(base, "/do\ncs")) == "https://example.com/docs"


class TestResolveAbsolute:
    def test_passthrough(self, base):
        """Absolute hrefs should be returned unchanged."""
        assert str(resolve(base, "https://other.com/x")) == "https://other.com/x"

    def test_passthrough_independent_of_base(self):
        """The base should not matter for absolute hrefs."""
        first = resolve(httpx.URL("http://a.example/"), "https://other.com/x")
        second = resolve(httpx.URL("https://b.example/deep/path?q=1"), "https://other.com/x")
        assert first == second == "https://other.com/x"

    def test_keeps_query_and_fragment(self, base):
        """Absolute hrefs keep their own query and fragment."""
        assert str(resolve(base, "https://other.com/x?a=1#b")) == "https://other.com/x?a=1#b"

    def test_non_web_scheme_passthrough(self, base):
        """Schemes without a host, like mailto, are still absolute."""
        result = resolve(base, "mailto:someone@example.com")
        assert result.scheme == "mailto"
        assert str(result) == "mailto:someone@example.com"


class TestResolveMalformed:
    def test_invalid_scheme_marker(self, base):
        """A lone scheme separator is neither absolute nor relative."""
        with pytest.raises(ResolutionError):
            resolve(base, ":")

    def test_empty_host(self, base):
        """A web URL without a host is malformed."""
        with pytest.raises(ResolutionError):
            resolve(base, "http://")

    def test_control_character(self, base):
        """Control characters inside the href are invalid."""
        with pytest.raises(ResolutionError):
            resolve(base, "/a\x01b")

    @pytest.mark.parametrize("raw", [
        "https://ex ample.com/",
        "https://ex|ample.com/",
        "http://exa^mple.com/x",
        "//ex ample.com/",
    ])
    def test_invalid_host_characters(self, base, raw):
        """Hosts with characters no domain can contain are malformed."""
        with pytest.raises(ResolutionError):
            resolve(base, raw)

    def test_ipv6_host_allowed(self, base):
        """IPv6 literals are valid hosts."""
        assert resolve(base, "http://[::1]:8080/x").host == "::1"

    def test_idna_host_allowed(self, base):
        """Internationalized domain names are valid hosts."""
        assert resolve(base, "https://例え.jp/").host == "例え.jp"

    def test_error_carries_context(self, base):
        """The error should name the href and the page it came from."""
        with pytest.raises(ResolutionError) as exc_info:
            resolve(base, ":")
        assert exc_info.value.raw == ":"
        assert exc_info.value.base == "https://example.com/api?q=1"


class TestResolveLinks:
    def test_splits_resolved_and_skipped(self, base):
        """Malformed hrefs should be set aside without stopping the rest."""
        resolved, skipped = resolve_links(base, ["/a", ":", "https://other.com/x"])
        assert [str(url) for url in resolved] == ["https://example.com/a", "https://other.com/x"]
        assert len(skipped) == 1
        assert skipped[0].raw == ":"

    def test_keeps_duplicates(self, base):
        """Duplicate hrefs should resolve to duplicate URLs."""
        resolved, skipped = resolve_links(base, ["/a", "/a"])
        assert [str(url) for url in resolved] == ["https://example.com/a", "https://example.com/a"]
        assert skipped == []

    def test_accepts_iterator(self, base):
        """Hrefs may be a one-shot iterator."""
        resolved, _ = resolve_links(base, iter(["/x"]))
        assert [str(url) for url in resolved] == ["https://example.com/x"]
