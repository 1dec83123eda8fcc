"""Tests for the message builder."""

import re

import pytest

from httpc import __version__
from httpc.errors import UriError
from httpc.message import (
    Request,
    RequestStyles,
    build_message,
    get_authority,
    parse_url,
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _header_lines(wire_bytes: bytes) -> list[str]:
    head = wire_bytes.split(b"\r\n\r\n", 1)[0].decode("ascii")
    return head.split("\r\n")[1:]


class TestParseUrl:
    """Tests for URL parsing."""

    def test_valid_url(self):
        url = parse_url("http://example.com:8080/a?b=1")
        assert url.host == "example.com"
        assert url.port == 8080
        assert url.path == "/a"
        assert url.query == "b=1"

    def test_missing_host_raises(self):
        with pytest.raises(UriError):
            parse_url("http:///path")

    def test_bad_port_raises(self):
        with pytest.raises(UriError):
            parse_url("http://example.com:notaport/")


class TestGetAuthority:
    """Tests for authority computation."""

    def test_http_default_port(self):
        assert get_authority(parse_url("http://example.com/")) == "example.com:80"

    def test_https_default_port(self):
        assert get_authority(parse_url("https://example.com/")) == "example.com:443"

    def test_explicit_port(self):
        assert get_authority(parse_url("https://example.com:8443/")) == "example.com:8443"

    def test_unknown_scheme_defaults_to_80(self):
        assert get_authority(parse_url("ftp://example.com/")) == "example.com:80"


class TestBuildMessage:
    """Tests for build_message and WireMessage serialization."""

    def test_request_line(self):
        wire = build_message(Request("GET", "http://example.com/path?q=1"))
        assert wire.to_bytes().startswith(b"GET /path?q=1 HTTP/1.1\r\n")

    def test_empty_path_becomes_root(self):
        wire = build_message(Request("GET", "http://example.com"))
        assert wire.to_bytes().startswith(b"GET / HTTP/1.1\r\n")

    def test_defaults_added_once(self):
        wire = build_message(Request("POST", "http://example.com/", body=b"hello"))
        lines = _header_lines(wire.to_bytes())
        assert lines == [
            "Host: example.com:80",
            f"User-Agent: httpc/{__version__}",
            "Connection: close",
            "Content-Length: 5",
        ]

    def test_no_content_length_without_body(self):
        wire = build_message(Request("GET", "http://example.com/"))
        names = [line.split(":", 1)[0] for line in _header_lines(wire.to_bytes())]
        assert "Content-Length" not in names

    def test_empty_body_gets_zero_length(self):
        wire = build_message(Request("POST", "http://example.com/", body=b""))
        assert "Content-Length: 0" in _header_lines(wire.to_bytes())

    @pytest.mark.parametrize(
        "name, value",
        [
            ("host", "other.example:1234"),
            ("User-Agent", "curl/8.0"),
            ("CONNECTION", "keep-alive"),
            ("Content-Length", "99"),
        ],
    )
    def test_caller_header_suppresses_default(self, name, value):
        request = Request("POST", "http://example.com/", [(name, value)], b"body")
        lines = _header_lines(build_message(request).to_bytes())
        matching = [line for line in lines if line.lower().startswith(name.lower() + ":")]
        assert matching == [f"{name}: {value}"]

    def test_caller_headers_come_first(self):
        request = Request("GET", "http://example.com/", [("Accept", "*/*")])
        lines = _header_lines(build_message(request).to_bytes())
        assert lines[0] == "Accept: */*"

    def test_body_follows_blank_line(self):
        wire = build_message(Request("POST", "http://example.com/", body=b"\x00\xffdata"))
        assert wire.to_bytes().endswith(b"\r\n\r\n\x00\xffdata")

    def test_does_not_mutate_request_headers(self):
        request = Request("GET", "http://example.com/", [("Accept", "*/*")])
        build_message(request)
        assert len(request.headers) == 1


class TestRender:
    """Tests for the styled rendering."""

    def test_plain_render_matches_wire_head(self):
        wire = build_message(Request("GET", "http://example.com/x", [("A", "b")]))
        head = wire.to_bytes().split(b"\r\n\r\n", 1)[0] + b"\r\n\r\n"
        assert wire.render().encode("ascii") == head

    def test_colorized_differs_only_in_markup(self):
        wire = build_message(Request("GET", "http://example.com/x", [("A", "b")]))
        styled = wire.render(RequestStyles.colorized())
        assert "\x1b[" in styled
        assert ANSI.sub("", styled) == wire.render()
