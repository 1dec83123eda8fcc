"""Message builder: logical request -> HTTP/1.1 wire bytes.

Fills in the headers a well-behaved client is expected to send (Host,
User-Agent, Connection, Content-Length) without ever overriding what the
caller set, then serializes the request line, header block and body.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from urllib3.exceptions import LocationParseError
from urllib3.util import Url
from urllib3.util import parse_url as _urllib3_parse_url

from httpc import __version__
from httpc.errors import UriError
from httpc.headers import Headers

logger = logging.getLogger(__name__)

HTTP_VERSION = "HTTP/1.1"
USER_AGENT = f"httpc/{__version__}"

DEFAULT_PORTS = {"http": 80, "https": 443}

# ANSI reset sequence
_RESET = "\x1b[0m"


def parse_url(url: str) -> Url:
    """Parse an absolute URL.

    Args:
        url: The URL text, e.g. ``http://example.com:8080/a?b=1``.

    Returns:
        The parsed :class:`urllib3.util.Url`.

    Raises:
        UriError: If the URL is malformed or names no host.
    """
    try:
        parsed = _urllib3_parse_url(url)
    except LocationParseError as exc:
        raise UriError(f"Invalid URL {url!r}: {exc}") from exc
    if not parsed.host:
        raise UriError(f"URL has no host: {url!r}")
    return parsed


def get_port(url: Url) -> int:
    """Return the explicit port, else the scheme's default (80 when unknown)."""
    if url.port is not None:
        return url.port
    return DEFAULT_PORTS.get(url.scheme or "http", 80)


def get_authority(url: Url) -> str:
    """Return ``host:port`` for a URL, always including the port."""
    return f"{url.host}:{get_port(url)}"


class Request:
    """A logical HTTP/1.1 request, built fresh for every hop."""

    __slots__ = ("method", "url", "headers", "body")

    def __init__(
        self,
        method: str,
        url: str | Url,
        headers: Iterable[tuple[str, str]] = (),
        body: bytes | None = None,
    ) -> None:
        self.method = method
        self.url = url if isinstance(url, Url) else parse_url(url)
        self.headers = Headers(headers)
        self.body = body

    @property
    def version(self) -> str:
        return HTTP_VERSION

    def __repr__(self) -> str:
        return (
            f"Request(method={self.method!r}, url={self.url.url!r}, "
            f"headers=<{len(self.headers)} headers>, "
            f"body={'<present>' if self.body is not None else '<none>'})"
        )


class RequestStyles:
    """ANSI SGR codes applied to each part of a rendered request.

    An empty code leaves that part unstyled, so ``RequestStyles()`` renders
    exactly the bytes that go on the wire.
    """

    __slots__ = ("method", "target", "version", "header_name", "header_value")

    def __init__(
        self,
        method: str = "",
        target: str = "",
        version: str = "",
        header_name: str = "",
        header_value: str = "",
    ) -> None:
        self.method = method
        self.target = target
        self.version = version
        self.header_name = header_name
        self.header_value = header_value

    @classmethod
    def colorized(cls) -> RequestStyles:
        return cls(
            method="32",  # green
            target="34",  # blue
            version="90",  # bright black
            header_name="36",  # cyan
            header_value="35",  # magenta
        )


def style(text: str, code: str) -> str:
    """Wrap ``text`` in an ANSI escape sequence, or return it as-is."""
    if not code:
        return text
    return f"\x1b[{code}m{text}{_RESET}"


class WireMessage:
    """Serialized form of a :class:`Request`, ready to send or display."""

    __slots__ = ("method", "target", "version", "headers", "body")

    def __init__(
        self,
        method: str,
        target: str,
        version: str,
        headers: Headers,
        body: bytes | None,
    ) -> None:
        self.method = method
        self.target = target
        self.version = version
        self.headers = headers
        self.body = body

    def render(self, styles: RequestStyles | None = None) -> str:
        """Render the request line and header block as text.

        Args:
            styles: Markup for each part; plain text when omitted.

        Returns:
            The head of the message, CRLF-terminated, ending in a blank line.
        """
        styles = styles or RequestStyles()
        lines = [
            f"{style(self.method, styles.method)} "
            f"{style(self.target, styles.target)} "
            f"{style(self.version, styles.version)}\r\n"
        ]
        for name, value in self.headers:
            lines.append(
                f"{style(name, styles.header_name)}: "
                f"{style(value, styles.header_value)}\r\n"
            )
        lines.append("\r\n")
        return "".join(lines)

    def to_bytes(self) -> bytes:
        """Return the exact bytes sent to the server."""
        head = self.render().encode("iso-8859-1")
        return head + (self.body or b"")


def default_headers(request: Request) -> list[tuple[str, str]]:
    """Return the default headers the caller did not supply.

    Host, User-Agent and Connection are always candidates; Content-Length
    only when the request has a body. The caller's headers win.
    """
    candidates = [
        ("Host", get_authority(request.url)),
        ("User-Agent", USER_AGENT),
        # connections are never reused
        ("Connection", "close"),
    ]
    if request.body is not None:
        candidates.append(("Content-Length", str(len(request.body))))
    return [(name, value) for name, value in candidates if name not in request.headers]


def build_message(request: Request) -> WireMessage:
    """Turn a request into its HTTP/1.1 wire form.

    Args:
        request: The logical request for this hop.

    Returns:
        A :class:`WireMessage` whose headers are the caller's, in order,
        followed by any missing defaults.
    """
    headers = request.headers.copy()
    for name, value in default_headers(request):
        logger.debug("Adding default header %s: %s", name, value)
        headers.add(name, value)

    return WireMessage(
        method=request.method,
        target=request.url.request_uri,
        version=request.version,
        headers=headers,
        body=request.body,
    )
