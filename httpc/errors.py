"""Error taxonomy shared by every httpc module.

Callers branch on the exception class, never on the message text. Every
error raised by the core derives from :class:`HttpcError`.
"""


class HttpcError(Exception):
    """Base class for all httpc failures."""


# --- Header codec ---


class HeaderParseError(HttpcError):
    """A ``key:value`` header string could not be accepted."""


class MissingColon(HeaderParseError):
    """The header string has no ``:`` separator."""


class InvalidName(HeaderParseError):
    """The header name is not a valid HTTP token."""


class InvalidValue(HeaderParseError):
    """The header value contains control characters."""


class NonAsciiValue(HeaderParseError):
    """The header value contains bytes outside the ASCII range."""


# --- Transport ---


class ConnectError(HttpcError):
    """The TCP connection to the server could not be established."""


class DnsError(ConnectError):
    """The host name could not be resolved."""


class TlsError(ConnectError):
    """The TLS handshake or certificate verification failed."""


class IoError(HttpcError):
    """The transport failed while sending or receiving bytes."""


# --- Response parser ---


class ParseError(HttpcError):
    """The response bytes are not a well-formed HTTP/1.1 message."""


class MalformedStatusLine(ParseError):
    """The status line has no numeric status code."""


class MissingStatusCode(ParseError):
    """The header block ended before any status line was read."""


class MalformedHeaderLine(ParseError):
    """A response header line is missing its colon or has a bad value."""


class MalformedChunkSize(ParseError):
    """A chunk-size line is not a hexadecimal number."""


class UnexpectedEof(ParseError):
    """The peer closed the connection in the middle of the message."""


# --- URLs and redirects ---


class UriError(HttpcError):
    """A URL cannot be parsed or has no host."""


class TooManyRedirects(HttpcError):
    """The redirect chain is longer than the configured maximum."""
