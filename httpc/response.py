"""Response parser: raw HTTP/1.1 bytes -> :class:`Response`.

Reads from any binary file-like object (a socket file in production, a
``BytesIO`` in tests). Declared lengths are trusted:

  - a Content-Length that is too long blocks until the peer closes;
  - one that is too short cuts the body off;
  - a missing one means no body at all.
"""

from __future__ import annotations

import logging
import re
from typing import BinaryIO

from httpc.errors import (
    IoError,
    MalformedChunkSize,
    MalformedHeaderLine,
    MalformedStatusLine,
    MissingStatusCode,
    ParseError,
    UnexpectedEof,
)
from httpc.headers import Headers

logger = logging.getLogger(__name__)

CRLF = b"\r\n"

# Longest status, header or chunk-size line accepted, in bytes
MAX_LINE_LENGTH = 64 * 1024

HEX_PATTERN = re.compile(rb"[0-9A-Fa-f]+")


class Response:
    """A parsed HTTP response."""

    __slots__ = ("status", "headers", "body", "version", "reason")

    def __init__(
        self,
        status: int,
        headers: Headers,
        body: bytes,
        version: str = "HTTP/1.1",
        reason: str = "",
    ) -> None:
        self.status = status
        self.headers = headers
        self.body = body
        self.version = version
        self.reason = reason

    @property
    def status_line(self) -> str:
        return f"{self.version} {self.status} {self.reason}".rstrip()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Response):
            return NotImplemented
        return (
            self.status == other.status
            and self.headers == other.headers
            and self.body == other.body
        )

    def __repr__(self) -> str:
        return (
            f"Response(status={self.status!r}, "
            f"headers=<{len(self.headers)} headers>, "
            f"body=<{len(self.body)} bytes>)"
        )


def _read(reader: BinaryIO, size: int) -> bytes:
    try:
        return reader.read(size)
    except OSError as exc:
        raise IoError(f"Failed to read response: {exc}") from exc


def read_line(reader: BinaryIO) -> bytes:
    """Read one CRLF-terminated line, CRLF included.

    A bare LF does not end the line; it is kept as part of the content.

    Raises:
        UnexpectedEof: If the stream ends before CRLF.
        ParseError: If the line exceeds :data:`MAX_LINE_LENGTH`.
        IoError: If the underlying read fails.
    """
    line = b""
    while not line.endswith(CRLF):
        try:
            part = reader.readline(MAX_LINE_LENGTH + 1 - len(line))
        except OSError as exc:
            raise IoError(f"Failed to read response: {exc}") from exc
        if not part:
            raise UnexpectedEof("Connection closed in the middle of a line")
        line += part
        if len(line) > MAX_LINE_LENGTH:
            raise ParseError(f"Line longer than {MAX_LINE_LENGTH} bytes")
    return line


def parse_status_line(line: bytes) -> tuple[str, int, str]:
    """Split a status line into version, code and reason phrase.

    Raises:
        MalformedStatusLine: If the second token is missing or not numeric.
    """
    text = line.decode("iso-8859-1").strip()
    parts = text.split(None, 2)
    if len(parts) < 2 or not parts[1].isdigit() or not parts[1].isascii():
        raise MalformedStatusLine(f"Malformed status line: {text!r}")
    reason = parts[2] if len(parts) == 3 else ""
    return parts[0], int(parts[1]), reason


def parse_header_line(line: bytes) -> tuple[str, str]:
    """Split a response header line on its first colon.

    Raises:
        MalformedHeaderLine: If the line has no colon.
    """
    text = line.decode("iso-8859-1")
    name, sep, value = text.partition(":")
    if not sep:
        raise MalformedHeaderLine(f"Malformed header line: {text.strip()!r}")
    return name.strip(), value.strip()


def read_fixed(reader: BinaryIO, length: int) -> bytes:
    """Read up to ``length`` bytes, stopping early only if the peer closes."""
    chunks = []
    remaining = length
    while remaining > 0:
        data = _read(reader, remaining)
        if not data:
            logger.warning(
                "Connection closed after %d of %d body bytes",
                length - remaining,
                length,
            )
            break
        chunks.append(data)
        remaining -= len(data)
    return b"".join(chunks)


def read_exact(reader: BinaryIO, length: int) -> bytes:
    """Read exactly ``length`` bytes.

    Raises:
        UnexpectedEof: If the stream ends first.
    """
    data = b""
    while len(data) < length:
        part = _read(reader, length - len(data))
        if not part:
            raise UnexpectedEof(
                f"Connection closed after {len(data)} of {length} chunk bytes"
            )
        data += part
    return data


def parse_chunk_size(line: bytes) -> int:
    """Return the size announced by a chunk-size line.

    Anything from the first ``;`` on is a chunk extension and is ignored.

    Raises:
        MalformedChunkSize: If the size is not a hexadecimal number.
    """
    size = line.split(b";", 1)[0].split(b"\r", 1)[0].strip(b" \t")
    if not HEX_PATTERN.fullmatch(size):
        raise MalformedChunkSize(f"Malformed chunk size line: {line!r}")
    return int(size, 16)


def read_chunked(reader: BinaryIO) -> bytes:
    """Decode a chunked transfer-coded body.

    Trailer fields after the last chunk are read and thrown away.
    """
    body = bytearray()
    while True:
        size = parse_chunk_size(read_line(reader))
        if size == 0:
            break
        body += read_exact(reader, size)
        # chunk data ends with CRLF; skip anything up to it
        read_line(reader)

    while read_line(reader) != CRLF:
        logger.debug("Discarding chunked trailer")
    return bytes(body)


def parse_response(reader: BinaryIO) -> Response:
    """Parse one HTTP/1.1 response from ``reader``.

    Args:
        reader: A binary file positioned at the start of the response.

    Returns:
        The parsed :class:`Response`.

    Raises:
        MissingStatusCode: If the head ends without a status line.
        MalformedStatusLine: If the status code is missing or non-numeric.
        MalformedHeaderLine: If a header line is unusable.
        MalformedChunkSize: If a chunk-size line is not hexadecimal.
        UnexpectedEof: If the peer closes before the message is complete.
        IoError: If reading from the transport fails.
    """
    line = read_line(reader)
    if line == CRLF:
        raise MissingStatusCode("No status code found")
    version, status, reason = parse_status_line(line)
    logger.debug("Status line: %s %d %s", version, status, reason)

    headers = Headers()
    content_length = 0
    chunked = False
    while True:
        line = read_line(reader)
        if line == CRLF:
            break
        name, value = parse_header_line(line)
        lowered = name.lower()
        if lowered == "content-length":
            if not value.isdigit() or not value.isascii():
                raise MalformedHeaderLine(f"Invalid Content-Length: {value!r}")
            content_length = int(value)
        elif lowered == "transfer-encoding" and "chunked" in value.lower():
            chunked = True
        headers.add(name, value)

    if chunked:
        body = read_chunked(reader)
    else:
        body = read_fixed(reader, content_length)

    return Response(
        status=status, headers=headers, body=body, version=version, reason=reason
    )
