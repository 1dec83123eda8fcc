"""Transport connector: TCP, optionally wrapped in TLS.

The scheme is looked at exactly once, in :func:`connect`. Everything
downstream talks to a :class:`Stream` and never needs to know whether the
bytes are encrypted.
"""

from __future__ import annotations

import logging
import socket
import ssl
from typing import BinaryIO

from urllib3.exceptions import LocationParseError
from urllib3.util import Url
from urllib3.util.connection import create_connection
from urllib3.util.ssl_ import create_urllib3_context, ssl_wrap_socket

from httpc.errors import ConnectError, DnsError, IoError, TlsError
from httpc.message import get_port

logger = logging.getLogger(__name__)


class Stream:
    """A connected, bidirectional byte stream owned by a single hop."""

    kind = "stream"

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._reader: BinaryIO | None = None

    @property
    def reader(self) -> BinaryIO:
        """Buffered binary file over the socket, for the response parser."""
        if self._reader is None:
            self._reader = self._sock.makefile("rb")
        return self._reader

    def send(self, data: bytes) -> None:
        """Write all of ``data`` to the peer.

        Raises:
            IoError: If the socket fails mid-write.
        """
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise IoError(f"Failed to send request: {exc}") from exc

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self._sock.close()

    def __enter__(self) -> Stream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.kind}>"


class PlainStream(Stream):
    """Unencrypted TCP stream used for ``http`` URLs."""

    kind = "tcp"


class TlsStream(Stream):
    """TLS-wrapped TCP stream used for ``https`` URLs."""

    kind = "tls"

    @property
    def tls_version(self) -> str | None:
        """Negotiated protocol, e.g. ``"TLSv1.3"``."""
        return self._sock.version()


def _bare_host(url: Url) -> str:
    # IPv6 literals keep their brackets in the URL but not on the socket
    return (url.host or "").strip("[]")


def open_tcp(host: str, port: int, timeout: float | None = None) -> socket.socket:
    """Resolve ``host`` and connect to the first address that answers.

    Args:
        host: Host name or IP literal.
        port: TCP port.
        timeout: Socket timeout in seconds; ``None`` blocks indefinitely.

    Returns:
        The connected socket.

    Raises:
        DnsError: If the name cannot be resolved.
        ConnectError: If no resolved address accepts the connection.
    """
    try:
        sock = create_connection((host, port), timeout=timeout)
    except (socket.gaierror, LocationParseError) as exc:
        raise DnsError(f"Could not resolve host {host!r}: {exc}") from exc
    except OSError as exc:
        raise ConnectError(f"Could not connect to {host}:{port}: {exc}") from exc
    logger.debug("Connected to %s:%d (%s)", host, port, sock.getpeername())
    return sock


def wrap_tls(sock: socket.socket, server_hostname: str) -> ssl.SSLSocket:
    """Run a TLS client handshake over ``sock``.

    The certificate chain is checked against the system trust store and
    the certificate must match ``server_hostname``.

    Raises:
        TlsError: If the handshake or verification fails.
    """
    context = create_urllib3_context(cert_reqs=ssl.CERT_REQUIRED)
    context.load_default_certs()
    context.check_hostname = True
    try:
        tls_sock = ssl_wrap_socket(
            sock, ssl_context=context, server_hostname=server_hostname
        )
    except (ssl.SSLError, ssl.CertificateError) as exc:
        sock.close()
        raise TlsError(f"TLS handshake with {server_hostname!r} failed: {exc}") from exc
    except OSError as exc:
        sock.close()
        raise ConnectError(f"Connection lost during TLS handshake: {exc}") from exc
    logger.debug("TLS established with %s (%s)", server_hostname, tls_sock.version())
    return tls_sock


def connect(url: Url, timeout: float | None = None) -> Stream:
    """Open the connection for one hop.

    Args:
        url: The parsed request URL; its scheme picks plain TCP or TLS.
        timeout: Optional socket timeout in seconds.

    Returns:
        A :class:`PlainStream` for ``http`` (and unknown schemes) or a
        :class:`TlsStream` for ``https``.
    """
    host = _bare_host(url)
    sock = open_tcp(host, get_port(url), timeout=timeout)
    if url.scheme == "https":
        return TlsStream(wrap_tls(sock, host))
    return PlainStream(sock)
