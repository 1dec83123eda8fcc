"""Request orchestrator: build, connect, send and parse, hop after hop.

Each hop opens its own connection and closes it when the response has
been read. Redirects resend the original method, headers and body
unchanged, even for POST on 301/302/303.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from httpc.display import Console
from httpc.errors import TooManyRedirects
from httpc.message import Request, build_message
from httpc.redirects import resolve_location, should_redirect
from httpc.response import Response, parse_response
from httpc.transport import connect

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 10

VERBOSE = 1
VERY_VERBOSE = 2


def send_request(
    request: Request,
    verbosity: int = 0,
    timeout: float | None = None,
    console: Console | None = None,
) -> Response:
    """Perform a single hop and return its response.

    Args:
        request: The request to send.
        verbosity: At ``VERY_VERBOSE`` the outgoing message and the
            send/receive markers are written to ``console``.
        timeout: Optional socket timeout in seconds.
        console: Destination for verbose output.

    Returns:
        The parsed response.

    Raises:
        HttpcError: Any connect, send or parse failure.
    """
    wire = build_message(request)
    trace = console is not None and verbosity >= VERY_VERBOSE
    if trace:
        console.sending(wire)

    logger.debug("%s %s", request.method, request.url.url)
    with connect(request.url, timeout=timeout) as stream:
        stream.send(wire.to_bytes())
        response = parse_response(stream.reader)

    if trace:
        console.received()
    return response


def do_request(
    method: str,
    url: str,
    headers: Iterable[tuple[str, str]] = (),
    body: bytes | None = None,
    verbosity: int = 0,
    follow_redirects: bool = False,
    *,
    max_redirects: int | None = DEFAULT_MAX_REDIRECTS,
    timeout: float | None = None,
    console: Console | None = None,
) -> Response:
    """Send a request, optionally following ``Location`` redirects.

    Args:
        method: HTTP method, e.g. ``GET``.
        url: Absolute URL of the first hop.
        headers: Caller headers, already validated.
        body: Request body, or ``None`` for no body.
        verbosity: 0 silent, 1 intermediate heads, 2 full request trace.
        follow_redirects: Whether to follow 3xx/201 responses that carry
            a ``Location`` header.
        max_redirects: Redirects allowed before giving up; ``None`` for
            no limit.
        timeout: Optional socket timeout in seconds.
        console: Destination for verbose output.

    Returns:
        The terminal response.

    Raises:
        TooManyRedirects: If the chain exceeds ``max_redirects``.
        HttpcError: Any failure of an individual hop.
    """
    headers = list(headers)
    redirects = 0

    while True:
        request = Request(method, url, headers, body)
        response = send_request(request, verbosity, timeout=timeout, console=console)

        if not follow_redirects or not should_redirect(response.status):
            return response
        location = response.headers.get("Location")
        if location is None:
            logger.debug("HTTP %d without Location, not following", response.status)
            return response
        if max_redirects is not None and redirects >= max_redirects:
            raise TooManyRedirects(
                f"Exceeded {max_redirects} redirects (last Location: {location})"
            )

        url = resolve_location(request.url, location)
        redirects += 1
        logger.debug("Redirect %d: HTTP %d -> %s", redirects, response.status, url)
        if console is not None and verbosity >= VERBOSE:
            console.redirecting(response, url)
