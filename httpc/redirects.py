"""URL resolver for ``Location`` redirects.

Given the URL of the request that was redirected and the raw ``Location``
value, compute the absolute URL of the next hop. Only dot segments are
normalized; percent-encoding, scheme and port are left exactly as written.
"""

from __future__ import annotations

import re

from urllib3.util import Url

from httpc.message import parse_url

ABSOLUTE_PREFIXES = ("http://", "https://")

# path ends at the first "?" or "#"
_SUFFIX_PATTERN = re.compile(r"[?#]")


def should_redirect(status: int) -> bool:
    """Return True for any 3xx status and for 201 Created."""
    return 300 <= status <= 399 or status == 201


def normalize_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments.

    ``..`` at the root is a no-op and the result always starts with a
    single ``/``, so ``normalize_path("..")`` is ``"/"``.

    >>> normalize_path("/foo/./../test")
    '/test'
    """
    segments = path.split("/")
    if segments and segments[0] == "":
        segments = segments[1:]

    kept: list[str] = []
    for segment in segments:
        if segment == ".":
            continue
        if segment == "..":
            if kept:
                kept.pop()
            continue
        kept.append(segment)
    return "/" + "/".join(kept)


def _normalize_reference(reference: str) -> str:
    # query and fragment are carried over untouched
    match = _SUFFIX_PATTERN.search(reference)
    if match is None:
        return normalize_path(reference)
    return normalize_path(reference[: match.start()]) + reference[match.start() :]


def _origin(base: Url) -> str:
    return f"{base.scheme or 'http'}://{base.netloc}"


def resolve_location(base: str | Url, location: str) -> str:
    """Resolve a ``Location`` value against the URL that produced it.

    Args:
        base: The URL of the redirected request.
        location: The raw ``Location`` header value.

    Returns:
        The absolute URL to request next.

    Raises:
        UriError: If ``base`` is not a valid URL.
    """
    if location.startswith(ABSOLUTE_PREFIXES):
        return location

    if not isinstance(base, Url):
        base = parse_url(base)
    base_path = base.path or ""

    if location.startswith("/"):
        return _origin(base) + _normalize_reference(location)

    if location.startswith("?"):
        return _origin(base) + normalize_path(base_path) + location

    directory = base_path.rsplit("/", 1)[0] if "/" in base_path else ""
    return _origin(base) + _normalize_reference(f"{directory}/{location}")
