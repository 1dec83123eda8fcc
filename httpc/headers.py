"""Header codec and the ordered header multimap.

Turns the raw ``key:value`` strings given on the command line into
validated ``(name, value)`` pairs, and provides :class:`Headers`, the
container used by both requests and responses.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from httpc.errors import InvalidName, InvalidValue, MissingColon, NonAsciiValue

# RFC 9110 token: 1*tchar
TOKEN_PATTERN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class Headers:
    """Ordered multimap of header fields.

    Lookups are case-insensitive, stored names keep their original case,
    and repeated names are kept as separate entries in arrival order.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._items: list[tuple[str, str]] = list(items)

    def add(self, name: str, value: str) -> None:
        """Append a field, keeping any existing field with the same name."""
        self._items.append((name, value))

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value stored under ``name``, or ``default``."""
        wanted = name.lower()
        for key, value in self._items:
            if key.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> list[str]:
        """Return every value stored under ``name``, in order."""
        wanted = name.lower()
        return [value for key, value in self._items if key.lower() == wanted]

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def copy(self) -> Headers:
        return Headers(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        wanted = name.lower()
        return any(key.lower() == wanted for key, _ in self._items)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


def validate_name(name: str) -> None:
    """Check that ``name`` is a valid HTTP token.

    Raises:
        InvalidName: If the name is empty or contains a non-token character.
    """
    if not TOKEN_PATTERN.match(name):
        raise InvalidName(f"Invalid header name: {name!r}")


def validate_value(value: str) -> None:
    """Check that ``value`` is visible ASCII (horizontal tab allowed).

    Raises:
        NonAsciiValue: If any character is outside the ASCII range.
        InvalidValue: If the value holds a control character.
    """
    for char in value:
        code = ord(char)
        if code > 0x7F:
            raise NonAsciiValue(f"Header value is not ASCII: {value!r}")
        if (code < 0x20 and char != "\t") or code == 0x7F:
            raise InvalidValue(f"Header value contains control characters: {value!r}")


def parse_header(raw: str) -> tuple[str, str]:
    """Parse a single ``key:value`` string.

    The string is split on the first colon only, so values such as
    ``Cookie: a=b:c`` survive intact. Both sides are stripped.

    Args:
        raw: The header string as typed by the user.

    Returns:
        The ``(name, value)`` pair.

    Raises:
        MissingColon: If the string has no colon.
        InvalidName: If the name is not an HTTP token.
        InvalidValue: If the value holds control characters.
        NonAsciiValue: If the value is not ASCII.
    """
    name, sep, value = raw.partition(":")
    if not sep:
        raise MissingColon(f"Header must have the form 'key:value': {raw!r}")
    name = name.strip()
    value = value.strip()
    validate_name(name)
    validate_value(value)
    return name, value


def parse_headers(raw_headers: Iterable[str]) -> list[tuple[str, str]]:
    """Parse ``key:value`` strings into an ordered list of pairs.

    Order is preserved and duplicate names are all kept.

    Args:
        raw_headers: The header strings, e.g. from repeated ``-h`` options.

    Returns:
        A list of ``(name, value)`` tuples.
    """
    return [parse_header(raw) for raw in raw_headers]
