"""Presentation layer: verbose traces and response rendering.

Nothing in here touches the network. Coloring is decided once, by the
caller, and handed to :class:`Console` explicitly.
"""

from __future__ import annotations

import enum
import os
import sys
from typing import TextIO

from httpc.message import RequestStyles, WireMessage, style
from httpc.response import Response

TEXT_CONTENT_TYPES = ("application/json",)


class ColorMode(str, enum.Enum):
    """Value of the ``--color`` option."""

    ALWAYS = "always"
    AUTO = "auto"
    NEVER = "never"


def use_color(mode: ColorMode, out: TextIO) -> bool:
    """Decide whether output written to ``out`` should carry ANSI colors.

    ``auto`` colors only a terminal, and honours ``NO_COLOR``.
    """
    if mode is ColorMode.ALWAYS:
        return True
    if mode is ColorMode.NEVER:
        return False
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(out, "isatty", None)
    return bool(isatty and isatty())


def format_head(response: Response, styles: RequestStyles | None = None) -> str:
    """Render the status line and headers, one per line."""
    styles = styles or RequestStyles()
    lines = [
        f"{style(response.version, styles.version)} "
        f"{style(str(response.status), styles.method)} {response.reason}".rstrip()
    ]
    for name, value in response.headers:
        lines.append(
            f"{style(name, styles.header_name)}: {style(value, styles.header_value)}"
        )
    return "\n".join(lines) + "\n"


def is_displayable(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type.startswith("text/") or media_type in TEXT_CONTENT_TYPES


def format_body(response: Response) -> str:
    """Return the body as text, or a note explaining why it is not shown.

    Only ``text/*`` and JSON bodies are printed; invalid UTF-8 is replaced
    rather than rejected.
    """
    content_type = response.headers.get("Content-Type")
    if content_type is None:
        return "No content type header, not displaying anything."
    if not is_displayable(content_type):
        return "Binary data, not displaying."
    return response.body.decode("utf-8", errors="replace")


def format_response(
    response: Response, verbosity: int = 0, styles: RequestStyles | None = None
) -> str:
    """Render a terminal response for stdout.

    Args:
        response: The response to show.
        verbosity: ``0`` shows the body only, ``1`` and above prefix the
            status line and headers.
        styles: Markup for the head; plain when omitted.

    Returns:
        The text to print.
    """
    text = ""
    if verbosity >= 1:
        text += format_head(response, styles) + "\n"
    return text + format_body(response)


def format_request_body(body: bytes | None) -> str:
    if not body:
        return ""
    try:
        return body.decode("utf-8") + "\n\n"
    except UnicodeDecodeError:
        return "[Invalid UTF-8]\n\n"


class Console:
    """Where verbose traces and the final response are written."""

    def __init__(self, out: TextIO | None = None, color: bool = False) -> None:
        self.out = out if out is not None else sys.stdout
        self.color = color
        self.styles = RequestStyles.colorized() if color else RequestStyles()

    def _marker(self, text: str) -> str:
        return style(text, "33" if self.color else "")  # yellow

    def write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def sending(self, wire: WireMessage) -> None:
        """Show the outgoing request (``-vv``)."""
        self.write(
            f"{self._marker('→ Sending')}\n"
            f"{wire.render(self.styles)}"
            f"{format_request_body(wire.body)}"
        )

    def received(self) -> None:
        """Mark the start of the response (``-vv``)."""
        self.write(f"{self._marker('← Received')}\n")

    def redirecting(self, response: Response, next_url: str) -> None:
        """Show an intermediate redirect response (``-v``)."""
        self.write(
            f"{format_head(response, self.styles)}"
            f"{self._marker('→ Redirecting to')} {next_url}\n\n"
        )

    def response(self, response: Response, verbosity: int = 0) -> None:
        """Print the terminal response."""
        self.write(format_response(response, verbosity, self.styles) + "\n")

    def head(self, response: Response) -> None:
        """Print only the status line and headers."""
        self.write(format_head(response, self.styles) + "\n")
