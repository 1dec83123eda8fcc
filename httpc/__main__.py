"""httpc: main entry point.

Ties together the CLI, the request core and the presentation layer, and
owns the file I/O for ``-f`` and ``-o``.
"""

import argparse
import logging
import sys

from httpc.cli import parse_cli
from httpc.client import do_request
from httpc.display import Console, use_color
from httpc.errors import HeaderParseError, HttpcError
from httpc.headers import parse_headers


def ensure_scheme(url: str) -> str:
    """Prefix ``http://`` to a URL typed without a scheme."""
    url = url.strip()
    if "://" in url:
        return url
    return "http://" + url


def read_body(args: argparse.Namespace) -> bytes | None:
    """Return the request body from ``-d`` or ``-f``, if any.

    Raises:
        OSError: If the ``-f`` file cannot be read.
    """
    if args.data is not None:
        return args.data.encode("utf-8")
    if args.file is not None:
        with open(args.file, "rb") as fh:
            return fh.read()
    return None


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Run the httpc tool.

    Args:
        argv: Optional argument list (defaults to sys.argv).

    Returns:
        Exit code (0 = success, 1 = request failed, 2 = bad input or
        unusable file).
    """
    args = parse_cli(argv)
    configure_logging(args.debug)
    console = Console(sys.stdout, color=use_color(args.color, sys.stdout))

    # --- Inputs ---
    try:
        headers = parse_headers(args.header)
    except HeaderParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        body = read_body(args)
    except OSError as exc:
        print(f"Error reading body file: {exc}", file=sys.stderr)
        return 2

    # --- Request ---
    try:
        response = do_request(
            method=args.command.upper(),
            url=ensure_scheme(args.url),
            headers=headers,
            body=body,
            verbosity=args.verbosity,
            follow_redirects=args.location,
            max_redirects=args.max_redirects,
            timeout=args.timeout,
            console=console,
        )
    except HttpcError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # --- Output ---
    if args.output is None:
        console.response(response, args.verbosity)
        return 0

    if args.verbosity >= 1:
        console.head(response)
    try:
        with open(args.output, "wb") as fh:
            fh.write(response.body)
    except OSError as exc:
        print(f"Error writing output file: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
