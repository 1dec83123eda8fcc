"""Command-line interface.

httpc help [get|post]
httpc get [-v] (-h "k:v")* URL
httpc post [-v] (-h "k:v")* [-d inline-data] [-f file] URL
"""

import argparse
import sys

from httpc import __version__
from httpc.client import DEFAULT_MAX_REDIRECTS
from httpc.display import ColorMode


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--help",
        action="help",
        help="Get help for this command.",
    )
    parser.add_argument(
        "-v",
        action="count",
        default=0,
        dest="verbosity",
        help=(
            "Verbosity of the output. -v prints the protocol, status and "
            "headers of the response; -vv also prints the request message."
        ),
    )
    parser.add_argument(
        "-o",
        dest="output",
        metavar="FILE",
        default=None,
        help="Write the response body to FILE instead of stdout.",
    )
    parser.add_argument(
        "-L",
        action="store_true",
        dest="location",
        help="Follow 'Location' header redirects by repeating requests.",
    )
    parser.add_argument(
        "-h",
        action="append",
        dest="header",
        metavar="key:value",
        default=[],
        help="Associates headers to the HTTP request with the format 'key:value'.",
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=DEFAULT_MAX_REDIRECTS,
        metavar="N",
        help=f"Give up after N redirects (default: {DEFAULT_MAX_REDIRECTS}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Socket timeout. By default the operating system's is used.",
    )
    parser.add_argument("url", metavar="URL", help="URL to send the request to.")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the httpc CLI."""
    # -h is taken by --header, so help is long-form only
    parser = argparse.ArgumentParser(
        prog="httpc",
        description="httpc {ver}: a small HTTP/1.1 client.".format(ver=__version__),
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  httpc get -v 'http://httpbin.org/get?course=networking'\n"
            "  httpc post -h Content-Type:application/json "
            "-d '{\"Assignment\": 1}' http://httpbin.org/post\n"
        ),
    )
    parser.add_argument("--help", action="help", help="Get help for this command.")
    parser.add_argument(
        "--color",
        type=ColorMode,
        choices=list(ColorMode),
        metavar="{always,auto,never}",
        default=ColorMode.AUTO,
        help="Should the output be in color? (default: auto)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log protocol details to stderr.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", metavar="{get,post}")
    commands.required = True

    get = commands.add_parser(
        "get",
        add_help=False,
        help="Executes an HTTP GET request and prints the response.",
    )
    _add_common_options(get)

    post = commands.add_parser(
        "post",
        add_help=False,
        help="Executes an HTTP POST request and prints the response.",
    )
    _add_common_options(post)
    body = post.add_mutually_exclusive_group()
    body.add_argument(
        "-d",
        dest="data",
        default=None,
        help="Associates inline data to the body of the HTTP POST request.",
    )
    body.add_argument(
        "-f",
        dest="file",
        default=None,
        help="Associates the content of a file to the body of the HTTP POST request.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments.

    Raises:
        SystemExit: If a numeric option is out of range or the URL is empty.
    """
    if not args.url.strip():
        print("Error: URL cannot be empty.", file=sys.stderr)
        sys.exit(2)

    if args.max_redirects < 0:
        print("Error: --max-redirects cannot be negative.", file=sys.stderr)
        sys.exit(2)

    if args.timeout is not None and args.timeout <= 0:
        print("Error: --timeout must be positive.", file=sys.stderr)
        sys.exit(2)


def parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Args:
        argv: Optional list of arguments (defaults to sys.argv).

    Returns:
        Parsed and validated argument namespace. ``data`` and ``file`` are
        always present, ``None`` for ``get``.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    args.data = getattr(args, "data", None)
    args.file = getattr(args, "file", None)
    validate_args(args)
    return args
