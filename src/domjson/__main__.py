"""Command line driver: parse a markup file and print its JSON tree.

Usage:
    python -m domjson page.html
    cat page.html | python -m domjson --format tree
"""

import argparse
import sys
from pathlib import Path

from .errors import MarkupError
from .parser import DomJSON, ParserOpts


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="domjson",
        description="Parse a markup document and print its DOM tree as JSON",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="Markup file to parse (default: read stdin)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "tree"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("--sort-attributes", action="store_true", help="Sort attribute keys in JSON output")
    parser.add_argument(
        "--legacy-escaping",
        action="store_true",
        help="Escape only quotes, tabs and newlines, while scanning",
    )
    parser.add_argument("--max-depth", type=int, default=None, help="Reject documents nested deeper than N")
    parser.add_argument("--debug", action="store_true", help="Trace parsing steps on stderr")
    return parser


def read_source(file):
    if file == "-":
        return sys.stdin.buffer.read()
    return Path(file).read_bytes()


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    try:
        source = read_source(args.file)
    except OSError as e:
        print(f"domjson: cannot read {args.file}: {e.strerror}", file=sys.stderr)
        return 2

    opts = ParserOpts(escape_on_scan=args.legacy_escaping, max_depth=args.max_depth)
    try:
        doc = DomJSON(source, debug=args.debug, opts=opts)
    except MarkupError as e:
        name = "<stdin>" if args.file == "-" else args.file
        error = e.error
        if error.line is not None:
            print(f"{name}:{error.line}:{error.column}: {error.code} - {error.message}", file=sys.stderr)
        else:
            print(f"{name}: {error.code} - {error.message}", file=sys.stderr)
        return 1

    if args.format == "tree":
        print(doc.to_test_format())
    else:
        print(doc.to_json(sort_attributes=args.sort_attributes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
