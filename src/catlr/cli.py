"""CLI entry point for catlr — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from itertools import permutations
from pathlib import Path
from typing import BinaryIO, TextIO

from catlr import __version__
from catlr.config import load_config
from catlr.filter import FilterSet
from catlr.gateway import OutputIdentity, Tools
from catlr.report import ReportOptions, run_report

logger = logging.getLogger(__name__)

# (dest, scope letters, action letter, long option, help)
_FILTER_FLAGS: list[tuple[str, str, str, str, str]] = [
    ("exclude", "lp", "e", "--exclude", "Exclude from both listing and printing"),
    ("include", "lp", "i", "--include", "Include in both scopes; overrides excludes"),
    ("list_exclude", "l", "e", "--list-exclude", "Exclude from the tree listing only"),
    ("list_include", "l", "i", "--list-include", "Only list matching paths"),
    ("print_exclude", "p", "e", "--print-exclude", "Exclude from printing only"),
    ("print_include", "p", "i", "--print-include", "Only print files matching pattern"),
]


def _flag_spellings(scopes: str, action: str) -> list[str]:
    """Return every short spelling of a filter flag.

    Scope letters may precede or follow the action letter in any order,
    so ``-le`` and ``-el`` are the same flag. Naming both scopes is the
    same as naming none.
    """
    spellings = {"-" + "".join(p) for p in permutations(scopes + action)}
    if scopes == "lp":
        spellings.add("-" + action)
    return sorted(spellings, key=lambda s: (len(s), s))


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``catlr`` command.
    """
    parser = argparse.ArgumentParser(
        prog="catlr",
        description="print a directory tree followed by the contents of its files",
        allow_abbrev=False,
        epilog=(
            "examples:\n"
            "  catlr -e .git node_modules        ignore .git and node_modules\n"
            "  catlr -e build/ -i build/main.js  keep build/main.js only\n"
            "  catlr -pi '*.cpp' '*.h'           print only .cpp and .h files\n"
            "  catlr -le .git -pe README.md      hide .git, skip printing README"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "directories",
        nargs="*",
        metavar="directory",
        help="Directories to audit (default: current directory). "
        "Legacy extensions such as .txt .md become print includes.",
    )

    for dest, scopes, action, long_option, help_text in _FILTER_FLAGS:
        parser.add_argument(
            *_flag_spellings(scopes, action),
            long_option,
            nargs="+",
            action="extend",
            default=[],
            dest=dest,
            metavar="PATTERN",
            help=help_text,
        )

    parser.add_argument(
        "--no-ignore",
        action="store_false",
        dest="use_ignore_file",
        help="Do not merge each root's .gitignore into the exclude patterns",
    )
    parser.add_argument(
        "--charset",
        choices=["unicode", "ascii"],
        default="unicode",
        help="Character set for the built-in tree (default: unicode)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log tool selection (-v) and skipped entries (-vv) to stderr",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _is_legacy_extension(token: str) -> bool:
    """Return whether *token* is a bare extension like ``.txt``."""
    if len(token) < 2 or not token.startswith(".") or token == "..":
        return False
    if "/" in token or os.sep in token:
        return False
    return not Path(token).exists()


def split_directories(tokens: list[str]) -> tuple[list[str], list[str]]:
    """Separate root directories from legacy extension patterns.

    Args:
        tokens: Positional CLI tokens.

    Returns:
        tuple[list[str], list[str]]: Root directories (``["."]`` when none
        are given) and print-include patterns such as ``*.txt``.
    """
    roots: list[str] = []
    extensions: list[str] = []
    for token in tokens:
        if _is_legacy_extension(token):
            extensions.append(f"*{token}")
        else:
            roots.append(token)
    return roots or ["."], extensions


def build_filters(args: argparse.Namespace, legacy_includes: list[str]) -> FilterSet:
    """Build the filter set from parsed CLI options.

    Args:
        args: Parsed CLI namespace.
        legacy_includes: Extra print-include patterns.

    Returns:
        FilterSet: Filters for both scopes.
    """
    return FilterSet.from_patterns(
        list_includes=[*args.include, *args.list_include],
        list_excludes=[*args.exclude, *args.list_exclude],
        print_includes=[*args.include, *args.print_include, *legacy_includes],
        print_excludes=[*args.exclude, *args.print_exclude],
    )


def configure_logging(verbosity: int, stream: TextIO | None = None) -> None:
    """Send log records to stderr at a level chosen by ``-v`` count."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="catlr: %(levelname)s: %(message)s",
        stream=stream or sys.stderr,
    )


def run_catlr(
    argv: list[str] | None,
    out: BinaryIO,
    err: TextIO,
    tools: Tools | None = None,
    output_identity: OutputIdentity | None = None,
) -> int:
    """Run catlr with provided CLI args, writing the report to *out*.

    This function takes its streams and tools explicitly and is the
    primary test target for CLI behavior.

    Args:
        argv: Command-line argument list without program name.
        out: Binary report stream.
        err: Diagnostic stream.
        tools: External commands. ``None`` uses the built-in renderers.
        output_identity: Identity of the file *out* writes to, if any.

    Returns:
        int: Process exit code. Unreadable roots are reported on *err*
        but do not change it.
    """
    args = build_parser().parse_args(argv)
    return _run_with_args(args, out, err, tools or Tools(), output_identity)


def _run_with_args(
    args: argparse.Namespace,
    out: BinaryIO,
    err: TextIO,
    tools: Tools,
    output_identity: OutputIdentity | None,
) -> int:
    roots, legacy_includes = split_directories(args.directories)
    filters = build_filters(args, legacy_includes)
    options = ReportOptions(
        tools=tools,
        output_identity=output_identity,
        use_ignore_file=args.use_ignore_file,
        charset=args.charset,
    )
    failed = run_report(roots, filters, options, out, err)
    if failed:
        logger.debug("%d of %d roots could not be audited", failed, len(roots))
    return 0


def main() -> None:
    """Run the CLI entry point with process arguments.

    Parses args exactly once, detects the output identity and the external
    tools, and writes the report to stdout. Exits with code 2 on usage
    errors (argparse), 0 otherwise.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse
    configure_logging(args.verbose)

    output_identity = OutputIdentity.of_stream(sys.stdout)
    tools = Tools.detect(load_config())

    code = _run_with_args(args, sys.stdout.buffer, sys.stderr, tools, output_identity)
    sys.exit(code)
