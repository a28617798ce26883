"""Per-root report: header, tree, file contents and end marker."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Literal, TextIO

from catlr import CatlrError
from catlr.filter import FilterSet
from catlr.gateway import OutputIdentity, Tools, print_file, print_tree_external
from catlr.gitignore import load_ignore_matchers
from catlr.scanner import Entry, iter_printable
from catlr.tree import render_tree

logger = logging.getLogger(__name__)

LOOP_WARNING = "[Warning: Skipping file to avoid I/O loop (file is program output)]"
END_MARKER = "--- End of Listing ---"


class RootError(CatlrError):
    """A requested root cannot be audited; other roots still proceed."""


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Options shared by every root of a run.

    Attributes:
        tools: External commands selected at startup.
        output_identity: Identity of the report's destination file, if any.
        use_ignore_file: Whether each root's ``.gitignore`` is merged into
            the exclude patterns.
        charset: Character set for the built-in tree.
    """

    tools: Tools = field(default_factory=Tools)
    output_identity: OutputIdentity | None = None
    use_ignore_file: bool = True
    charset: Literal["unicode", "ascii"] = "unicode"


def resolve_root(directory: str) -> Path:
    """Resolve directory and validate it is a directory.

    Args:
        directory: Directory argument from CLI.

    Returns:
        Path: Canonical root path.

    Raises:
        RootError: If directory does not exist or is not a directory.
    """
    try:
        root = Path(directory).resolve(strict=True)
    except OSError as exc:
        raise RootError(f"cannot access '{directory}': {exc.strerror or exc}") from exc
    if not root.is_dir():
        raise RootError(f"'{directory}' is not a directory")
    return root


class _Writer:
    """Text helper over the binary report stream."""

    def __init__(self, out: BinaryIO) -> None:
        self.out = out

    def line(self, text: str = "") -> None:
        self.out.write(text.encode("utf-8", "surrogateescape") + b"\n")


def _write_tree(
    root: Path, filters: FilterSet, options: ReportOptions, writer: _Writer
) -> None:
    tools = options.tools
    if tools.tree_command and filters.listing.active:
        logger.info(
            "External '%s' command does not support filters. Using built-in tree.",
            tools.tree_command,
        )
    elif print_tree_external(root, tools, writer.out):
        return
    elif not tools.tree_command:
        logger.info("No external tree command available. Using built-in tree.")

    writer.line(render_tree(root, filters.listing, options.charset))


def _write_file(
    entry: Entry, options: ReportOptions, writer: _Writer, err: TextIO
) -> None:
    header = f"--- {entry.relative_path} ---"

    identity = options.output_identity
    if identity is not None and identity.is_same_file(entry.path):
        err.write(f"{header}\n{LOOP_WARNING}\n")
        writer.line()
        return

    writer.line(header)
    try:
        print_file(entry.path, options.tools, writer.out)
    except OSError:
        logger.debug("Cannot read file: %s", entry.path)
        err.write(f"[Could not open file: {entry.path}]\n")
    writer.line()


def audit_root(
    root: Path,
    filters: FilterSet,
    options: ReportOptions,
    out: BinaryIO,
    err: TextIO,
) -> None:
    """Write the full report for one resolved root.

    The tree and the content scan walk the root independently. Errors on
    single entries are skipped; a root that cannot be enumerated during
    the content scan is reported once on *err*.

    Args:
        root: Canonical root directory.
        filters: Filter set shared by all roots.
        options: Run options.
        out: Binary report stream.
        err: Diagnostic stream.
    """
    if options.use_ignore_file:
        filters = filters.with_excludes(load_ignore_matchers(root))

    writer = _Writer(out)
    writer.line(f"--- Directory Tree for: {root.name or root} ---")
    writer.line(f"Located at: {root}")
    writer.line()

    _write_tree(root, filters, options, writer)
    writer.line()

    writer.line("--- File Contents (Recursive) ---")
    try:
        for entry in iter_printable(root, filters):
            _write_file(entry, options, writer, err)
    except OSError as exc:
        err.write(f"catlr: error during file traversal of '{root}': {exc}\n")

    writer.line(END_MARKER)
    out.flush()


def run_report(
    directories: Sequence[str],
    filters: FilterSet,
    options: ReportOptions,
    out: BinaryIO,
    err: TextIO,
) -> int:
    """Audit each directory in turn.

    Args:
        directories: Root directory arguments, processed in order.
        filters: Filter set shared by all roots.
        options: Run options.
        out: Binary report stream.
        err: Diagnostic stream.

    Returns:
        int: Number of roots that could not be audited.
    """
    failed = 0
    for directory in directories:
        try:
            root = resolve_root(directory)
        except RootError as exc:
            err.write(f"catlr: {exc}\n")
            failed += 1
            continue
        audit_root(root, filters, options, out, err)
    return failed
