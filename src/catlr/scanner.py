"""Content scanner: prune-aware DFS over a scan root using os.scandir."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from catlr.filter import FilterSet
from catlr.pattern import SEP, Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry discovered during a walk.

    Attributes:
        path: Absolute path of the filesystem entry.
        name: Basename of the entry.
        relative_path: Path relative to the scan root, ``/``-separated.
        is_dir: Whether the entry is a directory (symlinks not followed).
    """

    path: Path
    name: str
    relative_path: str
    is_dir: bool

    @property
    def candidate(self) -> Candidate:
        return Candidate(self.relative_path, self.name, self.is_dir)


def read_entries(directory: Path, relative: str = "") -> list[Entry]:
    """List the immediate children of *directory* sorted by name.

    Names are compared by code point, independent of locale. Entries
    whose type cannot be determined are skipped.

    Args:
        directory: Directory to enumerate.
        relative: Path of *directory* relative to the scan root.

    Returns:
        list[Entry]: Children in name order.

    Raises:
        OSError: If *directory* itself cannot be enumerated.
    """
    with os.scandir(directory) as it:
        raw_entries = list(it)

    entries: list[Entry] = []
    for dir_entry in raw_entries:
        try:
            is_dir = dir_entry.is_dir(follow_symlinks=False)
        except OSError:
            logger.debug("Cannot stat: %s", dir_entry.path)
            continue
        name = dir_entry.name
        entries.append(
            Entry(
                path=Path(dir_entry.path),
                name=name,
                relative_path=f"{relative}{SEP}{name}" if relative else name,
                is_dir=is_dir,
            )
        )

    entries.sort(key=lambda e: e.name)
    return entries


def iter_printable(root: Path, filters: FilterSet) -> Iterator[Entry]:
    """Yield the files under *root* whose content should be printed.

    Directories hidden in listing scope are pruned before they are
    enumerated. Files surviving the pruning are tested in printing scope.
    Symlinked directories are not entered; symlinked files are followed.

    Args:
        root: Scan root directory.
        filters: Filter set for this root.

    Yields:
        Entry: Printable files in depth-first, name-sorted order.

    Raises:
        OSError: If *root* cannot be enumerated.
    """
    # Stack items are pushed in reverse so the first name is popped first.
    stack: list[Entry] = list(reversed(read_entries(root)))

    while stack:
        entry = stack.pop()

        if entry.is_dir:
            if not filters.listing.should_show(entry.candidate):
                logger.debug("Pruned: %s", entry.relative_path)
                continue
            try:
                children = read_entries(entry.path, entry.relative_path)
            except OSError:
                logger.debug("Cannot read directory: %s", entry.path)
                continue
            stack.extend(reversed(children))
            continue

        try:
            is_file = entry.path.is_file()
        except OSError:
            logger.debug("Cannot stat: %s", entry.path)
            continue
        if not is_file:
            continue

        if filters.printing.should_show(entry.candidate):
            yield entry
