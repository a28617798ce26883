"""Built-in tree renderer with tree-compatible box-drawing output."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from catlr.filter import ScopeFilter
from catlr.scanner import Entry, read_entries

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Glyphs:
    """Box-drawing character set for tree rendering."""

    branch: str  # ├──
    last_branch: str  # └──
    vertical: str  # │
    space: str  # (indent)


UNICODE_GLYPHS = Glyphs(
    branch="├── ",
    last_branch="└── ",
    vertical="│   ",
    space="    ",
)

ASCII_GLYPHS = Glyphs(
    branch="|-- ",
    last_branch="\\-- ",
    vertical="|   ",
    space="    ",
)


def _visible_children(
    directory: Path, relative: str, listing: ScopeFilter
) -> list[Entry]:
    """Return the children of *directory* shown in listing scope.

    Hidden entries are dropped here so they never count towards the
    last-sibling connector.
    """
    try:
        entries = read_entries(directory, relative)
    except OSError:
        logger.debug("Cannot read directory: %s", directory)
        return []
    return [e for e in entries if listing.should_show(e.candidate)]


def render_tree(
    root: Path,
    listing: ScopeFilter | None = None,
    charset: Literal["unicode", "ascii"] = "unicode",
) -> str:
    """Render *root* as a connected-line tree.

    Args:
        root: Scan root directory.
        listing: Listing-scope filter. ``None`` shows everything.
        charset: Character set for tree drawing.

    Returns:
        str: Root line followed by one line per visible entry, without a
        trailing newline.
    """
    active = listing or ScopeFilter()
    glyphs = ASCII_GLYPHS if charset == "ascii" else UNICODE_GLYPHS

    # The filesystem root already ends in a separator.
    lines: list[str] = [f"{root.name}/" if root.name else str(root)]

    # Iterative DFS using an explicit stack.
    # Stack items: (entry, prefix, is_last_sibling)
    # Push children in reverse order so that the first child is popped first.
    stack: list[tuple[Entry, str, bool]] = []
    children = _visible_children(root, "", active)
    for i in range(len(children) - 1, -1, -1):
        stack.append((children[i], "", i == len(children) - 1))

    while stack:
        entry, prefix, is_last = stack.pop()
        connector = glyphs.last_branch if is_last else glyphs.branch

        if not entry.is_dir:
            lines.append(f"{prefix}{connector}{entry.name}")
            continue

        lines.append(f"{prefix}{connector}{entry.name}/")
        next_prefix = prefix + (glyphs.space if is_last else glyphs.vertical)
        grandchildren = _visible_children(entry.path, entry.relative_path, active)
        for j in range(len(grandchildren) - 1, -1, -1):
            stack.append((grandchildren[j], next_prefix, j == len(grandchildren) - 1))

    return "\n".join(lines)
