"""Gitignore integration — load a root's .gitignore as an exclude matcher."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pathspec import GitIgnoreSpec

from catlr.pattern import SEP, Candidate

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gitignore"


@dataclass(frozen=True, slots=True)
class GitIgnoreMatcher:
    """Exclude matcher backed by a compiled ``.gitignore`` spec.

    Directories are tested with a trailing ``/`` so that directory-only
    rules such as ``dist/`` apply to them.
    """

    spec: GitIgnoreSpec
    source: Path

    def matches(self, candidate: Candidate) -> bool:
        path = candidate.relative_path
        if candidate.is_dir:
            path += SEP
        return self.spec.match_file(path)


def load_gitignore_spec(root: Path) -> GitIgnoreSpec | None:
    """Load .gitignore patterns from *root* directory.

    Args:
        root: Directory containing the ``.gitignore`` file.

    Returns:
        A compiled spec when a ``.gitignore`` exists and is readable,
        otherwise ``None``.
    """
    gitignore_path = root / IGNORE_FILE
    try:
        lines = gitignore_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        logger.debug("Cannot read .gitignore: %s", gitignore_path)
        return None
    return GitIgnoreSpec.from_lines(lines)


def load_ignore_matchers(root: Path) -> list[GitIgnoreMatcher]:
    """Return the exclude matchers contributed by *root*'s ignore file."""
    spec = load_gitignore_spec(root)
    if spec is None:
        return []
    matcher = GitIgnoreMatcher(spec=spec, source=root / IGNORE_FILE)
    logger.debug("Merging %s into exclude patterns", matcher.source)
    return [matcher]
