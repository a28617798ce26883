"""Path pattern grammar: classification at parse time, pure matching."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

SEP = "/"


def normalize_separators(text: str) -> str:
    """Rewrite platform separators to the canonical ``/``."""
    text = text.replace(os.sep, SEP)
    if os.altsep:
        text = text.replace(os.altsep, SEP)
    return text


@dataclass(frozen=True, slots=True)
class Candidate:
    """A path reduced to the forms patterns are tested against.

    Attributes:
        relative_path: Path relative to the scan root, ``/``-separated.
        name: Base name (final path component).
        is_dir: Whether the path is a directory.
    """

    relative_path: str
    name: str
    is_dir: bool = False

    @classmethod
    def from_relative(cls, relative_path: str, is_dir: bool = False) -> Candidate:
        rel = normalize_separators(relative_path).strip(SEP)
        return cls(relative_path=rel, name=rel.rsplit(SEP, 1)[-1], is_dir=is_dir)


class PatternKind(Enum):
    NAME = "name"  # base name equality
    PATH = "path"  # full relative path equality
    DIRECTORY = "directory"  # directory itself or anything under it
    SUBSTRING = "substring"
    SUFFIX = "suffix"
    PREFIX = "prefix"
    UNIVERSAL = "universal"


@dataclass(frozen=True, slots=True)
class Pattern:
    """A parsed pattern.

    Attributes:
        raw: Pattern text as given by the user.
        kind: Shape decided once by :meth:`parse`.
        text: Operand for the matching rule of ``kind``.
    """

    raw: str
    kind: PatternKind
    text: str

    @classmethod
    def parse(cls, raw: str) -> Pattern:
        """Classify *raw* into one of the :class:`PatternKind` shapes.

        Never fails: an empty pattern parses to a ``NAME`` pattern that
        matches nothing, a bare ``*`` to ``UNIVERSAL``.
        """
        pat = normalize_separators(raw)

        if "*" in pat:
            if not pat.strip("*"):
                return cls(raw, PatternKind.UNIVERSAL, "")
            if len(pat) >= 2 and pat[0] == "*" and pat[-1] == "*":
                inner = pat[1:-1]
                if "*" not in inner:
                    return cls(raw, PatternKind.SUBSTRING, inner)
            elif pat[0] == "*" and "*" not in pat[1:]:
                return cls(raw, PatternKind.SUFFIX, pat[1:])
            elif pat[-1] == "*" and "*" not in pat[:-1]:
                return cls(raw, PatternKind.PREFIX, pat[:-1])
            return cls(raw, PatternKind.SUBSTRING, pat.replace("*", ""))

        if pat.endswith(SEP):
            return cls(raw, PatternKind.DIRECTORY, pat)
        if SEP not in pat:
            return cls(raw, PatternKind.NAME, pat)
        return cls(raw, PatternKind.PATH, pat)

    @property
    def literal_path(self) -> str | None:
        """Relative path named outright by the pattern, if any.

        Only ``PATH`` and ``DIRECTORY`` patterns name a concrete location;
        for the others this is ``None``.
        """
        if self.kind is PatternKind.PATH:
            return self.text
        if self.kind is PatternKind.DIRECTORY:
            return self.text.rstrip(SEP) or None
        return None

    @property
    def anchor(self) -> Candidate | None:
        """Location the pattern is rooted at, if it names one.

        Literal paths anchor at themselves. A prefix pattern with a
        directory part, such as ``build/main*``, anchors at that directory.
        """
        literal = self.literal_path
        if literal is not None:
            return Candidate.from_relative(literal, self.kind is PatternKind.DIRECTORY)
        if self.kind is PatternKind.PREFIX and SEP in self.text:
            directory = self.text.rsplit(SEP, 1)[0]
            if directory:
                return Candidate.from_relative(directory, is_dir=True)
        return None

    def matches(self, candidate: Candidate) -> bool:
        return matches(self, candidate.relative_path, candidate.name)

    def __str__(self) -> str:
        return self.raw


def matches(pattern: Pattern | str, relative_path: str, base_name: str) -> bool:
    """Return whether *pattern* matches a path.

    Args:
        pattern: Parsed pattern, or raw pattern text.
        relative_path: Path relative to the scan root, ``/``-separated.
        base_name: Final component of the path.

    Returns:
        bool: Match result. Comparisons are case-sensitive.
    """
    if isinstance(pattern, str):
        pattern = Pattern.parse(pattern)

    kind, text = pattern.kind, pattern.text
    if kind is PatternKind.UNIVERSAL:
        return True
    if kind is PatternKind.SUBSTRING:
        return text in relative_path
    if kind is PatternKind.SUFFIX:
        return relative_path.endswith(text)
    if kind is PatternKind.PREFIX:
        return relative_path.startswith(text)
    if kind is PatternKind.DIRECTORY:
        return relative_path == text[:-1] or relative_path.startswith(text)
    if kind is PatternKind.NAME:
        return base_name == text
    return relative_path == text
