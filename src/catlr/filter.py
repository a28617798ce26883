"""Include/exclude resolution for the listing and printing scopes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from catlr.pattern import SEP, Candidate, Pattern


class Matcher(Protocol):
    """Anything that can decide whether it matches a candidate path."""

    def matches(self, candidate: Candidate) -> bool: ...


class Scope(Enum):
    LISTING = "listing"
    PRINTING = "printing"


def lineage(candidate: Candidate) -> list[Candidate]:
    """Return *candidate* followed by its ancestor directories, innermost first.

    The scan root itself is not part of the lineage.
    """
    parts = candidate.relative_path.split(SEP)
    chain = [candidate]
    for depth in range(len(parts) - 1, 0, -1):
        chain.append(Candidate(SEP.join(parts[:depth]), parts[depth - 1], True))
    return chain


def _hits(matchers: Sequence[Matcher], chain: Sequence[Candidate]) -> bool:
    return any(m.matches(c) for m in matchers for c in chain)


def is_exception(include: Pattern, excludes: Sequence[Matcher]) -> bool:
    """Return whether *include* re-includes a path that *excludes* hide.

    Patterns without an anchor are never exceptions.

    Args:
        include: Parsed include pattern.
        excludes: Exclude matchers of the same scope.

    Returns:
        bool: ``True`` when some exclude covers the anchored location or
        one of its ancestors.
    """
    anchor = include.anchor
    if anchor is None:
        return False
    return _hits(excludes, lineage(anchor))


def _leads_to_include(candidate: Candidate, includes: Sequence[Pattern]) -> bool:
    """Return whether a directory candidate is on the way to an include.

    That is the anchor of the include, or one of its ancestors.
    """
    if not candidate.is_dir:
        return False
    rel = candidate.relative_path
    for include in includes:
        anchor = include.anchor
        if anchor is None:
            continue
        if anchor.relative_path.startswith(rel + SEP):
            return True
        if anchor.is_dir and anchor.relative_path == rel:
            return True
    return False


def should_show(
    candidate: Candidate,
    includes: Sequence[Pattern],
    excludes: Sequence[Matcher],
    allow_list: bool | None = None,
) -> bool:
    """Resolve the show/hide decision for one path in one scope.

    A pattern hits a path when it matches the path or one of its ancestor
    directories, so a pattern naming a directory covers its subtree.

    Resolution order:

    1. An include hit shows the path, whatever the excludes say. A
       directory on the way to an include's anchor is a hit too.
    2. An exclude hit hides the path.
    3. In allow-list mode anything not included is hidden.
    4. Otherwise the path is shown.

    Args:
        candidate: Path under test.
        includes: Include patterns of the scope.
        excludes: Exclude matchers of the scope.
        allow_list: Precomputed allow-list flag. When ``None`` it is
            derived from *includes* and *excludes*.

    Returns:
        bool: ``True`` to show the path.
    """
    chain = lineage(candidate)
    if _hits(includes, chain) or _leads_to_include(candidate, includes):
        return True
    if _hits(excludes, chain):
        return False
    if allow_list is None:
        allow_list = any(not is_exception(inc, excludes) for inc in includes)
    return not allow_list


@dataclass(frozen=True, slots=True)
class ScopeFilter:
    """Include and exclude sequences of one scope.

    Attributes:
        includes: Include patterns, tried in order.
        excludes: Exclude matchers, tried in order.
        allow_list: Whether anything not included is hidden. Set when at
            least one include is not an exception to the excludes.
    """

    includes: tuple[Pattern, ...] = ()
    excludes: tuple[Matcher, ...] = ()
    allow_list: bool = False

    @classmethod
    def build(
        cls, includes: Iterable[Pattern], excludes: Iterable[Matcher]
    ) -> ScopeFilter:
        inc = tuple(includes)
        exc = tuple(excludes)
        allow_list = any(not is_exception(pattern, exc) for pattern in inc)
        return cls(includes=inc, excludes=exc, allow_list=allow_list)

    @property
    def active(self) -> bool:
        return bool(self.includes or self.excludes)

    def should_show(self, candidate: Candidate) -> bool:
        return should_show(candidate, self.includes, self.excludes, self.allow_list)


@dataclass(frozen=True, slots=True)
class FilterSet:
    """Filters for both scopes, fixed for the duration of a run."""

    listing: ScopeFilter = field(default_factory=ScopeFilter)
    printing: ScopeFilter = field(default_factory=ScopeFilter)

    @classmethod
    def from_patterns(
        cls,
        list_includes: Iterable[str] = (),
        list_excludes: Iterable[str] = (),
        print_includes: Iterable[str] = (),
        print_excludes: Iterable[str] = (),
    ) -> FilterSet:
        """Parse raw pattern strings into a filter set.

        Args:
            list_includes: Listing-scope include patterns.
            list_excludes: Listing-scope exclude patterns.
            print_includes: Printing-scope include patterns.
            print_excludes: Printing-scope exclude patterns.

        Returns:
            FilterSet: Parsed, immutable filter set.
        """

        def parse(raw: Iterable[str]) -> list[Pattern]:
            return [Pattern.parse(p) for p in raw]

        return cls(
            listing=ScopeFilter.build(parse(list_includes), parse(list_excludes)),
            printing=ScopeFilter.build(parse(print_includes), parse(print_excludes)),
        )

    @property
    def list_includes(self) -> tuple[Pattern, ...]:
        return self.listing.includes

    @property
    def list_excludes(self) -> tuple[Matcher, ...]:
        return self.listing.excludes

    @property
    def print_includes(self) -> tuple[Pattern, ...]:
        return self.printing.includes

    @property
    def print_excludes(self) -> tuple[Matcher, ...]:
        return self.printing.excludes

    def scope(self, scope: Scope) -> ScopeFilter:
        return self.listing if scope is Scope.LISTING else self.printing

    def should_show(self, candidate: Candidate, scope: Scope) -> bool:
        return self.scope(scope).should_show(candidate)

    def with_excludes(self, matchers: Iterable[Matcher]) -> FilterSet:
        """Return a copy with *matchers* appended to both exclude sequences."""
        extra = tuple(matchers)
        if not extra:
            return self
        return FilterSet(
            listing=ScopeFilter.build(
                self.listing.includes, (*self.listing.excludes, *extra)
            ),
            printing=ScopeFilter.build(
                self.printing.includes, (*self.printing.excludes, *extra)
            ),
        )
