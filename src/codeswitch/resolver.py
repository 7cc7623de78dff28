"""Resolver — turn a fuzzy query into exactly one codebase path.

Pipeline, each stage narrowing the previous one's candidates:

1. ``_`` lists every known basename and stops.
2. Keep entries whose trailing path components equal the name.
3. Nothing matched but the entries came from the cache → rescan once and
   retry 2.  There is no other retry.
4. An all-digit filter is a 1-based index into the candidates; it settles
   resolution on its own.
5. Any other non-empty filter must occur (as raw bytes) in the directory
   part of the candidate, i.e. the entry minus the matched name.
6. Still ambiguous → literal default for the name, then glob patterns in
   file order.  Still ambiguous → :class:`MultipleMatches`.
"""

from __future__ import annotations

import os
from typing import Protocol

import structlog

from codeswitch.core.errors import (
    EmptyCodebaseName,
    IndexOutOfRange,
    MultipleMatches,
    NoMatches,
)
from codeswitch.core.models import ROOT_ENTRY, RepoEntry, ResolutionQuery, ScanResult
from codeswitch.defaults import DefaultRules

logger = structlog.get_logger()


class EntrySource(Protocol):
    """What the resolver needs from :class:`codeswitch.core.source.PathSource`."""

    root: bytes
    from_cache: bool

    def entries(self) -> ScanResult: ...

    def rescan(self) -> ScanResult: ...


def basename(entry: RepoEntry) -> bytes:
    return entry.rpartition(b"/")[2]


def render(root: bytes, entry: RepoEntry) -> bytes:
    """Root-joined path of *entry*, as shown to the user."""
    if entry == ROOT_ENTRY:
        return root
    return os.path.join(root, entry)


def match_path(root: bytes, entry: RepoEntry) -> bytes:
    """The path names are matched against: the root entry goes by the root's own name."""
    if entry == ROOT_ENTRY:
        return os.path.basename(os.path.abspath(root))
    return entry


def matches_name(entry: RepoEntry, name: bytes) -> bool:
    """Component-wise suffix match: ``b"a/proj"`` matches ``proj``, ``b"a/myproj"`` does not."""
    wanted = name.split(b"/")
    parts = entry.split(b"/")
    return len(parts) >= len(wanted) and parts[-len(wanted):] == wanted


def _name_matches(root: bytes, entries: ScanResult, name: bytes) -> tuple[RepoEntry, ...]:
    return tuple(e for e in entries if matches_name(match_path(root, e), name))


def _dir_prefix(root: bytes, entry: RepoEntry, name: bytes) -> bytes:
    path = match_path(root, entry)
    return path[: len(path) - len(name)]


def _parse_index(token: bytes) -> int | None:
    if token and token.isdigit():
        return int(token)
    return None


def _apply_defaults(
    root: bytes, name: bytes, candidates: tuple[RepoEntry, ...], rules: DefaultRules
) -> RepoEntry | None:
    literal = rules.literal_for(name)
    if literal is not None:
        for candidate in candidates:
            if literal in (candidate, render(root, candidate)):
                logger.debug("default_rule_applied", kind="literal", name=name, entry=candidate)
                return candidate

    chosen = rules.first_pattern_match(candidates)
    if chosen is not None:
        logger.debug("default_rule_applied", kind="pattern", name=name, entry=chosen)
    return chosen


def list_basenames(entries: ScanResult, root: bytes = b"") -> list[bytes]:
    """Distinct basenames of *entries*, sorted (used for shell completion)."""
    return sorted({basename(match_path(root, e)) for e in entries})


def resolve(
    query: ResolutionQuery,
    source: EntrySource,
    rules: DefaultRules | None = None,
) -> list[bytes]:
    """Resolve *query* and return the output lines (without newlines).

    A normal query yields exactly one line: the root-joined path plus the
    query's verbatim suffix.  The wildcard query yields one line per
    distinct basename.

    Raises
    ------
    EmptyCodebaseName
        The query has no name.
    IndexOutOfRange
        Index filter outside ``[1, count]``.
    NoMatches
        Nothing left after filtering.
    MultipleMatches
        Several candidates left and no default rule picked one.
    """
    rules = rules or DefaultRules()

    if query.is_wildcard:
        return list_basenames(source.entries(), source.root)

    name = query.name
    if not name:
        raise EmptyCodebaseName()

    root = source.root
    candidates = _name_matches(root, source.entries(), name)

    if not candidates and source.from_cache:
        logger.info("stale_cache_rescan", name=name)
        candidates = _name_matches(root, source.rescan(), name)

    index = _parse_index(query.filter)
    if index is not None:
        if not 0 < index <= len(candidates):
            raise IndexOutOfRange(index, [render(root, c) for c in candidates])
        chosen = candidates[index - 1]
    else:
        if query.filter:
            candidates = tuple(
                c for c in candidates if query.filter in _dir_prefix(root, c, name)
            )
        chosen = _disambiguate(root, name, candidates, rules)

    return [render(root, chosen) + query.suffix]


def _disambiguate(
    root: bytes, name: bytes, candidates: tuple[RepoEntry, ...], rules: DefaultRules
) -> RepoEntry:
    if not candidates:
        raise NoMatches()
    if len(candidates) == 1:
        return candidates[0]

    chosen = _apply_defaults(root, name, candidates, rules)
    if chosen is None:
        raise MultipleMatches(
            name,
            [render(root, c) for c in candidates],
            first=candidates[0],
        )
    return chosen
