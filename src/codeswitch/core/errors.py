"""codeswitch domain exceptions.

Every module raises typed exceptions so the CLI can report failures
explicitly.  Plain ``OSError`` from the filesystem is never wrapped: it
propagates unchanged and is reported verbatim.
"""

from __future__ import annotations

import os
from collections.abc import Sequence


# ── Base ────────────────────────────────────────────────────
class CodeswitchError(Exception):
    """Root exception for all codeswitch errors."""


# ── Input ───────────────────────────────────────────────────
class InputError(CodeswitchError):
    """The invocation itself is unusable."""


class NotADirectory(InputError):
    """The search root is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path!r} is not a directory")
        self.path = path


class EmptyCodebaseName(InputError):
    """The wanted codebase name is empty (e.g. ``/subdir`` was passed)."""

    def __init__(self) -> None:
        super().__init__("codebase name must not be empty")


# ── Not found ───────────────────────────────────────────────
class NotFoundError(CodeswitchError):
    """Something required could not be found."""


class CacheDirNotFound(NotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Cache directory {path!r} not found")
        self.path = path


class NoMatches(NotFoundError):
    def __init__(self) -> None:
        super().__init__("no matches found")


# ── Ambiguity ───────────────────────────────────────────────
class AmbiguityError(CodeswitchError):
    """Resolution could not settle on a single codebase.

    *candidates* holds the rendered (root-joined) paths that were in play,
    in the order they should be listed to the user.
    """

    def __init__(self, message: str, candidates: Sequence[bytes]) -> None:
        super().__init__(message)
        self.candidates = tuple(candidates)


class IndexOutOfRange(AmbiguityError):
    def __init__(self, index: int, candidates: Sequence[bytes]) -> None:
        super().__init__(f"Index {index} out of range", candidates)
        self.index = index


class MultipleMatches(AmbiguityError):
    """More than one candidate survived filtering and no default rule applied."""

    def __init__(self, name: bytes, candidates: Sequence[bytes], *, first: bytes) -> None:
        super().__init__("multiple matches found", candidates)
        self.name = name
        self.hint = os.fsdecode(name + b" = " + first)


# ── Cache ───────────────────────────────────────────────────
class CacheCorrupt(CodeswitchError):
    """The cache file exists but cannot be decoded."""


# ── Default rules ───────────────────────────────────────────
class DefaultsInvalid(CodeswitchError):
    """The default rules file contains a malformed line."""


class DefaultsTooLarge(DefaultsInvalid):
    """The default rules file exceeds the allowed size limit."""


# ── Settings ────────────────────────────────────────────────
class InvalidSettings(CodeswitchError):
    """A ``CODESWITCH_*`` environment override has an unusable value."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid configuration: {detail}")
