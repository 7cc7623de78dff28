"""codeswitch domain models — value objects shared by scanner, cache and resolver.

Repository paths are raw ``bytes`` relative to the search root, never
``str``: directory names do not have to be valid text.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

# A repository root, relative to the search root (e.g. ``b"work/proj"``).
RepoEntry = bytes

# Scanner emission order; never mutated, only filtered into new tuples.
ScanResult = tuple[RepoEntry, ...]

# Sentinel codebase name: list every known basename instead of resolving.
WILDCARD = b"_"

# Entry recorded when the search root is itself a repository.
ROOT_ENTRY = b"."


class DirType(Enum):
    LEAF = "leaf"  # the directory is a repository root
    BRANCH = "branch"


@dataclass(frozen=True)
class IdentityStamp:
    """(device, inode) of the search root at scan time."""

    device: int
    inode: int

    @classmethod
    def of(cls, root: bytes | str | os.PathLike[str]) -> "IdentityStamp":
        st = os.stat(root)
        return cls(device=st.st_dev, inode=st.st_ino)


@dataclass(frozen=True)
class ResolutionQuery:
    """What the user asked for.

    ``name`` is the codebase token, ``suffix`` the verbatim ``/sub/path``
    tail (including its leading slash) and ``filter`` an index or substring.
    """

    name: bytes
    suffix: bytes = b""
    filter: bytes = b""

    @classmethod
    def parse(cls, codebase: bytes, filter: bytes = b"") -> "ResolutionQuery":
        name, sep, rest = codebase.partition(b"/")
        return cls(name=name, suffix=sep + rest, filter=filter)

    @property
    def is_wildcard(self) -> bool:
        return self.name == WILDCARD
