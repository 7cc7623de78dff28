"""Repository scanner.

Walks the search root depth-first and returns every nested git repository
root as a path relative to the search root.

Algorithm
---------
At each directory:

1. ``.git`` is a directory → the directory is a repository (a *leaf*):
   record it and stop.  ``.git`` exists but is something else (a submodule
   gitlink file, a symlink) → dead end: record nothing, stop.
2. Otherwise split the children into plain subdirectories and an alias
   table ``symlink name → readlink target``.  Aliases are kept only when
   the target is a sibling subdirectory and the alias name is strictly
   shorter than the target.
3. Each surviving alias replaces its target: the target is walked only
   through the alias, and if the alias turns out to be a repository the
   target path is recorded as well.  So both ``R/s`` and ``R/some-long-name``
   resolve, yet the tree below is walked once.
4. Remaining plain subdirectories are walked normally.

Sibling order is whatever ``os.scandir`` returns.  Symlink cycles spanning
several directories are not detected.
"""

from __future__ import annotations

import os
import stat

import structlog

from codeswitch.core.models import ROOT_ENTRY, DirType, RepoEntry, ScanResult

logger = structlog.get_logger()

_GIT_DIR = b".git"


def scan(root: bytes | str) -> ScanResult:
    """Return all repository roots below *root*.

    A *root* that is itself a repository yields the single entry
    ``ROOT_ENTRY`` and is not descended into, like any other repository.

    The result is either complete or an ``OSError`` propagates; a partial
    tree is never returned.
    """
    root_b = os.fsencode(root)
    found: list[RepoEntry] = []
    _scan_dir(root_b, b"", found)
    logger.debug("scan_complete", root=root_b, entries=len(found))
    return tuple(found)


def _join(rel: bytes, name: bytes) -> bytes:
    return rel + b"/" + name if rel else name


def _git_marker(path: bytes) -> os.stat_result | None:
    try:
        return os.lstat(os.path.join(path, _GIT_DIR))
    except FileNotFoundError:
        return None


def _alias_table(path: bytes) -> tuple[set[bytes], dict[bytes, bytes]]:
    """Return (plain subdirectories, pruned alias table) for *path*."""
    subdirs: set[bytes] = set()
    symlinks: dict[bytes, bytes] = {}
    with os.scandir(path) as it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                subdirs.add(entry.name)
            elif entry.is_symlink():
                symlinks[entry.name] = os.readlink(entry.path)

    aliases = {
        link: target
        for link, target in symlinks.items()
        if target in subdirs and len(link) < len(target)
    }
    subdirs.difference_update(aliases.values())
    return subdirs, aliases


def _scan_children(path: bytes, rel: bytes, found: list[RepoEntry]) -> None:
    subdirs, aliases = _alias_table(path)

    for link, target in aliases.items():
        dtype = _scan_dir(os.path.join(path, link), _join(rel, link), found)
        if dtype is DirType.LEAF:
            found.append(_join(rel, target))

    for name in subdirs:
        _scan_dir(os.path.join(path, name), _join(rel, name), found)


def _scan_dir(path: bytes, rel: bytes, found: list[RepoEntry]) -> DirType:
    marker = _git_marker(path)
    if marker is not None:
        if stat.S_ISDIR(marker.st_mode):
            found.append(rel or ROOT_ENTRY)
            return DirType.LEAF
        # gitlink file (submodule / worktree): neither a repo nor worth descending
        return DirType.BRANCH

    _scan_children(path, rel, found)
    return DirType.BRANCH
