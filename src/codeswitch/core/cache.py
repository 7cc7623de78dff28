"""Scan result cache.

A single file holds the result of the most recent scan, stamped with the
identity of the root it was taken from.  Scanning a different root
overwrites it.

Wire format
-----------
::

    <u64 LE device> <u64 LE inode> ( <entry bytes> NUL )*

The stamp is compared with ``os.stat(root)`` on read; any difference means
the record belongs to another directory (or the root was recreated) and the
caller rescans.  mtimes are not consulted: adding a repository deep in the
tree does not touch the root, which is why the resolver also rescans once
when a cached lookup comes up empty.

Writes go to a temp file in the cache directory which is then
``os.replace``-d over the old one, so a concurrent reader sees either the
old record or the new one.  No locking is done.
"""

from __future__ import annotations

import os
import struct
import tempfile
from pathlib import Path

import structlog

from codeswitch.core.errors import CacheCorrupt
from codeswitch.core.models import IdentityStamp, ScanResult

logger = structlog.get_logger()

_STAMP = struct.Struct("<QQ")
_SEP = b"\0"


def encode_record(stamp: IdentityStamp, entries: ScanResult) -> bytes:
    return _STAMP.pack(stamp.device, stamp.inode) + b"".join(e + _SEP for e in entries)


def decode_record(blob: bytes) -> tuple[IdentityStamp, ScanResult]:
    """Split a raw cache file into its stamp and entries.

    Raises
    ------
    CacheCorrupt
        If *blob* is too short to hold a stamp.
    """
    if len(blob) < _STAMP.size:
        raise CacheCorrupt(f"cache record truncated: {len(blob)} bytes, need at least {_STAMP.size}")
    device, inode = _STAMP.unpack_from(blob)
    # Anything after the last NUL is a torn write and is dropped.
    body = blob[_STAMP.size:].split(_SEP)[:-1]
    return IdentityStamp(device=device, inode=inode), tuple(body)


def read_cache(root: bytes | str, cache_path: Path) -> ScanResult | None:
    """Return the cached entries for *root*, or ``None`` to request a rescan.

    ``None`` covers: no cache file, an empty file, a stamp from another
    root, and a record with no entries.  Other ``OSError`` propagates.
    """
    try:
        blob = cache_path.read_bytes()
    except FileNotFoundError:
        logger.debug("cache_miss", reason="no_file", path=str(cache_path))
        return None

    if not blob:
        logger.debug("cache_miss", reason="empty", path=str(cache_path))
        return None

    stamp, entries = decode_record(blob)
    live = IdentityStamp.of(root)
    if stamp != live:
        logger.debug(
            "cache_miss",
            reason="stamp_mismatch",
            cached=(stamp.device, stamp.inode),
            live=(live.device, live.inode),
        )
        return None

    if not entries:
        logger.debug("cache_miss", reason="no_entries", path=str(cache_path))
        return None

    logger.debug("cache_hit", entries=len(entries))
    return entries


def write_cache(root: bytes | str, cache_path: Path, entries: ScanResult) -> None:
    """Replace the cache file with a record for *root*.

    The record is fully rewritten, never appended to.
    """
    blob = encode_record(IdentityStamp.of(root), entries)

    fd, tmp_path = tempfile.mkstemp(
        dir=str(cache_path.parent),
        prefix=f".{cache_path.name}_",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(blob)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, cache_path)
    except BaseException:
        # Rename did not happen; do not leave the temp file behind.
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise

    logger.debug("cache_written", path=str(cache_path), entries=len(entries), size_bytes=len(blob))
