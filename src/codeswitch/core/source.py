"""Path source — "use the cache if it still matches the root, else scan".

The resolver never talks to the scanner or the cache directly.  It asks a
:class:`PathSource` for entries and, when a cached lookup finds nothing,
asks it once to :meth:`~PathSource.rescan`.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from codeswitch.core.cache import read_cache, write_cache
from codeswitch.core.models import ScanResult
from codeswitch.core.scanner import scan

logger = structlog.get_logger()


class PathSource:
    """Lazily loaded scan result for one search root.

    Parameters
    ----------
    root:
        The search root (as given by the user, not resolved).
    cache_path:
        The single-slot cache file.  Its directory must exist.
    rebuild:
        Ignore any cached record and scan on first use.
    """

    def __init__(self, root: bytes, cache_path: Path, *, rebuild: bool = False) -> None:
        self.root = root
        self.cache_path = cache_path
        self.rebuild = rebuild
        self.from_cache = False
        self._entries: ScanResult | None = None

    def entries(self) -> ScanResult:
        if self._entries is None:
            cached = None if self.rebuild else read_cache(self.root, self.cache_path)
            if cached is None:
                self._entries = self._build()
            else:
                self.from_cache = True
                self._entries = cached
        return self._entries

    def rescan(self) -> ScanResult:
        """Scan again and overwrite the cache, regardless of its state."""
        self._entries = self._build()
        return self._entries

    def _build(self) -> ScanResult:
        entries = scan(self.root)
        write_cache(self.root, self.cache_path, entries)
        self.from_cache = False
        return entries
