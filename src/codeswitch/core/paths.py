"""Per-user file locations.

The cache and default-rules files are the only state shared between
invocations.  Their locations are derived here once and then passed
around explicitly (via :class:`codeswitch.core.settings.Settings`), never
looked up again deep inside the core.

Layout
------
* cache:    ``~/.cache/codeswitch``  (``/var/cache/codeswitch`` without a home)
* defaults: ``~/.config/codeswitch/defaults``
"""

from __future__ import annotations

from pathlib import Path

from codeswitch.core.errors import CacheDirNotFound

# Used when no home directory can be resolved.
_SYSTEM_CACHE_DIR = Path("/var/cache")


def _home() -> Path | None:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def default_cache_dir() -> Path:
    """Return ``~/.cache``, or ``/var/cache`` if there is no home directory."""
    home = _home()
    if home is None:
        return _SYSTEM_CACHE_DIR
    return home / ".cache"


def default_config_path() -> Path:
    """Return the default rules file path (it does not need to exist)."""
    home = _home()
    base = home / ".config" if home is not None else Path("/etc")
    return base / "codeswitch" / "defaults"


def require_cache_dir(cache_dir: Path) -> Path:
    """Return *cache_dir* unchanged if it is an existing directory.

    Raises
    ------
    CacheDirNotFound
        If the directory is missing.  It is deliberately not created: a
        missing ``~/.cache`` usually means a misconfigured environment.
    """
    if not cache_dir.is_dir():
        raise CacheDirNotFound(str(cache_dir))
    return cache_dir
