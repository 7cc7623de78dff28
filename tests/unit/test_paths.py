"""Tests for codeswitch.core.paths — per-user file locations."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeswitch.core import paths
from codeswitch.core.errors import CacheDirNotFound
from codeswitch.core.paths import default_cache_dir, default_config_path, require_cache_dir


def test_default_cache_dir_under_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert default_cache_dir() == tmp_path / ".cache"


def test_default_cache_dir_without_home(monkeypatch: pytest.MonkeyPatch) -> None:
    """No resolvable home → system-wide cache directory."""
    monkeypatch.setattr(paths, "_home", lambda: None)
    assert default_cache_dir() == Path("/var/cache")


def test_home_lookup_failure_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(cls: type) -> Path:
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", classmethod(_boom))
    assert default_cache_dir() == Path("/var/cache")


def test_default_config_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert default_config_path() == tmp_path / ".config" / "codeswitch" / "defaults"


def test_require_cache_dir_ok(tmp_path: Path) -> None:
    assert require_cache_dir(tmp_path) == tmp_path


def test_require_cache_dir_missing(tmp_path: Path) -> None:
    with pytest.raises(CacheDirNotFound, match="not found"):
        require_cache_dir(tmp_path / "nope")


def test_require_cache_dir_not_created(tmp_path: Path) -> None:
    missing = tmp_path / "nope"
    with pytest.raises(CacheDirNotFound):
        require_cache_dir(missing)
    assert not missing.exists()
