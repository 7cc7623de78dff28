"""Tests for codeswitch.core.scanner — repository discovery with symlink aliases."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from codeswitch.core.scanner import scan


def _repo(path: Path) -> Path:
    (path / ".git").mkdir(parents=True)
    return path


def _alias(parent: Path, link: str, target: str) -> None:
    os.symlink(target, parent / link)


# ── Plain discovery ─────────────────────────────────────────
def test_single_nested_repo(tmp_path: Path) -> None:
    _repo(tmp_path / "A" / "B")
    assert scan(tmp_path) == (b"A/B",)


def test_empty_root(tmp_path: Path) -> None:
    assert scan(tmp_path) == ()


def test_accepts_bytes_root(tmp_path: Path) -> None:
    _repo(tmp_path / "proj")
    assert scan(os.fsencode(tmp_path)) == (b"proj",)


def test_multiple_repos_any_order(tmp_path: Path) -> None:
    _repo(tmp_path / "foo" / "proj1")
    _repo(tmp_path / "bar" / "proj1")
    _repo(tmp_path / "baz")
    assert sorted(scan(tmp_path)) == [b"bar/proj1", b"baz", b"foo/proj1"]


def test_does_not_descend_into_repo(tmp_path: Path) -> None:
    """Repos nested inside a repo (vendored, submodule checkouts) are not listed."""
    outer = _repo(tmp_path / "outer")
    _repo(outer / "vendor" / "inner")
    assert scan(tmp_path) == (b"outer",)


def test_gitlink_file_is_dead_end(tmp_path: Path) -> None:
    """A ``.git`` *file* neither marks a repo nor allows recursion."""
    sub = tmp_path / "submodule"
    sub.mkdir()
    (sub / ".git").write_text("gitdir: ../.git/modules/submodule\n")
    _repo(sub / "nested")
    assert scan(tmp_path) == ()


def test_plain_files_ignored(tmp_path: Path) -> None:
    (tmp_path / "notes.txt").write_text("x")
    _repo(tmp_path / "proj")
    assert scan(tmp_path) == (b"proj",)


def test_undecodable_names_survive(tmp_path: Path) -> None:
    name = b"caf\xe9"
    os.makedirs(os.path.join(os.fsencode(tmp_path), name, b".git"))
    assert scan(tmp_path) == (name,)


# ── Symlink aliases ─────────────────────────────────────────
def test_shorter_alias_yields_both_paths(tmp_path: Path) -> None:
    _repo(tmp_path / "my-long-project")
    _alias(tmp_path, "mlp", "my-long-project")
    assert sorted(scan(tmp_path)) == [b"mlp", b"my-long-project"]


def test_alias_substituted_in_middle_component(tmp_path: Path) -> None:
    """Repos below an aliased directory are reached (once) through the alias."""
    _repo(tmp_path / "upstream-projects" / "proj")
    _alias(tmp_path, "up", "upstream-projects")
    assert scan(tmp_path) == (b"up/proj",)


def test_non_shortening_alias_ignored(tmp_path: Path) -> None:
    _repo(tmp_path / "proj")
    _alias(tmp_path, "project", "proj")
    _alias(tmp_path, "same", "proj")
    assert scan(tmp_path) == (b"proj",)


def test_dangling_alias_ignored(tmp_path: Path) -> None:
    _alias(tmp_path, "x", "missing-target")
    assert scan(tmp_path) == ()


def test_external_alias_ignored(tmp_path: Path) -> None:
    """Targets outside the sibling set (absolute, ../) are not followed."""
    elsewhere = _repo(tmp_path / "elsewhere" / "target-repo")
    root = tmp_path / "root"
    root.mkdir()
    _alias(root, "t", str(elsewhere))
    assert scan(root) == ()


def test_alias_to_file_ignored(tmp_path: Path) -> None:
    (tmp_path / "some-file").write_text("x")
    _alias(tmp_path, "f", "some-file")
    assert scan(tmp_path) == ()


# ── Failure propagation ────────────────────────────────────
def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        scan(tmp_path / "nope")


@pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
def test_unreadable_directory_propagates(tmp_path: Path) -> None:
    locked = tmp_path / "locked"
    locked.mkdir()
    locked.chmod(0)
    try:
        with pytest.raises(PermissionError):
            scan(tmp_path)
    finally:
        locked.chmod(0o700)


# ── Search root itself ─────────────────────────────────────
def test_root_that_is_a_repo_is_recorded_and_not_descended(tmp_path: Path) -> None:
    (tmp_path / ".git" / "objects" / "ab").mkdir(parents=True)
    (tmp_path / ".git" / "refs" / "heads").mkdir(parents=True)
    _repo(tmp_path / "sub")
    assert scan(tmp_path) == (b".",)


def test_root_with_gitlink_file_is_dead_end(tmp_path: Path) -> None:
    (tmp_path / ".git").write_text("gitdir: /elsewhere/.git\n")
    _repo(tmp_path / "sub")
    assert scan(tmp_path) == ()
