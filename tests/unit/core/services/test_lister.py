from __future__ import annotations

"""
Unit tests for the Directory Listing Service.

Verifies ordering (directories first, case-insensitive names), ignore
filtering, graceful degradation and the bounded recursive variant.
"""

import os
from pathlib import Path
from typing import List

import pytest

from prompt4ai.core.services.lister import list_children, list_tree, sort_entries
from prompt4ai.domain.tree_models import EntryKind, PathEntry


def _names(entries: List[PathEntry]) -> List[str]:
    return [e.name for e in entries]


def test_gitignored_directory_is_excluded(tmp_path: Path) -> None:
    """Scenario: '.gitignore' with 'build/' hides the build directory."""
    repo = tmp_path / "repo"
    (repo / "build").mkdir(parents=True)
    (repo / ".gitignore").write_text("build/\n", encoding="utf-8")
    (repo / "main.rs").write_text("fn main() {}\n", encoding="utf-8")

    entries = list_children(str(repo), boundary_dir=str(repo))

    assert "build" not in _names(entries)
    main = next(e for e in entries if e.name == "main.rs")
    assert main.kind is EntryKind.FILE
    assert main.path == str(repo / "main.rs")
    assert main.children is None


def test_listing_order_directories_first_case_insensitive(tmp_path: Path) -> None:
    for d in ("beta", "Alpha"):
        (tmp_path / d).mkdir()
    for f in ("b.txt", "A.txt", "c.TXT"):
        (tmp_path / f).write_text("x", encoding="utf-8")

    entries = list_children(str(tmp_path), boundary_dir=str(tmp_path))

    assert _names(entries) == ["Alpha", "beta", "A.txt", "b.txt", "c.TXT"]
    kinds = [e.kind for e in entries]
    assert kinds == [EntryKind.DIRECTORY] * 2 + [EntryKind.FILE] * 3


def test_listing_filters_with_repo_rules(repo: Path) -> None:
    entries = list_children(str(repo), boundary_dir=str(repo))

    assert _names(entries) == ["src", ".gitignore", "main.rs", "Readme.md"]


def test_nested_listing_uses_ancestor_rules(repo: Path) -> None:
    """'*.log' from the repo root applies when listing repo/src."""
    entries = list_children(str(repo / "src"), boundary_dir=str(repo))

    assert _names(entries) == ["main.py"]


def test_unrelated_rule_file_does_not_affect_listing(repo: Path) -> None:
    """A rule file in a non-ancestor directory has no effect."""
    (repo / "src" / ".gitignore").write_text("*.rs\n", encoding="utf-8")

    entries = list_children(str(repo), boundary_dir=str(repo))

    assert "main.rs" in _names(entries)


def test_rule_edits_are_reflected_immediately(repo: Path) -> None:
    assert "main.rs" in _names(list_children(str(repo), boundary_dir=str(repo)))

    (repo / ".gitignore").write_text("build/\n*.log\n*.rs\n", encoding="utf-8")

    assert "main.rs" not in _names(list_children(str(repo), boundary_dir=str(repo)))


def test_missing_directory_yields_empty_list(tmp_path: Path) -> None:
    assert list_children(str(tmp_path / "missing"), boundary_dir=str(tmp_path)) == []


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_broken_symlink_is_listed_as_file(tmp_path: Path) -> None:
    """Link metadata is enough: a dangling symlink still shows up."""
    (tmp_path / "real.txt").write_text("x", encoding="utf-8")
    try:
        os.symlink(str(tmp_path / "gone"), str(tmp_path / "dangling"))
    except OSError:
        pytest.skip("cannot create symlinks here")

    entries = list_children(str(tmp_path), boundary_dir=str(tmp_path))

    assert _names(entries) == ["dangling", "real.txt"]
    assert entries[0].kind is EntryKind.FILE
    assert entries[0].children is None


def test_listing_inside_ignored_directory_is_empty(repo: Path) -> None:
    """'build/' in an ancestor rule file also hides everything below build."""
    entries = list_children(str(repo / "build"), boundary_dir=str(repo))

    assert entries == []


def test_sort_entries_is_stable_for_equal_keys() -> None:
    entries = [
        PathEntry(EntryKind.FILE, "b", "/b"),
        PathEntry(EntryKind.DIRECTORY, "z", "/z"),
        PathEntry(EntryKind.FILE, "A", "/A"),
    ]
    assert _names(sort_entries(entries)) == ["z", "A", "b"]


# -----------------------------------------------------------------------------
# Recursive listing
# -----------------------------------------------------------------------------

def test_list_tree_nests_children_with_same_rules(repo: Path) -> None:
    entries = list_tree(str(repo), boundary_dir=str(repo))

    src = next(e for e in entries if e.name == "src")
    assert src.children is not None
    assert _names(src.children) == ["main.py"]
    assert "build" not in _names(entries)


def test_list_tree_truncates_at_depth_cap(tmp_path: Path) -> None:
    deep = tmp_path / "a" / "b" / "c"
    deep.mkdir(parents=True)
    (deep / "leaf.txt").write_text("x", encoding="utf-8")

    entries = list_tree(str(tmp_path), max_depth=2, boundary_dir=str(tmp_path))

    a = entries[0]
    assert a.name == "a" and not a.truncated
    b = a.children[0]
    assert b.name == "b"
    assert b.truncated is True
    assert b.children is None


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_list_tree_cuts_symlink_cycles(tmp_path: Path) -> None:
    loop_dir = tmp_path / "loop"
    loop_dir.mkdir()
    try:
        os.symlink(str(tmp_path), str(loop_dir / "back"), target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    entries = list_tree(str(tmp_path), max_depth=50, follow_symlinks=True, boundary_dir=str(tmp_path))

    loop = entries[0]
    back = loop.children[0]
    assert back.name == "back"
    assert back.truncated is True
    assert back.children is None


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_list_tree_does_not_follow_symlinks_by_default(tmp_path: Path) -> None:
    target = tmp_path / "target"
    target.mkdir()
    (target / "inner.txt").write_text("x", encoding="utf-8")
    try:
        os.symlink(str(target), str(tmp_path / "link"), target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    entries = list_tree(str(tmp_path), boundary_dir=str(tmp_path))

    link = next(e for e in entries if e.name == "link")
    assert link.kind is EntryKind.DIRECTORY
    assert link.truncated is True
    assert link.children is None
