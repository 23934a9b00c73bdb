from __future__ import annotations

"""
Directory Listing Service.

Enumerates directory children for incremental UI population. Every call
rebuilds the ignore rule set from the current filesystem state, so listings
always reflect rule-file edits and directory changes. Entries whose metadata
cannot be read are skipped rather than reported: a partial listing is more
useful to an interactive caller than a failure.
"""

import logging
import os
from typing import List, Optional, Set, Tuple, Union

from prompt4ai.core.filtering.ignore_rules import (
    IgnoreRuleSet,
    IgnoreStrategy,
    build_rule_set,
)
from prompt4ai.domain.constants import DEFAULT_MAX_TREE_DEPTH, DEFAULT_RULE_FILE_NAME
from prompt4ai.domain.tree_models import EntryKind, PathEntry

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def list_children(
        dir_path: str,
        boundary_dir: Optional[str] = None,
        strategy: Union[IgnoreStrategy, str, None] = IgnoreStrategy.ANY,
        rule_file_name: str = DEFAULT_RULE_FILE_NAME,
) -> List[PathEntry]:
    """
    List the immediate children of a directory.

    Children excluded by the cascading ignore rules are dropped. The result
    holds directories before files, each group ordered by case-insensitive
    name.

    Args:
        dir_path: Directory to list.
        boundary_dir: Upper limit for rule-file discovery (defaults to cwd).
        strategy: Ignore combination policy across levels.
        rule_file_name: Name of the per-directory exclusion file.

    Returns:
        List[PathEntry]: Ordered, filtered entries (children left unset).
    """
    dir_abs = os.path.abspath(dir_path)
    rules = build_rule_set(dir_abs, boundary_dir, strategy, rule_file_name)
    return _scan_level(dir_abs, rules)


def list_tree(
        root_path: str,
        max_depth: int = DEFAULT_MAX_TREE_DEPTH,
        follow_symlinks: bool = False,
        boundary_dir: Optional[str] = None,
        strategy: Union[IgnoreStrategy, str, None] = IgnoreStrategy.ANY,
        rule_file_name: str = DEFAULT_RULE_FILE_NAME,
) -> List[PathEntry]:
    """
    Recursively list a directory with the same filtering and ordering as
    list_children, applied independently at every level.

    Descent is bounded: directories at depth 'max_depth' (the root's own
    children are depth 1), symlinked directories (unless 'follow_symlinks'),
    and directories already visited are returned with 'truncated=True' and
    no children.

    Args:
        root_path: Directory to materialize.
        max_depth: Deepest level whose entries are returned.
        follow_symlinks: Whether symlinked directories are descended into.
        boundary_dir: Upper limit for rule-file discovery (defaults to cwd).
        strategy: Ignore combination policy across levels.
        rule_file_name: Name of the per-directory exclusion file.

    Returns:
        List[PathEntry]: Entries of the root with nested children.
    """
    root_abs = os.path.abspath(root_path)
    visited: Set[Tuple[int, int]] = set()
    identity = _dir_identity(root_abs)
    if identity:
        visited.add(identity)

    return _list_recursive(
        root_abs,
        depth=1,
        max_depth=max(0, int(max_depth)),
        follow_symlinks=follow_symlinks,
        visited=visited,
        boundary_dir=boundary_dir,
        strategy=strategy,
        rule_file_name=rule_file_name,
    )


def sort_entries(entries: List[PathEntry]) -> List[PathEntry]:
    """Order entries: directories first, then case-insensitive name."""
    return sorted(entries, key=lambda e: (not e.is_dir, e.name.lower()))


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _scan_level(dir_abs: str, rules: IgnoreRuleSet) -> List[PathEntry]:
    """Read one directory level, filter it, and sort it."""
    results: List[PathEntry] = []

    try:
        with os.scandir(dir_abs) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir()
                    # Link metadata only: a dangling symlink is listed as a file
                    entry.stat(follow_symlinks=False)
                except OSError as e:
                    logger.debug(f"Skipping unreadable entry '{entry.path}': {e}")
                    continue

                if rules.is_ignored(entry.path, is_dir):
                    continue

                results.append(PathEntry(
                    kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
                    name=entry.name,
                    path=entry.path,
                ))
    except OSError as e:
        logger.warning(f"Cannot list directory '{dir_abs}': {e}")
        return []

    return sort_entries(results)


def _list_recursive(
        dir_abs: str,
        depth: int,
        max_depth: int,
        follow_symlinks: bool,
        visited: Set[Tuple[int, int]],
        boundary_dir: Optional[str],
        strategy: Union[IgnoreStrategy, str, None],
        rule_file_name: str,
) -> List[PathEntry]:
    rules = build_rule_set(dir_abs, boundary_dir, strategy, rule_file_name)
    entries = _scan_level(dir_abs, rules)

    for entry in entries:
        if not entry.is_dir:
            continue

        if depth >= max_depth:
            entry.truncated = True
            continue

        if os.path.islink(entry.path) and not follow_symlinks:
            entry.truncated = True
            continue

        identity = _dir_identity(entry.path)
        if identity is None or identity in visited:
            logger.debug(f"Not descending into '{entry.path}' (cycle or unreadable)")
            entry.truncated = True
            continue
        visited.add(identity)

        entry.children = _list_recursive(
            entry.path,
            depth=depth + 1,
            max_depth=max_depth,
            follow_symlinks=follow_symlinks,
            visited=visited,
            boundary_dir=boundary_dir,
            strategy=strategy,
            rule_file_name=rule_file_name,
        )

    return entries


def _dir_identity(path: str) -> Optional[Tuple[int, int]]:
    """Canonical (device, inode) identity of a directory, or None."""
    try:
        st = os.stat(path)
    except OSError:
        return None
    return st.st_dev, st.st_ino
