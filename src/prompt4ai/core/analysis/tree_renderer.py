from __future__ import annotations

"""
File Tree Renderer.

Merges a flat list of selected files into a path trie and converts it into a
visual ASCII tree. Only the selection is drawn: intermediate directories
appear because some deeper file implies them, never because of a filesystem
walk.
"""

from typing import Iterable, List, Optional

from prompt4ai.domain.tree_models import FileSelection, TreeNode
from prompt4ai.infra.fs import path_components

BRANCH = "├── "
ELBOW = "└── "
PIPE = "│   "
SPACE = "    "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_file_tree(base_dir: str, selections: Iterable[FileSelection]) -> TreeNode:
    """
    Insert every selection into a fresh trie.

    Each path is taken relative to 'base_dir' (or kept absolute if it does not
    lie under it) and split into components.

    Args:
        base_dir: Directory the selection is anchored at.
        selections: Selected files.

    Returns:
        TreeNode: Root of the trie (the root itself is never a file).
    """
    root = TreeNode()
    for selection in selections:
        parts = path_components(selection.path, base_dir)
        if parts:
            root.insert(parts)
    return root


def render_tree_structure(
        node: TreeNode,
        lines: Optional[List[str]] = None,
        prefix: str = "",
) -> List[str]:
    """
    Recursively transform the trie into a list of strings.

    Uses standard ASCII connectors (├──, └──); nested levels are indented
    with a continuation guide so each elbow lines up under its parent.

    Args:
        node: Current trie node to process.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.

    Returns:
        List[str]: The accumulator, for convenience.
    """
    if lines is None:
        lines = []

    entries = sorted(node.children.keys())
    total = len(entries)

    for i, entry in enumerate(entries):
        is_last = (i == total - 1)
        connector = ELBOW if is_last else BRANCH
        lines.append(f"{prefix}{connector}{entry}")
        render_tree_structure(
            node.children[entry],
            lines,
            prefix=prefix + (SPACE if is_last else PIPE),
        )

    return lines


def render_file_tree(base_dir: str, selections: Iterable[FileSelection]) -> str:
    """
    Render the selection as tree text, one newline-terminated line per node.

    Args:
        base_dir: Directory the selection is anchored at.
        selections: Selected files.

    Returns:
        str: The tree diagram ('' for an empty selection).

    Raises:
        ValueError: If 'base_dir' is empty.
    """
    if not base_dir or not str(base_dir).strip():
        raise ValueError("Base directory for tree rendering must not be empty.")

    lines = render_tree_structure(build_file_tree(base_dir, selections))
    return "".join(f"{line}\n" for line in lines)
