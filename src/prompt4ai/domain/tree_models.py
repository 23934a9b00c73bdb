from __future__ import annotations

"""
Directory and Tree Structure Data Models.

Provides the filesystem entry records returned by the listing service and the
path trie used to merge a flat file selection into a renderable hierarchy.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

# -----------------------------------------------------------------------------
# LISTING COMPONENTS
# -----------------------------------------------------------------------------

class EntryKind(str, Enum):
    """Classification of a filesystem node."""
    DIRECTORY = "folder"
    FILE = "file"


@dataclass
class PathEntry:
    """
    One filesystem node produced by a listing call.

    Attributes:
        kind: Directory or file, from filesystem metadata.
        name: Final path component.
        path: Absolute filesystem path.
        children: Ordered child entries; only filled by recursive listings.
        truncated: True when recursion stopped at this directory (depth cap
                   or an already visited directory).
    """
    kind: EntryKind
    name: str
    path: str
    children: Optional[List["PathEntry"]] = None
    truncated: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def to_dict(self) -> Dict[str, object]:
        """Serialize to the {type, name, path, children} wire shape."""
        payload: Dict[str, object] = {
            "type": self.kind.value,
            "name": self.name,
            "path": self.path,
            "children": None,
        }
        if self.children is not None:
            payload["children"] = [c.to_dict() for c in self.children]
        if self.truncated:
            payload["truncated"] = True
        return payload

# -----------------------------------------------------------------------------
# RENDERING COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileSelection:
    """
    A file picked by the caller for prompt assembly.

    Attributes:
        name: Display name (usually the basename).
        path: Absolute filesystem path.
    """
    name: str
    path: str


@dataclass
class TreeNode:
    """
    Node of the path trie.

    Children are keyed by path component; output order is lexicographic and
    applied at render time, so insertion order does not matter.
    """
    children: Dict[str, "TreeNode"] = field(default_factory=dict)
    is_file: bool = False

    def insert(self, parts: Sequence[str]) -> None:
        """
        Insert a component sequence, marking its final component as a file.

        Repeated prefixes reuse existing nodes, so inserting the same path
        twice leaves the trie unchanged.
        """
        node = self
        for part in parts:
            node = node.children.setdefault(part, TreeNode())
        if node is not self:
            node.is_file = True
