from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation and text reading utilities. Acts as
an abstraction over the 'os' and 'pathlib' modules so that listing, rendering
and metrics code share one notion of "relative to base" and "readable as text".
"""

import os
from pathlib import PurePath
from typing import List, Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "Prompt4AI"
UNIX_APP_DIR_NAME = ".prompt4ai"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/Prompt4AI
    - Linux/Mac: ~/.prompt4ai

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_boundary_dir(target_dir: str) -> str:
    """
    Resolve the upward limit for rule-file discovery.

    The process working directory approximates the repository root. When it
    cannot be determined the boundary collapses onto the target itself.
    """
    try:
        return os.path.abspath(os.getcwd())
    except OSError:
        return os.path.abspath(target_dir)


def relative_to_base(path: str, base_dir: str) -> PurePath:
    """
    Express 'path' relative to 'base_dir'.

    Purely lexical: a path that does not lie under the base is returned
    unchanged (still absolute), mirroring a prefix strip that falls back to
    the original path.

    Args:
        path: Absolute path of a selected file.
        base_dir: Directory the selection is anchored at.

    Returns:
        PurePath: Relative path, or the original path if not under base.
    """
    candidate = PurePath(path)
    try:
        return candidate.relative_to(PurePath(base_dir))
    except ValueError:
        return candidate


def path_components(path: str, base_dir: str) -> List[str]:
    """Split a selection into the component sequence used by the tree trie."""
    return list(relative_to_base(path, base_dir).parts)

# -----------------------------------------------------------------------------
# TEXT READING API
# -----------------------------------------------------------------------------

def read_text_strict(file_path: str) -> str:
    """
    Read a whole file as UTF-8 text.

    Line endings are preserved verbatim (no universal-newline translation) and
    undecodable bytes are NOT replaced: a binary file raises instead of being
    silently mangled.

    Args:
        file_path: Absolute path to the target file.

    Returns:
        str: Decoded file content.

    Raises:
        OSError: File missing, unreadable or a directory.
        UnicodeDecodeError: Content is not valid UTF-8.
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()
