from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes placeholder tokens, default templates, tokenizer settings and the
extension list used to recognize files that are never worth reading as text.
"""

import os
from typing import FrozenSet, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# TEMPLATE PLACEHOLDERS
# -----------------------------------------------------------------------------

FILE_NAME_TOKEN = "{{file_name}}"
FILE_PATH_TOKEN = "{{file_path}}"
FILE_CONTENT_TOKEN = "{{file_content}}"

FILETREE_TOKEN = "{{filetree}}"
FILES_TOKEN = "{{files}}"

FILE_TEMPLATE_TOKENS: Tuple[str, ...] = (FILE_NAME_TOKEN, FILE_PATH_TOKEN, FILE_CONTENT_TOKEN)
PROMPT_TEMPLATE_TOKENS: Tuple[str, ...] = (FILETREE_TOKEN, FILES_TOKEN)

DEFAULT_FILE_TEMPLATE = "File: {{file_name}}\nPath: {{file_path}}\nContent:\n{{file_content}}\n\n"
DEFAULT_PROMPT_TEMPLATE = "{{files}}"

# -----------------------------------------------------------------------------
# LISTING AND TOKENIZER DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_RULE_FILE_NAME = ".gitignore"
DEFAULT_TOKENIZER_ENCODING = "o200k_base"
DEFAULT_MAX_TREE_DEPTH = 8
CHARS_PER_TOKEN_AVG = 4

# -----------------------------------------------------------------------------
# NON-TEXT EXTENSIONS
# -----------------------------------------------------------------------------

BLOCKED_FILE_EXTENSIONS: FrozenSet[str] = frozenset({
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tiff", ".webp", ".ico", ".svg",
    # Audio
    ".mp3", ".wav", ".ogg", ".m4a", ".flac", ".aac",
    # Video
    ".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv", ".webm",
    # Archives
    ".zip", ".rar", ".7z", ".tar", ".gz", ".bz2",
    # Documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    # Executables and binaries
    ".exe", ".dll", ".so", ".dylib", ".bin", ".dat",
    # Databases
    ".db", ".sqlite", ".mdb",
    # Fonts
    ".ttf", ".otf", ".woff", ".woff2",
    # Compiled objects
    ".class", ".pyc", ".pyo", ".o", ".obj",
})


def is_blocked_extension(file_name: str) -> bool:
    """
    Check whether a file name carries a known non-text extension.

    Args:
        file_name: Basename or path of the file.

    Returns:
        bool: True if the extension (case-insensitive) is blocked.
    """
    _, ext = os.path.splitext(file_name)
    return ext.lower() in BLOCKED_FILE_EXTENSIONS
