from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared filesystem fixtures for listing, metrics and prompt tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """
    Create a small project tree.

    Structure:
    /repo
      .gitignore        (build/, *.log)
      /build
        out.bin
      /src
        main.py
        debug.log
      Readme.md
      main.rs
      app.log
    """
    root = tmp_path / "repo"
    root.mkdir()
    (root / ".gitignore").write_text("build/\n*.log\n", encoding="utf-8")

    build = root / "build"
    build.mkdir()
    (build / "out.bin").write_bytes(b"\x00\x01")

    src = root / "src"
    src.mkdir()
    (src / "main.py").write_text("print('hi')\n", encoding="utf-8")
    (src / "debug.log").write_text("noise\n", encoding="utf-8")

    (root / "Readme.md").write_text("# Repo\n", encoding="utf-8")
    (root / "main.rs").write_text("fn main() {}\n", encoding="utf-8")
    (root / "app.log").write_text("noise\n", encoding="utf-8")
    return root


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a complete configuration dictionary, as produced by the
    config domain defaults.
    """
    return {
        "file_template": "File: {{file_name}}\nPath: {{file_path}}\nContent:\n{{file_content}}\n\n",
        "prompt_template": "{{files}}",
        "ignore_strategy": "any",
        "rule_file_name": ".gitignore",
        "max_tree_depth": 8,
        "follow_symlinks": False,
        "tokenizer_encoding": "o200k_base",
        "max_workers": None,
    }
