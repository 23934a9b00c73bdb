from __future__ import annotations

"""
Prompt Assembler Stage.

Combines a file selection into the final prompt text:
1. Each readable file is rendered with the per-file template.
2. The whole selection is rendered as an ASCII tree.
3. The prompt template receives the tree first, then the file blocks.

The result is plain text; delivering it (clipboard, HTTP, file) is up to the
caller.
"""

import logging
import os
from typing import Iterable, List, Optional

from prompt4ai.core.analysis.tree_renderer import render_file_tree
from prompt4ai.core.processing.template_engine import (
    SubstitutionPolicy,
    assemble_prompt,
    render_file_block,
)
from prompt4ai.domain.prompt_models import PromptAssemblyError, PromptResult
from prompt4ai.domain.tree_models import FileSelection
from prompt4ai.infra.fs import read_text_strict, relative_to_base

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_file_text(file_path: str) -> str:
    """
    Return the UTF-8 text of a file with its line endings untouched.

    Raises:
        OSError: File missing or unreadable.
        UnicodeDecodeError: Content is not text.
    """
    return read_text_strict(file_path)


def render_file_from_disk(
        base_dir: str,
        selection: FileSelection,
        file_template: str,
        policy: SubstitutionPolicy = SubstitutionPolicy.ALL,
) -> Optional[str]:
    """
    Render a single file block straight from disk.

    Args:
        base_dir: Directory the selection is anchored at.
        selection: File to render.
        file_template: Per-file template.
        policy: Substitution policy for the file template.

    Returns:
        Optional[str]: The rendered block, or None if the file is not
                       readable as text.
    """
    try:
        content = read_text_strict(selection.path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping '{selection.path}': {e}")
        return None

    return render_file_block(
        file_template,
        selection.name,
        str(relative_to_base(selection.path, base_dir)),
        content,
        policy,
    )


def build_prompt(
        base_dir: str,
        selections: Iterable[FileSelection],
        file_template: str,
        prompt_template: str,
        policy: SubstitutionPolicy = SubstitutionPolicy.ALL,
) -> PromptResult:
    """
    Assemble the prompt and report which files made it in.

    Files that cannot be read as text are left out of the files section but
    still appear in the tree, which always reflects the full selection.

    Args:
        base_dir: Directory the selection is anchored at.
        selections: Selected files, in the order they should appear.
        file_template: Per-file template.
        prompt_template: Whole-prompt template.
        policy: Substitution policy for the file template.

    Returns:
        PromptResult: Prompt text plus included and skipped paths.

    Raises:
        PromptAssemblyError: If 'base_dir' is empty or not a directory.
    """
    base_abs = _validate_base_dir(base_dir)
    chosen = list(selections)

    blocks: List[str] = []
    included: List[str] = []
    skipped: List[str] = []

    for selection in chosen:
        block = render_file_from_disk(base_abs, selection, file_template, policy)
        if block is None:
            skipped.append(selection.path)
            continue
        blocks.append(block)
        included.append(selection.path)

    tree_text = render_file_tree(base_abs, chosen)
    text = assemble_prompt(prompt_template, tree_text, "".join(blocks))

    logger.info(
        f"Prompt assembled: {len(included)} file(s) included, {len(skipped)} skipped, "
        f"{len(text)} characters"
    )
    return PromptResult(
        text=text,
        tree_text=tree_text,
        included_files=included,
        skipped_files=skipped,
    )


def generate_prompt(
        base_dir: str,
        selections: Iterable[FileSelection],
        file_template: str,
        prompt_template: str,
) -> str:
    """Assemble the prompt and return only its text."""
    return build_prompt(base_dir, selections, file_template, prompt_template).text


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _validate_base_dir(base_dir: str) -> str:
    if not base_dir or not str(base_dir).strip():
        raise PromptAssemblyError("Base directory must not be empty.")
    base_abs = os.path.abspath(base_dir)
    if not os.path.isdir(base_abs):
        raise PromptAssemblyError(f"Base directory does not exist or is not a directory: {base_abs}")
    return base_abs
