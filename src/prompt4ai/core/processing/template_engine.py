from __future__ import annotations

"""
Placeholder Template Engine.

Literal, ordered substitution of a fixed set of '{{name}}' tokens. There is
no escaping and no nesting: a token without data, or one already consumed,
is simply left in the output.

Two policies are supported:
- FIRST: each token is replaced at most once, at its first occurrence. Used
  for the prompt template so that '{{files}}' or '{{filetree}}' appearing
  inside inserted file content is never expanded.
- ALL: every occurrence is replaced. Used for the file template, where
  content is substituted last and therefore never rescanned.
"""

from enum import Enum
from typing import Iterable, Tuple

from prompt4ai.domain.constants import (
    FILE_CONTENT_TOKEN,
    FILE_NAME_TOKEN,
    FILE_PATH_TOKEN,
    FILES_TOKEN,
    FILETREE_TOKEN,
)


class SubstitutionPolicy(str, Enum):
    FIRST = "first"
    ALL = "all"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def apply_template(
        template: str,
        replacements: Iterable[Tuple[str, str]],
        policy: SubstitutionPolicy = SubstitutionPolicy.FIRST,
) -> str:
    """
    Substitute placeholder tokens in order.

    Replacements are applied one after another, so a value inserted early is
    visible to later tokens. Callers put untrusted text (file content) last.

    Args:
        template: Template text.
        replacements: Ordered (token, value) pairs.
        policy: FIRST replaces one occurrence per token, ALL replaces every one.

    Returns:
        str: The expanded text.
    """
    count = 1 if policy is SubstitutionPolicy.FIRST else -1
    result = template
    for token, value in replacements:
        result = result.replace(token, value, count)
    return result


def render_file_block(
        file_template: str,
        file_name: str,
        relative_path: str,
        content: str,
        policy: SubstitutionPolicy = SubstitutionPolicy.ALL,
) -> str:
    """
    Expand a per-file template.

    Order is fixed: name, then relative path, then content, so placeholder-like
    text inside the file is never mistaken for a template token.

    Args:
        file_template: Template using {{file_name}}, {{file_path}}, {{file_content}}.
        file_name: Display name of the file.
        relative_path: Path relative to the selection base.
        content: File text.
        policy: Substitution policy (global by default).

    Returns:
        str: The rendered block.
    """
    return apply_template(
        file_template,
        [
            (FILE_NAME_TOKEN, file_name),
            (FILE_PATH_TOKEN, relative_path),
            (FILE_CONTENT_TOKEN, content),
        ],
        policy,
    )


def assemble_prompt(prompt_template: str, tree_text: str, files_text: str) -> str:
    """
    Expand the top-level prompt template.

    The tree is substituted first, then the aggregated file blocks, each at
    its first occurrence only. A second '{{files}}' stays literal.

    Args:
        prompt_template: Template using {{filetree}} and {{files}}.
        tree_text: Rendered file tree.
        files_text: Concatenated file blocks.

    Returns:
        str: The final prompt.
    """
    return apply_template(
        prompt_template,
        [
            (FILETREE_TOKEN, tree_text),
            (FILES_TOKEN, files_text),
        ],
        SubstitutionPolicy.FIRST,
    )
