from __future__ import annotations

"""
Prompt Assembly Domain Models.

Result object of a prompt assembly run and the error raised when the
arguments themselves are unusable.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class PromptResult:
    """
    Outcome of assembling a prompt from a file selection.

    Attributes:
        text: The final prompt.
        tree_text: Rendered tree of the whole selection.
        included_files: Paths rendered into the files section, in order.
        skipped_files: Paths left out because they were not readable as text.
    """
    text: str
    tree_text: str
    included_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)


class PromptAssemblyError(ValueError):
    """Raised when the base directory of a prompt assembly is unusable."""
