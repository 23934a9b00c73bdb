from __future__ import annotations

"""
Atomic Metrics Worker.

Encapsulates the measurement of a single file. Designed to run inside a
ThreadPoolExecutor: it owns its path, touches no shared mutable state, and
reports failures as data instead of raising.
"""

import logging
import os
from typing import Any, Dict, Optional

from prompt4ai.core.processing.tokenizer import TokenizerService, get_tokenizer
from prompt4ai.domain.metrics_models import FileMetrics
from prompt4ai.infra.fs import read_text_strict

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def count_lines(text: str) -> int:
    """
    Count newline-terminated lines plus a final partial line.

    "a\\nb\\n" and "a\\nb" both have two lines; "" has none.
    """
    if not text:
        return 0
    newlines = text.count("\n")
    return newlines if text.endswith("\n") else newlines + 1


def process_metrics_task(
        file_path: str,
        tokenizer: Optional[TokenizerService] = None,
) -> Dict[str, Any]:
    """
    Measure one file.

    Size comes from metadata; failing to stat the file is the only hard
    failure and is returned as {"ok": False}. A file that cannot be read as
    UTF-8 text still yields a metrics record, flagged invalid with zero
    line and token counts.

    Args:
        file_path: Path of the file to measure.
        tokenizer: Token counting service (process-wide default if omitted).

    Returns:
        Dict[str, Any]: {"ok": True, "file_path", "metrics"} or
                        {"ok": False, "file_path", "error"}.
    """
    try:
        size = os.stat(file_path).st_size
    except OSError as e:
        logger.error(f"Cannot stat '{file_path}': {e}")
        return {"ok": False, "file_path": file_path, "error": str(e)}

    try:
        content = read_text_strict(file_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Not readable as text '{file_path}': {e}")
        return {
            "ok": True,
            "file_path": file_path,
            "metrics": FileMetrics(
                size=size,
                line_count=0,
                token_count=0,
                file_path=file_path,
                is_valid=False,
            ),
        }

    service = tokenizer or get_tokenizer()
    return {
        "ok": True,
        "file_path": file_path,
        "metrics": FileMetrics(
            size=size,
            line_count=count_lines(content),
            token_count=service.count(content),
            file_path=file_path,
            is_valid=True,
        ),
    }
