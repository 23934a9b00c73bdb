from __future__ import annotations

"""
File Metrics Data Models.

Defines the per-file records produced by the concurrent metrics collector and
the error raised when a file in the batch could not even be stat'ed.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

# -----------------------------------------------------------------------------
# RESULT RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileMetrics:
    """
    Size, line and token statistics of a single file.

    When 'is_valid' is False the file could not be decoded as text and
    'line_count' / 'token_count' are zero; 'size' is always the real byte
    length from metadata.

    Attributes:
        size: Byte size from filesystem metadata.
        line_count: Number of lines (a trailing partial line counts).
        token_count: BPE token count of the decoded text.
        file_path: Path the record belongs to.
        is_valid: False if the content was not readable as text.
    """
    size: int
    line_count: int
    token_count: int
    file_path: str
    is_valid: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MetricsFailure:
    """
    A file whose metadata could not be read.

    Attributes:
        file_path: Path that failed.
        error: Descriptive error message.
    """
    file_path: str
    error: str

# -----------------------------------------------------------------------------
# EXCEPTIONS
# -----------------------------------------------------------------------------

class MetricsCollectionError(OSError):
    """
    Raised once a metrics batch has finished if any file failed to stat.

    'failure' is the first failure observed in completion order, which is not
    necessarily input order; 'failures' lists every failure of the batch.
    """

    def __init__(self, failures: List[MetricsFailure]) -> None:
        self.failures = list(failures)
        self.failure = self.failures[0]
        super().__init__(f"{self.failure.file_path}: {self.failure.error}")
