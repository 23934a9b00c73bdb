from __future__ import annotations

"""
Concurrent File Metrics Collector.

Fans per-file measurement out to a thread pool and fans the results back in.
Every unit runs to completion before the batch decides its outcome, so a
failing file never hides the results of the others: decode problems come
back as invalid records, and stat failures are gathered and raised together
once the whole batch has finished.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

from prompt4ai.core.pipeline.worker import process_metrics_task
from prompt4ai.core.processing.tokenizer import TokenizerService, get_tokenizer
from prompt4ai.domain.constants import DEFAULT_TOKENIZER_ENCODING
from prompt4ai.domain.metrics_models import (
    FileMetrics,
    MetricsCollectionError,
    MetricsFailure,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def collect_metrics_results(
        file_paths: Sequence[str],
        max_workers: Optional[int] = None,
        tokenizer: Optional[TokenizerService] = None,
) -> Tuple[List[FileMetrics], List[MetricsFailure]]:
    """
    Measure every file and return successes and failures separately.

    Successful records follow input order; failures are listed in the order
    they completed.

    Args:
        file_paths: Files to measure.
        max_workers: Thread pool size (executor default if None).
        tokenizer: Token counting service shared by all workers.

    Returns:
        Tuple of (metrics records, stat failures).
    """
    paths = list(file_paths)
    if not paths:
        return [], []

    service = tokenizer or get_tokenizer(DEFAULT_TOKENIZER_ENCODING)
    by_index: Dict[int, FileMetrics] = {}
    failures: List[MetricsFailure] = []

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="MetricsWorker") as executor:
        futures = {
            executor.submit(process_metrics_task, path, service): index
            for index, path in enumerate(paths)
        }

        for future in as_completed(futures):
            worker_res = future.result()
            if worker_res["ok"]:
                by_index[futures[future]] = worker_res["metrics"]
            else:
                failures.append(MetricsFailure(
                    file_path=worker_res["file_path"],
                    error=worker_res["error"],
                ))

    metrics = [by_index[i] for i in sorted(by_index)]
    logger.info(
        f"Metrics collected for {len(metrics)} file(s) "
        f"({sum(1 for m in metrics if not m.is_valid)} not text). Failures: {len(failures)}"
    )
    return metrics, failures


def collect_metrics(
        file_paths: Sequence[str],
        max_workers: Optional[int] = None,
        tokenizer: Optional[TokenizerService] = None,
) -> List[FileMetrics]:
    """
    Compute size, line count and token count for a batch of files.

    Args:
        file_paths: Files to measure.
        max_workers: Thread pool size (executor default if None).
        tokenizer: Token counting service shared by all workers.

    Returns:
        List[FileMetrics]: One record per input path, in input order.

    Raises:
        MetricsCollectionError: After the whole batch has run, if any file
            could not be stat'ed. Carries the first failure in completion
            order and the complete failure list.
    """
    metrics, failures = collect_metrics_results(file_paths, max_workers, tokenizer)
    if failures:
        raise MetricsCollectionError(failures)
    return metrics
