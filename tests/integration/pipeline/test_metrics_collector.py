from __future__ import annotations

"""
Integration tests for the Concurrent Metrics Collector.

Runs real files through the thread pool and verifies ordering, invalid
record handling and the deferred failure contract.
"""

from pathlib import Path
from typing import List
from unittest.mock import MagicMock, patch

import pytest

from prompt4ai.core.processing.tokenizer import TokenizerService
from prompt4ai.core.services.metrics import collect_metrics, collect_metrics_results
from prompt4ai.domain.metrics_models import MetricsCollectionError


@pytest.fixture
def tokenizer() -> MagicMock:
    """Deterministic stand-in: one token per character."""
    mock = MagicMock()
    mock.count.side_effect = lambda text: len(text)
    return mock


@pytest.fixture
def files(tmp_path: Path) -> List[Path]:
    text = tmp_path / "three.txt"
    text.write_bytes(b"a\nb\nc\n")
    blob = tmp_path / "image.png"
    blob.write_bytes(b"\x89PNG\r\n\x1a\n\xff\x00")
    return [text, blob]


def test_text_and_binary_file(files: List[Path], tokenizer: MagicMock) -> None:
    """Scenario: one valid 3-line file and one undecodable file."""
    metrics = collect_metrics([str(p) for p in files], tokenizer=tokenizer)

    assert len(metrics) == 2
    text, blob = metrics
    assert text.is_valid is True
    assert text.line_count == 3
    assert text.token_count == 6
    assert blob.is_valid is False
    assert blob.size == 10
    assert (blob.line_count, blob.token_count) == (0, 0)


def test_results_follow_input_order(tmp_path: Path, tokenizer: MagicMock) -> None:
    paths = []
    for i in range(20):
        p = tmp_path / f"f{i:02d}.txt"
        p.write_text("x" * i, encoding="utf-8")
        paths.append(str(p))
    paths.reverse()

    metrics = collect_metrics(paths, max_workers=4, tokenizer=tokenizer)

    assert [m.file_path for m in metrics] == paths


def test_empty_batch() -> None:
    assert collect_metrics([]) == []


def test_missing_file_raises_after_batch(files: List[Path], tmp_path: Path, tokenizer: MagicMock) -> None:
    missing = str(tmp_path / "missing.txt")
    paths = [str(files[0]), missing, str(files[1])]

    with pytest.raises(MetricsCollectionError) as exc_info:
        collect_metrics(paths, tokenizer=tokenizer)

    err = exc_info.value
    assert err.failure.file_path == missing
    assert [f.file_path for f in err.failures] == [missing]
    # The remaining files were still measured before the error surfaced
    assert tokenizer.count.call_count == 1


def test_results_variant_returns_partial_data(files: List[Path], tmp_path: Path, tokenizer: MagicMock) -> None:
    missing_a = str(tmp_path / "a.missing")
    missing_b = str(tmp_path / "b.missing")

    metrics, failures = collect_metrics_results(
        [missing_a, str(files[0]), missing_b], tokenizer=tokenizer
    )

    assert [m.file_path for m in metrics] == [str(files[0])]
    assert sorted(f.file_path for f in failures) == [missing_a, missing_b]
    assert all(f.error for f in failures)


def test_default_tokenizer_is_used_when_none_given(files: List[Path], monkeypatch: pytest.MonkeyPatch) -> None:
    shared = MagicMock()
    shared.count.return_value = 5
    monkeypatch.setattr("prompt4ai.core.services.metrics.get_tokenizer", lambda _enc: shared)

    metrics = collect_metrics([str(files[0])])

    assert metrics[0].token_count == 5


def test_offline_encoder_is_loaded_once_per_batch(tmp_path: Path) -> None:
    """A failing encoder load is not repeated for every file of the batch."""
    paths = []
    for i in range(5):
        p = tmp_path / f"f{i}.txt"
        p.write_text("abcdefghij", encoding="utf-8")
        paths.append(str(p))
    service = TokenizerService("o200k_base")

    with patch(
        "prompt4ai.core.processing.tokenizer.tiktoken.get_encoding",
        side_effect=OSError("offline"),
    ) as mock_get:
        metrics = collect_metrics(paths, max_workers=4, tokenizer=service)

    assert mock_get.call_count == 1
    assert [m.token_count for m in metrics] == [3] * 5
    assert service._tiktoken is None
