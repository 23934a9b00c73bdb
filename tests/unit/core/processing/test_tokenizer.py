from __future__ import annotations

"""
Unit tests for the Tokenizer Service.

Verifies the BPE facade:
1. Correct delegation to the tiktoken strategy.
2. Fallback to heuristic estimation on failure or absence.
3. Handling of empty inputs and the per-encoding shared service.
"""

from unittest.mock import patch

import pytest

from prompt4ai.core.processing.tokenizer import (
    EncodingUnavailableError,
    HeuristicStrategy,
    TiktokenStrategy,
    TokenizerService,
    count_tokens,
    get_tokenizer,
)


@pytest.fixture
def service() -> TokenizerService:
    """Provide a fresh instance of the TokenizerService."""
    return TokenizerService()


def test_tokenizer_service_delegates_to_bpe(service: TokenizerService) -> None:
    with patch.object(service, "_tiktoken") as mock_tik:
        mock_tik.count.return_value = 42

        assert service.count("some text") == 42
        mock_tik.count.assert_called_once_with("some text")


def test_tokenizer_service_fallback_on_bpe_failure(service: TokenizerService) -> None:
    """If the encoder blows up, the heuristic takes over."""
    with patch.object(service, "_tiktoken") as mock_tik:
        mock_tik.count.side_effect = Exception("Library Error")

        # 8 chars -> 2 tokens
        assert service.count("12345678") == 2


def test_tokenizer_service_heuristic_when_no_bpe(service: TokenizerService) -> None:
    service._tiktoken = None

    # 13 chars -> ceil(13 / 4)
    assert service.count("1234567890123") == 4


def test_tokenizer_service_empty_input(service: TokenizerService) -> None:
    with patch.object(service, "_tiktoken") as mock_tik:
        assert service.count("") == 0
        mock_tik.count.assert_not_called()


def test_heuristic_strategy_rounds_up() -> None:
    assert HeuristicStrategy().count("a") == 1
    assert HeuristicStrategy().count("abcd") == 1
    assert HeuristicStrategy().count("abcde") == 2


def test_tiktoken_strategy_allows_special_tokens() -> None:
    strategy = TiktokenStrategy("o200k_base")
    with patch("prompt4ai.core.processing.tokenizer.tiktoken.get_encoding") as mock_get:
        mock_get.return_value.encode.return_value = [1, 2, 3]

        assert strategy.count("<|endoftext|>") == 3
        assert strategy.count("again") == 3

        mock_get.assert_called_once_with("o200k_base")
        mock_get.return_value.encode.assert_called_with("again", allowed_special="all")


def test_get_tokenizer_shares_one_service_per_encoding() -> None:
    assert get_tokenizer("o200k_base") is get_tokenizer("o200k_base")
    assert get_tokenizer("o200k_base") is not get_tokenizer("cl100k_base")


def test_public_count_tokens_interface() -> None:
    """The module-level function delegates to the shared service."""
    with patch.object(TokenizerService, "count", return_value=99) as mock_count:
        assert count_tokens("hello world", "o200k_base") == 99
        mock_count.assert_called_once_with("hello world")


def test_failed_encoding_load_disables_bpe_for_good() -> None:
    """An encoder that cannot be loaded is tried once, then the heuristic takes over."""
    service = TokenizerService("o200k_base")
    with patch(
        "prompt4ai.core.processing.tokenizer.tiktoken.get_encoding",
        side_effect=OSError("offline"),
    ) as mock_get:
        assert service.count("12345678") == 2
        assert service.count("1234") == 1

    assert mock_get.call_count == 1
    assert service._tiktoken is None


def test_tiktoken_strategy_remembers_load_failure() -> None:
    strategy = TiktokenStrategy("o200k_base")
    with patch(
        "prompt4ai.core.processing.tokenizer.tiktoken.get_encoding",
        side_effect=OSError("offline"),
    ) as mock_get:
        for _ in range(3):
            with pytest.raises(EncodingUnavailableError):
                strategy.count("text")

    mock_get.assert_called_once_with("o200k_base")
