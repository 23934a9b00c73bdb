from __future__ import annotations

"""
BPE Token Counting Engine.

Counts tokens with the tiktoken byte-pair encoder (o200k_base by default),
encoding special-token text as special tokens. Follows a Strategy Pattern so
that a character-density heuristic can take over when the encoder cannot be
loaded (e.g. offline first run) or fails at runtime; the metrics batch then
still completes with an estimate.
"""

import logging
import math
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

import tiktoken

from prompt4ai.domain.constants import CHARS_PER_TOKEN_AVG, DEFAULT_TOKENIZER_ENCODING

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for tokenization algorithms.
    """

    @abstractmethod
    def count(self, text: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.

        Returns:
            int: Total token count.
        """


class HeuristicStrategy(TokenizerStrategy):
    """Character-density estimate used when the BPE encoder is unavailable."""

    def count(self, text: str) -> int:
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class EncodingUnavailableError(RuntimeError):
    """Raised when the BPE encoding could not be loaded."""


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoding via tiktoken.

    The encoding is loaded lazily once and shared; tiktoken encoders are safe
    to use from several worker threads. A failed load is remembered so that
    threads queued behind it do not retry the download.
    """

    def __init__(self, encoding_name: str = DEFAULT_TOKENIZER_ENCODING) -> None:
        self.encoding_name = encoding_name
        self._encoding: Optional[tiktoken.Encoding] = None
        self._load_error: Optional[Exception] = None
        self._lock = threading.Lock()

    def _get_encoding(self) -> tiktoken.Encoding:
        with self._lock:
            if self._load_error is not None:
                raise EncodingUnavailableError(str(self._load_error))
            if self._encoding is None:
                try:
                    self._encoding = tiktoken.get_encoding(self.encoding_name)
                except Exception as e:
                    self._load_error = e
                    raise EncodingUnavailableError(str(e)) from e
            return self._encoding

    def count(self, text: str) -> int:
        """Encode with special tokens allowed and count the result."""
        return len(self._get_encoding().encode(text, allowed_special="all"))


# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION (FACADE)
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Token counting facade with graceful fallback.

    The BPE strategy is tried first; any failure is logged and the heuristic
    result returned instead. If the encoding cannot be loaded at all, the BPE
    strategy is dropped and the heuristic serves the rest of the process.
    """

    def __init__(self, encoding_name: str = DEFAULT_TOKENIZER_ENCODING) -> None:
        self.heuristic = HeuristicStrategy()
        self._tiktoken: Optional[TokenizerStrategy] = TiktokenStrategy(encoding_name)
        self._lock = threading.Lock()

    def count(self, text: str) -> int:
        """
        Count tokens of 'text'.

        Args:
            text: Raw input text.

        Returns:
            int: Token count (0 for empty input).
        """
        if not text:
            return 0

        strategy = self._tiktoken
        if strategy is None:
            return self.heuristic.count(text)

        try:
            return strategy.count(text)
        except EncodingUnavailableError as e:
            self._disable_bpe(strategy, e)
            return self.heuristic.count(text)
        except Exception as e:
            logger.warning(f"BPE tokenizer failed: {e}. Using heuristic fallback.")
            return self.heuristic.count(text)

    def _disable_bpe(self, strategy: TokenizerStrategy, error: Exception) -> None:
        """Drop the BPE strategy once; later calls go straight to the heuristic."""
        with self._lock:
            if self._tiktoken is not strategy:
                return
            self._tiktoken = None
        logger.warning(f"BPE encoding unavailable: {error}. Using heuristic estimates from now on.")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_SERVICES: Dict[str, TokenizerService] = {}
_SERVICES_LOCK = threading.Lock()


def get_tokenizer(encoding_name: str = DEFAULT_TOKENIZER_ENCODING) -> TokenizerService:
    """Return the process-wide service for an encoding, creating it once."""
    with _SERVICES_LOCK:
        service = _SERVICES.get(encoding_name)
        if service is None:
            service = TokenizerService(encoding_name)
            _SERVICES[encoding_name] = service
        return service


def count_tokens(text: str, encoding_name: str = DEFAULT_TOKENIZER_ENCODING) -> int:
    """
    Count BPE tokens of 'text' with the shared service for 'encoding_name'.

    Args:
        text: Input string content.
        encoding_name: tiktoken encoding identifier.

    Returns:
        int: Total token count.
    """
    return get_tokenizer(encoding_name).count(text)
