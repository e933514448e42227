"""
Token Counter Module for LLM Context Sizing
==========================================

Counts the tokens of collected output so the user can judge whether it
fits an LLM context window.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict

import tiktoken

logger = logging.getLogger(__name__)

# Fallback: Simple word-based estimation
AVERAGE_TOKENS_PER_WORD = 1.3  # Approximate ratio for most languages


@dataclass
class TokenStats:
    """Statistics for token counting"""
    total_tokens: int
    word_count: int
    char_count: int
    processing_time: float = 0.0
    encoding_used: str = "unknown"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "total_tokens": self.total_tokens,
            "word_count": self.word_count,
            "char_count": self.char_count,
            "processing_time": self.processing_time,
            "encoding_used": self.encoding_used
        }


class TokenCounter:
    """
    Token counter backed by tiktoken.
    Falls back to word-based estimation when no encoding can be loaded
    (unknown model name, encoding files not downloadable offline).
    """

    def __init__(self, model_name: str = "gpt-4o", fallback_enabled: bool = True):
        """
        Initialize token counter

        Args:
            model_name: OpenAI model name for tiktoken encoding
            fallback_enabled: Whether to use word-based fallback if no encoding loads
        """
        self.model_name = model_name
        self.fallback_enabled = fallback_enabled
        self.encoding = None
        self.encoding_name = "word_fallback"

        try:
            self.encoding = tiktoken.encoding_for_model(model_name)
            self.encoding_name = f"tiktoken-{model_name}"
            logger.debug(f"Initialized tiktoken encoding for {model_name}")
        except Exception as e:
            logger.warning(f"Failed to get tiktoken encoding for {model_name}: {e}")
            if fallback_enabled:
                logger.info("Falling back to word-based estimation")
            else:
                raise

    @staticmethod
    def _estimate(word_count: int) -> int:
        return max(1, int(word_count * AVERAGE_TOKENS_PER_WORD)) if word_count else 0

    def count_tokens(self, text: str) -> TokenStats:
        """
        Count tokens in text using the best available method

        Args:
            text: Text to count tokens for

        Returns:
            TokenStats object with detailed statistics
        """
        start_time = time.time()

        char_count = len(text)
        word_count = len(text.split())

        if self.encoding is not None:
            try:
                total_tokens = len(self.encoding.encode(text, disallowed_special=()))
                encoding_used = self.encoding_name
            except Exception as e:
                logger.warning(f"tiktoken encoding failed: {e}")
                if not self.fallback_enabled:
                    raise
                total_tokens = self._estimate(word_count)
                encoding_used = "word_fallback"
        else:
            total_tokens = self._estimate(word_count)
            encoding_used = "word_fallback"

        return TokenStats(
            total_tokens=total_tokens,
            word_count=word_count,
            char_count=char_count,
            processing_time=time.time() - start_time,
            encoding_used=encoding_used
        )

    def estimate_context_usage(self, stats: TokenStats,
                               context_limit: int = 128000) -> Dict[str, Any]:
        """
        Estimate context window usage for LLM processing

        Args:
            stats: Token statistics
            context_limit: Maximum context window size

        Returns:
            Dictionary with usage statistics
        """
        usage_percent = (stats.total_tokens / context_limit) * 100
        remaining_tokens = max(0, context_limit - stats.total_tokens)

        return {
            "total_tokens": stats.total_tokens,
            "context_limit": context_limit,
            "usage_percent": usage_percent,
            "remaining_tokens": remaining_tokens,
            "fits_in_context": stats.total_tokens <= context_limit,
        }
