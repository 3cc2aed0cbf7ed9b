from __future__ import annotations

"""
Token Counting Engine.

Estimates the token density of the generated document. Routes to the
tiktoken BPE encoder and falls back to a character-ratio heuristic when an
encoding cannot be loaded (for example without network access on first use).
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict

import tiktoken

from project2text.domain.constants import DEFAULT_MODEL_KEY

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN_AVG = 4


# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for token counting algorithms.
    """

    @abstractmethod
    def count(self, text: str, model_id: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.
            model_id: Specific model identifier for encoding selection.

        Returns:
            int: Total token count.
        """


class HeuristicStrategy(TokenizerStrategy):
    """Character density estimation."""

    def count(self, text: str, model_id: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class TiktokenStrategy(TokenizerStrategy):
    """
    BPE encoder from the tiktoken library.
    """

    def count(self, text: str, model_id: str) -> int:
        encoding_name = "o200k_base"

        # Older GPT architectures use the previous vocabulary
        if any(x in model_id.lower() for x in ["gpt-4-", "gpt-3.5", "legacy"]):
            encoding_name = "cl100k_base"

        encoding = tiktoken.get_encoding(encoding_name)
        return len(encoding.encode(text, disallowed_special=()))


_STRATEGIES: Dict[str, TokenizerStrategy] = {
    "tiktoken": TiktokenStrategy(),
    "heuristic": HeuristicStrategy(),
}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def count_tokens(text: str, model: str = DEFAULT_MODEL_KEY) -> int:
    """
    Estimate the number of tokens of a text.

    Args:
        text: Content to measure.
        model: Target model identifier.

    Returns:
        int: Token count (0 for empty text).
    """
    if not text:
        return 0

    try:
        return _STRATEGIES["tiktoken"].count(text, model)
    except Exception as e:
        logger.warning(f"Tokenizer unavailable ({e}). Using heuristic estimate.")
        return _STRATEGIES["heuristic"].count(text, model)
