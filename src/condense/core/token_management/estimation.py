"""Language-aware token estimation.

Provides:
    - TokenEstimator: characters-per-token ratio table with estimation helpers
    - estimate_tokens(): Estimate with the shared default estimator
    - get_language_ratio(): Ratio lookup on the shared default estimator

Token counts are approximated as ``ceil(characters / ratio)`` where the ratio
depends on the script of the language. The same ratio is used by the chunker
to convert token budgets into character offsets, so estimation and chunking
always agree.
"""

import logging
import math
import threading
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_RATIO = 4.0

# Characters per token by ISO 639-3 code
DEFAULT_LANGUAGE_RATIOS: dict[str, float] = {
    "rus": 3.2,  # Cyrillic tokenizes denser than Latin scripts
    "eng": 4.0,
    "deu": 4.5,  # long compound words
    "fra": 4.2,
    "spa": 4.3,
    "cmn": 2.0,
}

# ISO 639-1 codes accepted as aliases
_LANGUAGE_ALIASES: dict[str, str] = {
    "ru": "rus",
    "en": "eng",
    "de": "deu",
    "fr": "fra",
    "es": "spa",
    "zh": "cmn",
}


def _normalize_language(language: Optional[str]) -> str:
    code = (language or "").strip().lower()
    return _LANGUAGE_ALIASES.get(code, code)


class TokenEstimator:
    """Deterministic character-ratio token estimator.

    Example:
        estimator = TokenEstimator()
        estimator.estimate_tokens("Привет мир", "rus")  # 4
        estimator.get_language_ratio("eng")  # 4.0
    """

    def __init__(
        self,
        ratios: Optional[dict[str, float]] = None,
        default_ratio: float = DEFAULT_LANGUAGE_RATIO,
    ):
        if default_ratio <= 0:
            raise ValueError("Ratio must be positive")
        self._ratios = dict(DEFAULT_LANGUAGE_RATIOS)
        self._default_ratio = default_ratio
        self._lock = threading.Lock()
        for code, ratio in (ratios or {}).items():
            self.set_language_ratio(code, ratio)

    def get_language_ratio(self, language: Optional[str]) -> float:
        """Get characters-per-token for a language.

        Unknown and undetermined ("und") languages use the default ratio.
        """
        with self._lock:
            return self._ratios.get(_normalize_language(language), self._default_ratio)

    def set_language_ratio(self, language: str, ratio: float) -> None:
        """Override the ratio for a language.

        Raises:
            ValueError: If ratio is zero or negative
        """
        if ratio <= 0:
            raise ValueError("Ratio must be positive")
        with self._lock:
            self._ratios[_normalize_language(language)] = float(ratio)

    def estimate_tokens(self, text: str, language: Optional[str] = None) -> int:
        """Estimate the token count of text.

        Returns 0 for empty or whitespace-only text.
        """
        if not text or not text.strip():
            return 0
        return math.ceil(len(text) / self.get_language_ratio(language))

    def batch_estimate_tokens(
        self, texts: Iterable[str], language: Optional[str] = None
    ) -> list[int]:
        """Estimate token counts for several texts in one call."""
        return [self.estimate_tokens(text, language) for text in texts]


_default_estimator = TokenEstimator()


def get_default_estimator() -> TokenEstimator:
    """Get the shared module-level estimator."""
    return _default_estimator


def estimate_tokens(text: str, language: Optional[str] = None) -> int:
    """Estimate tokens with the shared default estimator."""
    return _default_estimator.estimate_tokens(text, language)


def get_language_ratio(language: Optional[str]) -> float:
    """Get characters-per-token from the shared default estimator."""
    return _default_estimator.get_language_ratio(language)
