"""Token management utilities for the summarization pipeline.

Key Components:
    - TokenEstimator: Language-aware characters-per-token estimator
    - estimate_tokens(): Token estimation with the shared default estimator
    - get_language_ratio(): Characters-per-token lookup

Usage:
    from condense.core.token_management import estimate_tokens, get_language_ratio

    tokens = estimate_tokens("Hello, world!", "eng")
    chars_per_token = get_language_ratio("rus")  # 3.2
"""

from .estimation import (
    DEFAULT_LANGUAGE_RATIO,
    DEFAULT_LANGUAGE_RATIOS,
    TokenEstimator,
    estimate_tokens,
    get_default_estimator,
    get_language_ratio,
)

__all__ = [
    "DEFAULT_LANGUAGE_RATIO",
    "DEFAULT_LANGUAGE_RATIOS",
    "TokenEstimator",
    "estimate_tokens",
    "get_default_estimator",
    "get_language_ratio",
]
