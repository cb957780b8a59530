"""Unified error hierarchy for condense.

All custom exception classes are defined in domain-specific modules within
this package. This __init__.py re-exports everything for convenient access.

Usage:
    # Import from domain modules for specificity
    from condense.core.errors.llm import LLMError, RateLimitError

    # Or import from the package
    from condense.core.errors import QualityCriticalError
"""

# --- LLM errors ---
from condense.core.errors.llm import (
    AuthenticationError,
    InvalidRequestError,
    LLMError,
    MalformedResponseError,
    ModelNotFoundError,
    RateLimitError,
    TransportError,
    error_for_status,
)

# --- Summarization errors ---
from condense.core.errors.summarization import (
    FAILED_QUALITY_CRITICAL,
    ChunkSummarizationError,
    QualityCriticalError,
    QualityValidationError,
    SummarizationError,
    UnsupportedStrategyError,
)

__all__ = [
    # LLM
    "LLMError",
    "RateLimitError",
    "AuthenticationError",
    "InvalidRequestError",
    "ModelNotFoundError",
    "MalformedResponseError",
    "TransportError",
    "error_for_status",
    # Summarization
    "FAILED_QUALITY_CRITICAL",
    "SummarizationError",
    "ChunkSummarizationError",
    "QualityCriticalError",
    "QualityValidationError",
    "UnsupportedStrategyError",
]
