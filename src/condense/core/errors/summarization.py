"""Summarization pipeline error classes."""

from __future__ import annotations

from typing import Any, Optional

FAILED_QUALITY_CRITICAL = "FAILED_QUALITY_CRITICAL"


class SummarizationError(Exception):
    """Base exception for summarization errors."""

    pass


class ChunkSummarizationError(SummarizationError):
    """Raised when a single chunk's LLM call fails.

    Aborts the whole hierarchical run. Retrying is the job-level service's
    concern, never the chunker's.

    Attributes:
        chunk_index: 1-based index of the failed chunk
        total_chunks: Number of chunks in the failing iteration
        cause_message: Message of the underlying exception
    """

    def __init__(self, chunk_index: int, total_chunks: int, cause: BaseException):
        self.chunk_index = chunk_index
        self.total_chunks = total_chunks
        self.cause_message = str(cause) or type(cause).__name__
        super().__init__(
            f"Failed to summarize chunk {chunk_index}/{total_chunks}: {self.cause_message}"
        )


class QualityValidationError(SummarizationError):
    """Raised when the quality validator itself cannot produce a score."""

    pass


class UnsupportedStrategyError(SummarizationError):
    """Raised when a job requests a summarization strategy that is not implemented."""

    def __init__(self, strategy: str, supported: Optional[list[str]] = None):
        self.strategy = strategy
        self.supported = supported or ["hierarchical"]
        super().__init__(
            f"Unsupported summarization strategy {strategy!r} "
            f"(supported: {', '.join(self.supported)})"
        )


class QualityCriticalError(SummarizationError):
    """Raised when every attempt failed the quality gate.

    Terminal for the job. The message carries enough numbers to act on
    without re-running.

    Attributes:
        quality_score: Score of the final attempt
        threshold: Required threshold
        attempts: Total attempts made (original + retries)
        retry_strategy_changes: Ordered escalation log
    """

    error_code = FAILED_QUALITY_CRITICAL

    def __init__(
        self,
        quality_score: float,
        threshold: float,
        attempts: int,
        retry_strategy_changes: Optional[list[str]] = None,
    ):
        self.quality_score = quality_score
        self.threshold = threshold
        self.attempts = attempts
        self.retry_strategy_changes = list(retry_strategy_changes or [])
        super().__init__(
            f"{FAILED_QUALITY_CRITICAL}: Summary quality {quality_score:.2f} below "
            f"threshold {threshold:.2f} after {attempts} attempts"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": "quality_critical",
            "error_code": self.error_code,
            "quality_score": self.quality_score,
            "threshold": self.threshold,
            "attempts": self.attempts,
            "retry_strategy_changes": self.retry_strategy_changes,
        }
