"""Data models for hierarchical summarization.

Key Components:
    - CompressionLevel: Enum of per-iteration compression aggressiveness
    - ChunkingConfig: Immutable configuration for one hierarchical run
    - ChunkSummaryResult: Output of one chunk's LLM call
    - HierarchicalRunResult: Output of a complete hierarchical run
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import (
    DEFAULT_CHUNK_SIZE_TOKENS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK,
    DEFAULT_MODEL,
    DEFAULT_OVERLAP_PERCENT,
    DEFAULT_TARGET_TOKENS,
    DEFAULT_TEMPERATURE,
)


class CompressionLevel(str, Enum):
    """Compression aggressiveness for one iteration.

    Levels only move towards AGGRESSIVE within a run:
        DETAILED: Preserve depth, remove redundancy (iteration 1)
        BALANCED: Main ideas with supporting context (iterations 2-3)
        AGGRESSIVE: Critical facts only (iteration 4 onward)
    """

    DETAILED = "DETAILED"
    BALANCED = "BALANCED"
    AGGRESSIVE = "AGGRESSIVE"

    @property
    def rank(self) -> int:
        """Position in the escalation order (0 = least aggressive)."""
        return _LEVEL_ORDER.index(self)

    def is_at_least(self, other: "CompressionLevel") -> bool:
        return self.rank >= other.rank


_LEVEL_ORDER = (
    CompressionLevel.DETAILED,
    CompressionLevel.BALANCED,
    CompressionLevel.AGGRESSIVE,
)


def compression_level_for_iteration(iteration: int) -> CompressionLevel:
    """Map a 1-based iteration number to its compression level.

    Raises:
        ValueError: If iteration is less than 1
    """
    if iteration < 1:
        raise ValueError(f"iteration must be >= 1, got {iteration}")
    if iteration == 1:
        return CompressionLevel.DETAILED
    if iteration <= 3:
        return CompressionLevel.BALANCED
    return CompressionLevel.AGGRESSIVE


@dataclass(frozen=True)
class ChunkingConfig:
    """Configuration for a hierarchical run.

    Attributes:
        target_tokens: Stop once the running text is at or below this estimate
        max_iterations: Hard cap on processing passes
        chunk_size_tokens: Window size in tokens
        overlap_percent: Configured overlap between windows (0-100)
        model: Model identifier for chunk calls
        temperature: Sampling temperature for chunk calls
        max_output_tokens_per_chunk: Output cap for each chunk call
    """

    target_tokens: int = DEFAULT_TARGET_TOKENS
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    chunk_size_tokens: int = DEFAULT_CHUNK_SIZE_TOKENS
    overlap_percent: float = DEFAULT_OVERLAP_PERCENT
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens_per_chunk: int = DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK

    def __post_init__(self) -> None:
        if self.target_tokens <= 0:
            raise ValueError(f"target_tokens must be positive, got {self.target_tokens}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.chunk_size_tokens <= 0:
            raise ValueError(
                f"chunk_size_tokens must be positive, got {self.chunk_size_tokens}"
            )
        if not 0 <= self.overlap_percent <= 100:
            raise ValueError(
                f"overlap_percent must be between 0 and 100, got {self.overlap_percent}"
            )
        if not self.model:
            raise ValueError("model must not be empty")
        if self.max_output_tokens_per_chunk <= 0:
            raise ValueError(
                "max_output_tokens_per_chunk must be positive, "
                f"got {self.max_output_tokens_per_chunk}"
            )


@dataclass(frozen=True)
class ChunkSummaryResult:
    """Summary of a single chunk with its token accounting."""

    summary_text: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass(frozen=True)
class HierarchicalRunResult:
    """Result of a hierarchical run.

    Attributes:
        summary_text: Final text (unchanged input when already under target)
        iterations_performed: Processing passes actually run
        total_input_tokens: Prompt tokens summed over every chunk call
        total_output_tokens: Completion tokens summed over every chunk call
        compression_levels_used: One level per processing pass, in order
        total_chunks_processed: Chunk calls made across all passes
        final_token_count: Estimate for summary_text
        target_reached: Whether the final estimate is within target_tokens
    """

    summary_text: str
    iterations_performed: int
    total_input_tokens: int
    total_output_tokens: int
    compression_levels_used: tuple[CompressionLevel, ...]
    total_chunks_processed: int
    final_token_count: int
    target_reached: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "summary_text": self.summary_text,
            "iterations_performed": self.iterations_performed,
            "total_input_tokens": self.total_input_tokens,
            "total_output_tokens": self.total_output_tokens,
            "compression_levels_used": [level.value for level in self.compression_levels_used],
            "total_chunks_processed": self.total_chunks_processed,
            "final_token_count": self.final_token_count,
            "target_reached": self.target_reached,
        }
