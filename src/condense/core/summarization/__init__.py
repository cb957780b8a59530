"""Hierarchical summarization for oversized documents.

Key Components:
    - HierarchicalSummarizer: Recursive chunk-and-summarize loop
    - ChunkingConfig: Run configuration
    - CompressionLevel: Per-iteration compression aggressiveness
    - create_chunks(): Overlapping window chunking

Usage:
    from condense.core.summarization import ChunkingConfig, HierarchicalSummarizer

    summarizer = HierarchicalSummarizer(client)
    result = await summarizer.run(text, "rus", "Organic chemistry", ChunkingConfig(target_tokens=50_000))
"""

from condense.core.errors.summarization import ChunkSummarizationError

from .chunking import create_chunks, effective_overlap_percent
from .constants import (
    CHECK_ITERATION_OFFSET,
    CHUNK_SEPARATOR,
    DEFAULT_CHUNK_SIZE_TOKENS,
    DEFAULT_MAX_CONCURRENT_CHUNKS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK,
    DEFAULT_MODEL,
    DEFAULT_OVERLAP_PERCENT,
    DEFAULT_TARGET_TOKENS,
    DEFAULT_TEMPERATURE,
)
from .hierarchical import HierarchicalSummarizer
from .models import (
    ChunkingConfig,
    ChunkSummaryResult,
    CompressionLevel,
    HierarchicalRunResult,
    compression_level_for_iteration,
)
from .prompts import COMPRESSION_PROMPTS, build_chunk_prompt, get_system_prompt

__all__ = [
    # Constants
    "CHECK_ITERATION_OFFSET",
    "CHUNK_SEPARATOR",
    "DEFAULT_CHUNK_SIZE_TOKENS",
    "DEFAULT_MAX_CONCURRENT_CHUNKS",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK",
    "DEFAULT_MODEL",
    "DEFAULT_OVERLAP_PERCENT",
    "DEFAULT_TARGET_TOKENS",
    "DEFAULT_TEMPERATURE",
    # Models
    "ChunkingConfig",
    "ChunkSummaryResult",
    "CompressionLevel",
    "HierarchicalRunResult",
    "compression_level_for_iteration",
    # Chunking and prompts
    "create_chunks",
    "effective_overlap_percent",
    "COMPRESSION_PROMPTS",
    "build_chunk_prompt",
    "get_system_prompt",
    # Summarizer
    "HierarchicalSummarizer",
    # Errors (re-exported for convenience)
    "ChunkSummarizationError",
]
