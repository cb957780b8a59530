"""Constants for hierarchical summarization."""

from __future__ import annotations

# Run budget
DEFAULT_TARGET_TOKENS = 200_000
DEFAULT_MAX_ITERATIONS = 5

# Chunking configuration
DEFAULT_CHUNK_SIZE_TOKENS = 115_000
DEFAULT_OVERLAP_PERCENT = 5

# Per-chunk generation
DEFAULT_MODEL = "openai/gpt-oss-20b"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK = 10_000

# Fan-out width for one iteration's chunk calls
DEFAULT_MAX_CONCURRENT_CHUNKS = 16

# Joins chunk summaries in chunk order
CHUNK_SEPARATOR = "\n\n---\n\n"

# The stop check of iteration N sees the output of N - 1 processing passes
CHECK_ITERATION_OFFSET = 1
