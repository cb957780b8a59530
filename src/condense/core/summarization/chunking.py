"""Overlapping window chunking for hierarchical summarization.

Windows are sized in characters derived from a token budget and the
language's characters-per-token ratio. Overlap shrinks for small documents
so a text barely over one window is not split into two near-duplicates.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from condense.core.token_management import TokenEstimator, get_default_estimator

logger = logging.getLogger(__name__)

# Overlap used when the whole text fits in a single window
MIN_OVERLAP_PERCENT = 1.0


def effective_overlap_percent(
    text_length: int,
    chunk_chars: int,
    configured_percent: float,
) -> float:
    """Scale the configured overlap to the document size.

    Args:
        text_length: Length of the text in characters
        chunk_chars: Window size in characters
        configured_percent: Overlap from configuration (0-100)

    Returns:
        1 for texts shorter than one window, half the configured overlap
        (at least 1) for texts shorter than two windows, otherwise the
        configured overlap.
    """
    if text_length < chunk_chars:
        return MIN_OVERLAP_PERCENT
    if text_length < chunk_chars * 2:
        return max(MIN_OVERLAP_PERCENT, configured_percent / 2)
    return configured_percent


def create_chunks(
    text: str,
    chunk_size_tokens: int,
    overlap_percent: float,
    language: Optional[str] = None,
    estimator: Optional[TokenEstimator] = None,
) -> list[str]:
    """Split text into overlapping windows.

    Every character of ``text`` falls inside at least one window, windows
    are returned in text order, and the window start strictly advances on
    each step for any overlap in 0-100. Windows that are blank after
    stripping are dropped.

    Args:
        text: Text to split
        chunk_size_tokens: Window size in tokens
        overlap_percent: Configured overlap (0-100)
        language: Language code used to look up the chars-per-token ratio
        estimator: Token estimator supplying the ratio (default: shared)

    Returns:
        Ordered list of chunk strings

    Raises:
        ValueError: If chunk_size_tokens is not positive
    """
    if chunk_size_tokens <= 0:
        raise ValueError(f"chunk_size_tokens must be positive, got {chunk_size_tokens}")

    estimator = estimator or get_default_estimator()
    ratio = estimator.get_language_ratio(language)
    text_length = len(text)

    chunk_chars = math.ceil(chunk_size_tokens * ratio)
    overlap = effective_overlap_percent(text_length, chunk_chars, overlap_percent)
    overlap_chars = math.ceil(chunk_size_tokens * (overlap / 100) * ratio)

    logger.debug(
        "Chunk geometry: text_length=%d chunk_chars=%d overlap=%.1f%% (configured %.1f%%) overlap_chars=%d",
        text_length,
        chunk_chars,
        overlap,
        overlap_percent,
        overlap_chars,
    )

    chunks: list[str] = []
    start = 0
    while start < text_length:
        end = min(start + chunk_chars, text_length)
        chunk = text[start:end]
        if chunk.strip():
            chunks.append(chunk)

        if end >= text_length:
            break

        next_start = end - overlap_chars
        if next_start >= end - 1 or next_start <= start:
            next_start = end
        start = next_start

    logger.debug("Created %d chunks from %d characters", len(chunks), text_length)
    return chunks
