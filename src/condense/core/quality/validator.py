"""Semantic quality validation for summaries.

The score is the cosine similarity between embeddings of the source and
the summary. Both embeddings are requested concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional, Protocol, Sequence, runtime_checkable

from condense.core.errors.summarization import QualityValidationError

from .embeddings import EmbeddingClient
from .models import DEFAULT_QUALITY_THRESHOLD, QualityAssessment

logger = logging.getLogger(__name__)


@runtime_checkable
class QualityValidator(Protocol):
    """Scores how well a summary preserves its source."""

    async def validate_summary_quality(
        self,
        original: str,
        summary: str,
        threshold: float = DEFAULT_QUALITY_THRESHOLD,
        correlation_id: Optional[str] = None,
    ) -> QualityAssessment: ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        ValueError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise ValueError(f"Vector dimension mismatch: {len(a)} != {len(b)}")

    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class EmbeddingQualityValidator:
    """Quality validator backed by an embedding client."""

    def __init__(self, embedding_client: EmbeddingClient):
        self.embedding_client = embedding_client

    async def validate_summary_quality(
        self,
        original: str,
        summary: str,
        threshold: float = DEFAULT_QUALITY_THRESHOLD,
        correlation_id: Optional[str] = None,
    ) -> QualityAssessment:
        """Compare a summary to its source.

        Args:
            original: Source text
            summary: Summary text
            threshold: Minimum score for ``passed``
            correlation_id: Optional id attached to log records

        Returns:
            QualityAssessment with score and pass flag

        Raises:
            QualityValidationError: On empty input or embedding failure
        """
        if not original or not original.strip():
            raise QualityValidationError("Original text cannot be empty")
        if not summary or not summary.strip():
            raise QualityValidationError("Summary text cannot be empty")

        try:
            original_embedding, summary_embedding = await asyncio.gather(
                self.embedding_client.embed(original),
                self.embedding_client.embed(summary),
            )
            score = cosine_similarity(original_embedding, summary_embedding)
        except Exception as e:
            logger.error(
                "Quality validation failed: %s",
                e,
                extra={"correlation_id": correlation_id},
            )
            raise QualityValidationError(f"Quality validation failed: {e}") from e

        assessment = QualityAssessment(
            quality_score=score,
            passed=score >= threshold,
            threshold=threshold,
            original_length=len(original),
            summary_length=len(summary),
            compression_ratio=len(summary) / len(original),
        )
        logger.info(
            "Quality score %.4f (threshold %.2f, %s), compression ratio %.3f",
            score,
            threshold,
            "passed" if assessment.passed else "failed",
            assessment.compression_ratio,
            extra={"correlation_id": correlation_id},
        )
        return assessment
