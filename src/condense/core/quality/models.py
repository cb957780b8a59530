"""Quality assessment result model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_QUALITY_THRESHOLD = 0.75


@dataclass(frozen=True)
class QualityAssessment:
    """Semantic similarity between a source text and its summary.

    Attributes:
        quality_score: Similarity score (cosine, in [-1, 1])
        passed: Whether quality_score >= threshold
        threshold: Threshold the score was compared against
        original_length: Source length in characters
        summary_length: Summary length in characters
        compression_ratio: summary_length / original_length
    """

    quality_score: float
    passed: bool
    threshold: float
    original_length: int
    summary_length: int
    compression_ratio: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "quality_score": self.quality_score,
            "quality_check_passed": self.passed,
            "threshold": self.threshold,
            "original_length": self.original_length,
            "summary_length": self.summary_length,
            "compression_ratio": self.compression_ratio,
        }
