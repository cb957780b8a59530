"""Summary quality validation.

Usage:
    from condense.core.quality import EmbeddingQualityValidator, JinaEmbeddingClient

    validator = EmbeddingQualityValidator(JinaEmbeddingClient())
    assessment = await validator.validate_summary_quality(original, summary, 0.75)
"""

from condense.core.errors.summarization import QualityValidationError

from .embeddings import JINA_API_URL, EmbeddingClient, JinaEmbeddingClient
from .models import DEFAULT_QUALITY_THRESHOLD, QualityAssessment
from .validator import EmbeddingQualityValidator, QualityValidator, cosine_similarity

__all__ = [
    "DEFAULT_QUALITY_THRESHOLD",
    "JINA_API_URL",
    "EmbeddingClient",
    "EmbeddingQualityValidator",
    "JinaEmbeddingClient",
    "QualityAssessment",
    "QualityValidationError",
    "QualityValidator",
    "cosine_similarity",
]
