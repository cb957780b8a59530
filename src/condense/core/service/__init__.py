"""Quality-gated summarization service.

Key Components:
    - SummarizationService: Bypass check, quality gate, and retry ladder
    - escalate(): Pure strategy escalation for one retry
    - SummarizationJobSpec / SummarizationOutcome: Job contracts
"""

from condense.core.errors.summarization import QualityCriticalError, UnsupportedStrategyError

from .models import (
    HIERARCHICAL_STRATEGY,
    ProcessingMethod,
    QualityMetadata,
    StrategyParams,
    SummarizationJobSpec,
    SummarizationOutcome,
)
from .service import SUPPORTED_STRATEGIES, SummarizationService, create_summarization_service
from .strategy import (
    MAX_QUALITY_RETRIES,
    MODEL_UPGRADE_PATH,
    escalate,
    format_token_count,
    short_model_name,
)

__all__ = [
    # Models
    "HIERARCHICAL_STRATEGY",
    "ProcessingMethod",
    "QualityMetadata",
    "StrategyParams",
    "SummarizationJobSpec",
    "SummarizationOutcome",
    # Strategy
    "MAX_QUALITY_RETRIES",
    "MODEL_UPGRADE_PATH",
    "escalate",
    "format_token_count",
    "short_model_name",
    # Service
    "SUPPORTED_STRATEGIES",
    "SummarizationService",
    "create_summarization_service",
    # Errors (re-exported for convenience)
    "QualityCriticalError",
    "UnsupportedStrategyError",
]
