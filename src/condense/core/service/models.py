"""Job input/output contracts for the summarization service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from condense.core.quality.models import DEFAULT_QUALITY_THRESHOLD
from condense.core.summarization.constants import DEFAULT_MODEL

DEFAULT_JOB_MAX_OUTPUT_TOKENS = 200_000
HIERARCHICAL_STRATEGY = "hierarchical"


class ProcessingMethod(str, Enum):
    """How the delivered content was produced."""

    FULL_TEXT = "full_text"
    HIERARCHICAL = "hierarchical"


class SummarizationJobSpec(BaseModel):
    """Read-only description of one summarization job.

    Identifiers, correlation id and filename are carried through untouched.
    """

    model_config = ConfigDict(frozen=True)

    course_id: Optional[str] = Field(None, description="Opaque course identifier")
    organization_id: Optional[str] = Field(None, description="Opaque organization identifier")
    file_id: Optional[str] = Field(None, description="Opaque file identifier")
    correlation_id: Optional[str] = Field(None, description="Tracing id attached to log records")
    extracted_text: str = Field(..., description="Text extracted from the source document")
    original_filename: Optional[str] = Field(None, description="Source filename")
    language: str = Field(default="eng", description="Language code for token estimation")
    topic: str = Field(default="", description="Document topic passed to chunk prompts")
    strategy: str = Field(default=HIERARCHICAL_STRATEGY, description="Requested strategy")
    model: str = Field(default=DEFAULT_MODEL, min_length=1, description="Initial model identifier")
    quality_threshold: float = Field(
        default=DEFAULT_QUALITY_THRESHOLD, ge=0.0, le=1.0, description="Minimum quality score"
    )
    max_output_tokens: int = Field(
        default=DEFAULT_JOB_MAX_OUTPUT_TOKENS, gt=0, description="Target token budget for the summary"
    )
    no_summary_threshold_tokens: Optional[int] = Field(
        None, ge=0, description="Bypass summarization at or below this estimate (default from settings)"
    )


class QualityMetadata(BaseModel):
    """Quality and cost accounting for a finished job.

    Token counts and cost are summed over every attempt, not only the
    successful one.
    """

    quality_score: float = Field(..., description="Score of the delivered content")
    quality_check_passed: bool = Field(..., description="Whether the score met the threshold")
    quality_threshold: float = Field(..., description="Threshold the job was held to")
    retry_attempts: int = Field(default=0, ge=0, description="Retries before the delivered attempt")
    retry_strategy_changes: Optional[list[str]] = Field(
        None, description="Ordered escalation log (None when no retries ran)"
    )
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    estimated_cost_usd: float = Field(default=0.0, ge=0.0)
    model_used: Optional[str] = Field(None, description="Model of the delivered attempt")
    max_output_tokens_used: Optional[int] = Field(None, description="Token budget of the delivered attempt")
    iterations: int = Field(default=0, ge=0, description="Processing passes of the delivered run")
    chunks_processed: int = Field(default=0, ge=0, description="Chunk calls of the delivered run")
    compression_levels_used: list[str] = Field(default_factory=list)
    final_token_count: Optional[int] = Field(None, description="Estimated tokens of the delivered content")
    target_reached: Optional[bool] = None
    processing_time_ms: float = Field(default=0.0, ge=0.0)


class SummarizationOutcome(BaseModel):
    """Result handed back to the job system."""

    processed_content: str
    processing_method: ProcessingMethod
    quality_metadata: QualityMetadata
    success: bool = True


@dataclass(frozen=True)
class StrategyParams:
    """Knobs the retry ladder may change between attempts."""

    model: str
    max_output_tokens: int
