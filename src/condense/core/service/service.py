"""Quality-gated summarization service.

Wraps the hierarchical summarizer with a bypass for small documents, a
post-hoc quality gate, and a bounded retry ladder that escalates the model
and then the token budget. A job that never clears the gate fails with
``QualityCriticalError`` after 1 + MAX_QUALITY_RETRIES attempts.

Transport failures are not quality failures: anything the summarizer or
validator raises aborts the job immediately without spending retry budget.

Usage:
    service = create_summarization_service()
    outcome = await service.generate_summary(
        SummarizationJobSpec(extracted_text=text, language="eng", topic="Optics")
    )
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from condense.config.settings import SummarizationSettings, get_settings
from condense.core.errors.summarization import QualityCriticalError, UnsupportedStrategyError
from condense.core.llm.client import OpenRouterCompletionClient
from condense.core.llm.pricing import calculate_cost
from condense.core.observability import MetricsCollector, get_metrics
from condense.core.quality.embeddings import JinaEmbeddingClient
from condense.core.quality.models import QualityAssessment
from condense.core.quality.validator import EmbeddingQualityValidator, QualityValidator
from condense.core.summarization.hierarchical import HierarchicalSummarizer
from condense.core.summarization.models import ChunkingConfig, HierarchicalRunResult
from condense.core.token_management import TokenEstimator, get_default_estimator

from .models import (
    HIERARCHICAL_STRATEGY,
    ProcessingMethod,
    QualityMetadata,
    StrategyParams,
    SummarizationJobSpec,
    SummarizationOutcome,
)
from .strategy import MAX_QUALITY_RETRIES, escalate

logger = logging.getLogger(__name__)

SUPPORTED_STRATEGIES = [HIERARCHICAL_STRATEGY]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class SummarizationService:
    """Runs summarization jobs through the quality gate.

    Attributes:
        summarizer: Hierarchical summarizer used for every attempt
        validator: Quality validator scoring each attempt
        estimator: Token estimator for the bypass check
        settings: Pipeline settings (chunking defaults, bypass, retry knobs)
        metrics: Metrics collector
    """

    def __init__(
        self,
        summarizer: HierarchicalSummarizer,
        validator: QualityValidator,
        estimator: Optional[TokenEstimator] = None,
        settings: Optional[SummarizationSettings] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.summarizer = summarizer
        self.validator = validator
        self.estimator = estimator or get_default_estimator()
        self.settings = settings or SummarizationSettings()
        self.metrics = metrics or get_metrics()

    def build_chunking_config(self, params: StrategyParams) -> ChunkingConfig:
        """Chunking config for one attempt: settings defaults plus the attempt's strategy."""
        chunking = self.settings.chunking
        return ChunkingConfig(
            target_tokens=params.max_output_tokens,
            max_iterations=chunking.max_iterations,
            chunk_size_tokens=chunking.chunk_size_tokens,
            overlap_percent=chunking.overlap_percent,
            model=params.model,
            temperature=chunking.temperature,
            max_output_tokens_per_chunk=chunking.max_output_tokens_per_chunk,
        )

    async def generate_summary(self, job: SummarizationJobSpec) -> SummarizationOutcome:
        """Produce the content to deliver for a job.

        Args:
            job: Job description

        Returns:
            SummarizationOutcome (full text for small documents, otherwise the
            first summary that passes the quality gate)

        Raises:
            UnsupportedStrategyError: If job.strategy is not implemented
            QualityCriticalError: If every attempt fails the quality gate
            ChunkSummarizationError: If a chunk call fails
            QualityValidationError: If the validator cannot score a summary
        """
        if job.strategy not in SUPPORTED_STRATEGIES:
            raise UnsupportedStrategyError(job.strategy, SUPPORTED_STRATEGIES)

        start = time.perf_counter()
        log_extra = {"correlation_id": job.correlation_id}

        bypass_threshold = job.no_summary_threshold_tokens
        if bypass_threshold is None:
            bypass_threshold = self.settings.quality.no_summary_threshold_tokens

        estimated_tokens = self.estimator.estimate_tokens(job.extracted_text, job.language)
        if estimated_tokens <= bypass_threshold:
            logger.info(
                "Document within bypass threshold (%d <= %d tokens), delivering full text",
                estimated_tokens,
                bypass_threshold,
                extra=log_extra,
            )
            self.metrics.record_job(ProcessingMethod.FULL_TEXT.value)
            return self._full_text_outcome(job, estimated_tokens, start)

        params = StrategyParams(model=job.model, max_output_tokens=job.max_output_tokens)
        changes: list[str] = []
        total_input_tokens = 0
        total_output_tokens = 0
        total_cost = 0.0
        assessment: Optional[QualityAssessment] = None

        for retry_number in range(MAX_QUALITY_RETRIES + 1):
            if retry_number > 0:
                params, change = escalate(
                    params,
                    retry_number,
                    upgrade_model=self.settings.retry.upgrade_model,
                    token_budget_multiplier=self.settings.retry.token_budget_multiplier,
                )
                if change:
                    changes.append(change)
                logger.info(
                    "Quality retry %d/%d: %s",
                    retry_number,
                    MAX_QUALITY_RETRIES,
                    change or "no strategy change",
                    extra=log_extra,
                )
                self.metrics.record_quality_retry(retry_number)

            run = await self.summarizer.run(
                job.extracted_text,
                job.language,
                job.topic,
                self.build_chunking_config(params),
            )
            total_input_tokens += run.total_input_tokens
            total_output_tokens += run.total_output_tokens
            total_cost += calculate_cost(params.model, run.total_input_tokens, run.total_output_tokens)

            with self.metrics.timed("summarization.validation_ms"):
                assessment = await self.validator.validate_summary_quality(
                    job.extracted_text,
                    run.summary_text,
                    job.quality_threshold,
                    correlation_id=job.correlation_id,
                )
            self.metrics.record_quality_score(assessment.quality_score, assessment.passed)

            if assessment.passed:
                logger.info(
                    "Summary passed quality gate: score %.2f >= %.2f after %d retries",
                    assessment.quality_score,
                    job.quality_threshold,
                    retry_number,
                    extra=log_extra,
                )
                self.metrics.record_job(ProcessingMethod.HIERARCHICAL.value)
                metadata = QualityMetadata(
                    quality_score=assessment.quality_score,
                    quality_check_passed=True,
                    quality_threshold=job.quality_threshold,
                    retry_attempts=retry_number,
                    retry_strategy_changes=list(changes) if retry_number > 0 else None,
                    input_tokens=total_input_tokens,
                    output_tokens=total_output_tokens,
                    estimated_cost_usd=total_cost,
                    model_used=params.model,
                    max_output_tokens_used=params.max_output_tokens,
                    iterations=run.iterations_performed,
                    chunks_processed=run.total_chunks_processed,
                    compression_levels_used=[level.value for level in run.compression_levels_used],
                    final_token_count=run.final_token_count,
                    target_reached=run.target_reached,
                    processing_time_ms=_elapsed_ms(start),
                )
                return self._hierarchical_outcome(run, metadata)

            logger.warning(
                "Summary failed quality gate: score %.2f < %.2f (attempt %d/%d)",
                assessment.quality_score,
                job.quality_threshold,
                retry_number + 1,
                MAX_QUALITY_RETRIES + 1,
                extra=log_extra,
            )

        attempts = MAX_QUALITY_RETRIES + 1
        final_score = assessment.quality_score if assessment is not None else 0.0
        logger.error(
            "Quality critical failure after %d attempts: score %.2f, threshold %.2f, changes=%s",
            attempts,
            final_score,
            job.quality_threshold,
            changes,
            extra=log_extra,
        )
        self.metrics.record_quality_critical()
        raise QualityCriticalError(final_score, job.quality_threshold, attempts, changes)

    def _full_text_outcome(
        self, job: SummarizationJobSpec, estimated_tokens: int, start: float
    ) -> SummarizationOutcome:
        return SummarizationOutcome(
            processed_content=job.extracted_text,
            processing_method=ProcessingMethod.FULL_TEXT,
            quality_metadata=QualityMetadata(
                quality_score=1.0,
                quality_check_passed=True,
                quality_threshold=job.quality_threshold,
                retry_attempts=0,
                retry_strategy_changes=None,
                input_tokens=0,
                output_tokens=0,
                estimated_cost_usd=0.0,
                final_token_count=estimated_tokens,
                target_reached=True,
                processing_time_ms=_elapsed_ms(start),
            ),
            success=True,
        )

    def _hierarchical_outcome(
        self, run: HierarchicalRunResult, metadata: QualityMetadata
    ) -> SummarizationOutcome:
        return SummarizationOutcome(
            processed_content=run.summary_text,
            processing_method=ProcessingMethod.HIERARCHICAL,
            quality_metadata=metadata,
            success=True,
        )


def create_summarization_service(
    settings: Optional[SummarizationSettings] = None,
) -> SummarizationService:
    """Wire a service with the OpenRouter and Jina clients from settings.

    Raises:
        ValueError: If an API key is missing from both settings and environment
    """
    settings = settings or get_settings()

    completion_client = OpenRouterCompletionClient(
        api_key=settings.llm.api_key,
        base_url=settings.llm.base_url,
        timeout=settings.llm.timeout,
        max_retries=settings.llm.max_retries,
    )
    embedding_client = JinaEmbeddingClient(
        api_key=settings.embeddings.api_key,
        url=settings.embeddings.url,
        model=settings.embeddings.model,
        dimensions=settings.embeddings.dimensions,
        timeout=settings.embeddings.timeout,
    )
    estimator = get_default_estimator()
    summarizer = HierarchicalSummarizer(
        completion_client,
        estimator,
        max_concurrent_chunks=settings.chunking.max_concurrent_chunks,
        chunk_timeout=settings.chunking.chunk_timeout,
    )
    return SummarizationService(
        summarizer,
        EmbeddingQualityValidator(embedding_client),
        estimator,
        settings,
    )
