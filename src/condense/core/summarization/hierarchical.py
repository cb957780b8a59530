"""Recursive budget-driven summarization.

Each iteration splits the running text into overlapping chunks, summarizes
every chunk in parallel at the iteration's compression level, and joins the
summaries in chunk order. Iterations continue until the estimate is within
the target or the iteration cap is hit.

Usage:
    summarizer = HierarchicalSummarizer(client)
    result = await summarizer.run(text, "eng", "Thermodynamics", ChunkingConfig())
    result.summary_text, result.iterations_performed
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from condense.core.concurrency import ConcurrencyLimiter
from condense.core.errors.summarization import ChunkSummarizationError
from condense.core.llm.client import CompletionClient, CompletionOptions
from condense.core.observability import MetricsCollector, get_metrics
from condense.core.token_management import TokenEstimator, get_default_estimator

from .chunking import create_chunks
from .constants import CHECK_ITERATION_OFFSET, CHUNK_SEPARATOR, DEFAULT_MAX_CONCURRENT_CHUNKS
from .models import (
    ChunkingConfig,
    ChunkSummaryResult,
    CompressionLevel,
    HierarchicalRunResult,
    compression_level_for_iteration,
)
from .prompts import build_chunk_prompt, get_system_prompt

logger = logging.getLogger(__name__)


class HierarchicalSummarizer:
    """Compress text to a token budget through repeated parallel chunk summarization.

    A chunk failure aborts the run with ``ChunkSummarizationError``; the
    summarizer never retries. Cancellation of the caller propagates to every
    in-flight chunk call.

    Attributes:
        client: Completion client used for chunk calls
        estimator: Token estimator for stop checks and chunk geometry
        metrics: Metrics collector for chunk counts and iteration timings
        max_concurrent_chunks: Upper bound on simultaneous chunk calls
        chunk_timeout: Optional per-chunk timeout in seconds
    """

    def __init__(
        self,
        client: CompletionClient,
        estimator: Optional[TokenEstimator] = None,
        metrics: Optional[MetricsCollector] = None,
        *,
        max_concurrent_chunks: int = DEFAULT_MAX_CONCURRENT_CHUNKS,
        chunk_timeout: Optional[float] = None,
    ):
        if max_concurrent_chunks < 1:
            raise ValueError(
                f"max_concurrent_chunks must be at least 1, got {max_concurrent_chunks}"
            )
        self.client = client
        self.estimator = estimator or get_default_estimator()
        self.metrics = metrics or get_metrics()
        self.max_concurrent_chunks = max_concurrent_chunks
        self.chunk_timeout = chunk_timeout

    async def run(
        self,
        text: str,
        language: Optional[str],
        topic: str,
        config: Optional[ChunkingConfig] = None,
    ) -> HierarchicalRunResult:
        """Summarize ``text`` until it fits ``config.target_tokens``.

        Args:
            text: Source text
            language: Language code for token estimation
            topic: Document topic, passed to every chunk prompt
            config: Run configuration (default: ChunkingConfig())

        Returns:
            HierarchicalRunResult describing the final text and the run

        Raises:
            ChunkSummarizationError: If any chunk call fails
        """
        config = config or ChunkingConfig()

        logger.info(
            "Starting hierarchical summarization: length=%d language=%s target_tokens=%d "
            "max_iterations=%d chunk_size_tokens=%d model=%s",
            len(text),
            language,
            config.target_tokens,
            config.max_iterations,
            config.chunk_size_tokens,
            config.model,
        )

        current_text = text
        total_input_tokens = 0
        total_output_tokens = 0
        total_chunks = 0
        levels: list[CompressionLevel] = []

        for iteration in range(1, config.max_iterations + 1):
            current_tokens = self.estimator.estimate_tokens(current_text, language)

            if current_tokens <= config.target_tokens:
                logger.info(
                    "Target reached at check %d: %d <= %d tokens",
                    iteration,
                    current_tokens,
                    config.target_tokens,
                )
                return HierarchicalRunResult(
                    summary_text=current_text,
                    iterations_performed=iteration - CHECK_ITERATION_OFFSET,
                    total_input_tokens=total_input_tokens,
                    total_output_tokens=total_output_tokens,
                    compression_levels_used=tuple(levels),
                    total_chunks_processed=total_chunks,
                    final_token_count=current_tokens,
                    target_reached=True,
                )

            level = compression_level_for_iteration(iteration)
            levels.append(level)

            chunks = create_chunks(
                current_text,
                config.chunk_size_tokens,
                config.overlap_percent,
                language,
                self.estimator,
            )
            total_chunks += len(chunks)

            logger.info(
                "Iteration %d: %d tokens, %d chunks at %s",
                iteration,
                current_tokens,
                len(chunks),
                level.value,
            )

            start = time.perf_counter()
            results = await self._summarize_chunks(chunks, level, topic, config)
            elapsed_ms = (time.perf_counter() - start) * 1000

            for result in results:
                total_input_tokens += result.input_tokens
                total_output_tokens += result.output_tokens

            self.metrics.record_iteration(iteration, level.value, len(chunks), elapsed_ms)

            current_text = CHUNK_SEPARATOR.join(result.summary_text for result in results)

        final_tokens = self.estimator.estimate_tokens(current_text, language)
        logger.warning(
            "Max iterations (%d) reached without hitting target: %d > %d tokens, levels=%s",
            config.max_iterations,
            final_tokens,
            config.target_tokens,
            [level.value for level in levels],
        )
        return HierarchicalRunResult(
            summary_text=current_text,
            iterations_performed=config.max_iterations,
            total_input_tokens=total_input_tokens,
            total_output_tokens=total_output_tokens,
            compression_levels_used=tuple(levels),
            total_chunks_processed=total_chunks,
            final_token_count=final_tokens,
            target_reached=False,
        )

    async def _summarize_chunks(
        self,
        chunks: list[str],
        level: CompressionLevel,
        topic: str,
        config: ChunkingConfig,
    ) -> list[ChunkSummaryResult]:
        """Fan out chunk calls and return results in chunk order."""
        limiter = ConcurrencyLimiter(
            max_concurrent=self.max_concurrent_chunks, name="hierarchical-chunks"
        )
        total = len(chunks)
        gathered = await limiter.gather(
            [
                self._summarize_chunk(chunk, index, total, level, topic, config)
                for index, chunk in enumerate(chunks)
            ]
        )
        return gathered.results

    async def _summarize_chunk(
        self,
        chunk: str,
        index: int,
        total: int,
        level: CompressionLevel,
        topic: str,
        config: ChunkingConfig,
    ) -> ChunkSummaryResult:
        options = CompletionOptions(
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_output_tokens_per_chunk,
            system_prompt=get_system_prompt(level),
        )
        prompt = build_chunk_prompt(chunk, topic, index + 1, total)

        logger.debug(
            "Summarizing chunk %d/%d (%d chars) at %s", index + 1, total, len(chunk), level.value
        )
        try:
            call = self.client.generate_completion(prompt, options)
            if self.chunk_timeout:
                response = await asyncio.wait_for(call, timeout=self.chunk_timeout)
            else:
                response = await call
        except Exception as e:
            logger.error("Chunk %d/%d failed at %s: %s", index + 1, total, level.value, e)
            raise ChunkSummarizationError(index + 1, total, e) from e

        return ChunkSummaryResult(
            summary_text=response.content,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )
