"""Tests for HierarchicalSummarizer.

Tests cover:
1. Stop condition: under-target input makes no LLM calls
2. Iteration accounting, token totals, and separator joining
3. Compression level escalation and per-level prompts
4. Exhaustion at max_iterations
5. Chunk order independent of completion order
6. Chunk failure and timeout wrapping
"""

import asyncio
import re
from unittest.mock import MagicMock

import pytest

from condense.core.errors import ChunkSummarizationError, LLMError
from condense.core.summarization import (
    CHUNK_SEPARATOR,
    COMPRESSION_PROMPTS,
    ChunkingConfig,
    CompressionLevel,
    HierarchicalSummarizer,
)
from fakes import ScriptedCompletionClient

_CHUNK_NUMBER = re.compile(r"This is chunk (\d+) of (\d+)\.")


def _chunk_number(prompt: str) -> int:
    return int(_CHUNK_NUMBER.search(prompt).group(1))


def _config(**overrides) -> ChunkingConfig:
    """Small windows so tests run on short texts: 100 tokens = 400 eng chars."""
    values = {
        "target_tokens": 100,
        "max_iterations": 5,
        "chunk_size_tokens": 100,
        "overlap_percent": 0,
        "model": "openai/gpt-oss-20b",
        "temperature": 0.3,
        "max_output_tokens_per_chunk": 500,
    }
    values.update(overrides)
    return ChunkingConfig(**values)


# =============================================================================
# Test: Stop condition
# =============================================================================


class TestStopCondition:
    """Tests for the under-target early return."""

    @pytest.mark.asyncio
    async def test_under_target_returns_unchanged(self, completion_client, estimator, metrics):
        summarizer = HierarchicalSummarizer(completion_client, estimator, metrics)
        text = "a" * 400  # exactly 100 tokens

        result = await summarizer.run(text, "eng", "Topic", _config())

        assert result.summary_text == text
        assert result.iterations_performed == 0
        assert result.compression_levels_used == ()
        assert result.total_chunks_processed == 0
        assert result.total_input_tokens == 0
        assert result.final_token_count == 100
        assert result.target_reached is True
        assert completion_client.calls == []

    @pytest.mark.asyncio
    async def test_empty_text(self, completion_client, estimator, metrics):
        summarizer = HierarchicalSummarizer(completion_client, estimator, metrics)
        result = await summarizer.run("", "eng", "Topic", _config())
        assert result.summary_text == ""
        assert result.iterations_performed == 0
        assert completion_client.calls == []


# =============================================================================
# Test: One iteration
# =============================================================================


class TestSingleIteration:
    """A text that fits after one pass."""

    @pytest.mark.asyncio
    async def test_one_pass_accounting(self, completion_client, estimator, metrics):
        summarizer = HierarchicalSummarizer(completion_client, estimator, metrics)
        text = "b" * 1000  # 250 tokens -> 3 chunks of 400/400/200 chars

        result = await summarizer.run(text, "eng", "Topic", _config())

        assert result.iterations_performed == 1
        assert result.compression_levels_used == (CompressionLevel.DETAILED,)
        assert result.total_chunks_processed == 3
        assert result.total_input_tokens == 300
        assert result.total_output_tokens == 30
        assert result.summary_text == CHUNK_SEPARATOR.join(["short summary"] * 3)
        assert result.target_reached is True
        assert result.final_token_count == estimator.estimate_tokens(result.summary_text, "eng")

    @pytest.mark.asyncio
    async def test_chunk_calls_use_config_and_level_prompt(self, completion_client, estimator, metrics):
        summarizer = HierarchicalSummarizer(completion_client, estimator, metrics)

        await summarizer.run("b" * 1000, "eng", "Quantum optics", _config())

        assert len(completion_client.calls) == 3
        for prompt, options in completion_client.calls:
            assert options.model == "openai/gpt-oss-20b"
            assert options.temperature == 0.3
            assert options.max_tokens == 500
            assert options.system_prompt == COMPRESSION_PROMPTS[CompressionLevel.DETAILED]
            assert prompt.startswith("Document topic: Quantum optics\n\n")
            assert "Please summarize the following text:\n\n" in prompt
        numbers = sorted(_chunk_number(prompt) for prompt, _ in completion_client.calls)
        assert numbers == [1, 2, 3]
        assert "This is chunk 3 of 3." in "".join(p for p, _ in completion_client.calls)

    @pytest.mark.asyncio
    async def test_emits_metrics(self, completion_client, estimator):
        metrics = MagicMock()
        summarizer = HierarchicalSummarizer(completion_client, estimator, metrics)

        await summarizer.run("b" * 1000, "eng", "Topic", _config())

        metrics.record_iteration.assert_called_once()
        iteration, level, chunk_count, duration_ms = metrics.record_iteration.call_args[0]
        assert (iteration, level, chunk_count) == (1, "DETAILED", 3)
        assert duration_ms >= 0


# =============================================================================
# Test: Escalation and exhaustion
# =============================================================================


class TestEscalation:
    """Texts that never shrink below target."""

    @pytest.mark.asyncio
    async def test_levels_escalate_monotonically(self, estimator, metrics):
        client = ScriptedCompletionClient(lambda prompt, options: "x" * 500)
        summarizer = HierarchicalSummarizer(client, estimator, metrics)

        result = await summarizer.run("c" * 1000, "eng", "Topic", _config())

        assert result.compression_levels_used == (
            CompressionLevel.DETAILED,
            CompressionLevel.BALANCED,
            CompressionLevel.BALANCED,
            CompressionLevel.AGGRESSIVE,
            CompressionLevel.AGGRESSIVE,
        )
        ranks = [level.rank for level in result.compression_levels_used]
        assert ranks == sorted(ranks)
        assert len(result.compression_levels_used) == result.iterations_performed

    @pytest.mark.asyncio
    async def test_exhaustion_reports_target_missed(self, estimator, metrics):
        client = ScriptedCompletionClient(lambda prompt, options: "x" * 500)
        summarizer = HierarchicalSummarizer(client, estimator, metrics)

        result = await summarizer.run("c" * 1000, "eng", "Topic", _config(max_iterations=2))

        assert result.iterations_performed == 2
        assert result.target_reached is False
        assert result.final_token_count > 100
        assert result.total_chunks_processed == len(client.calls)

    @pytest.mark.asyncio
    async def test_system_prompt_follows_level(self, estimator, metrics):
        client = ScriptedCompletionClient(lambda prompt, options: "x" * 500)
        summarizer = HierarchicalSummarizer(client, estimator, metrics)

        await summarizer.run("c" * 1000, "eng", "Topic", _config(max_iterations=4))

        used = {options.system_prompt for _, options in client.calls}
        assert used == set(COMPRESSION_PROMPTS.values())

    @pytest.mark.asyncio
    async def test_stops_mid_run_when_target_reached(self, estimator, metrics):
        """Second pass shrinks enough; the third check stops the run."""
        pass_lengths = iter([500] * 3 + [10] * 10)
        client = ScriptedCompletionClient(lambda prompt, options: "y" * next(pass_lengths))
        summarizer = HierarchicalSummarizer(client, estimator, metrics, max_concurrent_chunks=1)

        result = await summarizer.run("c" * 1000, "eng", "Topic", _config())

        assert result.iterations_performed == 2
        assert result.compression_levels_used == (
            CompressionLevel.DETAILED,
            CompressionLevel.BALANCED,
        )
        assert result.target_reached is True


# =============================================================================
# Test: Parallelism
# =============================================================================


class TestParallelOrdering:
    """Reassembly order never depends on completion order."""

    @pytest.mark.asyncio
    async def test_reverse_completion_keeps_chunk_order(self, estimator, metrics):
        client = ScriptedCompletionClient(
            lambda prompt, options: f"summary-{_chunk_number(prompt)}",
            delay=lambda prompt: 0.05 / _chunk_number(prompt),
        )
        summarizer = HierarchicalSummarizer(client, estimator, metrics)

        result = await summarizer.run("d" * 2000, "eng", "Topic", _config(target_tokens=200))

        assert result.summary_text == CHUNK_SEPARATOR.join(f"summary-{i}" for i in range(1, 6))

    @pytest.mark.asyncio
    async def test_concurrency_bound(self, estimator, metrics):
        active = 0
        peak = 0

        class TrackingClient(ScriptedCompletionClient):
            async def generate_completion(self, user_prompt, options):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                try:
                    await asyncio.sleep(0.01)
                    return await super().generate_completion(user_prompt, options)
                finally:
                    active -= 1

        summarizer = HierarchicalSummarizer(
            TrackingClient(), estimator, metrics, max_concurrent_chunks=2
        )
        await summarizer.run("d" * 2000, "eng", "Topic", _config(target_tokens=200))

        assert peak == 2

    def test_rejects_zero_concurrency(self, completion_client):
        with pytest.raises(ValueError):
            HierarchicalSummarizer(completion_client, max_concurrent_chunks=0)


# =============================================================================
# Test: Failures
# =============================================================================


class TestChunkFailure:
    """A failing chunk aborts the run."""

    @pytest.mark.asyncio
    async def test_failure_wrapped_with_chunk_context(self, estimator, metrics):
        cause = LLMError("upstream exploded", provider="openrouter")
        client = ScriptedCompletionClient(
            fail_on=lambda prompt: cause if _chunk_number(prompt) == 2 else None
        )
        summarizer = HierarchicalSummarizer(client, estimator, metrics)

        with pytest.raises(ChunkSummarizationError) as exc_info:
            await summarizer.run("e" * 1000, "eng", "Topic", _config())

        error = exc_info.value
        assert str(error) == "Failed to summarize chunk 2/3: upstream exploded"
        assert error.chunk_index == 2
        assert error.total_chunks == 3
        assert error.__cause__ is cause

    @pytest.mark.asyncio
    async def test_failure_cancels_slow_siblings(self, estimator, metrics):
        client = ScriptedCompletionClient(
            delay=lambda prompt: 0.0 if _chunk_number(prompt) == 1 else 5.0,
            fail_on=lambda prompt: RuntimeError("boom") if _chunk_number(prompt) == 1 else None,
        )
        summarizer = HierarchicalSummarizer(client, estimator, metrics)

        with pytest.raises(ChunkSummarizationError):
            await asyncio.wait_for(
                summarizer.run("e" * 1000, "eng", "Topic", _config()), timeout=2.0
            )

    @pytest.mark.asyncio
    async def test_chunk_timeout(self, estimator, metrics):
        client = ScriptedCompletionClient(delay=lambda prompt: 1.0)
        summarizer = HierarchicalSummarizer(client, estimator, metrics, chunk_timeout=0.01)

        with pytest.raises(ChunkSummarizationError) as exc_info:
            await summarizer.run("e" * 1000, "eng", "Topic", _config())

        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)
