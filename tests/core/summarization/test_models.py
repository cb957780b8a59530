"""Tests for summarization data models and prompts."""

import pytest

from condense.core.summarization import (
    ChunkingConfig,
    CompressionLevel,
    HierarchicalRunResult,
    build_chunk_prompt,
    compression_level_for_iteration,
    get_system_prompt,
)


class TestCompressionLevelForIteration:
    @pytest.mark.parametrize(
        "iteration,expected",
        [
            (1, CompressionLevel.DETAILED),
            (2, CompressionLevel.BALANCED),
            (3, CompressionLevel.BALANCED),
            (4, CompressionLevel.AGGRESSIVE),
            (5, CompressionLevel.AGGRESSIVE),
            (12, CompressionLevel.AGGRESSIVE),
        ],
    )
    def test_mapping(self, iteration, expected):
        assert compression_level_for_iteration(iteration) == expected

    def test_never_decreases(self):
        ranks = [compression_level_for_iteration(i).rank for i in range(1, 20)]
        assert ranks == sorted(ranks)

    def test_rejects_zero(self):
        with pytest.raises(ValueError):
            compression_level_for_iteration(0)

    def test_is_at_least(self):
        assert CompressionLevel.AGGRESSIVE.is_at_least(CompressionLevel.BALANCED)
        assert not CompressionLevel.DETAILED.is_at_least(CompressionLevel.BALANCED)


class TestChunkingConfig:
    def test_defaults(self):
        config = ChunkingConfig()
        assert config.target_tokens == 200_000
        assert config.max_iterations == 5
        assert config.chunk_size_tokens == 115_000
        assert config.overlap_percent == 5
        assert config.model == "openai/gpt-oss-20b"
        assert config.temperature == 0.7
        assert config.max_output_tokens_per_chunk == 10_000

    @pytest.mark.parametrize(
        "overrides",
        [
            {"target_tokens": 0},
            {"max_iterations": 0},
            {"chunk_size_tokens": 0},
            {"overlap_percent": -1},
            {"overlap_percent": 101},
            {"model": ""},
            {"max_output_tokens_per_chunk": 0},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValueError):
            ChunkingConfig(**overrides)

    def test_overlap_bounds_inclusive(self):
        assert ChunkingConfig(overlap_percent=0).overlap_percent == 0
        assert ChunkingConfig(overlap_percent=100).overlap_percent == 100


class TestHierarchicalRunResult:
    def test_to_dict(self):
        result = HierarchicalRunResult(
            summary_text="s",
            iterations_performed=2,
            total_input_tokens=10,
            total_output_tokens=5,
            compression_levels_used=(CompressionLevel.DETAILED, CompressionLevel.BALANCED),
            total_chunks_processed=4,
            final_token_count=1,
            target_reached=True,
        )
        data = result.to_dict()
        assert data["compression_levels_used"] == ["DETAILED", "BALANCED"]
        assert data["iterations_performed"] == 2
        assert data["target_reached"] is True


class TestPrompts:
    def test_chunk_prompt_layout(self):
        prompt = build_chunk_prompt("BODY", "Biology", 2, 7)
        assert prompt == (
            "Document topic: Biology\n\n"
            "This is chunk 2 of 7.\n\n"
            "Please summarize the following text:\n\n"
            "BODY"
        )

    @pytest.mark.parametrize("level", list(CompressionLevel))
    def test_every_level_has_prompt(self, level):
        prompt = get_system_prompt(level)
        assert prompt.startswith("You are")
        assert "5." in prompt
