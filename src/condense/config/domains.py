"""Section-level configuration dataclasses.

One class per TOML section: ``[chunking]``, ``[quality]``, ``[retry]``,
``[llm]`` and ``[embeddings]``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from condense.config.parsing import _parse_optional_float
from condense.core.llm.client import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, OPENROUTER_API_BASE_URL
from condense.core.quality.embeddings import JINA_API_URL, JINA_DEFAULT_DIMENSIONS, JINA_DEFAULT_MODEL
from condense.core.quality.models import DEFAULT_QUALITY_THRESHOLD
from condense.core.summarization.constants import (
    DEFAULT_CHUNK_SIZE_TOKENS,
    DEFAULT_MAX_CONCURRENT_CHUNKS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK,
    DEFAULT_OVERLAP_PERCENT,
    DEFAULT_TEMPERATURE,
)

DEFAULT_NO_SUMMARY_THRESHOLD_TOKENS = 3000
DEFAULT_UPGRADE_MODEL = "openai/gpt-oss-120b"
DEFAULT_TOKEN_BUDGET_MULTIPLIER = 1.25


@dataclass
class ChunkingSettings:
    """Defaults for hierarchical runs.

    The target budget is not configured here; it comes from each job's
    ``max_output_tokens``.

    Attributes:
        max_iterations: Cap on processing passes per run
        chunk_size_tokens: Window size in tokens
        overlap_percent: Configured overlap between windows (0-100)
        temperature: Sampling temperature for chunk calls
        max_output_tokens_per_chunk: Output cap per chunk call
        max_concurrent_chunks: Parallel chunk calls per iteration
        chunk_timeout: Per-chunk timeout in seconds (None = no timeout)
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    chunk_size_tokens: int = DEFAULT_CHUNK_SIZE_TOKENS
    overlap_percent: float = DEFAULT_OVERLAP_PERCENT
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens_per_chunk: int = DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK
    max_concurrent_chunks: int = DEFAULT_MAX_CONCURRENT_CHUNKS
    chunk_timeout: Optional[float] = None

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "ChunkingSettings":
        return cls(
            max_iterations=int(data.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
            chunk_size_tokens=int(data.get("chunk_size_tokens", DEFAULT_CHUNK_SIZE_TOKENS)),
            overlap_percent=float(data.get("overlap_percent", DEFAULT_OVERLAP_PERCENT)),
            temperature=float(data.get("temperature", DEFAULT_TEMPERATURE)),
            max_output_tokens_per_chunk=int(
                data.get("max_output_tokens_per_chunk", DEFAULT_MAX_OUTPUT_TOKENS_PER_CHUNK)
            ),
            max_concurrent_chunks=int(
                data.get("max_concurrent_chunks", DEFAULT_MAX_CONCURRENT_CHUNKS)
            ),
            chunk_timeout=_parse_optional_float(data.get("chunk_timeout")),
        )


@dataclass
class QualitySettings:
    """Quality gate defaults.

    Attributes:
        default_threshold: Threshold used when a job does not set one
        no_summary_threshold_tokens: Bypass summarization at or below this estimate
    """

    default_threshold: float = DEFAULT_QUALITY_THRESHOLD
    no_summary_threshold_tokens: int = DEFAULT_NO_SUMMARY_THRESHOLD_TOKENS

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "QualitySettings":
        return cls(
            default_threshold=float(data.get("default_threshold", DEFAULT_QUALITY_THRESHOLD)),
            no_summary_threshold_tokens=int(
                data.get("no_summary_threshold_tokens", DEFAULT_NO_SUMMARY_THRESHOLD_TOKENS)
            ),
        )


@dataclass
class RetrySettings:
    """Strategy escalation settings.

    Attributes:
        upgrade_model: Model used on the upgrade step when the current model
            has no entry in the upgrade path
        token_budget_multiplier: Growth factor for the token budget step
    """

    upgrade_model: str = DEFAULT_UPGRADE_MODEL
    token_budget_multiplier: float = DEFAULT_TOKEN_BUDGET_MULTIPLIER

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "RetrySettings":
        return cls(
            upgrade_model=str(data.get("upgrade_model", DEFAULT_UPGRADE_MODEL)),
            token_budget_multiplier=float(
                data.get("token_budget_multiplier", DEFAULT_TOKEN_BUDGET_MULTIPLIER)
            ),
        )


@dataclass
class LLMSettings:
    """Completion client settings."""

    base_url: str = OPENROUTER_API_BASE_URL
    api_key: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "LLMSettings":
        return cls(
            base_url=str(data.get("base_url", OPENROUTER_API_BASE_URL)),
            api_key=data.get("api_key"),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
            max_retries=int(data.get("max_retries", DEFAULT_MAX_RETRIES)),
        )


@dataclass
class EmbeddingSettings:
    """Embedding client settings."""

    url: str = JINA_API_URL
    api_key: Optional[str] = None
    model: str = JINA_DEFAULT_MODEL
    dimensions: int = JINA_DEFAULT_DIMENSIONS
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "EmbeddingSettings":
        return cls(
            url=str(data.get("url", JINA_API_URL)),
            api_key=data.get("api_key"),
            model=str(data.get("model", JINA_DEFAULT_MODEL)),
            dimensions=int(data.get("dimensions", JINA_DEFAULT_DIMENSIONS)),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        )
