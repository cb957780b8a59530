"""Settings loading: defaults, then TOML, then environment variables.

Provides ``_SettingsLoader``, a mixin inherited by ``SummarizationSettings``
in ``settings.py``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Optional, cast

from condense.config.domains import (
    ChunkingSettings,
    EmbeddingSettings,
    LLMSettings,
    QualitySettings,
    RetrySettings,
)
from condense.config.parsing import _parse_bool, _parse_optional_float
from condense.core.llm.client import OPENROUTER_API_KEY_ENV_VAR
from condense.core.quality.embeddings import JINA_API_KEY_ENV_VAR

if TYPE_CHECKING:
    from condense.config.settings import SummarizationSettings

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "CONDENSE_CONFIG_FILE"
DEFAULT_CONFIG_FILENAME = "condense.toml"


class _SettingsLoader:
    """Loading methods for ``SummarizationSettings``."""

    if TYPE_CHECKING:
        log_level: str
        structured_logging: bool
        chunking: ChunkingSettings
        quality: QualitySettings
        retry: RetrySettings
        llm: LLMSettings
        embeddings: EmbeddingSettings

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "SummarizationSettings":
        """
        Create settings from environment variables and an optional TOML file.

        Priority (highest to lowest):
        1. Environment variables (CONDENSE_*, OPENROUTER_API_KEY, JINA_API_KEY)
        2. TOML file (config_file, $CONDENSE_CONFIG_FILE, or ./condense.toml)
        3. Default values
        """
        settings = cls()

        toml_path = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        if toml_path:
            settings._load_toml(Path(toml_path))
        else:
            project_config = Path(DEFAULT_CONFIG_FILENAME)
            if project_config.exists():
                settings._load_toml(project_config)
                logger.debug("Loaded project config from %s", project_config)

        settings._load_env()
        return cast("SummarizationSettings", settings)

    def _load_toml(self, path: Path) -> None:
        """Load settings from a TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "logging" in data:
                log = data["logging"]
                if "level" in log:
                    self.log_level = str(log["level"]).upper()
                if "structured" in log:
                    self.structured_logging = _parse_bool(log["structured"])

            if "chunking" in data:
                self.chunking = ChunkingSettings.from_toml_dict(data["chunking"])
            if "quality" in data:
                self.quality = QualitySettings.from_toml_dict(data["quality"])
            if "retry" in data:
                self.retry = RetrySettings.from_toml_dict(data["retry"])
            if "llm" in data:
                self.llm = LLMSettings.from_toml_dict(data["llm"])
            if "embeddings" in data:
                self.embeddings = EmbeddingSettings.from_toml_dict(data["embeddings"])

        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.error("Error loading config file %s: %s", path, e)

    def _load_env(self) -> None:
        """Load settings from environment variables."""
        # Logging
        if level := os.environ.get("CONDENSE_LOG_LEVEL"):
            self.log_level = level.upper()
        if structured := os.environ.get("CONDENSE_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

        # Chunking
        if value := os.environ.get("CONDENSE_MAX_ITERATIONS"):
            self.chunking.max_iterations = int(value)
        if value := os.environ.get("CONDENSE_CHUNK_SIZE_TOKENS"):
            self.chunking.chunk_size_tokens = int(value)
        if value := os.environ.get("CONDENSE_OVERLAP_PERCENT"):
            self.chunking.overlap_percent = float(value)
        if value := os.environ.get("CONDENSE_MAX_CONCURRENT_CHUNKS"):
            self.chunking.max_concurrent_chunks = int(value)
        if value := os.environ.get("CONDENSE_CHUNK_TIMEOUT"):
            self.chunking.chunk_timeout = _parse_optional_float(value)

        # Quality
        if value := os.environ.get("CONDENSE_QUALITY_THRESHOLD"):
            self.quality.default_threshold = float(value)
        if value := os.environ.get("CONDENSE_NO_SUMMARY_THRESHOLD_TOKENS"):
            self.quality.no_summary_threshold_tokens = int(value)

        # Retry
        if value := os.environ.get("CONDENSE_UPGRADE_MODEL"):
            self.retry.upgrade_model = value

        # Clients
        if value := os.environ.get("CONDENSE_LLM_BASE_URL"):
            self.llm.base_url = value
        if value := os.environ.get(OPENROUTER_API_KEY_ENV_VAR):
            self.llm.api_key = value
        if value := os.environ.get(JINA_API_KEY_ENV_VAR):
            self.embeddings.api_key = value
