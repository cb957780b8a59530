"""SummarizationSettings dataclass and global settings state.

Field declarations and logging setup live here. Loading logic lives in the
``_SettingsLoader`` mixin (``loader.py``).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from condense.config.domains import (
    ChunkingSettings,
    EmbeddingSettings,
    LLMSettings,
    QualitySettings,
    RetrySettings,
)
from condense.config.loader import _SettingsLoader

PACKAGE_LOGGER_NAME = "condense"
HANDLER_NAME = "condense-settings"


class CorrelationIdFilter(logging.Filter):
    """Give every record a ``correlation_id`` so formatters can always render it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "correlation_id", None) is None:
            record.correlation_id = "-"
        return True


@dataclass
class SummarizationSettings(_SettingsLoader):
    """Settings for the summarization pipeline."""

    log_level: str = "INFO"
    structured_logging: bool = False

    chunking: ChunkingSettings = field(default_factory=ChunkingSettings)
    quality: QualitySettings = field(default_factory=QualitySettings)
    retry: RetrySettings = field(default_factory=RetrySettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    embeddings: EmbeddingSettings = field(default_factory=EmbeddingSettings)

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            # JSON-style structured logging
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
                '"correlation_id":"%(correlation_id)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"
            )

        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        package_logger.setLevel(level)

        # Repeated calls replace the handler installed here rather than stacking.
        for existing in list(package_logger.handlers):
            if existing.get_name() == HANDLER_NAME:
                package_logger.removeHandler(existing)

        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(formatter)
        handler.addFilter(CorrelationIdFilter())
        package_logger.addHandler(handler)


# Global settings instance
_settings: Optional[SummarizationSettings] = None


def get_settings() -> SummarizationSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = SummarizationSettings.from_env()
    return _settings


def set_settings(settings: SummarizationSettings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings
