"""Configuration package for condense.

Sub-modules:
    parsing  – boolean/optional-number parsing helpers
    domains  – ChunkingSettings, QualitySettings, RetrySettings, LLMSettings,
               EmbeddingSettings
    settings – SummarizationSettings dataclass, get_settings/set_settings globals
    loader   – SummarizationSettings loading mixin (_SettingsLoader)
"""

from condense.config.domains import (  # noqa: F401
    ChunkingSettings,
    EmbeddingSettings,
    LLMSettings,
    QualitySettings,
    RetrySettings,
)
from condense.config.loader import CONFIG_FILE_ENV_VAR  # noqa: F401
from condense.config.parsing import _parse_bool  # noqa: F401
from condense.config.settings import (  # noqa: F401
    SummarizationSettings,
    get_settings,
    set_settings,
)

__all__ = [
    "CONFIG_FILE_ENV_VAR",
    "ChunkingSettings",
    "EmbeddingSettings",
    "LLMSettings",
    "QualitySettings",
    "RetrySettings",
    "SummarizationSettings",
    "get_settings",
    "set_settings",
]
