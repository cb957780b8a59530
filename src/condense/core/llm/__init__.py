"""LLM completion clients, transient-error retry, and pricing."""

from condense.core.llm.client import (
    OPENROUTER_API_BASE_URL,
    CompletionClient,
    CompletionOptions,
    CompletionResult,
    OpenRouterCompletionClient,
)
from condense.core.llm.http import post_json
from condense.core.llm.pricing import (
    OPENROUTER_PRICING,
    ModelPricing,
    calculate_cost,
    get_model_pricing,
)
from condense.core.llm.retry import RetryPolicy, retry_transient

__all__ = [
    "OPENROUTER_API_BASE_URL",
    "OPENROUTER_PRICING",
    "CompletionClient",
    "CompletionOptions",
    "CompletionResult",
    "ModelPricing",
    "OpenRouterCompletionClient",
    "RetryPolicy",
    "calculate_cost",
    "get_model_pricing",
    "post_json",
    "retry_transient",
]
