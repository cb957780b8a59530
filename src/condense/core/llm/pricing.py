"""OpenRouter pricing table and cost calculation.

Prices are USD per 1M tokens. Unknown models cost 0.0 and log a warning so
a missing table entry never fails a job.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TOKENS_PER_PRICE_UNIT = 1_000_000


@dataclass(frozen=True)
class ModelPricing:
    """Per-model prices in USD per 1M tokens."""

    input: float
    output: float


OPENROUTER_PRICING: dict[str, ModelPricing] = {
    "openai/gpt-oss-20b": ModelPricing(input=0.08, output=0.08),
    "openai/gpt-oss-120b": ModelPricing(input=0.20, output=0.20),
    "google/gemini-2.5-flash": ModelPricing(input=0.15, output=0.15),
    "google/gemini-2.5-flash-preview": ModelPricing(input=0.10, output=0.40),
    "qwen/qwen3-max": ModelPricing(input=1.20, output=6.00),
    "qwen/qwen3-235b-a22b-2507": ModelPricing(input=0.11, output=0.60),
    "anthropic/claude-3.5-sonnet": ModelPricing(input=3.00, output=15.00),
    "openai/gpt-4-turbo": ModelPricing(input=10.00, output=30.00),
    "minimax/minimax-m2": ModelPricing(input=0.255, output=1.02),
    "moonshotai/kimi-k2-thinking": ModelPricing(input=0.55, output=2.25),
}


def get_model_pricing(model: str) -> ModelPricing | None:
    """Look up pricing for a model, or None if unknown."""
    return OPENROUTER_PRICING.get(model)


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """Estimate the USD cost of a call.

    Args:
        model: OpenRouter model identifier
        input_tokens: Prompt tokens consumed
        output_tokens: Completion tokens produced

    Returns:
        Cost in USD, 0.0 for models missing from the table
    """
    pricing = get_model_pricing(model)
    if pricing is None:
        logger.warning("No pricing entry for model %s, reporting cost 0.0", model)
        return 0.0
    return (
        input_tokens * pricing.input + output_tokens * pricing.output
    ) / TOKENS_PER_PRICE_UNIT
