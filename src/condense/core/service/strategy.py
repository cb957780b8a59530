"""Retry ladder for the quality gate.

``escalate`` is pure: it receives the current parameters and the 1-based
retry number and returns the next parameters plus an optional
human-readable change string.

    retry 1: unchanged
    retry 2: model upgrade
    retry 3: token budget x1.25
"""

from __future__ import annotations

from typing import Optional

from condense.config.domains import DEFAULT_TOKEN_BUDGET_MULTIPLIER, DEFAULT_UPGRADE_MODEL

from .models import StrategyParams

MAX_QUALITY_RETRIES = 3

RETRY_UNCHANGED = 1
RETRY_MODEL_UPGRADE = 2
RETRY_TOKEN_BUDGET = 3

MODEL_UPGRADE_PATH: dict[str, str] = {
    "openai/gpt-oss-20b": "openai/gpt-oss-120b",
}


def short_model_name(model: str) -> str:
    """Drop the vendor prefix: ``openai/gpt-oss-20b`` -> ``gpt-oss-20b``."""
    return model.rsplit("/", 1)[-1]


def format_token_count(tokens: int) -> str:
    """Render a token count in thousands: 200000 -> ``200K``, 12500 -> ``12.5K``."""
    if tokens < 1000:
        return str(tokens)
    return f"{tokens / 1000:g}K"


def escalate(
    params: StrategyParams,
    retry_number: int,
    *,
    upgrade_model: str = DEFAULT_UPGRADE_MODEL,
    token_budget_multiplier: float = DEFAULT_TOKEN_BUDGET_MULTIPLIER,
) -> tuple[StrategyParams, Optional[str]]:
    """Compute the parameters for a retry.

    Args:
        params: Parameters of the previous attempt
        retry_number: 1-based retry number (1 to MAX_QUALITY_RETRIES)
        upgrade_model: Fallback target when the model has no upgrade path entry
        token_budget_multiplier: Growth factor for the token budget step

    Returns:
        Tuple of (new params, change string or None when nothing changed)

    Raises:
        ValueError: If retry_number is outside the ladder
    """
    if retry_number < 1 or retry_number > MAX_QUALITY_RETRIES:
        raise ValueError(
            f"retry_number must be between 1 and {MAX_QUALITY_RETRIES}, got {retry_number}"
        )

    if retry_number == RETRY_UNCHANGED:
        return params, None

    if retry_number == RETRY_MODEL_UPGRADE:
        new_model = MODEL_UPGRADE_PATH.get(params.model, upgrade_model)
        if new_model == params.model:
            return params, None
        change = f"model: {short_model_name(params.model)} → {new_model}"
        return StrategyParams(model=new_model, max_output_tokens=params.max_output_tokens), change

    # Budget only grows
    new_tokens = max(params.max_output_tokens, round(params.max_output_tokens * token_budget_multiplier))
    if new_tokens == params.max_output_tokens:
        return params, None
    change = (
        f"max_tokens: {format_token_count(params.max_output_tokens)} → "
        f"{format_token_count(new_tokens)}"
    )
    return StrategyParams(model=params.model, max_output_tokens=new_tokens), change
