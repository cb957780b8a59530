"""
LLM completion client contract and the OpenRouter implementation.

The summarization core depends only on the ``CompletionClient`` protocol:

    result = await client.generate_completion(
        user_prompt,
        CompletionOptions(model="openai/gpt-oss-20b", system_prompt="..."),
    )
    result.content, result.input_tokens, result.output_tokens

Any failure surfaces as an ``LLMError`` subclass. Transient failures
(rate limits, 5xx, timeouts, connection errors) are retried inside the
client with exponential backoff before surfacing.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from condense.core.errors.llm import MalformedResponseError
from condense.core.llm.http import post_json
from condense.core.llm.retry import RetryPolicy, SleepFunc, retry_transient

logger = logging.getLogger(__name__)

# OpenRouter API constants
OPENROUTER_API_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_COMPLETIONS_ENDPOINT = "/chat/completions"
OPENROUTER_API_KEY_ENV_VAR = "OPENROUTER_API_KEY"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_MAX_TOKENS = 10_000
DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class CompletionOptions:
    """Per-call generation options.

    Attributes:
        model: Model identifier (e.g. "openai/gpt-oss-20b")
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        system_prompt: Optional system instructions
    """

    model: str
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    system_prompt: Optional[str] = None


@dataclass(frozen=True)
class CompletionResult:
    """Completion text with token accounting."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: Optional[str] = None


@runtime_checkable
class CompletionClient(Protocol):
    """Anything that can turn a prompt into a completion."""

    async def generate_completion(
        self, user_prompt: str, options: CompletionOptions
    ) -> CompletionResult: ...


class OpenRouterCompletionClient:
    """Chat-completions client for OpenRouter's OpenAI-compatible API.

    Status handling follows ``error_for_status``: auth failures, unknown
    models and other 4xx surface immediately, while 429, 5xx, timeouts and
    blank completions are retried with backoff. A 404 is reported as
    ModelNotFoundError, since the only path component a caller controls is
    the model.

    Example usage:
        client = OpenRouterCompletionClient(api_key="sk-or-...")
        result = await client.generate_completion(
            "Summarize this...", CompletionOptions(model="openai/gpt-oss-20b")
        )
    """

    provider_name = "openrouter"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: str = OPENROUTER_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        """Initialize the client.

        Args:
            api_key: OpenRouter API key (falls back to OPENROUTER_API_KEY)
            base_url: API base URL
            timeout: Request timeout in seconds
            max_retries: Retries for transient failures
            base_delay: Initial backoff delay in seconds
            transport: Optional httpx transport (for testing)
            sleep_func: Optional async sleep (for testing)

        Raises:
            ValueError: If no API key is available
        """
        self._api_key = api_key or os.environ.get(OPENROUTER_API_KEY_ENV_VAR)
        if not self._api_key:
            raise ValueError(
                f"OpenRouter API key required (pass api_key or set {OPENROUTER_API_KEY_ENV_VAR})"
            )
        self.url = base_url.rstrip("/") + OPENROUTER_COMPLETIONS_ENDPOINT
        self.timeout = timeout
        self.retry_policy = RetryPolicy(max_retries=max_retries, base_delay=base_delay)
        self._transport = transport
        self._sleep_func = sleep_func

    async def generate_completion(
        self, user_prompt: str, options: CompletionOptions
    ) -> CompletionResult:
        """Generate a completion.

        Raises:
            LLMError: On any failure once transient retries are exhausted
        """
        messages = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        payload = {
            "model": options.model,
            "messages": messages,
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }

        logger.debug(
            "OpenRouter completion: model=%s max_tokens=%d prompt_chars=%d",
            options.model,
            options.max_tokens,
            len(user_prompt),
        )

        async def attempt() -> CompletionResult:
            data = await post_json(
                self.url,
                payload,
                api_key=self._api_key,
                provider=self.provider_name,
                timeout=self.timeout,
                model=options.model,
                transport=self._transport,
            )
            return self._parse_response(data, options.model)

        return await retry_transient(
            attempt, policy=self.retry_policy, sleep_func=self._sleep_func
        )

    def _parse_response(self, data: Any, model: str) -> CompletionResult:
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}",
                provider=self.provider_name,
                retryable=True,
            )
        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise MalformedResponseError("Response contained no choices", provider=self.provider_name)
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise MalformedResponseError(
                "Response choice has no message object", provider=self.provider_name
            )

        content = message.get("content") or ""
        if not isinstance(content, str) or not content.strip():
            # Providers occasionally return an empty message under load.
            raise MalformedResponseError(
                "Response contained empty content",
                provider=self.provider_name,
                retryable=True,
            )

        usage = data.get("usage") or {}
        return CompletionResult(
            content=content,
            input_tokens=int(usage.get("prompt_tokens") or 0),
            output_tokens=int(usage.get("completion_tokens") or 0),
            model=data.get("model") or model,
        )
