"""Embedding clients used by the quality validator."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from condense.core.errors.llm import MalformedResponseError
from condense.core.llm.http import post_json
from condense.core.llm.retry import RetryPolicy, SleepFunc, retry_transient

logger = logging.getLogger(__name__)

JINA_API_URL = "https://api.jina.ai/v1/embeddings"
JINA_API_KEY_ENV_VAR = "JINA_API_KEY"
JINA_DEFAULT_MODEL = "jina-embeddings-v3"
JINA_DEFAULT_DIMENSIONS = 768
JINA_PASSAGE_TASK = "retrieval.passage"
DEFAULT_TIMEOUT = 60.0


@runtime_checkable
class EmbeddingClient(Protocol):
    """Anything that can turn one text into one vector."""

    async def embed(self, text: str) -> list[float]: ...


class JinaEmbeddingClient:
    """Jina embeddings API client.

    Requests passage embeddings with server-side truncation so long source
    documents can be embedded without pre-splitting. Transient failures are
    retried with backoff like the completion client.
    """

    provider_name = "jina"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        url: str = JINA_API_URL,
        model: str = JINA_DEFAULT_MODEL,
        dimensions: int = JINA_DEFAULT_DIMENSIONS,
        task: str = JINA_PASSAGE_TASK,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        base_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self._api_key = api_key or os.environ.get(JINA_API_KEY_ENV_VAR)
        if not self._api_key:
            raise ValueError(
                f"Jina API key required (pass api_key or set {JINA_API_KEY_ENV_VAR})"
            )
        self.url = url
        self.model = model
        self.dimensions = dimensions
        self.task = task
        self.timeout = timeout
        self.retry_policy = RetryPolicy(max_retries=max_retries, base_delay=base_delay)
        self._transport = transport
        self._sleep_func = sleep_func

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            LLMError: On API failure or a malformed response
        """
        payload = {
            "model": self.model,
            "input": [text],
            "task": self.task,
            "dimensions": self.dimensions,
            "truncate": True,
        }

        async def attempt() -> list[float]:
            data = await post_json(
                self.url,
                payload,
                api_key=self._api_key,
                provider=self.provider_name,
                timeout=self.timeout,
                transport=self._transport,
            )
            return self._parse_embedding(data)

        logger.debug("Jina embedding request: chars=%d dimensions=%d", len(text), self.dimensions)
        return await retry_transient(attempt, policy=self.retry_policy, sleep_func=self._sleep_func)

    def _parse_embedding(self, data: Any) -> list[float]:
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}",
                provider=self.provider_name,
                retryable=True,
            )
        items = data.get("data") or []
        if (
            not isinstance(items, list)
            or not items
            or not isinstance(items[0], dict)
            or not isinstance(items[0].get("embedding"), list)
        ):
            raise MalformedResponseError(
                "Jina response contained no embedding", provider=self.provider_name
            )
        embedding = [float(value) for value in items[0]["embedding"]]
        if len(embedding) != self.dimensions:
            raise MalformedResponseError(
                f"Invalid embedding dimensions: expected {self.dimensions}, got {len(embedding)}",
                provider=self.provider_name,
            )
        return embedding
