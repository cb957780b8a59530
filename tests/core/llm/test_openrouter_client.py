"""Tests for OpenRouterCompletionClient using httpx.MockTransport."""

import json

import httpx
import pytest

from condense.core.errors import (
    AuthenticationError,
    InvalidRequestError,
    LLMError,
    MalformedResponseError,
    ModelNotFoundError,
    RateLimitError,
)
from condense.core.llm import CompletionClient, CompletionOptions, OpenRouterCompletionClient


async def _no_sleep(seconds):
    return None


def _completion_body(content="A summary.", prompt_tokens=120, completion_tokens=30):
    return {
        "id": "gen-1",
        "model": "openai/gpt-oss-20b",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    }


def _client(handler, **kwargs):
    return OpenRouterCompletionClient(
        api_key="sk-or-test",
        transport=httpx.MockTransport(handler),
        sleep_func=_no_sleep,
        **kwargs,
    )


class TestConstruction:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
        with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
            OpenRouterCompletionClient()

    def test_reads_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-env")
        assert OpenRouterCompletionClient() is not None

    def test_satisfies_protocol(self):
        assert isinstance(_client(lambda request: httpx.Response(200)), CompletionClient)


class TestGenerateCompletion:
    """Tests for request building and response parsing."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion_body())

        options = CompletionOptions(
            model="openai/gpt-oss-20b", temperature=0.2, max_tokens=777, system_prompt="Be brief."
        )
        await _client(handler).generate_completion("Summarize me", options)

        assert captured["url"] == "https://openrouter.ai/api/v1/chat/completions"
        assert captured["auth"] == "Bearer sk-or-test"
        assert captured["body"]["model"] == "openai/gpt-oss-20b"
        assert captured["body"]["temperature"] == 0.2
        assert captured["body"]["max_tokens"] == 777
        assert captured["body"]["messages"] == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Summarize me"},
        ]

    @pytest.mark.asyncio
    async def test_system_prompt_optional(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion_body())

        await _client(handler).generate_completion("Hi", CompletionOptions(model="m/x"))
        assert captured["body"]["messages"] == [{"role": "user", "content": "Hi"}]

    @pytest.mark.asyncio
    async def test_parses_content_and_usage(self):
        client = _client(lambda request: httpx.Response(200, json=_completion_body()))

        result = await client.generate_completion("x", CompletionOptions(model="openai/gpt-oss-20b"))

        assert result.content == "A summary."
        assert result.input_tokens == 120
        assert result.output_tokens == 30
        assert result.model == "openai/gpt-oss-20b"

    @pytest.mark.asyncio
    async def test_missing_usage_defaults_to_zero(self):
        body = _completion_body()
        del body["usage"]
        client = _client(lambda request: httpx.Response(200, json=body))

        result = await client.generate_completion("x", CompletionOptions(model="m/x"))
        assert result.input_tokens == 0
        assert result.output_tokens == 0


class TestErrorMapping:
    """HTTP status to error type mapping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_type",
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, ModelNotFoundError),
            (400, InvalidRequestError),
            (422, InvalidRequestError),
        ],
    )
    async def test_non_retryable_statuses(self, status, error_type):
        calls = [0]

        def handler(request):
            calls[0] += 1
            return httpx.Response(status, json={"error": {"message": "nope"}})

        with pytest.raises(error_type) as exc_info:
            await _client(handler).generate_completion("x", CompletionOptions(model="m/x"))

        assert "nope" in str(exc_info.value)
        assert calls[0] == 1

    @pytest.mark.asyncio
    async def test_rate_limit_retried_then_raised(self):
        calls = [0]

        def handler(request):
            calls[0] += 1
            return httpx.Response(429, headers={"Retry-After": "7"}, text="slow down")

        with pytest.raises(RateLimitError) as exc_info:
            await _client(handler, max_retries=2).generate_completion(
                "x", CompletionOptions(model="m/x")
            )

        assert exc_info.value.retry_after == 7.0
        assert calls[0] == 3

    @pytest.mark.asyncio
    async def test_server_error_recovers(self):
        responses = iter(
            [
                httpx.Response(502, text="bad gateway"),
                httpx.Response(503, text="unavailable"),
                httpx.Response(200, json=_completion_body(content="recovered")),
            ]
        )
        client = _client(lambda request: next(responses))

        result = await client.generate_completion("x", CompletionOptions(model="m/x"))
        assert result.content == "recovered"

    @pytest.mark.asyncio
    async def test_timeout_is_retryable_llm_error(self):
        calls = [0]

        def handler(request):
            calls[0] += 1
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(LLMError) as exc_info:
            await _client(handler, max_retries=1).generate_completion(
                "x", CompletionOptions(model="m/x")
            )

        assert exc_info.value.retryable is True
        assert calls[0] == 2

    @pytest.mark.asyncio
    async def test_connection_error_is_retryable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LLMError, match="Request failed"):
            await _client(handler, max_retries=0).generate_completion(
                "x", CompletionOptions(model="m/x")
            )

    @pytest.mark.asyncio
    async def test_empty_content_rejected(self):
        calls = [0]

        def handler(request):
            calls[0] += 1
            return httpx.Response(200, json=_completion_body(content="   "))

        with pytest.raises(LLMError, match="empty content"):
            await _client(handler, max_retries=1).generate_completion(
                "x", CompletionOptions(model="m/x")
            )
        assert calls[0] == 2

    @pytest.mark.asyncio
    async def test_no_choices_not_retried(self):
        calls = [0]

        def handler(request):
            calls[0] += 1
            return httpx.Response(200, json={"choices": []})

        with pytest.raises(LLMError, match="no choices"):
            await _client(handler).generate_completion("x", CompletionOptions(model="m/x"))
        assert calls[0] == 1


# =============================================================================
# Test: Unusable success bodies
# =============================================================================


class TestMalformedBodies:
    """A 200 that cannot be parsed is a retryable LLMError, never a raw exception."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response_kwargs",
        [
            {"text": "<html>gateway</html>"},
            {"json": [1, 2]},
        ],
    )
    async def test_retried_then_raised_as_llm_error(self, response_kwargs):
        calls = [0]

        def handler(request):
            calls[0] += 1
            return httpx.Response(200, **response_kwargs)

        with pytest.raises(MalformedResponseError) as exc_info:
            await _client(handler, max_retries=1).generate_completion(
                "x", CompletionOptions(model="m/x")
            )

        assert isinstance(exc_info.value, LLMError)
        assert exc_info.value.retryable is True
        assert exc_info.value.provider == "openrouter"
        assert calls[0] == 2

    @pytest.mark.asyncio
    async def test_recovers_after_gateway_page(self):
        responses = iter(
            [
                httpx.Response(200, text="<html>gateway</html>"),
                httpx.Response(200, json=_completion_body(content="fine")),
            ]
        )
        client = _client(lambda request: next(responses))

        result = await client.generate_completion("x", CompletionOptions(model="m/x"))
        assert result.content == "fine"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"choices": ["not-an-object"]},
            {"choices": [{"message": None}]},
            {"choices": [{"message": {"content": ["a", "b"]}}]},
        ],
    )
    async def test_bad_choice_shapes(self, body):
        client = _client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(MalformedResponseError):
            await client.generate_completion("x", CompletionOptions(model="m/x"))
