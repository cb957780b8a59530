"""JSON-over-HTTP plumbing shared by the OpenRouter and Jina clients."""

from typing import Any, Optional

import httpx

from condense.core.errors.llm import MalformedResponseError, TransportError, error_for_status


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def extract_error_detail(response: httpx.Response) -> str:
    """Best-effort error text: ``error.message`` from a JSON body, else raw text."""
    try:
        data = response.json()
    except ValueError:
        data = None
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return str(error.get("message", error))[:200]
    if error:
        return str(error)[:200]
    return response.text[:200] if response.text else "Unknown error"


async def post_json(
    url: str,
    payload: dict[str, Any],
    *,
    api_key: str,
    provider: str,
    timeout: float,
    model: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """POST ``payload`` with bearer auth and return the decoded JSON body.

    Raises:
        TransportError: On timeout or connection failure
        LLMError: The status-mapped error for any 4xx/5xx response
        MalformedResponseError: If a success response is not JSON (retryable)
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException as e:
        raise TransportError(f"Request timed out after {timeout}s: {e}", provider=provider) from e
    except httpx.RequestError as e:
        raise TransportError(f"Request failed: {e}", provider=provider) from e

    error = error_for_status(
        response.status_code,
        extract_error_detail(response),
        provider=provider,
        model=model,
        retry_after=parse_retry_after(response),
    )
    if error is not None:
        raise error
    try:
        return response.json()
    except ValueError as e:
        # Gateways sometimes answer 200 with an HTML error page.
        raise MalformedResponseError(
            f"Response body is not valid JSON: {response.text[:200]}",
            provider=provider,
            retryable=True,
        ) from e
