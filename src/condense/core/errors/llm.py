"""Errors raised by the completion and embedding HTTP clients.

``retryable`` marks transient failures. The clients retry those with
backoff; everything else surfaces on the first attempt. Above the clients,
the summarizer wraps any of these with chunk context and never looks at
the subtype.
"""

from typing import Optional


class LLMError(Exception):
    """A provider call failed.

    Attributes:
        provider: Provider that raised the error ("openrouter", "jina")
        retryable: True for transient failures worth another attempt
        status_code: HTTP status, when the failure came from a response
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        retryable: bool = False,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable
        self.status_code = status_code


class TransportError(LLMError):
    """Timeout or connection failure before any response arrived."""

    def __init__(self, message: str, *, provider: Optional[str] = None):
        super().__init__(message, provider=provider, retryable=True)


class MalformedResponseError(LLMError):
    """A 2xx response that cannot be used (no choices, blank text, bad vector)."""


class RateLimitError(LLMError):
    """HTTP 429. ``retry_after`` carries the server's Retry-After, in seconds."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        provider: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, provider=provider, retryable=True, status_code=429)
        self.retry_after = retry_after


class AuthenticationError(LLMError):
    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        provider: Optional[str] = None,
        status_code: int = 401,
    ):
        super().__init__(message, provider=provider, retryable=False, status_code=status_code)


class InvalidRequestError(LLMError):
    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        status_code: int = 400,
    ):
        super().__init__(message, provider=provider, retryable=False, status_code=status_code)


class ModelNotFoundError(LLMError):
    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ):
        super().__init__(message, provider=provider, retryable=False, status_code=404)
        self.model = model


def error_for_status(
    status: int,
    detail: str,
    *,
    provider: str,
    model: Optional[str] = None,
    retry_after: Optional[float] = None,
) -> Optional[LLMError]:
    """Map an HTTP status to the matching error, or None for success.

    401/403 -> AuthenticationError, 404 -> ModelNotFoundError (when a model
    was requested), 429 -> RateLimitError, 5xx -> retryable LLMError, any
    other 4xx -> InvalidRequestError.
    """
    if status < 400:
        return None
    if status in (401, 403):
        return AuthenticationError(
            f"Authentication failed: {detail}", provider=provider, status_code=status
        )
    if status == 404 and model is not None:
        return ModelNotFoundError(f"Model not available: {detail}", provider=provider, model=model)
    if status == 429:
        return RateLimitError(
            f"Rate limit exceeded: {detail}", provider=provider, retry_after=retry_after
        )
    if status >= 500:
        return LLMError(
            f"API error {status}: {detail}", provider=provider, retryable=True, status_code=status
        )
    return InvalidRequestError(f"API error {status}: {detail}", provider=provider, status_code=status)
