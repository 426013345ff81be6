"""
OpenAI-compatible LLM Client.

Provides a single async completion call against OpenRouter (or any endpoint
speaking the OpenAI chat completions API), with optional JSON-schema
structured output.
"""

import json
import logging
import os
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from diapredict.models.llm import LLMResponse

logger = logging.getLogger(__name__)

# Transient provider failures worth another attempt. APITimeoutError is a
# subclass of APIConnectionError.
TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


class LLMClient:
    """
    Async client for an OpenAI-compatible chat completions API.

    Uses the OpenAI SDK with OpenRouter's base URL by default.
    """

    OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        site_url: Optional[str] = None,
        site_name: Optional[str] = None,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: Provider API key. If not provided, reads from OPENROUTER_API_KEY env var.
            base_url: API base URL. Defaults to OpenRouter.
            timeout: Per-attempt HTTP timeout in seconds.
            site_url: Optional site URL for OpenRouter attribution.
            site_name: Optional site name for OpenRouter attribution.
        """
        self.api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        if not self.api_key:
            raise ValueError(
                "OpenRouter API key required. Set OPENROUTER_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.site_url = site_url or os.getenv("OPENROUTER_SITE_URL", "http://localhost:8000")
        self.site_name = site_name or os.getenv("OPENROUTER_SITE_NAME", "DiaPredict")

        # Retries are handled by tenacity below, not by the SDK
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url or self.OPENROUTER_BASE_URL,
            timeout=timeout,
            max_retries=0,
            default_headers={
                "HTTP-Referer": self.site_url,
                "X-Title": self.site_name,
            },
        )

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """
        Generate a completion from the specified model.

        Args:
            model: Model identifier (e.g., "google/gemini-2.0-flash-001")
            messages: List of message dicts with "role" and "content" keys
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate (optional)
            response_schema: JSON schema for structured output (optional)

        Returns:
            LLMResponse with content and token usage
        """
        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        if response_schema:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "prediction",
                    "strict": True,
                    "schema": response_schema,
                },
            }

        response = await self.client.chat.completions.create(**kwargs)

        # OpenRouter reports some upstream failures as a 200 with an error body
        if not response.choices:
            error = getattr(response, "error", None)
            raise openai.APIError(
                f"Provider returned no choices: {error or 'empty response'}",
                request=httpx.Request("POST", self.client.base_url.join("chat/completions")),
                body=error,
            )

        content = response.choices[0].message.content or ""
        finish_reason = response.choices[0].finish_reason or "stop"

        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0

        logger.debug(
            f"Completion from {model}: {input_tokens} in / {output_tokens} out, "
            f"finish_reason={finish_reason}"
        )

        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=finish_reason,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()


class MockLLMClient:
    """
    Mock LLM client for testing and offline development.

    Returns predefined responses without making actual API calls.
    """

    DEFAULT_REPLY = json.dumps({"probability": 0.5, "confidence": "Low"})

    def __init__(
        self,
        responses: Optional[dict[str, str]] = None,
        default: Optional[str] = None,
        error: Optional[Exception] = None,
    ):
        """
        Initialize mock client.

        Args:
            responses: Optional dict mapping model names to response content.
            default: Content returned for models not in responses.
            error: If set, raised from every complete() call.
        """
        self.responses = responses or {}
        self.default = default if default is not None else self.DEFAULT_REPLY
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    async def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """Return a mock response."""
        # Record the call for verification
        self.calls.append({
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_schema": response_schema,
        })

        if self.error is not None:
            raise self.error

        content = self.responses.get(model, self.default)

        # Simulate token usage
        input_tokens = sum(len(m.get("content", "")) // 4 for m in messages)
        output_tokens = len(content) // 4

        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason="stop",
        )

    async def close(self) -> None:
        self.closed = True
