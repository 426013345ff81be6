"""
Shared Protocol definitions for type hints across the codebase.

These protocols describe the AI provider client the gateway depends on,
allowing real and mock clients to be injected interchangeably.
"""

from typing import Optional, Protocol

from diapredict.models.llm import LLMResponse


class LLMClientProtocol(Protocol):
    """Interface expected from an LLM client."""

    async def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """
        Complete a chat conversation with the LLM.

        Args:
            model: Model identifier (e.g., "google/gemini-2.0-flash-001")
            messages: List of message dicts with "role" and "content"
            temperature: Sampling temperature
            max_tokens: Optional maximum tokens to generate
            response_schema: Optional JSON schema the reply must follow

        Returns:
            LLMResponse with content and token usage
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
