"""
AI gateway adapter.

Bridges the prompt builder and the provider client: sends the prompt,
requests structured output when enabled and returns the raw reply text.
Provider failures of any kind are reported as AIServiceError.
"""

import asyncio
import logging
from typing import Optional

import httpx
import openai

from diapredict.config import Settings
from diapredict.errors import AIServiceError
from diapredict.models.prediction import PredictionOutput
from diapredict.utils.protocols import LLMClientProtocol

logger = logging.getLogger(__name__)


class PredictionGateway:
    """Issues prediction prompts to the configured AI provider."""

    def __init__(self, llm_client: Optional[LLMClientProtocol], settings: Settings):
        """
        Initialize the gateway.

        Args:
            llm_client: Provider client, or None when running degraded
            settings: Model, sampling and timeout configuration
        """
        self.llm_client = llm_client
        self.settings = settings

    @property
    def available(self) -> bool:
        return self.llm_client is not None

    async def request_prediction(self, messages: list[dict]) -> str:
        """
        Send the prompt messages and return the reply text.

        Raises:
            AIServiceError: Provider missing, unreachable, rate-limited,
                erroring or slower than the configured timeout
        """
        if self.llm_client is None:
            raise AIServiceError("AI provider is not configured (missing API key)")

        schema = PredictionOutput.json_schema_for_provider() if self.settings.structured_output else None

        try:
            response = await asyncio.wait_for(
                self.llm_client.complete(
                    model=self.settings.model,
                    messages=messages,
                    temperature=self.settings.temperature,
                    max_tokens=self.settings.max_tokens,
                    response_schema=schema,
                ),
                timeout=self.settings.request_timeout,
            )
        except asyncio.TimeoutError as e:
            raise AIServiceError(
                f"AI provider timed out after {self.settings.request_timeout:g}s"
            ) from e
        except openai.RateLimitError as e:
            raise AIServiceError(f"AI provider rate limit exceeded: {e}") from e
        except openai.APIStatusError as e:
            raise AIServiceError(f"AI provider returned HTTP {e.status_code}: {e.message}") from e
        except (openai.APIError, httpx.HTTPError) as e:
            raise AIServiceError(f"AI provider request failed: {e}") from e

        logger.debug(
            f"Provider reply from {response.model} "
            f"({response.output_tokens} tokens, finish_reason={response.finish_reason})"
        )
        return response.content
