"""Tests for LLM client."""

import httpx
import openai
import pytest
from tenacity import wait_none
from unittest.mock import AsyncMock, MagicMock, patch

from diapredict.llm.client import LLMClient, MockLLMClient
from diapredict.models.llm import LLMResponse


def _completion(content: str, prompt_tokens: int = 120, completion_tokens: int = 12):
    """Build an object shaped like an OpenAI ChatCompletion."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    return response


def _connection_error() -> openai.APIConnectionError:
    request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
    return openai.APIConnectionError(request=request)


def _bad_request() -> openai.BadRequestError:
    request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
    response = httpx.Response(400, request=request)
    return openai.BadRequestError("bad request", response=response, body=None)


class TestMockLLMClient:
    """Tests for MockLLMClient."""

    @pytest.mark.asyncio
    async def test_default_reply_is_valid_prediction(self):
        client = MockLLMClient()

        response = await client.complete(
            model="test/model",
            messages=[{"role": "user", "content": "Hello"}],
        )

        assert isinstance(response, LLMResponse)
        assert response.model == "test/model"
        assert '"probability"' in response.content

    @pytest.mark.asyncio
    async def test_custom_responses(self):
        client = MockLLMClient(responses={"model-a": "A"}, default="other")

        a = await client.complete(model="model-a", messages=[])
        b = await client.complete(model="model-b", messages=[])

        assert a.content == "A"
        assert b.content == "other"

    @pytest.mark.asyncio
    async def test_records_calls(self):
        client = MockLLMClient()
        schema = {"type": "object"}

        await client.complete(
            model="model-a",
            messages=[{"role": "user", "content": "First"}],
            temperature=0.5,
            response_schema=schema,
        )

        assert len(client.calls) == 1
        assert client.calls[0]["temperature"] == 0.5
        assert client.calls[0]["response_schema"] == schema

    @pytest.mark.asyncio
    async def test_raises_configured_error(self):
        client = MockLLMClient(error=TimeoutError("slow"))

        with pytest.raises(TimeoutError):
            await client.complete(model="m", messages=[])
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_close(self):
        client = MockLLMClient()
        await client.close()
        assert client.closed


class TestLLMClient:
    """Tests for LLMClient."""

    def test_client_requires_api_key(self):
        """Test that client raises error without API key."""
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError) as exc_info:
                LLMClient()

            assert "API key required" in str(exc_info.value)

    def test_client_accepts_api_key_param(self):
        client = LLMClient(api_key="test-key")
        assert client.api_key == "test-key"

    def test_client_reads_env_api_key(self):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "env-key"}):
            client = LLMClient()
            assert client.api_key == "env-key"

    def test_client_sets_openrouter_base_url(self):
        client = LLMClient(api_key="test-key")
        assert client.client.base_url.host == "openrouter.ai"

    def test_client_custom_base_url(self):
        client = LLMClient(api_key="test-key", base_url="http://localhost:11434/v1")
        assert client.client.base_url.host == "localhost"

    def test_sdk_retries_disabled(self):
        client = LLMClient(api_key="test-key")
        assert client.client.max_retries == 0

    @pytest.mark.asyncio
    async def test_complete_plain(self):
        client = LLMClient(api_key="test-key")
        create = AsyncMock(return_value=_completion('{"probability": 0.1, "confidence": "Low"}'))

        with patch.object(client.client.chat.completions, "create", new=create):
            response = await client.complete(
                model="test/model",
                messages=[{"role": "user", "content": "Hi"}],
                max_tokens=64,
            )

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "test/model"
        assert kwargs["max_tokens"] == 64
        assert "response_format" not in kwargs
        assert response.input_tokens == 120
        assert response.output_tokens == 12

    @pytest.mark.asyncio
    async def test_complete_structured(self):
        client = LLMClient(api_key="test-key")
        create = AsyncMock(return_value=_completion("{}"))
        schema = {"type": "object", "properties": {}}

        with patch.object(client.client.chat.completions, "create", new=create):
            await client.complete(model="m", messages=[], response_schema=schema)

        response_format = create.call_args.kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["schema"] == schema

    @pytest.mark.asyncio
    async def test_retries_transient_errors(self, monkeypatch):
        monkeypatch.setattr(LLMClient.complete.retry, "wait", wait_none())
        client = LLMClient(api_key="test-key")
        create = AsyncMock(side_effect=[_connection_error(), _completion("ok")])

        with patch.object(client.client.chat.completions, "create", new=create):
            response = await client.complete(model="m", messages=[])

        assert response.content == "ok"
        assert create.await_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_client_errors(self, monkeypatch):
        monkeypatch.setattr(LLMClient.complete.retry, "wait", wait_none())
        client = LLMClient(api_key="test-key")
        create = AsyncMock(side_effect=_bad_request())

        with patch.object(client.client.chat.completions, "create", new=create):
            with pytest.raises(openai.BadRequestError):
                await client.complete(model="m", messages=[])

        assert create.await_count == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_three_attempts(self, monkeypatch):
        monkeypatch.setattr(LLMClient.complete.retry, "wait", wait_none())
        client = LLMClient(api_key="test-key")
        create = AsyncMock(side_effect=_connection_error())

        with patch.object(client.client.chat.completions, "create", new=create):
            with pytest.raises(openai.APIConnectionError):
                await client.complete(model="m", messages=[])

        assert create.await_count == 3

    @pytest.mark.asyncio
    async def test_error_body_without_choices(self):
        client = LLMClient(api_key="test-key")
        completion = MagicMock()
        completion.choices = None
        completion.error = {"message": "Upstream provider error", "code": 502}
        create = AsyncMock(return_value=completion)

        with patch.object(client.client.chat.completions, "create", new=create):
            with pytest.raises(openai.APIError) as exc_info:
                await client.complete(model="m", messages=[])

        assert "Upstream provider error" in str(exc_info.value)
        assert create.await_count == 1
