"""AI provider clients."""

from diapredict.llm.client import LLMClient, MockLLMClient

__all__ = ["LLMClient", "MockLLMClient"]
