"""Utility functions and helpers."""

from diapredict.utils.logging import get_logger, setup_logging
from diapredict.utils.protocols import LLMClientProtocol

__all__ = [
    "get_logger",
    "setup_logging",
    "LLMClientProtocol",
]
