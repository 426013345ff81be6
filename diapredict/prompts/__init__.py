"""Prompt templates and the prompt builder."""

from diapredict.prompts.builder import (
    BMIMode,
    PromptBuilder,
    build_messages,
    format_prompt,
    load_prompt,
)

__all__ = [
    "BMIMode",
    "PromptBuilder",
    "build_messages",
    "format_prompt",
    "load_prompt",
]
