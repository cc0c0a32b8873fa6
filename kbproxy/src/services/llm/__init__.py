"""LLM service package."""

from .llm_service import BaseLLMService, GeminiLLMService, LlmError

__all__ = [
    "BaseLLMService",
    "GeminiLLMService",
    "LlmError",
]
