"""Grounded chat package."""

from .chat_service import ChatService, InvalidQuery
from .prompt_composer import compose_prompt

__all__ = ["ChatService", "InvalidQuery", "compose_prompt"]
