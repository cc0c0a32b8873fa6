"""Services package for backend functionality.

This package contains all service components for business logic.
"""

from .chat import ChatService, InvalidQuery
from .factory import (
    create_chat_service,
    create_knowledge_base_client,
    create_llm_service,
)
from .knowledge_base import BaseKnowledgeBaseClient, HttpKnowledgeBaseClient
from .llm import BaseLLMService, GeminiLLMService, LlmError

__all__ = [
    # LLM Services
    "BaseLLMService",
    "GeminiLLMService",
    "LlmError",
    # Other Services
    "BaseKnowledgeBaseClient",
    "HttpKnowledgeBaseClient",
    "ChatService",
    "InvalidQuery",
    # Factory Functions
    "create_chat_service",
    "create_knowledge_base_client",
    "create_llm_service",
]
