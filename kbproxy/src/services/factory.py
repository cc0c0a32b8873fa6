"""Service factory module for centralized service instantiation.

This module provides factory methods for creating service instances,
keeping service initialization logic in one place.
"""

import logging
from typing import Optional

from kbproxy.conf.config import ServerConfig
from kbproxy.src.services.chat import ChatService
from kbproxy.src.services.knowledge_base import (
    BaseKnowledgeBaseClient,
    HttpKnowledgeBaseClient,
)
from kbproxy.src.services.llm import BaseLLMService, GeminiLLMService

logger = logging.getLogger(__name__)


def create_knowledge_base_client(config: ServerConfig) -> BaseKnowledgeBaseClient:
    """Create a client for the upstream knowledge-base service.

    Args:
        config: Server configuration

    Returns:
        Configured knowledge-base client
    """
    logger.info(f"Using knowledge base service at {config.upstream_base_url}")
    return HttpKnowledgeBaseClient(
        base_url=config.upstream_base_url, api_key=config.retrieval_api_key
    )


def create_llm_service(config: ServerConfig) -> Optional[BaseLLMService]:
    """Create the LLM service, or None when no Gemini key is configured.

    Without a key the knowledge-base endpoints keep working and only chat
    requests fail.

    Args:
        config: Server configuration

    Returns:
        Configured LLM service or None
    """
    if not config.llm_api_key:
        logger.warning("GEMINI_API_KEY is not set, chat requests will fail")
        return None
    return GeminiLLMService(api_key=config.llm_api_key, model_name=config.llm_model_name)


def create_chat_service(
    config: ServerConfig,
    knowledge_base_client: Optional[BaseKnowledgeBaseClient] = None,
    llm_service: Optional[BaseLLMService] = None,
) -> ChatService:
    """Create and configure a ChatService instance.

    Args:
        config: Server configuration
        knowledge_base_client: Client for the similarity search
        llm_service: LLM service for answer generation

    Returns:
        Configured ChatService instance
    """
    if knowledge_base_client is None:
        logger.info("No knowledge base client provided, creating new one")
        knowledge_base_client = create_knowledge_base_client(config)

    if llm_service is None:
        llm_service = create_llm_service(config)

    if not config.default_knowledge_base_id:
        logger.warning("KNOWLEDGE_BASE_ID is not set, chat requests will fail")

    return ChatService(
        config=config,
        knowledge_base_client=knowledge_base_client,
        llm_service=llm_service,
    )
