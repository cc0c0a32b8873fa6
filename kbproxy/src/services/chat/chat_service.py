"""Chat service implementing the retrieval-augmented answer pipeline.

The service answers a query by:
1. Searching the configured knowledge base for the top-K chunks
2. Dropping chunks without text
3. Composing a grounded prompt from the remaining chunks
4. Asking the language model for a single answer

When nothing is retrieved the fixed no-evidence answer is returned and the
language model is never called. Errors are not caught here; the API layer
decides what the caller sees.
"""

import logging
from typing import Any, Optional

from kbproxy.conf.config import Config, ConfigError, ServerConfig
from kbproxy.src.services.chat.prompt_composer import compose_prompt
from kbproxy.src.services.knowledge_base import BaseKnowledgeBaseClient
from kbproxy.src.services.llm import BaseLLMService

logger = logging.getLogger(__name__)


class InvalidQuery(ValueError):
    """Raised when the chat query is missing or blank."""


class ChatService:
    """Answers questions grounded in the default knowledge base.

    Attributes:
        config: Process-wide server configuration
        knowledge_base_client: Client for the upstream similarity search
        llm_service: Language model, None when no Gemini key is configured
    """

    def __init__(
        self,
        config: ServerConfig,
        knowledge_base_client: BaseKnowledgeBaseClient,
        llm_service: Optional[BaseLLMService] = None,
    ) -> None:
        assert knowledge_base_client is not None, "Knowledge base client is required"

        self.config = config
        self.knowledge_base_client = knowledge_base_client
        self.llm_service = llm_service

    def answer(self, query: Any) -> str:
        """Answer a query using the default knowledge base.

        Args:
            query: The user's question

        Returns:
            The model's answer verbatim, or the no-evidence answer when the
            search yields no usable chunks

        Raises:
            ConfigError: If the knowledge base id or the Gemini key is missing
            InvalidQuery: If the query is not text or is blank
            UpstreamError: If the similarity search fails
            LlmError: If the language model fails
        """
        missing = self.config.missing_chat_settings()
        if missing or self.llm_service is None:
            missing = missing or ["GEMINI_API_KEY"]
            raise ConfigError(
                f"Missing chat configuration: {', '.join(missing)}", missing=missing
            )

        if not isinstance(query, str) or not query.strip():
            raise InvalidQuery("Query must be a non-empty string")

        logger.info(f"User query: {query}")
        knowledge_base_id = self.config.default_knowledge_base_id
        assert knowledge_base_id is not None

        chunks = self.knowledge_base_client.query_embeddings(
            knowledge_base_id, query, Config.TOP_K
        )
        if not chunks:
            logger.info(f"No chunks found for query: '{query}'")
            return Config.NO_EVIDENCE_ANSWER

        for chunk in chunks:
            logger.info(
                f"[Chunk {chunk.rank}] {chunk.preview(Config.CHUNK_LOG_PREVIEW_CHARS)}..."
            )

        usable = [chunk for chunk in chunks if not chunk.is_empty]
        if not usable:
            logger.info(f"All {len(chunks)} chunks were empty for query: '{query}'")
            return Config.NO_EVIDENCE_ANSWER

        prompt = compose_prompt(query, [chunk.content for chunk in usable])
        return self.llm_service.generate(prompt)
