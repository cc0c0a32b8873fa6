"""Core API setup and configuration.

This module configures API middleware, error handling, and other global API components.
"""

import logging

from flask import Flask

from kbproxy.src.api.endpoints import register_endpoints
from kbproxy.src.api.middleware import register_middleware
from kbproxy.src.services import BaseKnowledgeBaseClient, ChatService

logger = logging.getLogger(__name__)


def setup_api(
    app: Flask,
    knowledge_base_client: BaseKnowledgeBaseClient,
    chat_service: ChatService,
) -> None:
    """Set up API with middleware and endpoints.

    Args:
        app: Flask application
        knowledge_base_client: Client for the upstream knowledge-base service
        chat_service: Service for grounded chat
    """
    # Register middleware
    register_middleware(app)

    # Register endpoints
    register_endpoints(app, knowledge_base_client, chat_service)
