"""API endpoints package.

This package contains endpoint definitions for the API.
"""

from flask import Flask

from kbproxy.src.api.endpoints.chat import init_chat_routes
from kbproxy.src.api.endpoints.knowledge_base import init_knowledge_base_routes
from kbproxy.src.services import BaseKnowledgeBaseClient, ChatService


def register_endpoints(
    app: Flask,
    knowledge_base_client: BaseKnowledgeBaseClient,
    chat_service: ChatService,
) -> None:
    """Register all API endpoints with the application.

    Args:
        app: Flask application
        knowledge_base_client: Client for the upstream knowledge-base service
        chat_service: Service for grounded chat
    """
    app.register_blueprint(init_knowledge_base_routes(knowledge_base_client))
    app.register_blueprint(init_chat_routes(chat_service))
