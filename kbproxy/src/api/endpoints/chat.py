"""Chat endpoints module.

This module provides the Flask route for grounded chat. Every failure of the
chat pipeline is reported as a generic internal server error so that
retrieval and model details never reach the caller.
"""

import logging
import traceback
from typing import Optional

from flask import Blueprint, request
from flask_pydantic import validate  # type: ignore
from pydantic import BaseModel, Field

from kbproxy.src.api.middleware.exceptions import ChatError
from kbproxy.src.services.chat import ChatService

logger = logging.getLogger(__name__)


# Schema definitions
class ChatRequest(BaseModel):
    """Chat request model."""

    query: Optional[str] = Field(None, description="User's question")


class ChatResponseModel(BaseModel):
    """Chat response model."""

    answer: str = Field(..., description="Generated answer text")


class HealthResponseModel(BaseModel):
    """Health check response model."""

    status: str = Field("ok", description="Service status")


def init_chat_routes(chat_service: ChatService) -> Blueprint:
    """Initialize chat routes with the provided service.

    Args:
        chat_service: Service answering queries from the default knowledge base.

    Returns:
        Blueprint: Flask blueprint with configured chat routes.
    """
    chat_bp = Blueprint("chat", __name__)

    @chat_bp.route("/api/chat", methods=["POST"])
    @validate()
    def chat() -> ChatResponseModel:  # type: ignore
        """Answer a question grounded in the default knowledge base.

        Returns:
            Response with the generated answer
        """
        try:
            # Parsed here rather than by flask-pydantic so malformed bodies fail like any other chat error
            body = ChatRequest.model_validate(request.get_json(silent=True) or {})
            answer = chat_service.answer(body.query)
        except Exception as e:
            logger.error(f"Failed to process chat: {str(e)}")
            logger.error(traceback.format_exc())
            raise ChatError() from e

        return ChatResponseModel(answer=answer)

    @chat_bp.route("/health", methods=["GET"])
    @validate()
    def health() -> HealthResponseModel:  # type: ignore
        """Liveness probe."""
        return HealthResponseModel()

    return chat_bp
