"""Knowledge base endpoints module.

This module provides Flask routes that pass knowledge-base management
requests through to the upstream service. Successful upstream responses are
returned verbatim; upstream errors are re-raised for the error middleware to
forward with their original status and body.
"""

import logging
from typing import List, Tuple

from flask import Blueprint, Response, jsonify, request

from kbproxy.conf.config import Config
from kbproxy.src.api.middleware.exceptions import ServiceError, ValidationError
from kbproxy.src.data_classes import FileBlob, UploadRequest
from kbproxy.src.services.knowledge_base import (
    BaseKnowledgeBaseClient,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def parse_upload_request() -> UploadRequest:
    """Build an UploadRequest from the current multipart request.

    ``name`` falls back to the default name when absent or blank. Every part
    named ``files`` becomes a FileBlob, in the order received.

    Returns:
        The parsed upload request

    Raises:
        ValidationError: If no files were uploaded
    """
    name = (request.form.get("name") or "").strip() or Config.DEFAULT_KNOWLEDGE_BASE_NAME
    description = request.form.get("description") or None

    files: List[FileBlob] = [
        FileBlob(
            filename=storage.filename or "",
            content_type=storage.content_type or "application/octet-stream",
            data=storage.read(),
        )
        for storage in request.files.getlist("files")
    ]
    if not files:
        raise ValidationError(message="At least one file is required")

    return UploadRequest(name=name, description=description, files=files)


def init_knowledge_base_routes(
    knowledge_base_client: BaseKnowledgeBaseClient,
) -> Blueprint:
    """Initialize knowledge base routes with the provided client.

    Args:
        knowledge_base_client: Client for the upstream knowledge-base service.

    Returns:
        Blueprint: Flask blueprint with configured knowledge base routes.
    """
    knowledge_base_bp = Blueprint("knowledge_base", __name__)

    @knowledge_base_bp.route("/api/knowledgebase", methods=["GET"])
    def list_knowledge_bases() -> Tuple[Response, int]:
        """List knowledge bases, returning the upstream JSON verbatim."""
        try:
            listing = knowledge_base_client.list_knowledge_bases()
        except UpstreamError as e:
            logger.error(f"Error listing KBs: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error listing KBs: {str(e)}")
            raise ServiceError(message=str(e))

        logger.info(f"Listed {len(listing.knowledge_bases)} knowledge bases")
        return jsonify(listing.payload), 200

    @knowledge_base_bp.route("/api/knowledgebase", methods=["POST"])
    def create_knowledge_base() -> Tuple[Response, int]:
        """Create a knowledge base from a multipart upload."""
        # Parsed outside the try block so 413 and 400 keep their status
        upload = parse_upload_request()

        try:
            summary = knowledge_base_client.create_knowledge_base(upload)
        except UpstreamError as e:
            logger.error(f"Error creating KB: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error creating KB: {str(e)}")
            raise ServiceError(message=str(e))

        logger.info(
            f"Created knowledge base '{upload.name}' (id={summary.id}, status={summary.status.value})"
        )
        return jsonify(summary.raw), 200

    @knowledge_base_bp.route("/api/knowledgebase/<request_id>", methods=["GET"])
    def get_knowledge_base(request_id: str) -> Tuple[Response, int]:
        """Return the current upstream state of one knowledge base."""
        try:
            summary = knowledge_base_client.get_knowledge_base(request_id)
        except UpstreamError as e:
            logger.error(f"Error checking status: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error checking status: {str(e)}")
            raise ServiceError(message=str(e))

        return jsonify(summary.raw), 200

    return knowledge_base_bp
