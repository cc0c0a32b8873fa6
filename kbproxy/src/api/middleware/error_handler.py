"""Error handling middleware for API requests.

This is the single place where failures are turned into HTTP responses.
Upstream knowledge-base errors are forwarded with the upstream status and
body; everything else becomes a JSON ``{"error": ...}`` body.
"""

import logging
import traceback
from typing import Tuple

from flask import Flask, Response, current_app, jsonify
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from kbproxy.src.api.middleware.exceptions import APIError, ErrorResponseModel
from kbproxy.src.services.knowledge_base import UpstreamError

logger = logging.getLogger(__name__)


def upstream_error_response(error: UpstreamError) -> Tuple[Response, int]:
    """Forward an upstream failure to the client.

    Args:
        error: Upstream error with the captured status and body

    Returns:
        The upstream body (JSON or text) with the upstream status, or a 500
        with the error message when the upstream never answered
    """
    status_code = error.status_code or 500
    if not error.has_body:
        return ErrorResponseModel(error=error.message).to_json(), status_code
    if isinstance(error.body, str):
        return Response(error.body, mimetype="text/plain"), status_code
    return jsonify(error.body), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers with the Flask application.

    Args:
        app: Flask application
    """

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_validation_error(error: PydanticValidationError) -> Tuple[Response, int]:  # type: ignore
        """Handle Pydantic validation errors.

        Args:
            error: Validation error from Pydantic

        Returns:
            JSON response with error details
        """
        logger.warning(f"Validation error: {error}")

        # Convert Pydantic errors to a string representation for consistency
        error_details = "\n".join([str(e) for e in error.errors()])

        response = ErrorResponseModel(error="Validation error", details=error_details)
        return response.to_json(), 400

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError) -> Tuple[Response, int]:  # type: ignore
        """Handle custom API errors.

        Args:
            error: Custom API error

        Returns:
            JSON response with error details
        """
        logger.error(f"API error ({error.__class__.__name__}): {error.message}")
        if error.details:
            logger.error(f"Error details: {error.details}")

        return error.to_response()

    @app.errorhandler(UpstreamError)
    def handle_upstream_error(error: UpstreamError) -> Tuple[Response, int]:  # type: ignore
        """Forward knowledge-base service errors.

        Args:
            error: Error raised by the knowledge-base client

        Returns:
            Upstream status and body
        """
        logger.error(
            f"Upstream error ({error.__class__.__name__}, status={error.status_code}): "
            f"{error.message}"
        )
        return upstream_error_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException) -> Tuple[Response, int]:  # type: ignore
        """Handle routing and protocol errors (404, 405, 413, ...).

        Args:
            error: Werkzeug HTTP exception

        Returns:
            JSON response with the exception's status code
        """
        logger.warning(f"HTTP error {error.code}: {error.description}")
        response = ErrorResponseModel(error=error.description or error.name)
        return response.to_json(), error.code or 500

    @app.errorhandler(Exception)
    def handle_exception(error: Exception) -> Tuple[Response, int]:  # type: ignore
        """Handle uncaught exceptions.

        Args:
            error: Exception that was raised

        Returns:
            JSON response with error message
        """
        logger.error(f"Unhandled exception: {str(error)}")
        logger.error(traceback.format_exc())

        # Only include detailed error info in debug mode
        details = str(error) if current_app.debug else None

        response = ErrorResponseModel(error="Internal server error", details=details)
        return response.to_json(), 500
