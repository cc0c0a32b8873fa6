"""Custom exception types for the API.

This module defines custom exception classes for various error scenarios and error response models.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from flask import Response, jsonify
from pydantic import BaseModel, Field


class ErrorResponseModel(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error message")
    details: Optional[Union[str, List[Dict[str, Any]]]] = Field(
        None, description="Additional error details"
    )

    def to_json(self) -> Response:
        """Serialize to a JSON response, leaving out empty details."""
        return jsonify(self.model_dump(exclude_none=True))


class APIError(Exception):
    """Base class for all API errors."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Union[str, List[Dict[str, Any]]]] = None,
    ):
        """Initialize the API error.

        Args:
            message: Custom error message (uses default_message if None)
            details: Additional error details
        """
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> Tuple[Response, int]:
        """Convert to Flask response."""
        error_model = ErrorResponseModel(error=self.message, details=self.details)
        return error_model.to_json(), self.status_code


class ValidationError(APIError):
    """Error for invalid request data."""

    status_code = 400
    default_message = "Invalid request data"


class ServiceError(APIError):
    """Error from underlying services."""

    status_code = 500
    default_message = "Service error"


class ChatError(APIError):
    """Any failure of the chat endpoint.

    Chat failures never expose upstream or model details to the caller.
    """

    status_code = 500
    default_message = "Internal server error"
