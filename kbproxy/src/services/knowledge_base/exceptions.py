"""Errors raised by the upstream knowledge-base client.

Each error keeps the upstream status code and body, when there was a
response, so the API layer can forward them unchanged.
"""

from typing import Any, Optional


class UpstreamError(Exception):
    """Base class for failures talking to the knowledge-base service."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        """Initialize the upstream error.

        Args:
            message: Human readable description
            status_code: HTTP status returned upstream, None without a response
            body: Decoded JSON body, or the raw text when it was not JSON
        """
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @property
    def has_body(self) -> bool:
        """Whether a non-empty upstream body was captured."""
        return self.body is not None and self.body != ""


class UpstreamBadRequest(UpstreamError):
    """4xx response other than 401, 403 and 404."""


class UpstreamUnauthorized(UpstreamError):
    """401 or 403 response."""


class UpstreamNotFound(UpstreamError):
    """404 response."""


class UpstreamServerError(UpstreamError):
    """5xx response, or a success response that could not be decoded."""


class UpstreamTimeout(UpstreamError):
    """The request did not complete within its deadline."""


class UpstreamUnreachable(UpstreamError):
    """The service could not be reached at all."""


def error_for_status(status_code: int) -> type:
    """Pick the error class for an unsuccessful HTTP status.

    Args:
        status_code: HTTP status code (>= 400)

    Returns:
        The matching UpstreamError subclass
    """
    if status_code in (401, 403):
        return UpstreamUnauthorized
    if status_code == 404:
        return UpstreamNotFound
    if 400 <= status_code < 500:
        return UpstreamBadRequest
    return UpstreamServerError
