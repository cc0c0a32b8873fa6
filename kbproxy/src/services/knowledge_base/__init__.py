"""Upstream knowledge-base service package."""

from .exceptions import (
    UpstreamBadRequest,
    UpstreamError,
    UpstreamNotFound,
    UpstreamServerError,
    UpstreamTimeout,
    UpstreamUnauthorized,
    UpstreamUnreachable,
)
from .upstream_client import BaseKnowledgeBaseClient, HttpKnowledgeBaseClient

__all__ = [
    "BaseKnowledgeBaseClient",
    "HttpKnowledgeBaseClient",
    "UpstreamError",
    "UpstreamBadRequest",
    "UpstreamUnauthorized",
    "UpstreamNotFound",
    "UpstreamServerError",
    "UpstreamTimeout",
    "UpstreamUnreachable",
]
