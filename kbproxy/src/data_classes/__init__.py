"""Data classes module for knowledge bases, uploads and retrieval results.

Classes:
    - KnowledgeBaseSummary: A knowledge base as reported by the upstream service
    - KnowledgeBaseListing: Normalised list of knowledge bases
    - KnowledgeBaseStatus: Readiness state of a knowledge base
    - FileBlob: A single uploaded file held in memory
    - UploadRequest: Request to create a knowledge base
    - RetrievedChunk: A ranked piece of evidence from the similarity search
"""

from kbproxy.src.data_classes.knowledge_base import (
    KnowledgeBaseListing,
    KnowledgeBaseStatus,
    KnowledgeBaseSummary,
)
from kbproxy.src.data_classes.retrieved_chunk import RetrievedChunk
from kbproxy.src.data_classes.upload_request import FileBlob, UploadRequest

__all__ = [
    "KnowledgeBaseListing",
    "KnowledgeBaseStatus",
    "KnowledgeBaseSummary",
    "FileBlob",
    "UploadRequest",
    "RetrievedChunk",
]
