"""Client for the third-party knowledge-base service.

The service hosts knowledge bases built from uploaded documents and answers
top-K similarity queries against them. Every request carries the server-held
API key in the ``x-api-key`` header.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests

from kbproxy.conf.config import Config
from kbproxy.src.data_classes import (
    KnowledgeBaseListing,
    KnowledgeBaseSummary,
    RetrievedChunk,
    UploadRequest,
)
from kbproxy.src.services.knowledge_base.exceptions import (
    UpstreamServerError,
    UpstreamTimeout,
    UpstreamUnreachable,
    error_for_status,
)

logger = logging.getLogger(__name__)


class BaseKnowledgeBaseClient(ABC):
    """Base class for knowledge-base clients.

    This abstract class defines the operations the proxy needs from the
    knowledge-base service.
    """

    @abstractmethod
    def list_knowledge_bases(self) -> KnowledgeBaseListing:
        """List all knowledge bases visible to the API key.

        Raises:
            UpstreamError: If the service call fails
        """

    @abstractmethod
    def create_knowledge_base(self, upload: UploadRequest) -> KnowledgeBaseSummary:
        """Create a knowledge base from uploaded files.

        Args:
            upload: Name, optional description and files to upload

        Returns:
            The freshly created knowledge base, usually still pending

        Raises:
            ValueError: If the upload carries no files
            UpstreamError: If the service call fails
        """

    @abstractmethod
    def get_knowledge_base(self, knowledge_base_id: str) -> KnowledgeBaseSummary:
        """Fetch the current state of a knowledge base.

        Raises:
            UpstreamError: If the service call fails
        """

    @abstractmethod
    def query_embeddings(
        self, knowledge_base_id: str, query: str, top_k: int
    ) -> List[RetrievedChunk]:
        """Run a similarity search against a knowledge base.

        Args:
            knowledge_base_id: Knowledge base to search
            query: Natural-language query
            top_k: Maximum number of chunks to return

        Returns:
            Chunks in upstream rank order, possibly empty

        Raises:
            UpstreamError: If the service call fails
        """


class HttpKnowledgeBaseClient(BaseKnowledgeBaseClient):
    """Knowledge-base client speaking HTTP to the upstream service.

    Responses are streamed so that a request timeout bounds the whole
    exchange, body included, and not just each socket read.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the service (e.g. "https://backend.vgvishesh.com")
            api_key: Key sent in the ``x-api-key`` header
            session: Optional preconfigured session
            clock: Monotonic clock used for request deadlines
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.clock = clock

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _decode_body(content: bytes, encoding: Optional[str]) -> Any:
        """Decode a response body as JSON, falling back to text."""
        if not content:
            return None
        try:
            return json.loads(content)
        except ValueError:
            return content.decode(encoding or "utf-8", errors="replace")

    def _read_body(
        self,
        response: requests.Response,
        url: str,
        started: float,
        timeout: Optional[float],
    ) -> bytes:
        """Read the streamed body, enforcing the overall deadline.

        Raises:
            UpstreamTimeout: If the deadline passes before the body is complete
        """

        def check_deadline() -> None:
            if timeout is not None and self.clock() - started > timeout:
                raise UpstreamTimeout(
                    f"Request to {url} timed out after {timeout} seconds"
                )

        chunks = []
        try:
            check_deadline()
            for chunk in response.iter_content(chunk_size=8192):
                chunks.append(chunk)
                check_deadline()
        finally:
            response.close()
        return b"".join(chunks)

    def _request(
        self,
        method: str,
        path: str,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path below the base URL
            timeout: Seconds the whole request may take, None to wait indefinitely
            **kwargs: Passed through to ``requests.Session.request``

        Returns:
            Decoded JSON body, None for an empty body

        Raises:
            UpstreamError: Subclass matching the failure
        """
        url = self._url(path)
        headers: Dict[str, str] = dict(kwargs.pop("headers", None) or {})
        headers[Config.API_KEY_HEADER] = self.api_key

        logger.debug(f"{method} {url}")
        started = self.clock()
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=timeout, stream=True, **kwargs
            )
            content = self._read_body(response, url, started, timeout)
        except requests.exceptions.Timeout as e:
            raise UpstreamTimeout(
                f"Request to {url} timed out after {timeout} seconds"
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise UpstreamUnreachable(
                f"Could not connect to knowledge base service at {self.base_url}"
            ) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamUnreachable(f"Request to {url} failed: {str(e)}") from e

        body = self._decode_body(content, response.encoding)
        if response.status_code >= 400:
            error_cls = error_for_status(response.status_code)
            raise error_cls(
                f"Knowledge base service returned {response.status_code} for {method} {path}",
                status_code=response.status_code,
                body=body,
            )
        if isinstance(body, str):
            raise UpstreamServerError(
                f"Knowledge base service returned a non-JSON body for {method} {path}",
                body=body,
            )
        return body

    def list_knowledge_bases(self) -> KnowledgeBaseListing:
        payload = self._request(
            "GET", "/knowledgebase", timeout=Config.LIST_TIMEOUT_SECONDS
        )
        try:
            return KnowledgeBaseListing.from_payload(payload)
        except ValueError as e:
            logger.warning(f"Forwarding unrecognised knowledge base listing: {str(e)}")
            return KnowledgeBaseListing(payload=payload)

    def create_knowledge_base(self, upload: UploadRequest) -> KnowledgeBaseSummary:
        if not upload.files:
            raise ValueError("At least one file is required to create a knowledge base")

        data = [("name", upload.name)]
        if upload.description:
            data.append(("description", upload.description))
        files = [("files", blob.to_multipart()) for blob in upload.files]

        logger.info(
            f"Creating knowledge base '{upload.name}' with {len(files)} file(s), "
            f"{upload.total_bytes} bytes"
        )
        # No timeout: large uploads can take arbitrarily long to be accepted
        payload = self._request("POST", "/knowledgebase", data=data, files=files)
        return self._parse_summary(payload)

    def get_knowledge_base(self, knowledge_base_id: str) -> KnowledgeBaseSummary:
        payload = self._request(
            "GET", f"/knowledgebase/{quote(knowledge_base_id, safe='')}"
        )
        return self._parse_summary(payload)

    def query_embeddings(
        self, knowledge_base_id: str, query: str, top_k: int
    ) -> List[RetrievedChunk]:
        payload = self._request(
            "POST",
            f"/knowledgebase/{quote(knowledge_base_id, safe='')}/embeddings",
            json={"knowledgeBaseId": knowledge_base_id, "query": query, "topK": top_k},
        )
        if payload is None:
            return []
        if not isinstance(payload, dict):
            raise UpstreamServerError(
                "Unexpected embeddings response shape", body=payload
            )

        results = payload.get("embeddings") or []
        if not isinstance(results, list):
            raise UpstreamServerError("'embeddings' is not a list", body=payload)

        chunks = []
        for rank, item in enumerate(results, start=1):
            content = item.get("content") if isinstance(item, dict) else None
            chunks.append(
                RetrievedChunk(rank=rank, content=content if isinstance(content, str) else "")
            )
        return chunks

    @staticmethod
    def _parse_summary(payload: Any) -> KnowledgeBaseSummary:
        try:
            return KnowledgeBaseSummary.from_payload(payload)
        except ValueError as e:
            logger.warning(f"Forwarding unrecognised knowledge base response: {str(e)}")
            return KnowledgeBaseSummary.unparsed(payload)
