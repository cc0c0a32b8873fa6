"""Unit tests for the HTTP knowledge-base client.

The requests session is mocked; responses are real ``requests.Response``
objects with canned content.
"""

import json
import unittest
from typing import Any, Optional
from unittest.mock import Mock

import requests

from kbproxy.src.data_classes import (
    FileBlob,
    KnowledgeBaseStatus,
    UploadRequest,
)
from kbproxy.src.services.knowledge_base import (
    HttpKnowledgeBaseClient,
    UpstreamBadRequest,
    UpstreamError,
    UpstreamNotFound,
    UpstreamServerError,
    UpstreamTimeout,
    UpstreamUnauthorized,
    UpstreamUnreachable,
)


def make_response(
    status_code: int = 200, body: Any = None, text: Optional[str] = None
) -> requests.Response:
    """Build a response carrying a JSON body, a raw text body, or nothing."""
    response = requests.Response()
    response.status_code = status_code
    if text is not None:
        response._content = text.encode("utf-8")
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    response.encoding = "utf-8"
    response._content_consumed = True
    return response


class TestHttpKnowledgeBaseClient(unittest.TestCase):
    """Test cases for the HttpKnowledgeBaseClient class."""

    def setUp(self) -> None:
        """Set up test fixtures before each test method."""
        self.session = Mock(spec=requests.Session)
        self.client = HttpKnowledgeBaseClient(
            base_url="https://kb.example.com/", api_key="secret", session=self.session
        )

    def test_every_request_carries_api_key(self) -> None:
        self.session.request.return_value = make_response(body=[])

        self.client.list_knowledge_bases()

        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs["headers"]["x-api-key"], "secret")

    def test_list_uses_short_timeout(self) -> None:
        self.session.request.return_value = make_response(body=[])

        self.client.list_knowledge_bases()

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("GET", "https://kb.example.com/knowledgebase"))
        self.assertEqual(kwargs["timeout"], 8.0)

    def test_list_bare_array(self) -> None:
        payload = [
            {"_id": "a", "name": "First", "status": "ready"},
            {"_id": "b", "name": "Second", "status": "processing"},
        ]
        self.session.request.return_value = make_response(body=payload)

        listing = self.client.list_knowledge_bases()

        self.assertEqual(listing.payload, payload)
        self.assertEqual([kb.id for kb in listing.knowledge_bases], ["a", "b"])
        self.assertEqual(
            [kb.status for kb in listing.knowledge_bases],
            [KnowledgeBaseStatus.READY, KnowledgeBaseStatus.PENDING],
        )

    def test_list_wrapped_object(self) -> None:
        payload = {"knowledgeBases": [{"id": "a", "name": "First"}]}
        self.session.request.return_value = make_response(body=payload)

        listing = self.client.list_knowledge_bases()

        self.assertEqual(listing.payload, payload)
        self.assertEqual(len(listing.knowledge_bases), 1)
        self.assertEqual(listing.knowledge_bases[0].name, "First")

    def test_list_unexpected_shape_is_forwarded(self) -> None:
        self.session.request.return_value = make_response(body=42)

        listing = self.client.list_knowledge_bases()

        self.assertEqual(listing.payload, 42)
        self.assertEqual(listing.knowledge_bases, [])

    def test_create_sends_multipart_in_order(self) -> None:
        self.session.request.return_value = make_response(
            body={"requestId": "req-1", "status": "pending"}
        )
        upload = UploadRequest(
            name="Docs",
            description="Product docs",
            files=[
                FileBlob("a.pdf", "application/pdf", b"%PDF-1.4"),
                FileBlob("b.txt", "text/plain", b"hello"),
            ],
        )

        summary = self.client.create_knowledge_base(upload)

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("POST", "https://kb.example.com/knowledgebase"))
        self.assertEqual(kwargs["data"], [("name", "Docs"), ("description", "Product docs")])
        self.assertEqual(
            kwargs["files"],
            [
                ("files", ("a.pdf", b"%PDF-1.4", "application/pdf")),
                ("files", ("b.txt", b"hello", "text/plain")),
            ],
        )
        self.assertIsNone(kwargs["timeout"])
        self.assertEqual(summary.id, "req-1")
        self.assertEqual(summary.raw, {"requestId": "req-1", "status": "pending"})

    def test_create_omits_missing_description(self) -> None:
        self.session.request.return_value = make_response(body={"id": "kb"})
        upload = UploadRequest(
            name="Docs", files=[FileBlob("a.txt", "text/plain", b"x")]
        )

        self.client.create_knowledge_base(upload)

        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs["data"], [("name", "Docs")])

    def test_create_without_files_is_rejected_locally(self) -> None:
        with self.assertRaises(ValueError):
            self.client.create_knowledge_base(UploadRequest(name="Docs"))

        self.session.request.assert_not_called()

    def test_create_unwraps_knowledge_base_object(self) -> None:
        payload = {"knowledgeBase": {"_id": "kb-9", "name": "Docs", "state": "done"}}
        self.session.request.return_value = make_response(body=payload)
        upload = UploadRequest(name="Docs", files=[FileBlob("a", "text/plain", b"x")])

        summary = self.client.create_knowledge_base(upload)

        self.assertEqual(summary.id, "kb-9")
        self.assertEqual(summary.status, KnowledgeBaseStatus.READY)
        self.assertEqual(summary.raw, payload)

    def test_get_escapes_identifier(self) -> None:
        self.session.request.return_value = make_response(body={"id": "a/b c"})

        self.client.get_knowledge_base("a/b c")

        args, _ = self.session.request.call_args
        self.assertEqual(args[1], "https://kb.example.com/knowledgebase/a%2Fb%20c")

    def test_query_embeddings_request_body(self) -> None:
        self.session.request.return_value = make_response(body={"embeddings": []})

        self.client.query_embeddings("kb-1", "What is X?", 5)

        args, kwargs = self.session.request.call_args
        self.assertEqual(
            args, ("POST", "https://kb.example.com/knowledgebase/kb-1/embeddings")
        )
        self.assertEqual(
            kwargs["json"], {"knowledgeBaseId": "kb-1", "query": "What is X?", "topK": 5}
        )

    def test_query_embeddings_ranks_and_content(self) -> None:
        self.session.request.return_value = make_response(
            body={
                "embeddings": [
                    {"content": "first", "score": 0.9},
                    {"content": None},
                    {"other": "field"},
                    {"content": "fourth"},
                ]
            }
        )

        chunks = self.client.query_embeddings("kb-1", "q", 5)

        self.assertEqual([c.rank for c in chunks], [1, 2, 3, 4])
        self.assertEqual([c.content for c in chunks], ["first", "", "", "fourth"])

    def test_query_embeddings_empty(self) -> None:
        for body in [{"embeddings": []}, {}, {"embeddings": None}]:
            with self.subTest(body=body):
                self.session.request.return_value = make_response(body=body)
                self.assertEqual(self.client.query_embeddings("kb-1", "q", 5), [])

    def test_query_embeddings_empty_body(self) -> None:
        self.session.request.return_value = make_response(status_code=200)
        self.assertEqual(self.client.query_embeddings("kb-1", "q", 5), [])

    def test_query_embeddings_malformed(self) -> None:
        for body in [["not", "an", "object"], {"embeddings": "nope"}]:
            with self.subTest(body=body):
                self.session.request.return_value = make_response(body=body)
                with self.assertRaises(UpstreamServerError):
                    self.client.query_embeddings("kb-1", "q", 5)

    def test_status_codes_map_to_errors(self) -> None:
        cases = [
            (400, UpstreamBadRequest),
            (401, UpstreamUnauthorized),
            (403, UpstreamUnauthorized),
            (404, UpstreamNotFound),
            (409, UpstreamBadRequest),
            (500, UpstreamServerError),
            (503, UpstreamServerError),
        ]
        for status, error_cls in cases:
            with self.subTest(status=status):
                self.session.request.return_value = make_response(
                    status_code=status, body={"message": "nope"}
                )
                with self.assertRaises(error_cls) as ctx:
                    self.client.get_knowledge_base("kb-1")
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.body, {"message": "nope"})

    def test_error_keeps_text_body(self) -> None:
        self.session.request.return_value = make_response(
            status_code=502, text="Bad Gateway"
        )

        with self.assertRaises(UpstreamServerError) as ctx:
            self.client.list_knowledge_bases()

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(ctx.exception.body, "Bad Gateway")

    def test_error_without_body(self) -> None:
        self.session.request.return_value = make_response(status_code=500)

        with self.assertRaises(UpstreamServerError) as ctx:
            self.client.list_knowledge_bases()

        self.assertFalse(ctx.exception.has_body)

    def test_non_json_success_body(self) -> None:
        self.session.request.return_value = make_response(text="<html>ok</html>")

        with self.assertRaises(UpstreamServerError) as ctx:
            self.client.get_knowledge_base("kb-1")

        self.assertIsNone(ctx.exception.status_code)

    def test_timeout(self) -> None:
        self.session.request.side_effect = requests.exceptions.ReadTimeout("slow")

        with self.assertRaises(UpstreamTimeout) as ctx:
            self.client.list_knowledge_bases()

        self.assertIsNone(ctx.exception.status_code)
        self.assertFalse(ctx.exception.has_body)

    def test_connection_error(self) -> None:
        self.session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(UpstreamUnreachable):
            self.client.get_knowledge_base("kb-1")

    def test_other_request_errors(self) -> None:
        self.session.request.side_effect = requests.exceptions.InvalidURL("bad")

        with self.assertRaises(UpstreamError):
            self.client.get_knowledge_base("kb-1")

    def test_responses_are_streamed(self) -> None:
        self.session.request.return_value = make_response(body=[])

        self.client.list_knowledge_bases()

        _, kwargs = self.session.request.call_args
        self.assertTrue(kwargs["stream"])

    def test_status_object_with_unusual_fields_is_kept(self) -> None:
        payload = {
            "_id": "a",
            "description": 42,
            "createdAt": {"$date": "2024-01-01T00:00:00Z"},
            "status": "ready",
        }
        self.session.request.return_value = make_response(body=payload)

        summary = self.client.get_knowledge_base("a")

        self.assertEqual(summary.id, "a")
        self.assertIsNone(summary.description)
        self.assertEqual(summary.status, KnowledgeBaseStatus.READY)
        self.assertEqual(summary.raw, payload)

    def test_status_array_is_kept_verbatim(self) -> None:
        payload = [{"_id": "a", "status": "ready"}]
        self.session.request.return_value = make_response(body=payload)

        summary = self.client.get_knowledge_base("a")

        self.assertIsNone(summary.id)
        self.assertEqual(summary.raw, payload)


class TestRequestDeadline(unittest.TestCase):
    """The list timeout bounds the whole exchange, not each socket read."""

    def setUp(self) -> None:
        self.session = Mock(spec=requests.Session)
        self.response = Mock(spec=requests.Response)
        self.response.status_code = 200
        self.response.encoding = "utf-8"
        self.response.iter_content.return_value = iter([b'{"knowledge', b'Bases": []}'])
        self.session.request.return_value = self.response

    def make_client(self, *times: float) -> HttpKnowledgeBaseClient:
        return HttpKnowledgeBaseClient(
            base_url="https://kb.example.com",
            api_key="secret",
            session=self.session,
            clock=Mock(side_effect=list(times)),
        )

    def test_slow_body_times_out(self) -> None:
        # Started at 0, headers at 1 s, first chunk at 9.5 s
        client = self.make_client(0.0, 1.0, 9.5, 9.5)

        with self.assertRaises(UpstreamTimeout) as ctx:
            client.list_knowledge_bases()

        self.assertIsNone(ctx.exception.status_code)
        self.response.close.assert_called_once()

    def test_body_within_deadline(self) -> None:
        client = self.make_client(0.0, 1.0, 2.0, 3.0)

        listing = client.list_knowledge_bases()

        self.assertEqual(listing.payload, {"knowledgeBases": []})
        self.response.close.assert_called_once()

    def test_requests_without_timeout_have_no_deadline(self) -> None:
        self.response.iter_content.return_value = iter([b'{"id": "kb-1"}'])
        client = self.make_client(0.0, 1000.0, 5000.0)

        summary = client.get_knowledge_base("kb-1")

        self.assertEqual(summary.id, "kb-1")


if __name__ == "__main__":
    unittest.main()
