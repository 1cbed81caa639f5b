"""
Unit tests for response serialization.
"""

import pytest

from minihttp.http.response import (
    HTML_CONTENT_TYPE,
    ResponseSpec,
    ResponseWriter,
    bad_request,
    internal_error,
    method_not_allowed,
    no_content,
    not_found,
    serialize_response,
)
from minihttp.http.status_codes import HTTPStatus


class TestResponseSpec:
    """Tests for ResponseSpec."""

    def test_for_status_encodes_text(self):
        """Test that str bodies are stored as UTF-8 bytes."""
        response = ResponseSpec.for_status(HTTPStatus.OK, "你好")

        assert response.status == 200
        assert response.reason == "OK"
        assert response.content_type == HTML_CONTENT_TYPE
        assert response.body == "你好".encode("utf-8")

    def test_content_length_counts_bytes(self):
        """Test Content-Length uses the byte length, not characters."""
        response = ResponseSpec.for_status(HTTPStatus.OK, "你好")

        assert response.content_length == 6

    def test_status_line(self):
        response = ResponseSpec.for_status(HTTPStatus.NOT_FOUND)

        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_for_status_restores_escaped_bytes(self):
        """Test surrogate-escaped text encodes back to the original bytes."""
        path = b"/caf\xe9".decode("utf-8", "surrogateescape")

        response = ResponseSpec.for_status(HTTPStatus.NOT_FOUND, f"<p>{path}</p>")

        assert response.body == b"<p>/caf\xe9</p>"

    def test_body_must_be_bytes(self):
        """Test that an unencoded body is rejected."""
        with pytest.raises(TypeError):
            ResponseSpec(200, "OK", "text/plain", body="text")


class TestResponseWriter:
    """Tests for ResponseWriter."""

    def test_exact_bytes(self):
        """Test the full wire format of a small response."""
        response = ResponseSpec(200, "OK", "text/plain", b"hi")

        data = ResponseWriter().write(response)

        assert data == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 2\r\n"
            b"Connection: close\r\n"
            b"Server: mini-py-http/0.1\r\n"
            b"\r\n"
            b"hi"
        )

    def test_header_order(self, parse_response):
        """Test the four headers appear in a fixed order."""
        data = ResponseWriter().write(ResponseSpec.for_status(HTTPStatus.OK, "<p>x</p>"))

        _, _, headers, _ = parse_response(data)

        assert list(headers) == ["Content-Type", "Content-Length", "Connection", "Server"]

    def test_content_length_matches_body(self, parse_response):
        """Test Content-Length equals the bytes after the blank line."""
        data = ResponseWriter().write(ResponseSpec.for_status(HTTPStatus.OK, "<p>你好，世界！</p>"))

        _, _, headers, body = parse_response(data)

        assert int(headers["Content-Length"]) == len(body)

    def test_custom_server_name(self, parse_response):
        data = ResponseWriter(server_name="test/1.0").write(no_content())

        _, _, headers, _ = parse_response(data)

        assert headers["Server"] == "test/1.0"

    def test_empty_body(self):
        """Test a response ends right after the blank line when empty."""
        data = ResponseWriter().write(no_content())

        assert data.startswith(b"HTTP/1.1 204 No Content\r\n")
        assert data.endswith(b"Content-Length: 0\r\nConnection: close\r\nServer: mini-py-http/0.1\r\n\r\n")

    def test_serialize_response(self):
        response = ResponseSpec(200, "OK", "text/plain", b"hi")

        assert serialize_response(response) == ResponseWriter().write(response)


class TestConvenienceFunctions:
    """Tests for the canned responses."""

    def test_no_content(self):
        response = no_content()

        assert response.status == 204
        assert response.content_type == "text/plain"
        assert response.body == b""

    def test_bad_request(self):
        response = bad_request()

        assert response.status == 400
        assert response.reason == "Bad Request"
        assert b"400 Bad Request" in response.body

    def test_not_found_echoes_path(self):
        """Test the 404 body contains the path exactly as received."""
        response = not_found("/a<b>?x=1")

        assert response.status == 404
        assert b"<p>Path: /a<b>?x=1</p>" in response.body

    def test_method_not_allowed_echoes_method(self):
        response = method_not_allowed("POST")

        assert response.status == 405
        assert response.reason == "Method Not Allowed"
        assert b"<p>Method: POST</p>" in response.body
        assert b"Only GET is supported." in response.body

    def test_internal_error(self):
        response = internal_error()

        assert response.status == 500
        assert response.reason == "Internal Server Error"


class TestHTTPStatus:
    """Tests for HTTPStatus helpers."""

    def test_phrase(self):
        assert HTTPStatus.METHOD_NOT_ALLOWED.phrase == "Method Not Allowed"
