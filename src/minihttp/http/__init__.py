"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The protocol side of the responder, leaves first:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ framing.py      HeaderFramer: bytes in until \r\n\r\n or the cap    │
    │ request.py      RequestParser: first line → (method, path, version) │
    │ router.py       Router: (method, path) → ResponseSpec               │
    │ response.py     ResponseWriter: ResponseSpec → wire bytes           │
    │ status_codes.py HTTPStatus: codes and reason phrases                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HTTP MESSAGE FORMAT (the subset we speak)
=============================================================================

    REQUEST:                          RESPONSE:
    ─────────                         ──────────
    GET /path HTTP/1.1\r\n            HTTP/1.1 200 OK\r\n
    Header: Value\r\n  (ignored)      Content-Type: ...\r\n
    \r\n                              Content-Length: ...\r\n
    [body]             (ignored)      Connection: close\r\n
                                      Server: ...\r\n
                                      \r\n
                                      [body]

=============================================================================
"""

from .status_codes import HTTPStatus
from .framing import HEADER_TERMINATOR, FrameResult, HeaderFramer, read_header_block
from .request import HTTPParseError, ParsedRequestLine, RequestParser, parse_request_line
from .response import (
    HTML_CONTENT_TYPE,
    ResponseSpec,
    ResponseWriter,
    serialize_response,
    # Fixed responses
    no_content,          # 204 No Content
    bad_request,         # 400 Bad Request
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
)
from .router import Route, Router

__all__ = [
    # Status codes
    "HTTPStatus",

    # Framing
    "HEADER_TERMINATOR",
    "FrameResult",
    "HeaderFramer",
    "read_header_block",

    # Request line
    "HTTPParseError",
    "ParsedRequestLine",
    "RequestParser",
    "parse_request_line",

    # Responses
    "HTML_CONTENT_TYPE",
    "ResponseSpec",
    "ResponseWriter",
    "serialize_response",
    "no_content",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Routing
    "Route",
    "Router",
]
