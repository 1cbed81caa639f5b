"""
=============================================================================
HTTP RESPONSE WRITER
=============================================================================

Serializes a ResponseSpec into the bytes sent back on the connection.

=============================================================================
RESPONSE ANATOMY
=============================================================================

Every response this server produces has the same shape and the same four
headers, always in this order:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 404 Not Found\r\n                  ← status line          │
    │  Content-Type: text/html; charset=utf-8\r\n                         │
    │  Content-Length: 187\r\n                     ← len(body) in BYTES   │
    │  Connection: close\r\n                       ← no keep-alive        │
    │  Server: mini-py-http/0.1\r\n                                       │
    │  \r\n                                        ← end of headers       │
    │  <!doctype html>...                          ← body, verbatim       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONTENT-LENGTH COUNTS BYTES
=============================================================================

The body of a ResponseSpec is always bytes, so Content-Length is simply
len(body). Text is encoded before it gets here:

    "Hello"      → 5 characters, 5 bytes
    "你好"        → 2 characters, 6 bytes in UTF-8   ← Content-Length: 6

Getting this wrong makes the client either hang waiting for bytes that
never come, or truncate the page.

=============================================================================
"""

from dataclasses import dataclass
from typing import Union

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.1"
DEFAULT_SERVER_NAME = "mini-py-http/0.1"

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain"


@dataclass(frozen=True)
class ResponseSpec:
    """
    A complete response, prior to serialization.

    Attributes:
        status: Numeric status code
        reason: Reason phrase for the status line
        content_type: Value of the Content-Type header
        body: Response body; its length becomes Content-Length
    """

    status: int
    reason: str
    content_type: str
    body: bytes = b""

    def __post_init__(self):
        if not isinstance(self.body, (bytes, bytearray)):
            raise TypeError(f"ResponseSpec body must be bytes, not {type(self.body).__name__}")

    @classmethod
    def for_status(
        cls,
        status: HTTPStatus,
        body: Union[str, bytes] = b"",
        content_type: str = HTML_CONTENT_TYPE,
    ) -> "ResponseSpec":
        """
        Build a ResponseSpec from an HTTPStatus, taking the reason phrase
        from the enum and encoding str bodies as UTF-8. Surrogate escapes
        left by the request parser turn back into the original bytes.
        """
        if isinstance(body, str):
            body = body.encode("utf-8", "surrogateescape")
        return cls(status=int(status), reason=status.phrase, content_type=content_type, body=body)

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 200 OK" """
        return f"{HTTP_VERSION} {self.status} {self.reason}"


class ResponseWriter:
    """
    Turns ResponseSpec objects into wire bytes.

        writer = ResponseWriter(server_name="mini-py-http/0.1")
        data = writer.write(ResponseSpec.for_status(HTTPStatus.OK, "<h1>hi</h1>"))
        conn.send_response(data)
    """

    def __init__(self, server_name: str = DEFAULT_SERVER_NAME):
        self.server_name = server_name

    def headers(self, response: ResponseSpec) -> list[tuple[str, str]]:
        """The fixed header set, in wire order."""
        return [
            ("Content-Type", response.content_type),
            ("Content-Length", str(response.content_length)),
            ("Connection", "close"),
            ("Server", self.server_name),
        ]

    def write(self, response: ResponseSpec) -> bytes:
        """
        Serialize response to bytes ready for sendall().

        Head is encoded as latin-1 (the HTTP header charset); the body is
        appended untouched.
        """
        lines = [response.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers(response))

        # Trailing "" yields the blank line that ends the header section
        lines.append("")
        head = "\r\n".join(lines).encode("latin-1", errors="replace") + b"\r\n"

        return head + bytes(response.body)


def serialize_response(response: ResponseSpec, server_name: str = DEFAULT_SERVER_NAME) -> bytes:
    """Serialize with a throwaway ResponseWriter."""
    return ResponseWriter(server_name).write(response)


# =============================================================================
# HTML PAGES
# =============================================================================

HOME_LINK = "<p><a href='/'>Back to home</a></p>"


def html_page(title: str, content: str) -> str:
    """Wrap content in the minimal HTML document every page shares."""
    return (
        "<!doctype html><html><head><meta charset='utf-8'>"
        f"<title>{title}</title></head>"
        "<body style='font-family: sans-serif'>"
        f"{content}"
        "</body></html>"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the fixed responses the router and connection handler
# fall back to. Echoed values are inserted exactly as received.
#
# =============================================================================

def no_content() -> ResponseSpec:
    """204 No Content with an empty body."""
    return ResponseSpec.for_status(HTTPStatus.NO_CONTENT, content_type=TEXT_CONTENT_TYPE)


def bad_request() -> ResponseSpec:
    """400 for an unterminated header block or a malformed request line."""
    return ResponseSpec.for_status(HTTPStatus.BAD_REQUEST, "<h1>400 Bad Request</h1>")


def not_found(path: str) -> ResponseSpec:
    """404 echoing the requested path."""
    body = html_page(
        "404",
        "<h1>404 Not Found</h1>"
        f"<p>Path: {path}</p>"
        f"{HOME_LINK}",
    )
    return ResponseSpec.for_status(HTTPStatus.NOT_FOUND, body)


def method_not_allowed(method: str) -> ResponseSpec:
    """405 echoing the received method."""
    body = html_page(
        "405",
        "<h1>405 Method Not Allowed</h1>"
        f"<p>Method: {method}</p>"
        "<p>Only GET is supported.</p>",
    )
    return ResponseSpec.for_status(HTTPStatus.METHOD_NOT_ALLOWED, body)


def internal_error() -> ResponseSpec:
    """500 for a route handler that raised. No details leak to the client."""
    return ResponseSpec.for_status(
        HTTPStatus.INTERNAL_SERVER_ERROR, "<h1>500 Internal Server Error</h1>"
    )
