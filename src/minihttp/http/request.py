"""
=============================================================================
HTTP REQUEST LINE PARSER
=============================================================================

Turns a framed header block into a ParsedRequestLine. Only the first line
is looked at; header fields and any body are ignored.

=============================================================================
REQUEST LINE ANATOMY
=============================================================================

    ┌─ REQUEST LINE ─────────────────────────────────────────────────┐
    │                                                                 │
    │    GET /hello HTTP/1.1\r\n                                     │
    │    ─┬─ ───┬── ────┬───                                         │
    │     │     │       │                                             │
    │   Method Target  Version                                        │
    │                                                                 │
    └─────────────────────────────────────────────────────────────────┘

The line is split on runs of whitespace (spaces or tabs). Exactly three
tokens must come out, otherwise the request is malformed and answered
with 400 Bad Request:

    "GET /hello HTTP/1.1"      → ("GET", "/hello", "HTTP/1.1")
    "GET\t/hello  HTTP/1.1"    → ("GET", "/hello", "HTTP/1.1")
    "GET /hello"               → HTTPParseError
    "GET /a b HTTP/1.1"        → HTTPParseError
    ""                         → HTTPParseError

The target is kept verbatim: no percent-decoding and no query-string
splitting, so "/hello?x=1" stays "/hello?x=1" and later falls through to
404 in the router.

=============================================================================
"""

import logging
from dataclasses import dataclass

from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


LINE_TERMINATOR = b"\r\n"


class HTTPParseError(Exception):
    """
    Raised when the request line cannot be parsed.

    Carries the HTTP status that should be returned to the client.
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ParsedRequestLine:
    """
    The three tokens of an HTTP request line.

    Attributes:
        method: Request method, case preserved ("GET", "POST", "get", ...)
        path: Request target exactly as sent
        version: Protocol token ("HTTP/1.1"); not validated
    """

    method: str
    path: str
    version: str

    def __str__(self) -> str:
        return f"{self.method} {self.path} {self.version}"


class RequestParser:
    """
    Parses the request line out of a framed header block.

        parser = RequestParser()
        line = parser.parse(b"GET /hello HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n")
        line.path   # "/hello"
    """

    TOKEN_COUNT = 3

    def __init__(self, encoding: str = "utf-8"):
        """
        Args:
            encoding: Used to decode the request line. Undecodable bytes
                      are carried as surrogate escapes, so they round-trip
                      unchanged when a page echoes them.
        """
        self.encoding = encoding

    def parse(self, header_block: bytes) -> ParsedRequestLine:
        """
        Parse the first line of header_block.

        Raises:
            HTTPParseError: No CRLF in the block, or the first line does not
                            split into exactly three tokens.
        """
        line_end = header_block.find(LINE_TERMINATOR)
        if line_end == -1:
            raise HTTPParseError("Malformed request line: no line terminator")

        # bytes.split() only splits on ASCII whitespace, so a multi-byte
        # character in the target never breaks it apart
        tokens = header_block[:line_end].split()

        if len(tokens) != self.TOKEN_COUNT:
            raise HTTPParseError(
                f"Malformed request line: expected {self.TOKEN_COUNT} tokens, got {len(tokens)}"
            )

        method, path, version = (
            token.decode(self.encoding, errors="surrogateescape") for token in tokens
        )
        parsed = ParsedRequestLine(method=method, path=path, version=version)
        logger.debug(f"Parsed: method={method}, path={path}, version={version}")
        return parsed


def parse_request_line(header_block: bytes) -> ParsedRequestLine:
    """Convenience function using a default RequestParser."""
    return RequestParser().parse(header_block)
