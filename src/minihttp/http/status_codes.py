"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this responder can emit, with their reason
phrases for the status line.

    ┌──────┬────────────────────────┬──────────────────────────────────────┐
    │ Code │ Phrase                 │ When                                 │
    ├──────┼────────────────────────┼──────────────────────────────────────┤
    │ 200  │ OK                     │ Known GET route                      │
    │ 204  │ No Content             │ /favicon.ico                         │
    │ 400  │ Bad Request            │ Unterminated / malformed request line│
    │ 404  │ Not Found              │ GET to an unknown path               │
    │ 405  │ Method Not Allowed     │ Anything but GET                     │
    │ 500  │ Internal Server Error  │ A route handler raised               │
    └──────┴────────────────────────┴──────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare and format as plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.OK.phrase
        'OK'
    """

    OK = 200
    NO_CONTENT = 204

    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
