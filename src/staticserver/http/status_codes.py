"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server speaks a deliberately small subset of HTTP/1.1. Exactly five
status codes ever leave it:

    ┌──────┬─────────────────────────┬──────────────────────────────────────┐
    │ Code │ Phrase                  │ When                                 │
    ├──────┼─────────────────────────┼──────────────────────────────────────┤
    │ 200  │ OK                      │ File found and read                  │
    │ 302  │ Found                   │ GET /redirect (fixed special case)   │
    │ 403  │ Forbidden               │ Path escapes the root directory      │
    │ 404  │ Not found               │ Missing file or directory w/o index  │
    │ 500  │ Internal Server Error   │ I/O failure while handling           │
    └──────┴─────────────────────────┴──────────────────────────────────────┘

Note the lowercase "found" in 404: the error message doubles as the reason
phrase, so the status line reads "HTTP/1.1 404 Not found".

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes emitted by the server.

    IntEnum, so codes compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not found'
    """

    OK = 200
    FOUND = 302
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line (and as error body)."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
