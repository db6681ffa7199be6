"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

The server reads exactly ONE line from each connection, the request line.
Headers and body are never read.

    GET /docs/index.html HTTP/1.1
    ─┬─ ───────┬──────── ───┬────
     │         │            │
   Method     Path       Version

=============================================================================
STRICT SHAPE
=============================================================================

The line is split on single spaces and must produce exactly three tokens.
There is no 400 Bad Request: a malformed line is dropped silently and the
connection is closed without writing a single byte.

    "GET / HTTP/1.1"          →  ("GET", "/", "HTTP/1.1")
    "GET /"                   →  MalformedRequestError (2 tokens)
    "GET / HTTP/1.1 extra"    →  MalformedRequestError (4 tokens)
    "GET  / HTTP/1.1"         →  MalformedRequestError (empty token counts)
    ""                        →  MalformedRequestError (1 token)

Method and version are carried along but never validated. The path is
taken verbatim: no URL decoding, no query string splitting.

=============================================================================
"""

from dataclasses import dataclass


class MalformedRequestError(ValueError):
    """
    Raised when the request line does not have the METHOD PATH VERSION shape.

    The handler catches this and closes the connection with no response.
    """


@dataclass(frozen=True)
class RequestLine:
    """
    The parsed first line of a request.

    Attributes:
        method: Request method, e.g. "GET". Not validated.
        path: Raw request path, e.g. "/a/b" or "/../etc/passwd".
        version: Protocol version token, e.g. "HTTP/1.1". Not validated.
    """

    method: str
    path: str
    version: str


def parse_request_line(line: str) -> RequestLine:
    """
    Parse a request line into its three tokens.

    Args:
        line: The request line with its line terminator already removed.

    Returns:
        Parsed RequestLine.

    Raises:
        MalformedRequestError: If splitting on " " does not give 3 tokens.
    """
    # str.split(" ") keeps empty tokens, so doubled spaces change the count
    tokens = line.split(" ")
    if len(tokens) != 3:
        raise MalformedRequestError(
            f"Expected 3 tokens in request line, got {len(tokens)}: {line!r}"
        )

    method, path, version = tokens
    return RequestLine(method=method, path=path, version=version)
