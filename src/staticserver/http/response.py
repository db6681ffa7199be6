"""
=============================================================================
HTTP RESPONSE SERIALIZATION
=============================================================================

Every response the server sends has the same framing:

    HTTP/1.1 200 OK\\r\\n                 ← Status line
    Content-Type: text/html\\r\\n         ← Headers, in insertion order
    Content-Length: 1234\\r\\n
    \\r\\n                                ← Blank line ends the headers
    <raw body bytes>                    ← Exactly Content-Length bytes

Only three header names ever appear: Content-Type, Content-Length and
Location. Nothing is added behind the caller's back (no Date, no Server,
no Connection), so what a helper puts in `headers` is exactly what goes
on the wire.

=============================================================================
RESPONSE SHAPES
=============================================================================

    ok_file(content, type)     200, Content-Type + Content-Length + bytes
    redirect(location)         302, Location only, empty body
    error_response(status)     403/404/500, text/plain, body = phrase

The error body IS the reason phrase ("Forbidden", "Not found",
"Internal Server Error"); there is no separate error page.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Use the module-level helpers to build one; they set exactly the
    headers each response shape needs.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 Not found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize status line, headers, blank line and body.

        Header text is ASCII in practice; it is encoded as UTF-8 so a
        non-ASCII Location cannot raise here.
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


def ok_file(content: bytes, content_type: str) -> HTTPResponse:
    """
    200 OK carrying a file's bytes.

    Content-Length is always the length of `content`, so the header can
    never disagree with the body that follows it.
    """
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers={
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
        },
        body=content,
    )


def redirect(location: str) -> HTTPResponse:
    """302 Found with a Location header and no body."""
    return HTTPResponse(
        status=HTTPStatus.FOUND,
        headers={"Location": location},
    )


def error_response(status: HTTPStatus) -> HTTPResponse:
    """Plain-text error response for 403, 404 or 500; the body is the phrase."""
    body = status.phrase.encode("utf-8")
    return HTTPResponse(
        status=status,
        headers={
            "Content-Type": "text/plain",
            "Content-Length": str(len(body)),
        },
        body=body,
    )


def forbidden() -> HTTPResponse:
    """403 Forbidden."""
    return error_response(HTTPStatus.FORBIDDEN)


def not_found() -> HTTPResponse:
    """404 Not found."""
    return error_response(HTTPStatus.NOT_FOUND)


def internal_error() -> HTTPResponse:
    """500 Internal Server Error."""
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR)
