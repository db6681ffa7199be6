"""
HTTP protocol pieces: request-line parsing, response framing, status codes
and content types.
"""

from .status_codes import HTTPStatus
from .request import RequestLine, MalformedRequestError, parse_request_line
from .response import (
    HTTPResponse,
    ok_file,
    redirect,
    error_response,
    forbidden,
    not_found,
    internal_error,
)
from .mime_types import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, get_content_type, get_file_extension


__all__ = [
    "HTTPStatus",
    "RequestLine",
    "MalformedRequestError",
    "parse_request_line",
    "HTTPResponse",
    "ok_file",
    "redirect",
    "error_response",
    "forbidden",
    "not_found",
    "internal_error",
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    "get_content_type",
    "get_file_extension",
]
