"""
=============================================================================
HANDLERS MODULE
=============================================================================

The request handler: takes one accepted connection and the root
directory, answers exactly one request, and closes the connection.

    from staticserver.handlers import handle
    handle(conn, "/var/www/site")

The individual pipeline steps are exported too, for callers (and tests)
that want to resolve a path without a socket.

=============================================================================
"""

from .static import (
    StaticFileHandler,
    PathTraversalError,
    Outcome,
    Resolution,
    handle,
    normalize_request_path,
    candidate_path,
    check_within_root,
    resolve_target,
    build_response,
)


__all__ = [
    "StaticFileHandler",
    "PathTraversalError",
    "Outcome",
    "Resolution",
    "handle",
    "normalize_request_path",
    "candidate_path",
    "check_within_root",
    "resolve_target",
    "build_response",
]
