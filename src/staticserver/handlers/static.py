"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves files from <root>/public, one request per connection.

=============================================================================
THE PIPELINE
=============================================================================

Each step is a small function that can be tested without a socket. Only
the first and last steps touch the network.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   conn.read_line()            "GET /a/b HTTP/1.1"          (I/O)    │
    │        │                                                             │
    │        ▼                                                             │
    │   parse_request_line()        RequestLine(path="/a/b")              │
    │        │    └── wrong shape → close, send NOTHING                   │
    │        ▼                                                             │
    │   normalize_request_path()    "/" → "/index.html"                   │
    │        │                      "/a..." dir → ".../index.html"        │
    │        ▼                                                             │
    │   candidate_path()            <root>/public/a/b                     │
    │        │                                                             │
    │        ▼                                                             │
    │   check_within_root()         outside root → 403 Forbidden          │
    │        │                                                             │
    │        ▼                                                             │
    │   resolve_target()            SERVE / REDIRECT / NOT_FOUND          │
    │        │                                                             │
    │        ▼                                                             │
    │   build_response()            reads the file, picks Content-Type    │
    │        │                                                             │
    │        ▼                                                             │
    │   conn.send() + close         any failure → 500, always close (I/O) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    GET /../../../etc/passwd HTTP/1.1

    <root>/public/../../../etc/passwd  ──resolve()──►  /etc/passwd

The candidate is canonicalized (".." collapsed, symlinks followed) and
must still be the root directory or something below it. The comparison
is by path components, so a sibling like "<root>-backup" does not pass
just because it shares a string prefix.

The guard is the ROOT, not root/public: "/../notes.txt" may read
<root>/notes.txt. Everything outside <root> is refused with 403.

=============================================================================
SPECIAL CASES
=============================================================================

    /                    served as /index.html
    /a...  (a directory) gets /index.html appended before resolving
    any other directory  falls back to its index.html, else 404
    /redirect            302 to <root string> + "/302-redirect.png"
                         (only when no such file exists)

The redirect Location is the configured root string glued to a file
name. It is a filesystem-looking path, not an absolute URL, and is sent
exactly as built.

=============================================================================
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..core.connection import Connection, ConnectionState
from ..http.request import RequestLine, MalformedRequestError, parse_request_line
from ..http.response import HTTPResponse, ok_file, redirect, forbidden, not_found, internal_error
from ..http.mime_types import get_content_type


logger = logging.getLogger(__name__)


PUBLIC_DIR = "public"
INDEX_FILE = "index.html"
REDIRECT_PATH = "/redirect"
REDIRECT_TARGET = "/302-redirect.png"


class PathTraversalError(Exception):
    """
    Raised when a candidate path canonicalizes to somewhere outside the root.

    Never fatal: the handler answers 403 Forbidden.
    """

    def __init__(self, candidate: Path, root: Path):
        super().__init__(f"{candidate} is outside {root}")
        self.candidate = candidate
        self.root = root


class Outcome(Enum):
    """What to answer once the path is known to be inside the root."""
    SERVE = "serve"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolve_target().

    Attributes:
        outcome: Which response shape to build.
        file_path: File to read when outcome is SERVE.
        location: Location header value when outcome is REDIRECT.
    """

    outcome: Outcome
    file_path: Optional[Path] = None
    location: Optional[str] = None


# =============================================================================
# PIPELINE STEPS
# =============================================================================

def _strip_leading_slash(path: str) -> str:
    return path[1:] if path.startswith("/") else path


# pathlib only swallows a few errnos (ENOENT, ENOTDIR, ...). Anything else,
# such as ENAMETOOLONG or EACCES, still means there is nothing to serve.
def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except (OSError, ValueError):
        return False


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except (OSError, ValueError):
        return False


def normalize_request_path(path: str, public_dir: Union[str, Path]) -> str:
    """
    Apply the default-document rewrites to a raw request path.

    - "/" becomes "/index.html".
    - A path starting with "/a" that names an existing directory under
      public_dir gets "/index.html" appended.
    - Anything else is returned unchanged, even if it names a directory;
      resolve_target() handles those.

    Args:
        path: Raw path token from the request line.
        public_dir: The <root>/public directory.

    Returns:
        The rewritten request path.
    """
    if path == "/":
        return "/" + INDEX_FILE

    if path.startswith("/a"):
        if _is_dir(Path(public_dir) / _strip_leading_slash(path)):
            return path + "/" + INDEX_FILE

    return path


def candidate_path(public_dir: Union[str, Path], path: str) -> Path:
    """
    Join the request path under public_dir.

    No normalization happens here; ".." and absolute-looking segments are
    left for check_within_root() to judge.
    """
    return Path(public_dir) / _strip_leading_slash(path)


def check_within_root(candidate: Path, root: Union[str, Path]) -> Path:
    """
    Traversal guard.

    Args:
        candidate: Path built by candidate_path().
        root: The root directory.

    Returns:
        The canonical form of candidate.

    Raises:
        PathTraversalError: If the canonical candidate is not the root or
                            below it, or cannot be canonicalized at all.
    """
    root_path = Path(root).resolve()
    try:
        resolved = candidate.resolve()
    except ValueError:
        # e.g. an embedded NUL byte; nothing provably inside the root
        raise PathTraversalError(candidate, root_path)

    try:
        resolved.relative_to(root_path)
    except ValueError:
        raise PathTraversalError(resolved, root_path)

    return resolved


def resolve_target(request_path: str, candidate: Path, root_directory: str) -> Resolution:
    """
    Decide what to answer for a candidate that passed the traversal guard.

    Args:
        request_path: Path after normalize_request_path().
        candidate: Path built by candidate_path().
        root_directory: The root directory exactly as configured; the
                        redirect Location is built from this string.

    Returns:
        A Resolution. Only SERVE carries a file_path.
    """
    if _exists(candidate) and not _is_dir(candidate):
        return Resolution(Outcome.SERVE, file_path=candidate)

    # Missing, or a directory
    if request_path == REDIRECT_PATH:
        return Resolution(Outcome.REDIRECT, location=root_directory + REDIRECT_TARGET)

    if _is_dir(candidate):
        index_path = candidate / INDEX_FILE
        if _exists(index_path):
            return Resolution(Outcome.SERVE, file_path=index_path)

    return Resolution(Outcome.NOT_FOUND)


def build_response(resolution: Resolution) -> HTTPResponse:
    """
    Turn a Resolution into a response, reading the file if there is one.

    Raises:
        OSError: If the file cannot be read. The caller answers 500.
    """
    if resolution.outcome is Outcome.REDIRECT:
        return redirect(resolution.location)

    if resolution.outcome is Outcome.NOT_FOUND:
        return not_found()

    content = resolution.file_path.read_bytes()
    return ok_file(content, get_content_type(resolution.file_path))


# =============================================================================
# HANDLER
# =============================================================================

class StaticFileHandler:
    """
    Handles one connection end to end.

    Holds nothing but the root directory, so a fresh instance per
    connection costs nothing and shares nothing.

    Usage:
        handler = StaticFileHandler("/var/www/site")
        handler.handle(conn)          # reads, answers, closes

        handler.respond(RequestLine("GET", "/", "HTTP/1.1"))   # no socket
    """

    def __init__(self, root_directory: str):
        """
        Args:
            root_directory: Root directory as configured. Kept as given
                            (not resolved) for the redirect Location.
        """
        self.root_directory = root_directory
        self.public_dir = Path(root_directory) / PUBLIC_DIR

    def respond(self, request: RequestLine) -> HTTPResponse:
        """
        Build the response for a parsed request line.

        Raises:
            OSError: If the resolved file cannot be read.
        """
        path = normalize_request_path(request.path, self.public_dir)
        candidate = candidate_path(self.public_dir, path)

        logger.info(f"serving from: {candidate.absolute()}")

        try:
            check_within_root(candidate, self.root_directory)
        except PathTraversalError as e:
            logger.warning(f"Path traversal attempt: {request.path!r} ({e})")
            return forbidden()

        return build_response(resolve_target(path, candidate, self.root_directory))

    def handle(self, conn: Connection) -> None:
        """
        Read one request from `conn`, answer it, close it.

        Never raises. Malformed or empty input closes silently; a failure
        after parsing is answered with 500 if the socket still allows it.
        """
        with conn:
            try:
                line = conn.read_line()
            except (OSError, ValueError) as e:
                logger.debug(f"[{conn.id}] Could not read request line: {e}")
                return

            if line is None:
                logger.debug(f"[{conn.id}] Client closed before sending a request")
                return

            try:
                request = parse_request_line(line)
            except MalformedRequestError as e:
                logger.debug(f"[{conn.id}] Dropping malformed request: {e}")
                return

            conn.state = ConnectionState.PROCESSING

            try:
                response = self.respond(request)
                conn.send(response.to_bytes())
            except Exception as e:
                logger.exception(f"[{conn.id}] Error handling {request.path!r}: {e}")
                self._send_internal_error(conn)
                return

            logger.debug(
                f"[{conn.id}] {request.method} {request.path} -> {int(response.status)}"
            )

    def _send_internal_error(self, conn: Connection) -> None:
        """Best-effort 500; a failure here is logged and dropped."""
        try:
            conn.send(internal_error().to_bytes())
        except OSError as e:
            logger.debug(f"[{conn.id}] Could not send 500 response: {e}")


def handle(connection: Connection, root_directory: str) -> None:
    """
    Handle one accepted connection against `root_directory`.

    Functional entry point used by the listener for each connection.
    """
    StaticFileHandler(root_directory).handle(connection)
