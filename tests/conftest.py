"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Dict, Generator, Tuple
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from staticserver import ServerConfig, StaticFileServer
from staticserver.core import Connection
from staticserver.handlers import handle


INDEX_HTML = b"<html><body>home</body></html>"
A_INDEX_HTML = b"<html><body>section a</body></html>"
DOCS_INDEX_HTML = b"<html><body>docs</body></html>"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))
BIN_BYTES = b"\x00\x01\x02binary\xff"
README_BYTES = b"plain readme, no extension"
SECRET_BYTES = b"root-level secret"
OUTSIDE_BYTES = b"outside the root"


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """
    A root directory laid out the way the server expects.

        tmp_path/
            outside.txt              (not under the root)
            site/                    ← root
                secret.txt           (under root, not under public)
                public/
                    index.html
                    a/index.html
                    docs/index.html
                    empty/
                    img.png
                    data.bin
                    README
    """
    (tmp_path / "outside.txt").write_bytes(OUTSIDE_BYTES)

    root = tmp_path / "site"
    public = root / "public"
    (public / "a").mkdir(parents=True)
    (public / "docs").mkdir()
    (public / "empty").mkdir()

    (root / "secret.txt").write_bytes(SECRET_BYTES)
    (public / "index.html").write_bytes(INDEX_HTML)
    (public / "a" / "index.html").write_bytes(A_INDEX_HTML)
    (public / "docs" / "index.html").write_bytes(DOCS_INDEX_HTML)
    (public / "img.png").write_bytes(PNG_BYTES)
    (public / "data.bin").write_bytes(BIN_BYTES)
    (public / "README").write_bytes(README_BYTES)

    return root


def recv_all(sock: socket.socket) -> bytes:
    """Read until the peer closes."""
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def split_response(raw: bytes) -> Tuple[str, Dict[str, str], bytes]:
    """Split raw response bytes into (status line, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


@pytest.fixture
def exchange(site_root: Path) -> Callable[..., bytes]:
    """
    Run the handler over a socketpair, no listener involved.

    Returns a function taking the raw request bytes (and optionally a
    root directory string) and returning everything the handler wrote.
    """
    def _exchange(request: bytes, root: str = None) -> bytes:
        server_sock, client_sock = socket.socketpair()
        with client_sock:
            client_sock.sendall(request)
            client_sock.shutdown(socket.SHUT_WR)

            conn = Connection(socket=server_sock, address=("socketpair", 0))
            handle(conn, root if root is not None else str(site_root))

            return recv_all(client_sock)

    return _exchange


class RunningServer:
    """Server helper that runs in a background thread."""

    def __init__(self, server: StaticFileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.server_address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop accepting and wait for the accept loop to exit."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Open a connection, send `raw`, return everything received."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as sock:
            sock.sendall(raw)
            sock.shutdown(socket.SHUT_WR)
            return recv_all(sock)


@pytest.fixture
def running_server(site_root: Path) -> Generator[RunningServer, None, None]:
    """A live server on an OS-assigned port serving `site_root`."""
    server = StaticFileServer(ServerConfig(
        host="127.0.0.1",
        port=0,
        root_dir=str(site_root),
        log_level="WARNING",
    ))

    srv = RunningServer(server)
    srv.start()

    yield srv

    srv.stop()


@pytest.fixture
def parse_response() -> Callable[[bytes], Tuple[str, Dict[str, str], bytes]]:
    """Fixture form of split_response() for use inside tests."""
    return split_response
