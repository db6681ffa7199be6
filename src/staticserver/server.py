"""
=============================================================================
STATIC FILE SERVER
=============================================================================

Ties the listening socket to the request handler.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                     ┌────────────────────┐                          │
    │                     │  StaticFileServer  │                          │
    │                     └─────────┬──────────┘                          │
    │                               │                                      │
    │                               ▼                                      │
    │                     ┌────────────────────┐                          │
    │                     │   SocketServer     │   accept() loop           │
    │                     └─────────┬──────────┘                          │
    │                               │  one new thread per connection       │
    │             ┌─────────────────┼─────────────────┐                   │
    │             ▼                 ▼                 ▼                   │
    │      ┌────────────┐    ┌────────────┐    ┌────────────┐             │
    │      │  handle()  │    │  handle()  │    │  handle()  │             │
    │      └────────────┘    └────────────┘    └────────────┘             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THREAD PER CONNECTION
=============================================================================

The accept loop never waits for a handler. Each connection gets its own
daemon thread, there is no pool and no cap. Handlers share nothing
mutable: the content-type table is read-only and the root directory is
a plain string, so no locks are needed.

A slow client ties up only its own thread.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import handle


logger = logging.getLogger(__name__)


class StaticFileServer:
    """
    Static file server: one listener, one thread per connection.

    Usage:
        server = StaticFileServer(ServerConfig(root_dir="./site", port=9090))
        server.run()   # Blocks until the process is killed
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults to root "." on port 9090.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)

    @property
    def root_directory(self) -> str:
        return self.config.root_dir

    @property
    def server_address(self) -> Tuple[str, int]:
        """Bound (host, port); reflects the real port when configured as 0."""
        return self._socket_server.server_address

    def run(self):
        """
        Bind and serve forever.

        Raises:
            OSError: If the port cannot be bound. Nothing is retried.
        """
        self._setup_logging()

        self._socket_server.bind()

        _, port = self.server_address
        print(f"Server is running on port {port}")
        logger.info(f"Serving {self.root_directory!r} on port {port}")

        self._socket_server.start(self._handle_connection)

    def shutdown(self):
        """Stop accepting. In-flight handlers finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is up (for tests and embedding)."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("staticserver").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """Start a handler thread for `conn` and return immediately."""
        thread = threading.Thread(
            target=handle,
            args=(conn, self.root_directory),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()


def start(port: int, root_directory: str, host: str = "0.0.0.0") -> None:
    """
    Serve `root_directory` on `port` until the process is killed.

    Raises:
        OSError: If the port is unavailable.
    """
    StaticFileServer(ServerConfig(host=host, port=port, root_dir=root_directory)).run()
