"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

The "ears" of the server: binds the listening socket and accepts
connections, handing each one off without waiting for it.

SOCKET LIFECYCLE (Server Side):
────────────────────────────────

    1. socket()    Create a TCP socket
    2. bind()      Reserve IP:PORT (fails if the port is taken → fatal)
    3. listen()    OS starts queueing incoming connections
    4. accept()    BLOCKS until a client connects, returns a NEW socket
    5. close()     Release the listening socket

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    └───────────┬───────────┘
                                │ accept()
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
    ┌───────────┐         ┌───────────┐         ┌───────────┐
    │ Client 1  │         │ Client 2  │         │ Client 3  │
    └───────────┘         └───────────┘         └───────────┘

=============================================================================
STOPPING
=============================================================================

There is no signal handling and no draining of in-flight requests: the
process is meant to run until it is killed. shutdown() only exists so an
embedding program (or a test) can stop the accept loop. accept() uses a
1-second timeout so the loop notices the running flag going False.

=============================================================================
"""

import socket
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def on_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(on_connection)  # Blocks
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is bound and listening
        self._ready_event = threading.Event()

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def server_address(self) -> Tuple[str, int]:
        """
        The address actually bound.

        When the configured port is 0 the OS picks one; this returns it.
        """
        if self._socket is None:
            return (self.config.host, self.config.port)
        return self._socket.getsockname()[:2]

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart immediately without "Address already in use"
        # while old sockets sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # TCP_NODELAY: send the response as soon as it is written
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # Poll interval for the running flag
        sock.settimeout(1.0)

        return sock

    def bind(self) -> None:
        """
        Bind and listen.

        Raises:
            OSError: If the port is unavailable. The caller treats this
                     as fatal.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections until shutdown() is called.

        Binds first if bind() has not been called yet.

        Args:
            connection_handler: Called with each new Connection. It must
                                return quickly; the server spawns a thread
                                in it.
        """
        if self._socket is None:
            self.bind()

        self._running = True
        self._ready_event.set()

        host, port = self.server_address
        logger.info(f"Listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Main loop: accept, wrap, hand off, repeat."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                # Usually the socket was closed under us during shutdown
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                max_line_size=self.config.max_line_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop the accept loop. Idempotent; in-flight connections continue."""
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Close the listening socket."""
        self._running = False
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the server is listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
