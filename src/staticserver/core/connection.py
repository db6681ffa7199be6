"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the three operations the handler
needs: read one line, send bytes, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does not preserve message boundaries. The request line

    GET /index.html HTTP/1.1\\r\\n

may arrive in one recv() or in several:

    recv() → "GET /ind"
    recv() → "ex.html HTTP/1.1\\r\\n"

So we read through a buffered file object (socket.makefile) and let
readline() collect bytes until the "\\n" terminator arrives, or the
client closes its side.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

There is no keep-alive. Every connection goes through the same short
life, and CLOSED is the only way out:

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
               │                                      ▲
               └──────────── (abort, no response) ────┘

=============================================================================
"""

import socket
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, BinaryIO


logger = logging.getLogger(__name__)

# Bounds on the unread request bytes close() discards before closing
DRAIN_LIMIT = 64 * 1024
DRAIN_TIMEOUT = 2.0


class ConnectionState(Enum):
    """Connection lifecycle states."""
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Reading the request line
    PROCESSING = "processing"  # Resolving the path
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current lifecycle state.
        max_line_size: Longest request line accepted, in bytes.
    """

    socket: socket.socket
    address: tuple
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    max_line_size: int = 8192

    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # Blocking with no timeout: a stalled client holds its own thread only
        self.socket.settimeout(None)

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> Optional[str]:
        """
        Read the request line.

        The line ends at "\\n"; a trailing "\\r\\n" or "\\n" is stripped.
        A final line without a terminator (client half-closed after
        sending it) is returned as-is.

        Returns:
            The decoded line, or None if the stream ended before any
            byte arrived.

        Raises:
            ValueError: If the line is longer than max_line_size.
            OSError: On a socket read error.
        """
        self.state = ConnectionState.READING

        if self._reader is None:
            self._reader = self.socket.makefile("rb")

        # One byte past the limit tells "exactly at limit" from "too long"
        raw = self._reader.readline(self.max_line_size + 1)
        if not raw:
            return None

        if len(raw) > self.max_line_size:
            raise ValueError(f"Request line exceeds {self.max_line_size} bytes")

        if raw.endswith(b"\r\n"):
            raw = raw[:-2]
        elif raw.endswith(b"\n"):
            raw = raw[:-1]

        return raw.decode("utf-8", errors="replace")

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> None:
        """
        Send all of `data` to the client.

        Uses sendall() so a partially filled kernel buffer can't truncate
        the response.

        Raises:
            OSError: If the client is gone or the write fails.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        shutdown(SHUT_WR) sends FIN first so the client sees end-of-stream
        right after the last response byte.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        # Headers we never read would make close() send RST and could
        # discard response bytes still in flight, so drain them first.
        # Both byte count and time are capped, so a client trickling bytes
        # cannot keep this thread alive.
        drained = 0
        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            self.socket.settimeout(0.5)
            while drained < DRAIN_LIMIT and time.monotonic() < deadline:
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass

        if self._reader is not None:
            try:
                self._reader.close()
            except OSError:
                pass
            self._reader = None

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False
