"""
Networking core: the listening socket and the per-client connection wrapper.
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer


__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
