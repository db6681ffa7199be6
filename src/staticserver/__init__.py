"""
=============================================================================
STATICSERVER - Minimal HTTP/1.1 Static File Server
=============================================================================

Serves files from <root>/public over raw sockets, one thread per
connection, one request per connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Listener             bind, accept forever, spawn a thread each    │
    │   Request handler      read line → resolve path → respond → close   │
    │                                                                      │
    │   Responses:  200 file     302 /redirect     403 outside root        │
    │               404 missing  500 I/O failure                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    from staticserver import start
    start(9090, "/var/www/site")       # serves /var/www/site/public

Or from the shell:

    python -m staticserver --root /var/www/site --port 9090

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import StaticFileServer, start
from .handlers import StaticFileHandler, handle


__all__ = [
    "__version__",
    "ServerConfig",
    "StaticFileServer",
    "StaticFileHandler",
    "start",
    "handle",
]
