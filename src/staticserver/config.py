"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

The request handler treats the root directory and port as opaque inputs.
This module is where they come from.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m staticserver --port 3000 --root ./site          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── STATIC_PORT=3000 python -m staticserver                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │      └── root ".", port 9090                                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the static file server.

    Development:
        ServerConfig(root_dir="./site", port=9090, log_level="DEBUG")

    Tests:
        ServerConfig(host="127.0.0.1", port=0)   # OS picks a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to. Defaults to all interfaces.
    """

    port: int = 9090
    """
    The port number to listen on. 0 lets the OS assign a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections before the OS refuses new ones.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "."
    """
    Root directory. Files are served from <root_dir>/public and nothing
    outside <root_dir> is ever served. Kept as the string the operator
    gave, because the /redirect Location header is built from it verbatim.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_line_size: int = 8192
    """
    Longest request line accepted, in bytes. Longer lines are dropped
    like any other malformed request.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

            STATIC_HOST       Bind host (default: 0.0.0.0)
            STATIC_PORT       Port (default: 9090)
            STATIC_ROOT       Root directory (default: .)
            STATIC_LOG_LEVEL  Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("STATIC_HOST", "0.0.0.0"),
            port=int(os.getenv("STATIC_PORT", "9090")),
            root_dir=os.getenv("STATIC_ROOT", "."),
            log_level=os.getenv("STATIC_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails before the socket is bound.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.max_line_size < 64:
            raise ValueError("max_line_size must be >= 64")

        if not self.root_dir:
            raise ValueError("root_dir must not be empty")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}."
            )
