"""
=============================================================================
STATIC FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve ./public under the current directory on port 9090
    python -m staticserver

    # Another root and port
    python -m staticserver --root /var/www/site --port 8080

    # Same thing from the environment
    STATIC_ROOT=/var/www/site STATIC_PORT=8080 python -m staticserver

Flags win over environment variables, which win over the defaults.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig, LOG_LEVELS
from .server import StaticFileServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticserver",
        description="Minimal HTTP/1.1 static file server, one thread per connection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staticserver                         # ./public on port 9090
  python -m staticserver --root ./site           # ./site/public
  python -m staticserver --port 8080             # Custom port
        """
    )

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Root directory; files are served from <root>/public (default: .)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 9090)"
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"staticserver {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment first, then override with whatever flags were given."""
    config = ServerConfig.from_env()

    if args.root is not None:
        config.root_dir = args.root
    if args.port is not None:
        config.port = args.port
    if args.host is not None:
        config.host = args.host
    if args.log_level is not None:
        config.log_level = args.log_level

    return config


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = StaticFileServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        server.run()
    except KeyboardInterrupt:
        pass
    except OSError as e:
        # Bind failure: nothing to fall back to
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
