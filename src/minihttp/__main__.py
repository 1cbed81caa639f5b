"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Defaults (0.0.0.0:8080)
    python -m minihttp

    # Custom port, verbose logging
    python -m minihttp --port 3000 --log-level DEBUG

    # Bound the wait for slow clients
    python -m minihttp --timeout 10

Every option falls back to the matching MINIHTTP_* environment variable
(see ServerConfig.from_env), then to the built-in default.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal single-connection HTTP responder on raw sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                        # Run with defaults
  python -m minihttp --port 3000            # Custom port
  python -m minihttp --host 127.0.0.1       # Localhost only
  python -m minihttp --log-level DEBUG      # Dump incoming requests
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Per-connection read timeout in seconds (default: wait forever)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--max-request-size",
        type=int,
        default=defaults.max_request_size,
        help=f"Header block cap in bytes (default: {defaults.max_request_size})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}",
    )
    return parser


def main(argv=None) -> int:
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid MINIHTTP_* environment variable: {e}", file=sys.stderr)
        return 2

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        max_request_size=args.max_request_size,
        log_level=args.log_level,
    )

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
