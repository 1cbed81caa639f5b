"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the responder needs to know about its environment lives in one
explicit value, ServerConfig, which is handed to the server and from there
to the connection handler. Nothing in the request path reads module-level
globals, so the router and response writer can be tested without a socket.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m minihttp --port 3000                             │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── MINIHTTP_PORT=3000 python -m minihttp                      │
    │                                                                      │
    │   3. Defaults in this file                                          │
    │      └── 0.0.0.0:8080, backlog 16, 8 KB request cap                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


# Smallest cap that can still hold "\r\n\r\n"
MIN_REQUEST_SIZE = 4


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP responder.

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    FRAMING
    - max_request_size

    LOGGING / IDENTITY
    - log_level, server_name
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind to. All interfaces by default."""

    port: int = 8080
    """
    Port to listen on.
    0 asks the OS for a free ephemeral port (handy in tests).
    """

    backlog: int = 16
    """Connections the kernel may queue while we handle the current one."""

    buffer_size: int = 4096
    """Bytes requested per recv() call."""

    timeout: Optional[float] = None
    """
    Read timeout for an accepted connection, in seconds.
    None = block until the peer sends or closes. A silent peer then stalls
    the whole (sequential) server; set a value to bound that.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FRAMING
    # ─────────────────────────────────────────────────────────────────────

    max_request_size: int = 8192
    """
    Hard cap on the header block, in bytes.
    A request that has not terminated its headers by then gets a 400.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    server_name: str = "mini-py-http/0.1"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        MINIHTTP_HOST               Bind address (default: 0.0.0.0)
        MINIHTTP_PORT               Listen port (default: 8080)
        MINIHTTP_MAX_REQUEST_SIZE   Header block cap (default: 8192)
        MINIHTTP_TIMEOUT            Read timeout in seconds (default: none)
        MINIHTTP_LOG_LEVEL          Logging level (default: INFO)
        """
        timeout = os.getenv("MINIHTTP_TIMEOUT")
        return cls(
            host=os.getenv("MINIHTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("MINIHTTP_PORT", "8080")),
            max_request_size=int(os.getenv("MINIHTTP_MAX_REQUEST_SIZE", "8192")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO"),
        )

    @property
    def level(self) -> int:
        """Numeric logging level for log_level."""
        return logging.getLevelName(self.log_level.upper())

    def validate(self) -> None:
        """
        Validate configuration values.

        Called from HTTPServer.__init__ so a bad value fails at startup
        rather than on the first connection.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_request_size < MIN_REQUEST_SIZE:
            raise ValueError(f"max_request_size must be >= {MIN_REQUEST_SIZE}")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not isinstance(self.level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
