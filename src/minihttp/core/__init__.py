"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The socket plumbing underneath the HTTP logic:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates, binds and listens on the TCP socket                     │
    │  • Accepts ONE client at a time and hands it off                    │
    │  • Stops cleanly on SIGTERM / SIGINT                                │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Connection(client_socket)
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • recv() / send_response() over the client socket                  │
    │  • Tracks AWAITING_HEADERS → ... → CLOSED                           │
    │  • close() is idempotent and runs on every exit path                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
