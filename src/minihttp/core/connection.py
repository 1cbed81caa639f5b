"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: reading, writing, state tracking, and,
above all, making sure the socket is closed exactly once on every path.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

This server never keeps a connection alive. Each accepted socket goes
through the same short life:

    AWAITING_HEADERS ──► HEADERS_COMPLETE ──► DISPATCHED ──► CLOSED
           │                     │                             ▲
           │ incomplete          │ malformed                   │
           ▼                     ▼                             │
       CLIENT_ERROR ◄────────────┘                             │
           │   (400 sent)                                      │
           └───────────────────────────────────────────────────┘

    A read error in AWAITING_HEADERS jumps straight to CLOSED with no
    response at all.

=============================================================================
WHY CLOSING IS MORE THAN close()
=============================================================================

We read only the header block. If the client sent a body (or more junk
after an oversized request) those bytes are still sitting unread in the
kernel. Calling close() with unread data makes the kernel send RST instead
of FIN, and the RST can destroy our response before the client reads it.

So close() does:

    1. shutdown(SHUT_WR)   → FIN: "response complete"
    2. drain (bounded)     → read and discard what the client sent
    3. close()             → release the file descriptor

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


# Bounds for the pre-close drain (total time, total bytes)
DRAIN_TIMEOUT = 0.5
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    AWAITING_HEADERS = "awaiting_headers"  # Accepted, framing the header block
    HEADERS_COMPLETE = "headers_complete"  # Terminator seen, parsing request line
    DISPATCHED = "dispatched"              # Routed, response being written
    CLIENT_ERROR = "client_error"          # Answering 400
    CLOSED = "closed"                      # Socket released


@dataclass
class Connection:
    """
    A single accepted client connection.

    Exposes the duplex byte stream the protocol code needs (recv /
    send_response) and a close() that is safe to call any number of times.
    Use it as a context manager so the socket is released even when
    handling raises:

        with Connection(sock, addr) as conn:
            result = framer.read(conn)
            conn.send_response(data)
        # closed here, whatever happened

    Attributes:
        socket: The client socket (or anything socket-shaped, in tests).
        address: Client (ip, port).
        id: Short identifier for log lines.
        state: Current ConnectionState.
        created_at: Accept timestamp.
        bytes_received / bytes_sent: Traffic counters.
    """

    socket: socket.socket
    address: tuple = ("", 0)

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.AWAITING_HEADERS
    created_at: float = field(default_factory=time.time)

    timeout: Optional[float] = None

    bytes_received: int = 0
    bytes_sent: int = 0

    def __post_init__(self):
        # None keeps the socket fully blocking
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Seconds since accept."""
        return time.time() - self.created_at

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def recv(self, bufsize: int) -> bytes:
        """
        Read up to bufsize bytes.

        Returns b"" when the peer has closed. Errors (including timeouts
        and resets) propagate; the framer treats them as fatal.
        """
        data = self.socket.recv(bufsize)
        self.bytes_received += len(data)
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes with sendall().

        Returns:
            True if everything was written, False if the peer went away.
        """
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        self.bytes_sent += len(data)
        return True

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self) -> None:
        """
        Close the connection. Idempotent.

        Every step tolerates a socket that is already half-dead; the final
        socket.close() is always attempted.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass
        finally:
            self.state = ConnectionState.CLOSED

        logger.debug(
            f"[{self.id}] Connection closed "
            f"(recv={self.bytes_received}B sent={self.bytes_sent}B {self.age * 1000:.1f}ms)"
        )

    def _drain(self) -> int:
        """
        Read and discard unread input.

        Stops at end-of-input, after DRAIN_LIMIT bytes, or once DRAIN_TIMEOUT
        seconds have passed in total, however the bytes trickle in.
        """
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0
        try:
            while drained < DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # Timeout or reset: nothing more to drain
        return drained

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
