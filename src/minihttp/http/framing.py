"""
=============================================================================
REQUEST FRAMING
=============================================================================

Finds the end of an HTTP header block in a raw TCP byte stream.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

TCP only guarantees that bytes arrive in order and intact. It does not
preserve the boundaries of the sender's writes:

    Client sends:
        "GET /hello HTTP/1.1\r\n\r\n"

    Server might receive:
        recv() → "GET /hel"
        recv() → "lo HTTP/1.1\r\n\r"      ← terminator split here
        recv() → "\n"

So we accumulate everything we read and search the ACCUMULATOR, not the
latest chunk, for the header terminator. The search restarts three bytes
before the newest chunk so a terminator straddling two reads is still
found without rescanning the whole buffer.

=============================================================================
STOP CONDITIONS
=============================================================================

    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ Condition                    │ Result                               │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ \r\n\r\n found               │ complete, block includes terminator  │
    │ accumulator reached max_size │ incomplete                           │
    │ recv() returned b""          │ incomplete (peer closed)             │
    │ InterruptedError             │ retried                              │
    │ any other OSError            │ propagates (fatal for connection)    │
    └──────────────────────────────┴──────────────────────────────────────┘

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Protocol


logger = logging.getLogger(__name__)


HEADER_TERMINATOR = b"\r\n\r\n"


class ByteStream(Protocol):
    """Anything with a socket-style recv(). socket.socket and Connection both qualify."""

    def recv(self, bufsize: int) -> bytes: ...


@dataclass(frozen=True)
class FrameResult:
    """
    Outcome of reading one header block.

    Attributes:
        complete: True if the terminator was found.
        header_block: Bytes up to and including the terminator, or
                      everything read so far when incomplete.
        remainder: Bytes read past the terminator (start of a body the
                   server does not interpret).
    """

    complete: bool
    header_block: bytes
    remainder: bytes = b""

    @property
    def size(self) -> int:
        """Total bytes read, header block plus remainder."""
        return len(self.header_block) + len(self.remainder)


class HeaderFramer:
    """
    Reads from a stream until a complete header block is buffered.

    Usage:
        framer = HeaderFramer(max_size=8192)
        result = framer.read(conn)
        if not result.complete:
            ...  # respond 400
    """

    def __init__(self, max_size: int = 8192, read_size: int = 4096):
        """
        Args:
            max_size: Cap on accumulated bytes. Never exceeded.
            read_size: Upper bound for a single recv() call.
        """
        if max_size < len(HEADER_TERMINATOR):
            raise ValueError(f"max_size must be >= {len(HEADER_TERMINATOR)}")
        if read_size < 1:
            raise ValueError("read_size must be >= 1")
        self.max_size = max_size
        self.read_size = read_size

    def read(self, stream: ByteStream) -> FrameResult:
        """
        Accumulate bytes from stream until the header terminator, the cap,
        or end-of-input.

        Raises:
            OSError: A read failed for any reason other than an interrupt.
        """
        buffer = bytearray()

        while len(buffer) < self.max_size:
            chunk = self._recv(stream, min(self.read_size, self.max_size - len(buffer)))
            if not chunk:
                logger.debug(f"Peer closed after {len(buffer)} bytes without header terminator")
                break

            # Terminator may straddle the previous chunk and this one
            search_from = max(0, len(buffer) - (len(HEADER_TERMINATOR) - 1))
            buffer += chunk

            end = buffer.find(HEADER_TERMINATOR, search_from)
            if end != -1:
                end += len(HEADER_TERMINATOR)
                return FrameResult(
                    complete=True,
                    header_block=bytes(buffer[:end]),
                    remainder=bytes(buffer[end:]),
                )

        return FrameResult(complete=False, header_block=bytes(buffer))

    @staticmethod
    def _recv(stream: ByteStream, size: int) -> bytes:
        # EINTR is retried; everything else is the caller's problem
        while True:
            try:
                return stream.recv(size)
            except InterruptedError:
                logger.debug("recv() interrupted, retrying")
                continue


def read_header_block(stream: ByteStream, max_size: int = 8192, read_size: int = 4096) -> FrameResult:
    """Convenience wrapper: frame one header block with a throwaway HeaderFramer."""
    return HeaderFramer(max_size=max_size, read_size=read_size).read(stream)
