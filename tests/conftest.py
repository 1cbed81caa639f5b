"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator, Iterable, List, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig
from minihttp.core import Connection


class FakeSocket:
    """
    Socket stand-in that replays scripted recv() results.

    Each item in `chunks` is either bytes (returned by one recv call, split
    further if larger than the requested size) or an exception instance
    (raised by that recv call). Once the script runs out, recv() returns
    b"" like a peer that closed its side.
    """

    def __init__(self, chunks: Iterable = (), fail_send: bool = False):
        self._script: List = list(chunks)
        self.sent = b""
        self.fail_send = fail_send
        self.recv_sizes: List[int] = []
        self.closed = False
        self.shutdown_called = False
        self.timeout: Optional[float] = None
        self._draining = False

    def recv(self, bufsize: int) -> bytes:
        if self.closed:
            raise OSError("recv on closed socket")
        if self._draining:
            return b""
        self.recv_sizes.append(bufsize)
        if not self._script:
            return b""
        item = self._script.pop(0)
        if isinstance(item, BaseException):
            raise item
        if len(item) > bufsize:
            self._script.insert(0, item[bufsize:])
            item = item[:bufsize]
        return item

    def sendall(self, data: bytes) -> None:
        if self.fail_send:
            raise BrokenPipeError("peer went away")
        self.sent += data

    def settimeout(self, value: Optional[float]) -> None:
        self.timeout = value

    def shutdown(self, how: int) -> None:
        self.shutdown_called = True
        self._draining = True

    def close(self) -> None:
        self.closed = True


def parse_raw_response(data: bytes):
    """Split raw response bytes into (status, reason, headers, body)."""
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    version, status, reason = lines[0].split(" ", 2)
    assert version == "HTTP/1.1"
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return int(status), reason, headers, body


@pytest.fixture
def parse_response():
    return parse_raw_response


@pytest.fixture
def fake_socket_factory():
    """Build FakeSockets from a list of recv results."""
    return FakeSocket


@pytest.fixture
def make_connection():
    """Wrap a scripted FakeSocket in a Connection."""
    def factory(*chunks, fail_send: bool = False) -> Connection:
        return Connection(
            socket=FakeSocket(chunks, fail_send=fail_send),
            address=("127.0.0.1", 50000),
        )
    return factory


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        max_request_size=1024,
        buffer_size=256,
        timeout=5.0,
        log_level="WARNING",
    )


class TestServer:
    """Runs an HTTPServer in a background thread."""

    __test__ = False  # not a test class

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    @property
    def thread_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def request(self, raw: bytes, chunk_size: Optional[int] = None, shut_write: bool = False) -> bytes:
        """Send raw bytes, optionally in small pieces, and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            if chunk_size:
                for i in range(0, len(raw), chunk_size):
                    sock.sendall(raw[i:i + chunk_size])
            else:
                sock.sendall(raw)
            if shut_write:
                sock.shutdown(socket.SHUT_WR)

            response = b""
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                response += chunk
            return response


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A live server on an ephemeral port."""
    server = HTTPServer(config)
    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def server_runner() -> Generator:
    """Start a preconfigured HTTPServer; every started server is stopped afterwards."""
    started: List[TestServer] = []

    def factory(server: HTTPServer) -> TestServer:
        test_srv = TestServer(server)
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield factory

    for test_srv in started:
        test_srv.stop()
