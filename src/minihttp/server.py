"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REQUEST PROCESSING FLOW                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   ConnectionHandler.handle(conn)                                     │
    │        │                                                             │
    │        ├── 1. HeaderFramer.read(conn)      AWAITING_HEADERS          │
    │        │        incomplete  → 400                                    │
    │        │        read error  → close, no response                     │
    │        │                                                             │
    │        ├── 2. RequestParser.parse(block)   HEADERS_COMPLETE          │
    │        │        malformed   → 400                                    │
    │        │                                                             │
    │        ├── 3. Router.handle(request_line)  DISPATCHED                │
    │        │        handler raised → 500                                 │
    │        │                                                             │
    │        ├── 4. ResponseWriter.write(resp) → conn.send_response()      │
    │        │                                                             │
    │        └── 5. conn.close()                 CLOSED (always)           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

ConnectionHandler only needs a Connection-shaped object and the config, so
it does not care how connections are scheduled. HTTPServer runs it
sequentially on the accept thread.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers import default_router
from .http import (
    HeaderFramer,
    HTTPParseError,
    ParsedRequestLine,
    RequestParser,
    ResponseSpec,
    ResponseWriter,
    Router,
    bad_request,
    internal_error,
)


logger = logging.getLogger(__name__)


# How much of an incoming request to echo at DEBUG level
LOG_PREVIEW_BYTES = 1024


class ConnectionHandler:
    """
    Runs one connection through frame → parse → route → write → close.

        handler = ConnectionHandler(config, router)
        handler.handle(conn)   # conn is closed when this returns

    Never raises for per-connection failures: read errors, malformed input
    and handler bugs are all logged and contained so the accept loop keeps
    going.
    """

    def __init__(self, config: ServerConfig, router: Optional[Router] = None):
        self.config = config
        self.router = router or default_router()
        self.framer = HeaderFramer(max_size=config.max_request_size, read_size=config.buffer_size)
        self.parser = RequestParser()
        self.writer = ResponseWriter(server_name=config.server_name)

    def handle(self, conn: Connection) -> None:
        with conn:
            try:
                self._process(conn)
            except Exception:
                logger.exception(f"[{conn.id}] Unexpected error while handling connection")

    __call__ = handle

    def _process(self, conn: Connection) -> None:
        # ─────────────────────────────────────────────────────────────────
        # AWAITING_HEADERS
        # ─────────────────────────────────────────────────────────────────
        conn.state = ConnectionState.AWAITING_HEADERS
        try:
            frame = self.framer.read(conn)
        except OSError as e:
            logger.warning(f"[{conn.id}] Read failed, closing without response: {e}")
            return

        logger.debug(
            f"[{conn.id}] Incoming request ({frame.size} bytes):\n"
            f"{frame.header_block[:LOG_PREVIEW_BYTES].decode('utf-8', errors='replace')}"
        )

        if not frame.complete:
            logger.warning(
                f"[{conn.id}] Header block incomplete after {len(frame.header_block)} bytes"
            )
            self._client_error(conn)
            return

        # ─────────────────────────────────────────────────────────────────
        # HEADERS_COMPLETE
        # ─────────────────────────────────────────────────────────────────
        conn.state = ConnectionState.HEADERS_COMPLETE
        try:
            request = self.parser.parse(frame.header_block)
        except HTTPParseError as e:
            logger.warning(f"[{conn.id}] {e}")
            self._client_error(conn)
            return

        # ─────────────────────────────────────────────────────────────────
        # DISPATCHED
        # ─────────────────────────────────────────────────────────────────
        conn.state = ConnectionState.DISPATCHED
        response = self.dispatch(request, conn)
        self._send(conn, response, request)

    def dispatch(self, request: ParsedRequestLine, conn: Optional[Connection] = None) -> ResponseSpec:
        """Route request, converting a handler exception into a 500."""
        try:
            return self.router.handle(request)
        except Exception:
            conn_id = conn.id if conn is not None else "-"
            logger.exception(f"[{conn_id}] Handler error for {request}")
            return internal_error()

    def _client_error(self, conn: Connection) -> None:
        conn.state = ConnectionState.CLIENT_ERROR
        self._send(conn, bad_request())

    def _send(
        self,
        conn: Connection,
        response: ResponseSpec,
        request: Optional[ParsedRequestLine] = None,
    ) -> None:
        sent = conn.send_response(self.writer.write(response))
        request_text = str(request) if request is not None else "-"
        logger.info(
            f'{conn.client_ip or "-"} "{request_text}" {response.status} '
            f'{response.content_length}{"" if sent else " (not delivered)"}'
        )


class HTTPServer:
    """
    Single-connection-at-a-time HTTP responder.

        server = HTTPServer(ServerConfig(port=8080))
        server.run()        # blocks; Ctrl+C to stop

    Extra routes can be registered before run():

        @server.get("/ping")
        def ping(request):
            return ResponseSpec.for_status(HTTPStatus.OK, "pong", "text/plain")
    """

    def __init__(self, config: Optional[ServerConfig] = None, router: Optional[Router] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._router = router or default_router()
        self._handler = ConnectionHandler(self.config, self._router)
        self._socket_server = SocketServer(self.config)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    def get(self, path: str, name: Optional[str] = None):
        """Register a GET route (decorator)."""
        return self._router.get(path, name=name)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, configure_logging: bool = True) -> None:
        """
        Start serving (blocking).

        Args:
            configure_logging: Install a basic stderr log handler. Turn off
                               when embedding in an app that owns logging.
        """
        if configure_logging:
            self._setup_logging()

        self._print_startup_banner()

        try:
            self._socket_server.start(self._handler.handle)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self) -> None:
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def _setup_logging(self):
        logging.basicConfig(
            level=self.config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(self.config.level)

    def _print_startup_banner(self):
        print()
        print(f"  {self.config.server_name}")
        print(f"  http://{self.config.host}:{self.config.port}")
        print(f"  max request: {self.config.max_request_size} bytes, backlog: {self.config.backlog}")
        print("  Press Ctrl+C to stop")
        print()
        self._router.print_routes()
