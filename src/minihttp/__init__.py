"""
=============================================================================
MINIHTTP - A Minimal HTTP Responder on Raw Sockets
=============================================================================

Accepts one TCP connection at a time, reads until the end of the HTTP
header block, parses the request line and answers with one of a small set
of canned pages. Then it closes the connection and accepts the next one.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer + ConnectionHandler (state machine)
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Socket plumbing
    │   ├── socket_server.py # Listening socket, sequential accept loop
    │   └── connection.py    # Client connection wrapper
    ├── http/                # Protocol pieces
    │   ├── framing.py       # Header block framing
    │   ├── request.py       # Request line parsing
    │   ├── router.py        # Exact-match GET routing
    │   ├── response.py      # ResponseSpec + serialization
    │   └── status_codes.py  # HTTP status enum
    └── handlers/
        └── pages.py         # /, /hello, /time and the default route table

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080))
    server.run()

    $ curl -i http://localhost:8080/hello
    HTTP/1.1 200 OK
    Content-Type: text/html; charset=utf-8
    Content-Length: 240
    Connection: close
    Server: mini-py-http/0.1

=============================================================================
"""

__version__ = "0.1.0"

from .config import ServerConfig
from .server import ConnectionHandler, HTTPServer

__all__ = ["HTTPServer", "ConnectionHandler", "ServerConfig", "__version__"]
