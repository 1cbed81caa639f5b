"""
=============================================================================
ROUTER
=============================================================================

Maps a parsed request line to a ResponseSpec.

=============================================================================
DISPATCH ORDER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        DISPATCH FLOW                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ParsedRequestLine(method, path, version)                           │
    │        │                                                             │
    │        ├── method != "GET" ?           → 405 (echo method)           │
    │        │                                                             │
    │        ├── path in no_content_paths ?  → 204, empty body             │
    │        │     (/favicon.ico)                                          │
    │        │                                                             │
    │        ├── path registered ?           → handler(request)            │
    │        │                                                             │
    │        └── otherwise                   → 404 (echo path)             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Matching is exact string equality. There are no patterns, no prefix
matching and no query-string handling:

    Registered: /hello
    Matches:    /hello
    404:        /hello/   /hello?x=1   /Hello   /hello/world

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from .request import ParsedRequestLine
from .response import ResponseSpec, method_not_allowed, no_content, not_found


logger = logging.getLogger(__name__)


Handler = Callable[[ParsedRequestLine], ResponseSpec]

SUPPORTED_METHOD = "GET"
DEFAULT_NO_CONTENT_PATHS = frozenset({"/favicon.ico"})


@dataclass(frozen=True)
class Route:
    """
    A registered GET route.

    Attributes:
        path: Exact request target this route answers
        handler: Callable producing the ResponseSpec
        name: Optional label, shown in the route table
    """

    path: str
    handler: Handler
    name: Optional[str] = None


class Router:
    """
    Exact-match GET router.

        router = Router()

        @router.get("/hello")
        def hello(request):
            return ResponseSpec.for_status(HTTPStatus.OK, "<h1>hi</h1>")

        router.handle(ParsedRequestLine("GET", "/hello", "HTTP/1.1"))
    """

    def __init__(self, no_content_paths: Iterable[str] = DEFAULT_NO_CONTENT_PATHS):
        """
        Args:
            no_content_paths: Paths answered with 204 and an empty body,
                              ahead of the route table.
        """
        self._routes: Dict[str, Route] = {}
        self.no_content_paths: FrozenSet[str] = frozenset(no_content_paths)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add_route(self, path: str, handler: Handler, name: Optional[str] = None) -> Route:
        """
        Register handler for GET requests to exactly path.

        Registering the same path again replaces the earlier handler.
        """
        if not path:
            raise ValueError("Route path must not be empty")
        if path in self._routes:
            logger.debug(f"Replacing handler for {path}")

        route = Route(path=path, handler=handler, name=name or getattr(handler, "__name__", None))
        self._routes[path] = route
        return route

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, name=name)
            return handler
        return decorator

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def match(self, path: str) -> Optional[Route]:
        """Return the route registered for exactly path, if any."""
        return self._routes.get(path)

    def handle(self, request: ParsedRequestLine) -> ResponseSpec:
        """
        Produce the response for request.

        Handler exceptions propagate; the connection handler turns them
        into a 500.
        """
        if request.method != SUPPORTED_METHOD:
            return method_not_allowed(request.method)

        if request.path in self.no_content_paths:
            return no_content()

        route = self.match(request.path)
        if route is None:
            return not_found(request.path)

        return route.handler(request)

    __call__ = handle

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    @property
    def routes(self) -> List[Route]:
        """Registered routes in registration order."""
        return list(self._routes.values())

    def print_routes(self) -> None:
        """Print the route table (startup banner)."""
        print("Routes:")
        for route in self.routes:
            print(f"  {SUPPORTED_METHOD:6} {route.path:20} → {route.name}")
        for path in sorted(self.no_content_paths):
            print(f"  {SUPPORTED_METHOD:6} {path:20} → 204 No Content")

