"""
=============================================================================
BUILT-IN PAGES
=============================================================================

The canned HTML pages behind the default route table.

    ┌──────────────┬───────────────────┬──────────────────────────────────┐
    │ Path         │ Handler           │ Body                             │
    ├──────────────┼───────────────────┼──────────────────────────────────┤
    │ /            │ index_page        │ Landing page linking the others  │
    │ /index.html  │ index_page        │ (same)                           │
    │ /hello       │ hello_page        │ Static greeting                  │
    │ /time        │ TimePage(clock)   │ Current local time               │
    │ /favicon.ico │ (router)          │ 204, empty                       │
    └──────────────┴───────────────────┴──────────────────────────────────┘

Error pages (400/404/405/500) live next to ResponseSpec in
http/response.py since the router and connection handler need them too.

=============================================================================
"""

from datetime import datetime
from typing import Callable, Optional

from ..http.request import ParsedRequestLine
from ..http.response import HOME_LINK, ResponseSpec, html_page
from ..http.router import Router
from ..http.status_codes import HTTPStatus


TIME_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current wall-clock time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


def index_page(request: Optional[ParsedRequestLine] = None) -> ResponseSpec:
    """Landing page for / and /index.html."""
    body = html_page(
        "Index",
        "<h1>Mini Python HTTP Server</h1>"
        "<ul>"
        "<li><a href='/hello'>/hello</a></li>"
        "<li><a href='/time'>/time</a></li>"
        "</ul>",
    )
    return ResponseSpec.for_status(HTTPStatus.OK, body)


def hello_page(request: Optional[ParsedRequestLine] = None) -> ResponseSpec:
    body = html_page(
        "Hello",
        "<h1>Hello from Python!</h1>"
        "<p>This is the /hello page. 你好，世界！</p>"
        f"{HOME_LINK}",
    )
    return ResponseSpec.for_status(HTTPStatus.OK, body)


class TimePage:
    """
    Handler for /time.

    The clock is injectable so tests can pin the rendered timestamp:

        page = TimePage(clock=lambda: datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        page().body  # contains b"2026-01-02 03:04:05 UTC"
    """

    def __init__(self, clock: Clock = local_now):
        self.clock = clock

    def timestamp(self) -> str:
        """
        Format the clock as YYYY-MM-DD HH:MM:SS TZ.

        Returns "unknown" if the clock cannot be read or formatted.
        """
        try:
            return self.clock().strftime(TIME_FORMAT).strip()
        except (OSError, OverflowError, ValueError):
            return "unknown"

    def __call__(self, request: Optional[ParsedRequestLine] = None) -> ResponseSpec:
        body = html_page(
            "Time",
            "<h1>Current time</h1>"
            f"<p>{self.timestamp()}</p>"
            f"{HOME_LINK}",
        )
        return ResponseSpec.for_status(HTTPStatus.OK, body)


def default_router(clock: Clock = local_now) -> Router:
    """
    The responder's standard route table.

        GET /             → index_page
        GET /index.html   → index_page
        GET /hello        → hello_page
        GET /time         → TimePage(clock)
        GET /favicon.ico  → 204 (Router.no_content_paths)
    """
    router = Router()
    router.add_route("/", index_page, name="index")
    router.add_route("/index.html", index_page, name="index")
    router.add_route("/hello", hello_page, name="hello")
    router.add_route("/time", TimePage(clock), name="time")
    return router
