"""
Request handlers: the canned pages behind the default route table.

    from minihttp.handlers import default_router

    router = default_router()
    router.handle(ParsedRequestLine("GET", "/hello", "HTTP/1.1"))
"""

from .pages import TimePage, default_router, hello_page, index_page, local_now

__all__ = [
    "TimePage",
    "default_router",
    "hello_page",
    "index_page",
    "local_now",
]
