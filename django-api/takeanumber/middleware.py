"""Request context middleware for structured logging."""

import re
from collections.abc import Callable
from uuid import uuid4

import structlog
from django.http import HttpRequest, HttpResponse

from takeanumber.log_config import bind_context, clear_context

logger = structlog.get_logger("http")

REQUEST_ID_HEADER = "X-Request-ID"
# Client ids outside this shape are replaced with a fresh uuid4.
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


class RequestContextMiddleware:
    """Adds a request_id and basic request info to structlog context.

    Also logs request start/end and propagates the X-Request-ID header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER, "")
        if not REQUEST_ID_PATTERN.fullmatch(request_id):
            request_id = str(uuid4())
        clear_context()
        bind_context(request_id=request_id, method=request.method, path=request.path)
        logger.info("request.start", client_ip=request.META.get("REMOTE_ADDR"))
        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = request_id
            logger.info("request.end", status_code=response.status_code)
            return response
        finally:
            clear_context()
