"""Request middleware: request IDs, client IPs, access logging, recovery and write errors."""

import time
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from template_service.logger import ServiceLogger

REQUEST_ID_HEADER = "X-Request-ID"


def get_client_ip(request: Request) -> str | None:
    """Extract the originating client IP from request.

    The IP can come from:
    1. True-Client-IP header
    2. X-Real-IP header
    3. The first X-Forwarded-For entry
    4. The socket peer address

    Args:
        request: FastAPI request.

    Returns:
        Client IP if known, None otherwise.
    """
    for header in ("True-Client-IP", "X-Real-IP"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host

    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ID, reusing the caller's if it sent one.

    The ID is stored in ``request.state.request_id`` and echoed in the
    ``X-Request-ID`` response header.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id

        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RealIPMiddleware(BaseHTTPMiddleware):
    """Store the originating client IP in ``request.state.client_ip``."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        request.state.client_ip = get_client_ip(request)
        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per completed request."""

    def __init__(self, app: Any, logger: ServiceLogger):
        super().__init__(app)
        self._logger = logger

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        self._logger.info(
            "%s %s %d",
            request.method,
            request.url.path,
            response.status_code,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 3),
            request_id=getattr(request.state, "request_id", None),
            client_ip=getattr(request.state, "client_ip", None),
        )
        return response


class WriteErrorMiddleware:
    """Log a response that could not be written to the client.

    Registered outermost so it wraps the server's own ``send``. Once the
    status line is out nothing can replace the body, so the failure is
    logged and the rest of the response is dropped.
    """

    def __init__(self, app: ASGIApp, logger: ServiceLogger):
        self.app = app
        self._logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        failed = False

        async def guarded_send(message: Message) -> None:
            nonlocal failed
            if failed:
                return
            try:
                await send(message)
            except OSError as e:
                failed = True
                self._logger.error(
                    "failed to write response",
                    error=str(e),
                    method=scope["method"],
                    path=scope["path"],
                )

        await self.app(scope, receive, guarded_send)


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn an unhandled exception into a logged 500 response."""

    def __init__(self, app: Any, logger: ServiceLogger):
        super().__init__(app)
        self._logger = logger

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            self._logger.error(
                "Unhandled error serving %s %s",
                request.method,
                request.url.path,
                exc_info=e,
                request_id=getattr(request.state, "request_id", None),
            )
            return PlainTextResponse("Internal Server Error", status_code=500)
