"""Correlation ID propagation for inbound and outbound HTTP.

Inbound, ``CorrelationIDMiddleware`` accepts a valid UUIDv7 from the
``X-Correlation-ID`` request header or mints a new one, binds it to the request
context and echoes it on the response. Outbound, the httpx transports copy the
bound ID onto requests made while handling that context.

    app = FastAPI()
    app.add_middleware(CorrelationIDMiddleware)

    client = httpx.AsyncClient(transport=AsyncCorrelationTransport())
"""

from typing import Optional

import httpx
from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from pyfulmen.foundry.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    get_correlation_id,
    is_valid_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to every request and response.

    Invalid inbound IDs are replaced, never rejected.
    """

    def __init__(self, app, header_name: str = CORRELATION_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(self.header_name)
        if incoming and is_valid_correlation_id(incoming):
            correlation_id = incoming.strip().lower()
        else:
            correlation_id = generate_correlation_id()
            if incoming:
                logger.debug(
                    "Replacing invalid inbound correlation ID",
                    received=incoming,
                    correlation_id=correlation_id,
                    path=request.url.path,
                )

        request.state.correlation_id = correlation_id
        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)

        response.headers[self.header_name] = correlation_id
        return response


def _with_correlation_header(request: httpx.Request, header_name: str) -> httpx.Request:
    correlation_id = get_correlation_id()
    if not correlation_id:
        return request

    headers = request.headers.copy()
    headers[header_name] = correlation_id
    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        stream=request.stream,
        extensions=request.extensions,
    )


class CorrelationTransport(httpx.BaseTransport):
    """Sync transport that adds the context correlation ID to outbound requests."""

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        header_name: str = CORRELATION_ID_HEADER,
    ):
        self.transport = transport or httpx.HTTPTransport()
        self.header_name = header_name

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self.transport.handle_request(_with_correlation_header(request, self.header_name))

    def close(self) -> None:
        self.transport.close()


class AsyncCorrelationTransport(httpx.AsyncBaseTransport):
    """Async transport that adds the context correlation ID to outbound requests."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        header_name: str = CORRELATION_ID_HEADER,
    ):
        self.transport = transport or httpx.AsyncHTTPTransport()
        self.header_name = header_name

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.transport.handle_async_request(
            _with_correlation_header(request, self.header_name)
        )

    async def aclose(self) -> None:
        await self.transport.aclose()
