"""Tests for correlation ID middleware and httpx transports."""

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request

from pyfulmen.foundry.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    get_correlation_id,
    is_valid_correlation_id,
    with_correlation_id,
)
from pyfulmen.foundry.middleware import (
    AsyncCorrelationTransport,
    CorrelationIDMiddleware,
    CorrelationTransport,
)

VALID = "018f5f8e-6b7a-7c3d-9e2f-1a2b3c4d5e6f"


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(CorrelationIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return {"state": request.state.correlation_id, "context": get_correlation_id()}

    return app


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_valid_inbound_id_is_kept(client):
    response = await client.get("/echo", headers={CORRELATION_ID_HEADER: VALID.upper()})
    assert response.status_code == 200
    assert response.headers[CORRELATION_ID_HEADER] == VALID
    assert response.json() == {"state": VALID, "context": VALID}


@pytest.mark.asyncio
async def test_missing_id_is_generated(client):
    response = await client.get("/echo")
    correlation_id = response.headers[CORRELATION_ID_HEADER]
    assert is_valid_correlation_id(correlation_id)
    assert response.json()["context"] == correlation_id


@pytest.mark.asyncio
async def test_invalid_id_is_replaced(client):
    response = await client.get("/echo", headers={CORRELATION_ID_HEADER: "not-a-uuid"})
    correlation_id = response.headers[CORRELATION_ID_HEADER]
    assert correlation_id != "not-a-uuid"
    assert is_valid_correlation_id(correlation_id)


@pytest.mark.asyncio
async def test_context_is_cleared_after_request(client):
    await client.get("/echo", headers={CORRELATION_ID_HEADER: VALID})
    assert get_correlation_id() is None


@pytest.mark.asyncio
async def test_custom_header_name():
    app = FastAPI()
    app.add_middleware(CorrelationIDMiddleware, header_name="X-Request-ID")

    @app.get("/")
    async def root():
        return {}

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/", headers={"X-Request-ID": VALID})
    assert response.headers["X-Request-ID"] == VALID


def _recording_handler(seen: list):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get(CORRELATION_ID_HEADER))
        return httpx.Response(200, json={"ok": True})

    return handler


def test_sync_transport_adds_header():
    seen: list = []
    transport = CorrelationTransport(httpx.MockTransport(_recording_handler(seen)))
    with httpx.Client(transport=transport, base_url="http://upstream") as client:
        client.get("/without")
        correlation_id = generate_correlation_id()
        with with_correlation_id(correlation_id):
            response = client.get("/with", headers={"Accept": "application/json"})

    assert response.json() == {"ok": True}
    assert seen == [None, correlation_id]


@pytest.mark.asyncio
async def test_async_transport_adds_header():
    seen: list = []
    transport = AsyncCorrelationTransport(httpx.MockTransport(_recording_handler(seen)))
    async with httpx.AsyncClient(transport=transport, base_url="http://upstream") as client:
        with with_correlation_id(VALID):
            await client.post("/events", json={"event": "start"})
    assert seen == [VALID]


@pytest.mark.asyncio
async def test_middleware_id_propagates_to_outbound_calls():
    seen: list = []
    outbound = httpx.AsyncClient(
        transport=AsyncCorrelationTransport(httpx.MockTransport(_recording_handler(seen))),
        base_url="http://upstream",
    )

    app = FastAPI()
    app.add_middleware(CorrelationIDMiddleware)

    @app.get("/proxy")
    async def proxy():
        await outbound.get("/downstream")
        return {}

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        await client.get("/proxy", headers={CORRELATION_ID_HEADER: VALID})
    await outbound.aclose()

    assert seen == [VALID]
