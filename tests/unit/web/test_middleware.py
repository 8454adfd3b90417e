"""Tests for the HTTP boundary middleware."""

import asyncio

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from gridkernel.core.context import get_current_context, try_get_current_context
from gridkernel.exceptions import ContextDisposedError
from gridkernel.metrics import GridMetrics
from gridkernel.web import GridContextMiddleware


def build_app(identity, seen, **options):
    async def show(request: Request):
        context = get_current_context()
        seen.append(context)
        return JSONResponse({
            "same_as_state": context is request.state.grid_context,
            "correlation_id": context.correlation_id,
            "causation_id": context.causation_id,
            "tenant_id": context.tenant_id,
            "baggage": dict(context.baggage),
        })

    async def crash(request: Request):
        seen.append(get_current_context())
        raise RuntimeError("handler failed")

    async def echo(request: Request):
        context = get_current_context()
        seen.append(context.cancellation)
        return PlainTextResponse(await request.body())

    async def wait_for_abort(request: Request):
        context = get_current_context()
        for _ in range(200):
            if context.is_cancellation_requested:
                break
            await asyncio.sleep(0.01)
        seen.append(context.is_cancellation_requested)
        return PlainTextResponse("done")

    return Starlette(
        routes=[
            Route("/show", show),
            Route("/crash", crash),
            Route("/echo", echo, methods=["POST"]),
            Route("/slow", wait_for_abort),
        ],
        middleware=[Middleware(GridContextMiddleware, identity=identity, **options)],
    )


@pytest.fixture
def seen():
    return []


@pytest.fixture
def metrics():
    return GridMetrics()


@pytest.fixture
def client(identity, seen, metrics):
    app = build_app(identity, seen, metrics=metrics)
    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.unit
class TestGridContextMiddleware:
    """Test per-request context ownership."""

    def test_context_from_headers(self, client):
        response = client.get("/show", headers={
            "X-Correlation-Id": "corr-http",
            "X-Causation-Id": "op-caller",
            "X-Tenant-Id": "tenant-a",
            "X-Baggage-region": "eu",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["same_as_state"] is True
        assert body["correlation_id"] == "corr-http"
        assert body["causation_id"] == "op-caller"
        assert body["tenant_id"] == "tenant-a"
        assert body["baggage"] == {"region": "eu"}

    def test_response_echoes_identity(self, client):
        response = client.get("/show", headers={"X-Correlation-Id": "corr-http"})

        assert response.headers["X-Correlation-Id"] == "corr-http"
        assert response.headers["X-Node-Id"] == "catalog-api"

    def test_correlation_generated_when_absent(self, client):
        response = client.get("/show")

        correlation_id = response.headers["X-Correlation-Id"]
        assert len(correlation_id) == 26
        assert response.json()["correlation_id"] == correlation_id

    def test_each_request_gets_its_own_context(self, client, seen):
        client.get("/show", headers={"X-Correlation-Id": "a"})
        client.get("/show", headers={"X-Correlation-Id": "b"})

        assert len(seen) == 2
        assert seen[0] is not seen[1]

    def test_context_disposed_after_request(self, client, seen):
        client.get("/show")

        assert seen[0].is_disposed is True
        with pytest.raises(ContextDisposedError):
            seen[0].correlation_id
        assert try_get_current_context() is None

    def test_header_values_capped(self, identity, seen):
        app = build_app(identity, seen, max_header_length=16)
        client = TestClient(app)

        response = client.get("/show", headers={"X-Correlation-Id": "x" * 100})

        assert response.json()["correlation_id"] == "x" * 16

    def test_request_metrics(self, client, metrics):
        client.get("/show")

        registry = metrics.registry
        assert registry.get_sample_value(
            "gridkernel_contexts_initialized_total", {"transport": "http"}
        ) == 1.0
        assert registry.get_sample_value(
            "gridkernel_operations_total", {"operation": "HttpRequest", "status": "success"}
        ) == 1.0

    def test_unhandled_exception(self, client, seen, metrics):
        response = client.get("/crash", headers={"X-Correlation-Id": "corr-crash"})

        assert response.status_code == 500
        assert seen[0].is_disposed is True
        assert metrics.registry.get_sample_value(
            "gridkernel_operations_total", {"operation": "HttpRequest", "status": "error"}
        ) == 1.0

    def test_unhandled_exception_propagates(self, identity, seen):
        client = TestClient(build_app(identity, seen))

        with pytest.raises(RuntimeError, match="handler failed"):
            client.get("/crash")


def http_scope(path):
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"x-correlation-id", b"corr-abort")],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }


@pytest.mark.unit
class TestRequestCancellation:
    """Test that the request context follows the client connection."""

    async def test_client_disconnect_cancels_context(self, identity, seen):
        app = build_app(identity, seen)
        inbound = [{"type": "http.request", "body": b"", "more_body": False}]
        sent = []

        async def receive():
            if inbound:
                return inbound.pop(0)
            await asyncio.sleep(0.05)
            return {"type": "http.disconnect"}

        async def send(message):
            sent.append(message)

        await app(http_scope("/slow"), receive, send)

        assert seen == [True]

    def test_completed_request_is_not_cancelled(self, client, seen):
        response = client.post("/echo", content=b"payload")

        assert response.status_code == 200
        assert seen[0].is_set() is False

    def test_request_body_reaches_endpoint(self, client):
        response = client.post("/echo", content=b"x" * 10000)

        assert response.text == "x" * 10000
