"""
HTTP boundary middleware for Starlette and FastAPI applications.

GridContextMiddleware owns one GridContext per request:

1. Creates the context for this node and initializes it from the request
   headers (values capped at max_header_length).
2. Binds it as the ambient context and on request.state.grid_context.
3. Tracks the request as an HttpRequest operation.
4. Echoes X-Correlation-Id and X-Node-Id on the response.
5. Clears the ambient context and disposes the context when the request ends.

The context's cancellation event follows the client connection. A
http.disconnect that arrives before the response is complete sets it, so
the request context and every child derived from it observe the abort.

Usage:
    app = FastAPI()
    app.add_middleware(GridContextMiddleware, identity=config.node.to_identity())
"""

import asyncio
import contextlib
import threading
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gridkernel.constants import DEFAULT_MAX_HEADER_LENGTH, HTTP_REQUEST_OPERATION
from gridkernel.core.clock import Clock
from gridkernel.core.context.accessor import reset_current_context, set_current_context
from gridkernel.core.context.grid_context import GridContext
from gridkernel.core.context.operation import OperationTracker
from gridkernel.core.identity import NodeIdentity
from gridkernel.core.ids import IdGenerator
from gridkernel.core.mappers.http import initialize_from_headers
from gridkernel.core.transport.binders import bind_http_response_headers
from gridkernel.exceptions.context import ContextLifecycleError
from gridkernel.logging.loggers import GridLogger

REQUEST_ID_HEADER = "X-Request-Id"
CANCELLATION_SCOPE_KEY = "gridkernel.cancellation"

logger = GridLogger(__name__)


class DisconnectWatcher:
    """Sole reader of one request's ASGI receive channel.

    Body messages are relayed to the application one at a time. Once the
    body is complete the watcher keeps listening, and a disconnect received
    before the response finished sets ``aborted``.
    """

    def __init__(self, receive: Receive):
        self._receive = receive
        self._messages: "asyncio.Queue[Message]" = asyncio.Queue()
        self._drained = asyncio.Event()
        self._drained.set()
        self._response_complete = False
        self._task: Optional[asyncio.Task] = None
        self.aborted = threading.Event()

    def start(self) -> None:
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    def wrap_send(self, send: Send) -> Send:
        async def send_watching_completion(message: Message) -> None:
            if message["type"] == "http.response.body" and not message.get("more_body", False):
                self._response_complete = True
            await send(message)

        return send_watching_completion

    async def receive(self) -> Message:
        if self._task is None or (self._task.done() and self._messages.empty()):
            return await self._receive()
        message = await self._messages.get()
        if self._messages.empty():
            self._drained.set()
        return message

    async def _run(self) -> None:
        body_complete = False
        while True:
            # Next body chunk only once the previous one was consumed
            if not body_complete:
                await self._drained.wait()
            message = await self._receive()
            if message["type"] == "http.disconnect":
                if not self._response_complete:
                    self.aborted.set()
                self._messages.put_nowait(message)
                return
            if not message.get("more_body", False):
                body_complete = True
            self._drained.clear()
            self._messages.put_nowait(message)


class GridContextMiddleware(BaseHTTPMiddleware):
    """Establishes the GridContext and request operation for every HTTP request."""

    def __init__(
        self,
        app: ASGIApp,
        identity: NodeIdentity,
        *,
        max_header_length: int = DEFAULT_MAX_HEADER_LENGTH,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        metrics=None,
    ):
        super().__init__(app)
        self.identity = identity
        self.max_header_length = max_header_length
        self.clock = clock
        self.id_generator = id_generator
        self.metrics = metrics

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        watcher = DisconnectWatcher(receive)
        scope[CANCELLATION_SCOPE_KEY] = watcher.aborted
        watcher.start()
        try:
            await super().__call__(scope, watcher.receive, watcher.wrap_send(send))
        finally:
            await watcher.stop()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        context = GridContext.from_identity(
            self.identity, clock=self.clock, id_generator=self.id_generator
        )
        initialize_from_headers(
            context,
            request.headers,
            cancellation=request.scope.get(CANCELLATION_SCOPE_KEY) or threading.Event(),
            max_value_length=self.max_header_length,
            id_generator=self.id_generator,
        )
        request.state.grid_context = context
        if self.metrics is not None:
            self.metrics.record_context_initialized("http")

        token = set_current_context(context)
        operation = OperationTracker(
            context,
            HTTP_REQUEST_OPERATION,
            operation_id=context.operation_id,
            clock=self.clock,
            logger=logger.bind(context),
            metadata={
                "http.method": request.method,
                "http.path": request.url.path,
                "http.request_id": request.headers.get(REQUEST_ID_HEADER) or context.operation_id,
            },
            metrics=self.metrics,
        )
        try:
            response = await call_next(request)
        except Exception as e:
            operation.fail("Unhandled exception", e)
            if self.metrics is not None and isinstance(e, ContextLifecycleError):
                self.metrics.record_context_error(type(e).__name__)
            raise
        else:
            operation.add_metadata("http.status_code", response.status_code)
            bind_http_response_headers(response.headers, context)
            operation.complete()
            return response
        finally:
            reset_current_context(token)
            operation.dispose()
            context.mark_disposed()
