import asyncio
import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from declarest import Config, HttpxTransport, RequestSpec


class RecordingTransport:
    """In-memory transport answering every request with ``respond(spec)``."""

    def __init__(self, respond: Optional[Callable[[RequestSpec], Any]] = None):
        self.requests: List[RequestSpec] = []
        self._respond = respond or (lambda spec: httpx.Response(200, json={"ok": True}))

    def _reply(self, spec: RequestSpec) -> httpx.Response:
        self.requests.append(spec)
        response = self._respond(spec)
        if isinstance(response, BaseException):
            raise response
        return response

    def send(self, spec: RequestSpec) -> httpx.Response:
        return self._reply(spec)

    async def send_async(self, spec: RequestSpec) -> httpx.Response:
        return self._reply(spec)


class PendingTransport:
    """Asynchronous transport that never answers until cancelled."""

    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.cancelled = False
        self.calls = 0

    def send(self, spec: RequestSpec) -> httpx.Response:
        raise AssertionError("blocking send is not expected")

    async def send_async(self, spec: RequestSpec) -> httpx.Response:
        self.calls += 1
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        raise AssertionError("unreachable")


def echo(request: httpx.Request) -> httpx.Response:
    """MockTransport handler returning the request line, headers and body."""
    body = request.content.decode() if request.content else None
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "headers": dict(request.headers),
            "body": json.loads(body) if body else None,
        },
    )


@pytest.fixture
def config() -> Config:
    return Config(base_url="https://api.example.com", secret="test-secret")


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def echo_transport() -> HttpxTransport:
    mock = httpx.MockTransport(echo)
    return HttpxTransport(
        client=httpx.Client(transport=mock),
        async_client=httpx.AsyncClient(transport=mock),
    )
