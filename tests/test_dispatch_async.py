import asyncio
from dataclasses import replace
from typing import Annotated, Optional

import httpx
import pytest

from declarest import Body, Path, RestService, adapter, get_async, mockup, post_async
from declarest.models import MissingPathParameterError

from .conftest import PendingTransport, RecordingTransport


def mocked_item(request, name):
    item_id = request.url.rsplit("/", 1)[-1]
    return httpx.Response(200, json={"id": item_id, "name": name})


async def mocked_item_async(request, name):
    await asyncio.sleep(0)
    return httpx.Response(200, json={"name": name})


transformed_responses = []


def record_transform(response):
    transformed_responses.append(response)
    return response.json()


def count_attempt(spec):
    spec.headers["X-Attempt"] = spec.headers.get("X-Attempt", "") + "1"
    return spec


class ItemsService(RestService):
    @get_async("/items/{id}")
    def retrieve(self, id: Annotated[int, Path("id")]): ...

    @adapter(response_fn=lambda response: response.json())
    @post_async("/items")
    def create(self, item: Annotated[dict, Body()]): ...

    @adapter(
        request_fn=lambda spec: replace(spec, url=spec.url + "/v2"),
        response_fn=lambda response: response.json()["name"].upper(),
    )
    @mockup(mocked_item, "mocked lamp")
    @get_async("/items/{id}")
    def mocked(self, id: Annotated[int, Path("id")]): ...

    @mockup(mocked_item_async, "awaited")
    @get_async("/items")
    def mocked_awaitable(self): ...

    @adapter(exception_fn=lambda error: {"recovered": str(error)})
    @get_async("/items")
    def recovering(self): ...

    @adapter(exception_fn=lambda error: LookupError("translated"))
    @get_async("/items")
    def translating(self): ...

    @adapter(response_fn=record_transform)
    @get_async("/items/{id}")
    def transformed(self, id: Annotated[int, Path("id")]): ...

    @adapter(request_fn=count_attempt)
    @get_async("/items")
    def counted(self): ...

    @get_async("/items/{id}/tags")
    def tags(self, id: Annotated[Optional[int], Path("id")] = None): ...


@pytest.fixture
def service(config, recording_transport) -> ItemsService:
    return ItemsService(config, transport=recording_transport)


class TestLaziness:
    @pytest.mark.asyncio
    async def test_nothing_is_sent_before_await(self, service, recording_transport):
        call = service.retrieve(1)
        await asyncio.sleep(0)

        assert recording_transport.requests == []

        response = await call

        assert response.status_code == 200
        assert len(recording_transport.requests) == 1

    @pytest.mark.asyncio
    async def test_each_await_dispatches_again(self, service, recording_transport):
        call = service.retrieve(1)

        await call
        await call

        assert len(recording_transport.requests) == 2

    @pytest.mark.asyncio
    async def test_each_dispatch_gets_a_fresh_request(
        self, service, recording_transport
    ):
        call = service.counted()

        await call
        await call

        assert [r.headers["X-Attempt"] for r in recording_transport.requests] == [
            "1",
            "1",
        ]
        assert recording_transport.requests[0] is not recording_transport.requests[1]

    @pytest.mark.asyncio
    async def test_path_errors_surface_on_await(self, service, recording_transport):
        call = service.tags()

        with pytest.raises(MissingPathParameterError):
            await call
        assert recording_transport.requests == []

    @pytest.mark.asyncio
    async def test_async_iteration_yields_single_value(self, service):
        values = [value async for value in service.create({"a": 1})]

        assert values == [{"ok": True}]


class TestSubscription:
    @pytest.mark.asyncio
    async def test_subscribe_delivers_value_then_completes(self, service):
        events = []

        subscription = service.create({"a": 1}).subscribe(
            on_next=lambda value: events.append(("next", value)),
            on_error=lambda error: events.append(("error", error)),
            on_complete=lambda: events.append(("complete",)),
        )
        await subscription.wait()

        assert events == [("next", {"ok": True}), ("complete",)]
        assert subscription.closed

    @pytest.mark.asyncio
    async def test_subscribe_delivers_single_error(self, config):
        transport = RecordingTransport(lambda spec: httpx.ConnectError("down"))
        service = ItemsService(config, transport=transport)
        events = []

        subscription = service.retrieve(1).subscribe(
            on_next=lambda value: events.append("next"),
            on_error=lambda error: events.append(type(error).__name__),
            on_complete=lambda: events.append("complete"),
        )
        await subscription.wait()

        assert events == ["ConnectError"]

    @pytest.mark.asyncio
    async def test_unsubscribe_cancels_transport_and_suppresses_effects(self, config):
        transport = PendingTransport()
        service = ItemsService(config, transport=transport)
        events = []

        subscription = service.transformed(1).subscribe(
            on_next=lambda value: events.append("next"),
            on_error=lambda error: events.append("error"),
            on_complete=lambda: events.append("complete"),
        )
        await asyncio.wait_for(transport.started.wait(), timeout=1)

        subscription.unsubscribe()
        await subscription.wait()
        for _ in range(5):
            await asyncio.sleep(0)

        assert transport.calls == 1
        assert transport.cancelled
        assert events == []
        assert subscription.closed
        assert transformed_responses == []

    @pytest.mark.asyncio
    async def test_each_subscription_dispatches(self, service, recording_transport):
        call = service.retrieve(5)

        first = call.subscribe()
        second = call.subscribe()
        await first.wait()
        await second.wait()

        assert len(recording_transport.requests) == 2


class TestInterceptors:
    @pytest.mark.asyncio
    async def test_response_transform_applies(self, service):
        assert await service.create({"a": 1}) == {"ok": True}

    @pytest.mark.asyncio
    async def test_mockup_replaces_transport(self, service, recording_transport):
        result = await service.mocked(3)

        assert result == "MOCKED LAMP"
        assert recording_transport.requests == []

    @pytest.mark.asyncio
    async def test_request_transform_runs_before_mockup(self, config):
        seen = []

        def handler(request, *args):
            seen.append(request.url)
            return httpx.Response(200, json={"name": "x"})

        class Service(RestService):
            @adapter(request_fn=lambda spec: replace(spec, url=spec.url + "/v2"))
            @mockup(handler)
            @get_async("/items/{id}")
            def retrieve(self, id: Annotated[int, Path("id")]): ...

        await Service(config, transport=RecordingTransport()).retrieve(3)

        assert seen == ["https://api.example.com/items/3/v2"]

    @pytest.mark.asyncio
    async def test_awaitable_mockup_result_is_awaited(self, service):
        response = await service.mocked_awaitable()

        assert response.json() == {"name": "awaited"}

    @pytest.mark.asyncio
    async def test_exception_transform_can_recover(self, config):
        transport = RecordingTransport(lambda spec: httpx.ConnectError("down"))
        service = ItemsService(config, transport=transport)

        assert await service.recovering() == {"recovered": "down"}

    @pytest.mark.asyncio
    async def test_exception_transform_can_translate(self, config):
        transport = RecordingTransport(lambda spec: httpx.ConnectError("down"))
        service = ItemsService(config, transport=transport)

        with pytest.raises(LookupError, match="translated") as info:
            await service.translating()

        assert isinstance(info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_transport_error_without_interceptor_propagates(self, config):
        transport = RecordingTransport(lambda spec: httpx.ConnectError("down"))
        service = ItemsService(config, transport=transport)

        with pytest.raises(httpx.ConnectError):
            await service.retrieve(1)
