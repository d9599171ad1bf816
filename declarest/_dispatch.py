import asyncio
import json
import logging
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generator,
    Generic,
    Optional,
    TypeVar,
)

from httpx import Response

from ._descriptor import MethodDescriptor
from ._interceptors import (
    call_mockup,
    call_mockup_async,
    handle_exception,
    intercept_request,
    intercept_response,
)
from ._utils._request_spec import RequestSpec
from .models.exceptions import ResponseDecodeError
from .tracing import dispatch_span

logger = logging.getLogger("declarest")

T = TypeVar("T")


class Subscription:
    """Handle on a dispatch started by :meth:`RestCall.subscribe`.

    Delivers one value followed by completion, or one error. Once
    :meth:`unsubscribe` is called the pending task is cancelled, which aborts
    the in-flight transport call, and no callback fires afterwards.
    """

    def __init__(
        self,
        task: "asyncio.Task[Any]",
        on_next: Optional[Callable[[Any], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._task = task
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete
        self._closed = False
        self._finished = asyncio.Event()
        task.add_done_callback(self._deliver)

    @property
    def closed(self) -> bool:
        return self._closed

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self._task.done():
            logger.debug("Unsubscribed before completion, cancelling dispatch")
            self._task.cancel()
        self._finished.set()

    async def wait(self) -> None:
        """Waits until the value or error was delivered, or until unsubscribed."""
        await self._finished.wait()

    def _deliver(self, task: "asyncio.Task[Any]") -> None:
        if task.cancelled():
            self._closed = True
            self._finished.set()
            return

        error = task.exception()
        if self._closed:
            return

        self._closed = True
        try:
            if error is not None:
                if self._on_error is not None:
                    self._on_error(error)
                else:
                    logger.error("Unhandled error in subscription", exc_info=error)
                return

            if self._on_next is not None:
                self._on_next(task.result())
            if self._on_complete is not None:
                self._on_complete()
        finally:
            self._finished.set()


class RestCall(Generic[T]):
    """Lazy result of an asynchronous service method.

    Nothing is sent until the call is awaited, iterated or subscribed to, and
    every one of those starts a new, independent dispatch.

    Examples:
        ```python
        response = await service.retrieve(42)

        subscription = service.retrieve(42).subscribe(on_next=print)
        subscription.unsubscribe()
        ```
    """

    def __init__(self, factory: Callable[[], Awaitable[T]], name: str = "") -> None:
        self._factory = factory
        self._name = name

    def __repr__(self) -> str:
        return f"RestCall({self._name!r})"

    def __await__(self) -> Generator[Any, None, T]:
        return self._factory().__await__()

    async def __aiter__(self) -> AsyncIterator[T]:
        yield await self._factory()

    def subscribe(
        self,
        on_next: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
    ) -> Subscription:
        """Starts the dispatch on the running event loop.

        Raises:
            RuntimeError: If no event loop is running.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._factory())
        return Subscription(task, on_next, on_error, on_complete)


def decode_response(response: Response, url: str) -> Any:
    """Decodes a JSON response body; an empty body decodes to ``None``.

    Raises:
        ResponseDecodeError: If the body is not valid JSON.
    """
    text = response.text
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError as e:
        raise ResponseDecodeError(url, text) from e


async def dispatch_async(
    descriptor: MethodDescriptor, spec: RequestSpec, transport: Any
) -> Any:
    """Sends ``spec`` and runs the interceptors of the asynchronous strategy.

    The exception interceptor sees failures of the request transform, of the
    transport or mock, and of the response transform.
    """
    adapters = descriptor.adapters

    with dispatch_span(descriptor.name, spec, "async"):
        try:
            spec = intercept_request(spec, adapters)
            logger.debug(f"Request: {spec.method} {spec.full_url}")

            if descriptor.mockup is not None:
                logger.debug(f"Serving {descriptor.name} from mockup")
                response = await call_mockup_async(descriptor.mockup, spec)
            else:
                response = await transport.send_async(spec)

            return intercept_response(response, adapters)
        except Exception as e:
            return handle_exception(e, adapters)


def dispatch_blocking(
    descriptor: MethodDescriptor, spec: RequestSpec, transport: Any
) -> Any:
    """Sends ``spec`` on the calling thread and returns the decoded result.

    The exception interceptor only sees failures of the request and response
    transforms; transport and decoding failures propagate unchanged.
    """
    adapters = descriptor.adapters

    with dispatch_span(descriptor.name, spec, "blocking"):
        try:
            spec = intercept_request(spec, adapters)
        except Exception as e:
            return handle_exception(e, adapters)

        logger.debug(f"Request: {spec.method} {spec.full_url}")

        if descriptor.mockup is not None:
            logger.debug(f"Serving {descriptor.name} from mockup")
            result = call_mockup(descriptor.mockup, spec)
            body = (
                decode_response(result, spec.full_url)
                if isinstance(result, Response)
                else result
            )
        else:
            body = decode_response(transport.send(spec), spec.full_url)

        try:
            return intercept_response(body, adapters)
        except Exception as e:
            return handle_exception(e, adapters)
