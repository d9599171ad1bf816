import inspect
from typing import Any, Optional

from ._descriptor import Adapters, Mockup
from ._utils._request_spec import RequestSpec


def intercept_request(spec: RequestSpec, adapters: Optional[Adapters]) -> RequestSpec:
    if adapters is None or adapters.request_fn is None:
        return spec
    return adapters.request_fn(spec)


def intercept_response(response: Any, adapters: Optional[Adapters]) -> Any:
    if adapters is None or adapters.response_fn is None:
        return response
    return adapters.response_fn(response)


def handle_exception(error: Exception, adapters: Optional[Adapters]) -> Any:
    """Routes ``error`` through the exception interceptor, if any.

    Raises:
        Exception: ``error`` itself when no interceptor is declared, or the
            exception returned by the interceptor.
    """
    if adapters is None or adapters.exception_fn is None:
        raise error

    result = adapters.exception_fn(error)
    if isinstance(result, BaseException):
        if result is error:
            raise error
        raise result from error
    return result


def call_mockup(mock: Mockup, spec: RequestSpec) -> Any:
    """Calls the mock handler of a blocking method.

    Raises:
        TypeError: If the handler returns an awaitable.
    """
    result = mock.handler(spec, *mock.args)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError(
            f"mockup handler {mock.handler!r} returned an awaitable "
            "on a blocking method"
        )
    return result


async def call_mockup_async(mock: Mockup, spec: RequestSpec) -> Any:
    result = mock.handler(spec, *mock.args)
    if inspect.isawaitable(result):
        result = await result
    return result
