from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ._utils.constants import DESCRIPTOR_ATTRIBUTE
from .models.exceptions import DescriptorError


@dataclass(frozen=True)
class Adapters:
    """Interceptors applied around a single method.

    Attributes:
        request_fn: Receives the assembled :class:`RequestSpec` and returns the
            one to send.
        response_fn: Receives the response (``httpx.Response`` on the
            asynchronous strategy, the decoded JSON on the blocking one) and
            returns the value handed to the caller.
        exception_fn: Receives the failure of a transform (or of the transport
            on the asynchronous strategy). A returned exception is raised, any
            other returned value becomes the result of the call.
    """

    request_fn: Optional[Callable[[Any], Any]] = None
    response_fn: Optional[Callable[[Any], Any]] = None
    exception_fn: Optional[Callable[[Exception], Any]] = None


@dataclass(frozen=True)
class Mockup:
    """Replaces the transport with ``handler(request, *args)``."""

    handler: Callable[..., Any]
    args: Tuple[Any, ...] = ()


@dataclass
class MethodDescriptor:
    """Declarative specification of one service method.

    Built incrementally while decorators are applied and frozen the first
    time the method is invoked.
    """

    verb: Optional[str] = None
    url_template: str = ""
    blocking: bool = True
    static_headers: Dict[str, str] = field(default_factory=dict)
    adapters: Optional[Adapters] = None
    mockup: Optional[Mockup] = None
    is_form_data: bool = False
    name: str = "<unbound>"
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, key: str, value: Any) -> None:
        if self.__dict__.get("_frozen", False):
            raise DescriptorError(self.name, "cannot be changed after first use")
        super().__setattr__(key, value)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        if not self._frozen:
            self._frozen = True


def descriptor_of(target: Any) -> MethodDescriptor:
    """Returns the descriptor attached to a function, creating it if missing."""
    descriptor = getattr(target, DESCRIPTOR_ATTRIBUTE, None)
    if descriptor is None:
        descriptor = MethodDescriptor(name=getattr(target, "__name__", "<unbound>"))
        setattr(target, DESCRIPTOR_ATTRIBUTE, descriptor)
    return descriptor


def headers(static_headers: Mapping[str, str]) -> Callable[[Any], Any]:
    """Declares headers sent with every call of the method.

    They override the service default headers and are overridden by
    :class:`Header` parameters. May be applied more than once.

    Examples:
        ```python
        @headers({"Accept": "text/plain"})
        @get("/status")
        def status(self): ...
        ```
    """

    def decorator(target: Any) -> Any:
        descriptor = descriptor_of(target)
        descriptor.static_headers = {
            **descriptor.static_headers,
            **{name: str(value) for name, value in static_headers.items()},
        }
        return target

    return decorator


def adapter(
    request_fn: Optional[Callable[[Any], Any]] = None,
    response_fn: Optional[Callable[[Any], Any]] = None,
    exception_fn: Optional[Callable[[Exception], Any]] = None,
) -> Callable[[Any], Any]:
    """Attaches request, response and exception interceptors to the method."""

    def decorator(target: Any) -> Any:
        descriptor_of(target).adapters = Adapters(
            request_fn=request_fn,
            response_fn=response_fn,
            exception_fn=exception_fn,
        )
        return target

    return decorator


def mockup(handler: Callable[..., Any], *args: Any) -> Callable[[Any], Any]:
    """Serves the method from ``handler`` instead of the transport.

    The handler is called with the assembled request followed by ``args``. It
    may return the response directly or an awaitable resolving to it.
    """

    def decorator(target: Any) -> Any:
        descriptor_of(target).mockup = Mockup(handler=handler, args=tuple(args))
        return target

    return decorator


def form_data(target: Any) -> Any:
    """Sends the first argument of the method untouched as the request body."""
    descriptor_of(target).is_form_data = True
    return target
