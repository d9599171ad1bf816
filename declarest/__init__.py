"""Declarative REST clients for Python.

Service methods are declared with an HTTP verb and a URL template, their
parameters with the part of the request they fill. Calling a method assembles
the request and sends it, either blocking (``get``, ``post``, ...) or lazily
on an event loop (``get_async``, ``post_async``, ...).

Example:
```python
    from typing import Annotated, Optional

    from declarest import Config, Path, Query, RestService, get, get_async

    class ItemsService(RestService):
        @get("/items/{id}")
        def retrieve(self, id: Annotated[int, Path("id")]): ...

        @get_async("/items")
        def search(self, q: Annotated[Optional[str], Query("q")] = None): ...

    service = ItemsService(Config(base_url="https://api.example.com"))
    item = service.retrieve(42)
    response = await service.search(q="lamp")
```
"""

from ._config import Config
from ._descriptor import (
    Adapters,
    MethodDescriptor,
    Mockup,
    adapter,
    form_data,
    headers,
    mockup,
)
from ._dispatch import RestCall, Subscription
from ._methods import (
    RestMethod,
    delete,
    delete_async,
    get,
    get_async,
    head,
    head_async,
    options,
    options_async,
    patch,
    patch_async,
    post,
    post_async,
    put,
    put_async,
)
from ._params import Body, Header, ParameterBinding, ParameterRole, Path, Query
from ._registry import ParameterRegistry
from ._services import HttpxTransport, RestService, Transport
from ._utils import RequestSpec, setup_logging

__all__ = [
    "Adapters",
    "Body",
    "Config",
    "Header",
    "HttpxTransport",
    "MethodDescriptor",
    "Mockup",
    "ParameterBinding",
    "ParameterRegistry",
    "ParameterRole",
    "Path",
    "Query",
    "RequestSpec",
    "RestCall",
    "RestMethod",
    "RestService",
    "Subscription",
    "Transport",
    "adapter",
    "delete",
    "delete_async",
    "form_data",
    "get",
    "get_async",
    "head",
    "head_async",
    "headers",
    "mockup",
    "options",
    "options_async",
    "patch",
    "patch_async",
    "post",
    "post_async",
    "put",
    "put_async",
    "setup_logging",
]
