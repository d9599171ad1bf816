from logging import getLogger
from typing import Any, Optional

from .._config import Config
from .._methods import register_methods
from .._registry import ParameterRegistry, registry_for
from .._utils._user_agent import header_user_agent
from .._utils.constants import (
    CONTENT_TYPE_JSON,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
)
from ._transport import HttpxTransport, Transport


class RestService:
    """Base class of declarative REST services.

    Subclasses declare their endpoints with the verb decorators; the class
    provides the base URL, the default headers and the transport every
    declared method is dispatched through.

    Examples:
        ```python
        from typing import Annotated

        from declarest import Config, Path, RestService, get

        class ItemsService(RestService):
            @get("/items/{id}")
            def retrieve(self, id: Annotated[int, Path("id")]): ...

        service = ItemsService(Config(base_url="https://api.example.com"))
        item = service.retrieve(42)
        ```

    Args:
        config (Config): Base URL, secret and timeout of the service.
        transport (Optional[Transport]): Sends the assembled requests. Defaults
            to an :class:`HttpxTransport` configured from ``config``.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        register_methods(cls)

    def __init__(self, config: Config, transport: Optional[Transport] = None) -> None:
        self._logger = getLogger("declarest")
        self._config = config
        self._transport = transport or HttpxTransport(timeout=config.timeout)

        self._logger.debug(f"HEADERS: {self.default_headers}")

        super().__init__()

    @classmethod
    def registry(cls) -> ParameterRegistry:
        return registry_for(cls)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            HEADER_ACCEPT: CONTENT_TYPE_JSON,
            HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON,
            **header_user_agent(type(self).__name__),
            **self.auth_headers,
            **self._config.default_headers,
            **self.custom_headers,
        }

    @property
    def auth_headers(self) -> dict[str, str]:
        if not self._config.secret:
            return {}
        return {HEADER_AUTHORIZATION: f"Bearer {self._config.secret}"}

    @property
    def custom_headers(self) -> dict[str, str]:
        return {}
