from collections.abc import Mapping
from logging import getLogger
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from httpx import AsyncClient, Client, HTTPStatusError, Request, Response

from .._utils._request_spec import RequestSpec
from .._utils._ssl_context import get_httpx_client_kwargs
from ..models.exceptions import EnrichedException


@runtime_checkable
class Transport(Protocol):
    """Sends fully assembled requests.

    ``send`` blocks the calling thread for the whole round trip. ``send_async``
    must be cancellable: cancelling the awaiting task aborts the exchange.
    """

    def send(self, spec: RequestSpec) -> Response: ...

    async def send_async(self, spec: RequestSpec) -> Response: ...


def _body_kwargs(spec: RequestSpec) -> Dict[str, Any]:
    if spec.data is None:
        return {"content": spec.content}
    if isinstance(spec.data, Mapping):
        return {"data": spec.data}
    return {"content": spec.data}


class HttpxTransport:
    """Transport built on ``httpx.Client`` and ``httpx.AsyncClient``.

    Redirects are not followed and nothing is retried. Responses outside the
    2xx range raise :class:`EnrichedException`.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = 30.0,
        client: Optional[Client] = None,
        async_client: Optional[AsyncClient] = None,
    ) -> None:
        self._logger = getLogger("declarest")

        if client is None or async_client is None:
            client_kwargs = get_httpx_client_kwargs(timeout)

        self._client = client or Client(**client_kwargs)
        self._client_async = async_client or AsyncClient(**client_kwargs)

    def _build_request(self, client: Any, spec: RequestSpec) -> Request:
        return client.build_request(
            spec.method,
            spec.full_url,
            headers=spec.headers,
            **_body_kwargs(spec),
        )

    def send(self, spec: RequestSpec) -> Response:
        self._logger.debug(f"Request: {spec.method} {spec.full_url}")
        self._logger.debug(f"HEADERS: {dict(spec.headers)}")

        response = self._client.send(self._build_request(self._client, spec))
        return self._check(response)

    async def send_async(self, spec: RequestSpec) -> Response:
        self._logger.debug(f"Request: {spec.method} {spec.full_url}")
        self._logger.debug(f"HEADERS: {dict(spec.headers)}")

        response = await self._client_async.send(
            self._build_request(self._client_async, spec)
        )
        return self._check(response)

    def _check(self, response: Response) -> Response:
        try:
            response.raise_for_status()
        except HTTPStatusError as e:
            # include the http response in the error message
            raise EnrichedException(e) from e
        return response

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        await self._client_async.aclose()
