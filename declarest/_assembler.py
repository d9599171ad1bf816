import logging
from typing import Any, Mapping, Optional, Sequence

from ._descriptor import MethodDescriptor
from ._params import ParameterRole
from ._registry import ParameterRegistry
from ._utils._body import serialize_body
from ._utils._endpoint import resolve_path
from ._utils._headers import compose_headers
from ._utils._query import serialize_query, serialize_query_pairs
from ._utils._request_spec import RequestSpec
from ._utils.constants import HEADER_CONTENT_TYPE

logger = logging.getLogger("declarest")


def join_url(base_url: str, path: str) -> str:
    if base_url.endswith("/") and path.startswith("/"):
        return base_url + path[1:]
    return base_url + path


def assemble_request(
    descriptor: MethodDescriptor,
    registry: ParameterRegistry,
    base_url: str,
    default_headers: Optional[Mapping[str, str]],
    args: Sequence[Any],
) -> RequestSpec:
    """Turns the arguments of one invocation into a :class:`RequestSpec`.

    Args:
        descriptor: The invoked method's descriptor.
        registry: The registry holding the method's bindings.
        base_url: Prefix of the resolved URL template.
        default_headers: Headers sent unless overridden by the method.
        args: The invocation arguments in declaration order, ``self``
            excluded, absent optional arguments as ``None``.
    """
    name = descriptor.name

    def bindings(role: ParameterRole):
        return registry.lookup(name, role)

    path = resolve_path(descriptor.url_template, bindings(ParameterRole.PATH), args)

    query_bindings = bindings(ParameterRole.QUERY)
    params = (
        serialize_query(query_bindings, args)
        if descriptor.blocking
        else serialize_query_pairs(query_bindings, args)
    )

    content, data = serialize_body(
        bindings(ParameterRole.BODY), args, descriptor.is_form_data
    )

    if descriptor.is_form_data and default_headers:
        # the transport sets the form content type itself
        default_headers = {
            key: value
            for key, value in default_headers.items()
            if key.lower() != HEADER_CONTENT_TYPE.lower()
        }

    headers = compose_headers(
        default_headers,
        descriptor.static_headers,
        bindings(ParameterRole.HEADER),
        args,
    )

    spec = RequestSpec(
        method=descriptor.verb or "GET",
        url=join_url(base_url, path),
        params=params,
        headers=headers,
        content=content,
        data=data,
    )
    logger.debug(f"Assembled {name}: {spec.method} {spec.full_url}")
    return spec
