from typing import Any, Mapping, Optional, Sequence

from httpx import Headers

from .._params import ParameterBinding
from ._encoding import to_text


def _override(headers: Headers, name: str, value: str) -> None:
    if name in headers:
        del headers[name]
    headers[name] = value


def compose_headers(
    default_headers: Optional[Mapping[str, str]],
    static_headers: Optional[Mapping[str, str]],
    bindings: Sequence[ParameterBinding],
    args: Sequence[Any],
) -> Headers:
    """Merges default, static and per-call headers, later sources winning.

    Header names are case-insensitive. An absent (``None``) per-call value
    leaves the earlier header in place.
    """
    headers = Headers(dict(default_headers or {}))

    for name, value in (static_headers or {}).items():
        _override(headers, name, value)

    for binding in bindings:
        value = args[binding.index]
        if value is None:
            continue
        _override(headers, binding.key, to_text(value))

    return headers
