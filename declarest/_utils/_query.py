from typing import Any, List, Sequence, Tuple

from .._params import ParameterBinding
from ._encoding import encode_uri_component, is_structured, to_json, to_text


def _encode_value(value: Any) -> str:
    if is_structured(value):
        return encode_uri_component(to_json(value))
    return encode_uri_component(to_text(value))


def serialize_query_pairs(
    bindings: Sequence[ParameterBinding], args: Sequence[Any]
) -> List[Tuple[str, str]]:
    """Encodes bound query arguments as ordered ``(key, value)`` pairs.

    Falsy arguments are skipped, so ``0``, ``False`` and ``""`` can never be
    sent through a query binding. Lists, tuples and sets produce one pair per
    element; dicts and models are JSON encoded. Both key and value are
    percent-encoded.
    """
    pairs: List[Tuple[str, str]] = []

    for binding in bindings:
        value = args[binding.index]
        if not value:
            continue

        key = encode_uri_component(binding.key)
        if isinstance(value, (list, tuple, set, frozenset)):
            pairs.extend((key, _encode_value(item)) for item in value)
        else:
            pairs.append((key, _encode_value(value)))

    return pairs


def serialize_query(
    bindings: Sequence[ParameterBinding], args: Sequence[Any]
) -> str:
    """Same as :func:`serialize_query_pairs`, joined as ``key=value&key=value``."""
    return "&".join(
        f"{key}={value}" for key, value in serialize_query_pairs(bindings, args)
    )


def join_query(url: str, query: str) -> str:
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"
