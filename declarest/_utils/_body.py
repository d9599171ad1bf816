from typing import Any, Optional, Sequence, Tuple

from .._params import ParameterBinding
from ._encoding import to_json


def serialize_body(
    bindings: Sequence[ParameterBinding],
    args: Sequence[Any],
    is_form_data: bool = False,
) -> Tuple[Optional[str], Optional[Any]]:
    """Builds the request body.

    Returns:
        Tuple[Optional[str], Optional[Any]]: The JSON text and the raw form
            data; at most one of them is set. Form-data methods send their
            first argument untouched, other methods JSON encode the argument
            of their first body binding.
    """
    if is_form_data:
        return None, args[0] if args else None

    if not bindings:
        return None, None

    value = args[bindings[0].index]
    if value is None:
        return None, None

    return to_json(value), None
