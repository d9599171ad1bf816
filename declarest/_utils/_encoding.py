import json
from datetime import date, datetime, time
from enum import Enum
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

# Characters left untouched by JavaScript's encodeURIComponent on top of the
# ones urllib.parse.quote never escapes.
_URI_COMPONENT_SAFE = "!*'()"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Encodes a value with the exchange format used for bodies and queries."""
    return json.dumps(value, default=_json_default, separators=(",", ":"))


def is_structured(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple, BaseModel))


def to_text(value: Any) -> str:
    """Renders a scalar the way it should appear inside a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)
