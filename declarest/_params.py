from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ParameterRole(str, Enum):
    """The part of the request a method argument is written into."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"
    HEADER = "header"


@dataclass(frozen=True)
class ParameterBinding:
    """Associates a method argument position with its role and key.

    The index counts positional parameters of the declared method, ``self``
    excluded.
    """

    role: ParameterRole
    key: str
    index: int


class ParameterMarker:
    """Base class for the markers used inside ``typing.Annotated``."""

    role: ParameterRole

    def __init__(self, key: Optional[str] = None) -> None:
        self.key = key

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"


class Path(ParameterMarker):
    """Substitutes the argument into the ``{key}`` placeholder of the URL.

    Examples:
        ```python
        @get("/items/{id}")
        def retrieve(self, id: Annotated[int, Path("id")]): ...
        ```
    """

    role = ParameterRole.PATH


class Query(ParameterMarker):
    """Sends the argument as a query string value under ``key``.

    Falsy arguments (``None``, ``""``, ``0``, ``False``, empty containers) are
    not sent at all.
    """

    role = ParameterRole.QUERY


class Body(ParameterMarker):
    """Sends the argument as the JSON request body."""

    role = ParameterRole.BODY

    def __init__(self, key: Optional[str] = None) -> None:
        super().__init__(key or "body")


class Header(ParameterMarker):
    """Sends the argument as the value of the ``key`` request header."""

    role = ParameterRole.HEADER
