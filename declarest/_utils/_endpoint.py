import re
from typing import Any, Dict, List, Mapping, Sequence

from .._params import ParameterBinding
from ..models.exceptions import MissingPathParameterError
from ._encoding import to_text

_PLACEHOLDER = re.compile(r"\{([^{}/?&]+)\}")


class UrlTemplate(str):
    """A string subclass representing a URL template with ``{name}`` placeholders.

    The template is split once into its path and query parts so that absent
    optional values can be dropped segment by segment instead of being
    rendered into the URL.

    Examples:
        >>> template = UrlTemplate("/items/{id}")
        >>> template.resolve({"id": 42})
        '/items/42'
        >>> template.resolve({"id": None})
        '/items'

        >>> template = UrlTemplate("/items?x={x}&y={y}")
        >>> template.resolve({"x": None, "y": 2})
        '/items?y=2'

    Args:
        template (str): The URL template. It is used verbatim, relative to the
            service base URL.
    """

    def __new__(cls, template: str) -> "UrlTemplate":
        return super().__new__(cls, template)

    def __repr__(self) -> str:
        return f"UrlTemplate({super().__str__()!r})"

    @property
    def placeholders(self) -> List[str]:
        """Names of the placeholders, in order of appearance."""
        return _PLACEHOLDER.findall(self)

    @property
    def path_part(self) -> str:
        return self.split("?", 1)[0]

    @property
    def query_part(self) -> str:
        parts = self.split("?", 1)
        return parts[1] if len(parts) == 2 else ""

    def resolve(self, values: Mapping[str, Any]) -> str:
        """Substitutes placeholders with ``values``.

        A value of ``None`` marks the placeholder as absent: a query fragment
        using it is dropped, and trailing path segments made of it are
        truncated. Placeholders missing from ``values`` are left untouched.

        Raises:
            MissingPathParameterError: If an absent value is used by a path
                segment that is not trailing.
        """
        path = self._resolve_path(values)
        query = self._resolve_query(values)
        return f"{path}?{query}" if query else path

    def _resolve_path(self, values: Mapping[str, Any]) -> str:
        segments = self.path_part.split("/")

        while segments and self._is_absent_segment(segments[-1], values):
            # template made of a single absent placeholder
            if len(segments) == 1:
                segments = []
                break
            segments.pop()

        resolved = []
        for segment in segments:
            absent = self._absent_names(segment, values)
            if absent:
                raise MissingPathParameterError(absent[0], str(self))
            resolved.append(self._substitute(segment, values))

        return "/".join(resolved)

    def _resolve_query(self, values: Mapping[str, Any]) -> str:
        if not self.query_part:
            return ""

        fragments = [
            self._substitute(fragment, values)
            for fragment in self.query_part.split("&")
            if fragment and not self._absent_names(fragment, values)
        ]
        return "&".join(fragments)

    @staticmethod
    def _absent_names(text: str, values: Mapping[str, Any]) -> List[str]:
        return [
            name
            for name in _PLACEHOLDER.findall(text)
            if name in values and values[name] is None
        ]

    def _is_absent_segment(self, segment: str, values: Mapping[str, Any]) -> bool:
        match = _PLACEHOLDER.fullmatch(segment)
        if match is None:
            return False
        name = match.group(1)
        return name in values and values[name] is None

    @staticmethod
    def _substitute(text: str, values: Mapping[str, Any]) -> str:
        def replace(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name not in values:
                return match.group(0)
            return to_text(values[name])

        return _PLACEHOLDER.sub(replace, text)


def path_values(
    bindings: Sequence[ParameterBinding], args: Sequence[Any]
) -> Dict[str, Any]:
    """Maps every path binding key to the argument it is bound to."""
    values: Dict[str, Any] = {}
    for binding in bindings:
        values.setdefault(binding.key, args[binding.index])
    return values


def resolve_path(
    template: str, bindings: Sequence[ParameterBinding], args: Sequence[Any]
) -> str:
    return UrlTemplate(template).resolve(path_values(bindings, args))
