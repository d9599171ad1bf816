from ._body import serialize_body
from ._encoding import encode_uri_component, to_json, to_text
from ._endpoint import UrlTemplate, resolve_path
from ._headers import compose_headers
from ._logs import setup_logging
from ._query import serialize_query, serialize_query_pairs
from ._request_spec import RequestSpec
from ._user_agent import header_user_agent, user_agent_value

__all__ = [
    "RequestSpec",
    "UrlTemplate",
    "compose_headers",
    "encode_uri_component",
    "header_user_agent",
    "resolve_path",
    "serialize_body",
    "serialize_query",
    "serialize_query_pairs",
    "setup_logging",
    "to_json",
    "to_text",
    "user_agent_value",
]
