from typing import Optional

from httpx import HTTPStatusError


class DescriptorError(Exception):
    """Raised when a service method is declared inconsistently.

    Declaration problems are detected while the owning class body is executed,
    so a broken service fails at import time rather than on the first call.
    """

    def __init__(self, method_name: str, reason: str) -> None:
        self.method_name = method_name
        self.reason = reason
        super().__init__(f"invalid declaration of '{method_name}': {reason}")


class RegistryFrozenError(Exception):
    """Raised when a binding is recorded after the registry was frozen."""

    def __init__(self, owner: str, method_name: str) -> None:
        self.message = (
            f"parameter registry of '{owner}' is frozen; "
            f"cannot record bindings for '{method_name}'"
        )
        super().__init__(self.message)


class MissingPathParameterError(ValueError):
    """Raised when an absent argument is bound to a non-trailing path segment."""

    def __init__(self, key: str, url_template: str) -> None:
        self.key = key
        self.url_template = url_template
        super().__init__(
            f"path parameter '{key}' is required by '{url_template}' "
            "unless it is the last segment"
        )


class ResponseDecodeError(ValueError):
    """Raised when a blocking call receives a body that is not valid JSON."""

    def __init__(self, url: str, content: Optional[str]) -> None:
        self.url = url
        self.content = content
        super().__init__(
            f"\nRequest URL: {url}"
            f"\nResponse Content: {content if content else 'No content'}"
        )


class EnrichedException(Exception):
    def __init__(self, error: HTTPStatusError) -> None:
        # Extract the relevant details from the HTTPStatusError
        status_code = error.response.status_code if error.response else "Unknown"
        url = str(error.request.url) if error.request else "Unknown"
        response_content = (
            error.response.content.decode("utf-8")
            if error.response is not None and error.response.content
            else "No content"
        )

        self.status_code = status_code
        self.url = url

        enriched_message = (
            f"\nRequest URL: {url}"
            f"\nStatus Code: {status_code}"
            f"\nResponse Content: {response_content}"
        )

        super().__init__(enriched_message)
