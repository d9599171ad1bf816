import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from .._utils._request_spec import RequestSpec

logger = logging.getLogger(__name__)

_tracer_instance: Optional[trace.Tracer] = None


def get_tracer() -> trace.Tracer:
    """Lazily initializes and returns the tracer instance."""
    global _tracer_instance
    if _tracer_instance is None:
        logger.debug("Initializing tracer instance")
        _tracer_instance = trace.get_tracer("declarest")
    return _tracer_instance


@contextmanager
def dispatch_span(name: str, spec: RequestSpec, strategy: str) -> Iterator[Span]:
    """Runs a dispatch inside a span carrying the request line.

    Failures are recorded on the span and re-raised unchanged.
    """
    with get_tracer().start_as_current_span(
        name,
        attributes={
            "http.request.method": spec.method,
            "url.full": spec.full_url,
            "declarest.strategy": strategy,
        },
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
