from ._traced import dispatch_span, get_tracer

__all__ = ["dispatch_span", "get_tracer"]
