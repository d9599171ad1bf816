from ._base_service import RestService
from ._transport import HttpxTransport, Transport

__all__ = ["HttpxTransport", "RestService", "Transport"]
