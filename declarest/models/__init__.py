from .errors import BaseUrlMissingError
from .exceptions import (
    DescriptorError,
    EnrichedException,
    MissingPathParameterError,
    RegistryFrozenError,
    ResponseDecodeError,
)

__all__ = [
    "BaseUrlMissingError",
    "DescriptorError",
    "EnrichedException",
    "MissingPathParameterError",
    "RegistryFrozenError",
    "ResponseDecodeError",
]
