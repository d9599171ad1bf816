from os import environ as env
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ._utils.constants import ENV_ACCESS_TOKEN, ENV_BASE_URL, ENV_TIMEOUT
from .models.errors import BaseUrlMissingError


class Config(BaseModel):
    base_url: str
    secret: Optional[str] = None
    timeout: Optional[float] = 30.0
    default_headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        *,
        base_url: Optional[str] = None,
        secret: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> "Config":
        """Builds a configuration, falling back to the environment.

        A ``.env`` file in the working directory is loaded first. Explicit
        arguments win over ``DECLAREST_BASE_URL``, ``DECLAREST_ACCESS_TOKEN``
        and ``DECLAREST_TIMEOUT``.

        Raises:
            BaseUrlMissingError: If no base URL is given nor configured.
        """
        load_dotenv(find_dotenv(usecwd=True), override=False)

        values = {
            "base_url": base_url or env.get(ENV_BASE_URL),
            "secret": secret or env.get(ENV_ACCESS_TOKEN),
        }
        timeout_value = timeout if timeout is not None else env.get(ENV_TIMEOUT)
        if timeout_value is not None:
            values["timeout"] = timeout_value

        try:
            return cls(**values)
        except ValidationError as e:
            for error in e.errors():
                if error["loc"][0] == "base_url":
                    raise BaseUrlMissingError() from e
            raise
