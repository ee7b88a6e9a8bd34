"""Configuration for the REST API under test."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, SecretStr, ValidationError

DEFAULT_BASE_URL = "http://localhost:31494"


class ConfigError(Exception):
    """Raised when the environment holds an invalid configuration."""


class ApiConfig(BaseModel):
    """Connection settings shared by all API clients."""

    base_url: str = DEFAULT_BASE_URL
    products_path: str = "/api/products"
    users_path: str = "/api/users"
    time_path: str = "/api/time"
    timeout: float = 10.0
    token: SecretStr | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ApiConfig":
        """Build the configuration from API_* environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Raises:
            ConfigError: If a variable holds a value of the wrong type

        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if base_url := env.get("API_BASE_URL"):
            values["base_url"] = base_url
        if timeout := env.get("API_TIMEOUT"):
            values["timeout"] = timeout
        if token := env.get("API_TOKEN"):
            values["token"] = token

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigError(f"Invalid API configuration: {e}") from e
