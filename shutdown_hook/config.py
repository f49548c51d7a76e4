"""
Configuration management for shutdown-hook.

Settings are read from environment variables prefixed with SHUTDOWN_HOOK_
(and an optional .env file). Explicit arguments always win over the
environment.
"""
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from shutdown_hook.errors import ConfigurationError

DEFAULT_TIMEOUT_MS = 10000


class ShutdownSettings(BaseSettings):
    """
    Hook settings, fixed once a ShutdownHook is constructed.
    """

    # Reverse insertion order before sorting by task order
    lifo: bool = False

    # Aggregate budget for the whole shutdown pass
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)

    # Run plain callables in a worker thread so the deadline can still fire
    offload_sync: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHUTDOWN_HOOK_",
        extra="ignore",
        frozen=True,
    )


def load_settings(**overrides: Any) -> ShutdownSettings:
    """
    Build settings from the environment, applying non-None overrides.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    explicit = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ShutdownSettings(**explicit)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid shutdown hook configuration: {e}") from e
