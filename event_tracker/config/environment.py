"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        anthropic_api_key: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        data_dir: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        self.anthropic_api_key = anthropic_api_key or None
        self.host = host
        self.port = port
        self.data_dir = data_dir
        self.log_level = log_level

    @property
    def has_api_key(self) -> bool:
        return bool(self.anthropic_api_key)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional. A missing ANTHROPIC_API_KEY does not fail
    startup; scans report it as a configuration error instead.

    - ANTHROPIC_API_KEY: key for the language-model API
    - HOST / PORT: override the server bind address
    - DATA_DIR: override the directory holding events.json and meta.json
    - LOG_LEVEL: override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    api_key = (os.getenv("ANTHROPIC_API_KEY") or "").strip()
    host = os.getenv("HOST") or None
    port_str = os.getenv("PORT")
    data_dir = os.getenv("DATA_DIR") or None
    log_level = os.getenv("LOG_LEVEL") or None

    port = None
    if port_str:
        try:
            port = int(port_str)
            if port < 1 or port > 65535:
                errors.append(f"Invalid PORT: {port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid PORT: '{port_str}'. Must be a valid integer.")

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        anthropic_api_key=api_key,
        host=host,
        port=port,
        data_dir=data_dir,
        log_level=log_level,
    )
