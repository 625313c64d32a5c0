"""Configuration management for the event tracker."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    LLMConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RegionConfig,
    ScheduleConfig,
    ServerConfig,
    StorageConfig,
)

__all__ = [
    "load_config",
    "load_environment_config",
    "AppConfig",
    "RegionConfig",
    "LLMConfig",
    "ScheduleConfig",
    "ServerConfig",
    "StorageConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
