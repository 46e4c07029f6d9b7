"""Configuration management for the careers crawler."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    BrowserConfig,
    CrawlConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    OutputConfig,
    OutputFormat,
    SelectorConfig,
    WarehouseConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "CrawlConfig",
    "SelectorConfig",
    "OutputConfig",
    "WarehouseConfig",
    "BrowserConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "OutputFormat",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
