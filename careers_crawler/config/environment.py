"""Environment variable loading and validation."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        google_cloud_project: Optional[str] = None,
        google_application_credentials: Optional[str] = None,
        browser_headless: Optional[bool] = None,
        environment: str = "local",
    ):
        self.log_level = log_level
        self.google_cloud_project = google_cloud_project
        self.google_application_credentials = google_application_credentials
        self.browser_headless = browser_headless
        self.environment = environment


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - GOOGLE_CLOUD_PROJECT: Default project for storage and warehouse clients
    - GOOGLE_APPLICATION_CREDENTIALS: Service account key file (must exist if set)
    - BROWSER_HEADLESS: Override browser.headless (true/false)
    - ENVIRONMENT: Environment label attached to log records (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If any variable is present but invalid
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    credentials = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if credentials and not Path(credentials).is_file():
        errors.append(f"GOOGLE_APPLICATION_CREDENTIALS points to a missing file: {credentials}")

    headless = None
    headless_str = os.getenv("BROWSER_HEADLESS")
    if headless_str:
        normalized = headless_str.strip().lower()
        if normalized in _TRUE_VALUES:
            headless = True
        elif normalized in _FALSE_VALUES:
            headless = False
        else:
            errors.append(f"Invalid BROWSER_HEADLESS: '{headless_str}'. Use true or false.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and review the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level or None,
        google_cloud_project=os.getenv("GOOGLE_CLOUD_PROJECT") or None,
        google_application_credentials=credentials or None,
        browser_headless=headless,
        environment=os.getenv("ENVIRONMENT", "local"),
    )
