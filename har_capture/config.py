"""Capture configuration settings.

This module defines the tool's configuration using Pydantic Settings, which
loads values from environment variables and .env files with type validation.

The Settings class manages:
- Browser identity (user agent, extra Chromium flags)
- Navigation and network-idle timeouts
- Crawler defaults reserved for an external link-discovery step
- Output naming for saved HAR files
- Logging levels

Configuration Priority:
1. Environment variables (highest priority)
2. .env file in project root
3. Default values defined in this module

Example:
    from har_capture.config import settings

    print(settings.NAVIGATION_TIMEOUT_MS)
"""

import logging
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
  "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
  "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
  """Capture settings using Pydantic Settings.

  Attributes:
    CAPTURE_USER_AGENT: Client identification string sent by the browser
    CAPTURE_HEADLESS: Default headless mode when the CLI flag is not given
    BROWSER_ARGS: Extra command-line flags passed to Chromium
    NAVIGATION_TIMEOUT_MS: Hard upper bound for a single page navigation
    NETWORK_IDLE_TIMEOUT_MS: How long to wait for network idle after load
    DEFAULT_MAX_PAGES: Page bound handed to the crawler collaborator
    OUTPUT_PREFIX: File name prefix for HAR files saved by the CLI
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
  """

  # Browser settings
  CAPTURE_USER_AGENT: str = Field(
    default=DEFAULT_USER_AGENT,
    description="User agent presented to target sites"
  )
  CAPTURE_HEADLESS: bool = Field(
    default=False,
    description="Run browser in headless mode unless overridden on the command line"
  )
  BROWSER_ARGS: List[str] = Field(
    default_factory=list,
    description="Extra Chromium launch flags"
  )

  # Navigation settings
  NAVIGATION_TIMEOUT_MS: int = Field(
    default=60000,
    ge=0,
    description="Navigation timeout per target in milliseconds"
  )
  NETWORK_IDLE_TIMEOUT_MS: int = Field(
    default=60000,
    ge=0,
    description="Upper bound on waiting for network idle after load"
  )

  # Crawler settings
  DEFAULT_MAX_PAGES: int = Field(
    default=15,
    ge=1,
    description="Default page bound for the crawler"
  )

  # Output settings
  OUTPUT_PREFIX: str = Field(
    default="unbrowse-capture",
    description="Prefix for default HAR output file names"
  )

  # Logging
  LOG_LEVEL: str = Field(
    default="INFO",
    description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
  )

  model_config = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=True,
    extra="ignore",
  )

  @field_validator("LOG_LEVEL", mode="before")
  @classmethod
  def normalize_log_level(cls, value: str) -> str:
    """Upper-case the level name and reject anything logging doesn't know."""
    level = str(value).strip().upper()
    if level not in VALID_LOG_LEVELS:
      raise ValueError(
        f"Invalid LOG_LEVEL '{value}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
      )
    return level

  def log_level_value(self, level: Optional[str] = None) -> int:
    """Return the numeric logging level for `level`, or for LOG_LEVEL if not given."""
    return getattr(logging, (level or self.LOG_LEVEL).upper(), logging.INFO)


# Create global settings instance
settings = Settings()
