"""Data models for capture sessions.

Options are pydantic models so caller input is validated before a browser is
launched. Results are plain dataclasses built once at the end of a session.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import settings as default_settings
from .exceptions import InvalidOptionsError

CAPTURE_METHOD = "playwright-har"


class CrawlOptions(BaseModel):
  """Parameters reserved for an external link-discovery crawler."""

  model_config = ConfigDict(frozen=True)

  max_pages: int = Field(
    default_factory=lambda: default_settings.DEFAULT_MAX_PAGES,
    ge=1,
    description="Upper bound on pages the crawler may visit"
  )
  discover_openapi: bool = Field(
    default=True,
    description="Look for an OpenAPI/Swagger description while crawling"
  )


class CaptureOptions(BaseModel):
  """Session configuration for one capture run."""

  model_config = ConfigDict(frozen=True)

  wait_ms: Optional[int] = Field(
    default=None,
    ge=0,
    description="Extra pause after each successful navigation, in milliseconds"
  )
  headless: bool = Field(
    default=False,
    description="Run browser without a visible window"
  )
  crawl: bool = Field(
    default=True,
    description="Whether a crawler collaborator should run (informational here)"
  )
  crawl_options: Optional[CrawlOptions] = None
  user_data_dir: Optional[Path] = Field(
    default=None,
    description="Persistent browser profile directory"
  )


def build_capture_options(**values: Any) -> CaptureOptions:
  """Validate raw option values, raising InvalidOptionsError on bad input."""
  try:
    return CaptureOptions(**values)
  except ValidationError as exc:
    errors = [
      {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
      for err in exc.errors()
    ]
    raise InvalidOptionsError("Invalid capture options", details={"errors": errors}) from exc


@dataclass
class CrawlResult:
  """What the crawler (or the linear visit loop) reports back."""
  pages_crawled: int
  openapi_source: Optional[str] = None


@dataclass
class CaptureResult:
  """HAR trace plus the summaries derived from it."""

  har: Dict[str, Any]
  request_count: int
  crawl_result: CrawlResult
  cookies: Dict[str, str] = field(default_factory=dict)
  method: str = CAPTURE_METHOD

  def to_dict(self) -> Dict[str, Any]:
    """Convert the summary (without the HAR body) to a JSON-serializable dictionary."""
    return {
      "method": self.method,
      "request_count": self.request_count,
      "crawl_result": {
        "pages_crawled": self.crawl_result.pages_crawled,
        "openapi_source": self.crawl_result.openapi_source,
      },
      "cookies": dict(self.cookies),
    }
