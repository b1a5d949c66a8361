"""Browser network capture into HAR files.

This package drives Chromium through a list of URLs with Playwright, records
every request/response exchange via the built-in HAR recorder, and returns
the trace together with request, page and cookie summaries.
"""

from .capture_session import run_capture
from .exceptions import (
  BrowserAcquisitionError,
  CaptureError,
  InvalidOptionsError,
  TraceFinalizationError,
)
from .models import CaptureOptions, CaptureResult, CrawlOptions, CrawlResult

__all__ = [
  'BrowserAcquisitionError',
  'CaptureError',
  'CaptureOptions',
  'CaptureResult',
  'CrawlOptions',
  'CrawlResult',
  'InvalidOptionsError',
  'TraceFinalizationError',
  'run_capture',
]
