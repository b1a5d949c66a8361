"""Custom exceptions for HAR capture.

This module defines a small hierarchy of exceptions with error codes and
user-friendly messages. Fatal session failures (browser acquisition and trace
finalization) and invalid caller input are raised; per-target navigation
failures are logged and skipped instead.
"""

from typing import Any, Dict, Optional


class CaptureError(Exception):
  """Base exception for all capture errors.

  Attributes:
    message: User-friendly error message
    error_code: Machine-readable error code
    details: Additional error details (optional)
  """

  def __init__(
    self,
    message: str,
    error_code: str = "CAPTURE_ERROR",
    details: Optional[Dict[str, Any]] = None,
  ):
    """Initialize base capture exception with common error fields."""
    self.message = message
    self.error_code = error_code
    self.details = details or {}
    super().__init__(self.message)

  def to_dict(self) -> Dict[str, Any]:
    """Convert exception to dictionary for JSON output."""
    response = {
      "error": {
        "message": self.message,
        "code": self.error_code,
      }
    }
    if self.details:
      response["error"]["details"] = self.details
    return response


class InvalidOptionsError(CaptureError):
  """Targets or session options are invalid.

  Raised before any browser resources are acquired.
  """

  def __init__(self, message: str = "Invalid capture options", details: Optional[Dict[str, Any]] = None):
    """Build invalid-options error with optional detail payload."""
    super().__init__(
      message=message,
      error_code="INVALID_OPTIONS",
      details=details,
    )


class BrowserAcquisitionError(CaptureError):
  """The browser process or recording context could not be started."""

  def __init__(self, message: str, original_error: Optional[Exception] = None):
    """Build acquisition error, keeping the underlying error text."""
    details = {"original_error": str(original_error)} if original_error else None
    super().__init__(
      message=message,
      error_code="BROWSER_ACQUISITION_FAILED",
      details=details,
    )


class TraceFinalizationError(CaptureError):
  """The flushed HAR could not be read back or parsed."""

  def __init__(self, message: str, path: Optional[str] = None, original_error: Optional[Exception] = None):
    """Build finalization error including the HAR location when known."""
    details: Dict[str, Any] = {}
    if path:
      details["path"] = path
    if original_error:
      details["original_error"] = str(original_error)
    super().__init__(
      message=message,
      error_code="TRACE_FINALIZATION_FAILED",
      details=details,
    )
