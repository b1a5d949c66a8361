"""Browser management utilities for HAR capture.

Handles the Playwright driver, browser and recording-context lifecycle, plus
the temporary HAR destination the recorder writes to.
"""

import logging
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from playwright.sync_api import BrowserContext
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import Settings, settings as default_settings
from .exceptions import BrowserAcquisitionError, TraceFinalizationError
from .models import CaptureOptions

logger = logging.getLogger(__name__)


@contextmanager
def temporary_har_path() -> Iterator[Path]:
  """Yield a unique HAR path inside a private temporary directory.

  The directory (and whatever the recorder wrote into it) is removed when the
  block exits, on success or failure.
  """
  with tempfile.TemporaryDirectory(prefix="har-capture-") as tmp_dir:
    yield Path(tmp_dir) / f"capture_{time.time_ns()}.har"


class BrowserManager:
  """Manager for the browser and its HAR-recording context.

  Resources are acquired in the order driver, browser, context and released
  in reverse. Closing the context is what makes Playwright write the HAR, so
  it always happens before the browser goes away.
  """

  def __init__(
    self,
    settings: Optional[Settings] = None,
    playwright_factory: Callable = sync_playwright,
  ):
    """Initialize browser manager.

    Args:
      settings: Capture settings (defaults to the global instance)
      playwright_factory: Callable returning a Playwright context manager
    """
    self.settings = settings or default_settings
    self._playwright_factory = playwright_factory

  def _start_driver(self):
    try:
      return self._playwright_factory().start()
    except PlaywrightError as exc:
      raise BrowserAcquisitionError("Failed to start Playwright driver", original_error=exc) from exc

  def _launch_browser(self, playwright, options: CaptureOptions):
    try:
      return playwright.chromium.launch(
        headless=options.headless,
        args=list(self.settings.BROWSER_ARGS),
      )
    except PlaywrightError as exc:
      raise BrowserAcquisitionError("Failed to launch browser", original_error=exc) from exc

  def _new_context(self, browser, har_path: Path) -> BrowserContext:
    try:
      return browser.new_context(
        record_har_path=str(har_path),
        user_agent=self.settings.CAPTURE_USER_AGENT,
      )
    except PlaywrightError as exc:
      raise BrowserAcquisitionError("Failed to create recording context", original_error=exc) from exc

  def _launch_persistent_context(self, playwright, options: CaptureOptions, har_path: Path) -> BrowserContext:
    user_data_dir = Path(options.user_data_dir).expanduser()
    try:
      return playwright.chromium.launch_persistent_context(
        str(user_data_dir),
        headless=options.headless,
        args=list(self.settings.BROWSER_ARGS),
        record_har_path=str(har_path),
        user_agent=self.settings.CAPTURE_USER_AGENT,
      )
    except PlaywrightError as exc:
      raise BrowserAcquisitionError(
        f"Failed to launch persistent context from {user_data_dir}",
        original_error=exc,
      ) from exc

  @staticmethod
  def _close_context(context: BrowserContext, har_path: Path) -> None:
    try:
      context.close()
    except PlaywrightError as exc:
      raise TraceFinalizationError(
        "Recording context failed to close; HAR was not flushed",
        path=str(har_path),
        original_error=exc,
      ) from exc

  @staticmethod
  def _discard_context(context: BrowserContext) -> None:
    try:
      context.close()
    except PlaywrightError as exc:
      logger.warning("Recording context failed to close after an earlier error: %s", exc)

  @staticmethod
  def _release(release: Callable[[], None], name: str) -> None:
    try:
      release()
    except PlaywrightError as exc:
      logger.warning("Failed to release %s: %s", name, exc)

  @contextmanager
  def session(self, options: CaptureOptions, har_path: Path) -> Iterator[BrowserContext]:
    """Open a browser context that records all traffic to `har_path`.

    With `options.user_data_dir` set, a persistent context is launched
    against that profile; it owns its browser, so there is no separate
    browser to close.

    Args:
      options: Session configuration
      har_path: Where the recorder writes the HAR when the context closes

    Yields:
      Playwright BrowserContext with HAR recording enabled

    Raises:
      BrowserAcquisitionError: If the driver, browser or context can't start
      TraceFinalizationError: If the context fails to close after a clean exit
        from the block; when the block raised, its error is kept and the
        close failure is only logged
    """
    playwright = self._start_driver()
    try:
      browser = None
      try:
        if options.user_data_dir:
          logger.info("Launching persistent context (profile: %s)", options.user_data_dir)
          context = self._launch_persistent_context(playwright, options, har_path)
        else:
          logger.info("Launching Chromium (headless=%s)", options.headless)
          browser = self._launch_browser(playwright, options)
          context = self._new_context(browser, har_path)

        try:
          yield context
        except BaseException:
          self._discard_context(context)
          raise
        self._close_context(context, har_path)
      finally:
        if browser is not None:
          self._release(browser.close, "browser")
    finally:
      self._release(playwright.stop, "driver")
