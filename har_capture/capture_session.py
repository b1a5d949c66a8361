"""Capture session: visit targets in a browser and return the recorded HAR."""

import logging
from typing import Optional, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .browser_manager import BrowserManager, temporary_har_path
from .config import Settings, settings as default_settings
from .exceptions import BrowserAcquisitionError, InvalidOptionsError
from .har import aggregate_cookies, count_requests, drop_failed_navigations, load_har
from .models import CaptureOptions, CaptureResult, CrawlResult

logger = logging.getLogger(__name__)


def visit_target(page, url: str, options: CaptureOptions, settings: Settings) -> bool:
  """Navigate one target and let its traffic settle.

  Returns:
    True if the page loaded, False if navigation failed and it was skipped
  """
  logger.info("Visiting %s...", url)
  try:
    page.goto(url, wait_until="load", timeout=settings.NAVIGATION_TIMEOUT_MS)
  except PlaywrightError as exc:
    logger.warning("Failed to load %s: %s", url, exc)
    return False

  # Long-polling pages never go idle.
  try:
    page.wait_for_load_state("networkidle", timeout=settings.NETWORK_IDLE_TIMEOUT_MS)
  except PlaywrightTimeoutError:
    logger.debug("Network did not go idle on %s within %sms", url, settings.NETWORK_IDLE_TIMEOUT_MS)
  except PlaywrightError as exc:
    logger.warning("Stopped waiting on %s: %s", url, exc)

  if options.wait_ms:
    try:
      page.wait_for_timeout(options.wait_ms)
    except PlaywrightError as exc:
      logger.warning("Pause on %s cut short: %s", url, exc)
  return True


def run_capture(
  targets: Sequence[str],
  options: Optional[CaptureOptions] = None,
  settings: Optional[Settings] = None,
  browser_manager: Optional[BrowserManager] = None,
) -> CaptureResult:
  """Visit every target in order and capture the network traffic as HAR.

  Args:
    targets: Addresses to visit, in order
    options: Session configuration (defaults to CaptureOptions())
    settings: Capture settings (defaults to the global instance)
    browser_manager: Browser lifecycle manager (built from settings if omitted)

  Returns:
    CaptureResult with the parsed HAR, request count, visited-page count
    and aggregated cookies

  Raises:
    InvalidOptionsError: If no targets are given
    BrowserAcquisitionError: If the browser or recording context can't start
    TraceFinalizationError: If the HAR can't be flushed or read back
  """
  targets = list(targets)
  if not targets:
    raise InvalidOptionsError("At least one target URL is required")

  options = options or CaptureOptions()
  settings = settings or default_settings
  manager = browser_manager or BrowserManager(settings)

  pages_visited = 0
  failed_targets = []
  with temporary_har_path() as har_path:
    with manager.session(options, har_path) as context:
      try:
        page = context.new_page()
      except PlaywrightError as exc:
        raise BrowserAcquisitionError("Failed to open a page in the recording context", original_error=exc) from exc

      for url in targets:
        if visit_target(page, url, options, settings):
          pages_visited += 1
        else:
          failed_targets.append(url)

    har = drop_failed_navigations(load_har(har_path), failed_targets)

  request_count = count_requests(har)
  cookies = aggregate_cookies(har)
  logger.info(
    "Captured %d request(s) across %d/%d page(s)",
    request_count,
    pages_visited,
    len(targets),
  )

  return CaptureResult(
    har=har,
    request_count=request_count,
    crawl_result=CrawlResult(pages_crawled=pages_visited),
    cookies=cookies,
  )
