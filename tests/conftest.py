"""Pytest configuration and fake Playwright objects for capture tests."""

import json
from pathlib import Path

import pytest
from dotenv import load_dotenv
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from har_capture.browser_manager import BrowserManager
from har_capture.config import Settings


def pytest_configure(config):
  """
  Load environment variables from .env file before running tests.

  Only the end-to-end suite reads them (RUN_E2E); unit tests use explicit
  Settings instances.
  """
  env_file = Path(__file__).resolve().parent.parent / ".env"
  if env_file.exists():
    load_dotenv(env_file)


class FakePage:
  """Page that records a HAR entry for every successful navigation."""

  def __init__(self, context):
    self.context = context
    self.pauses = []

  def goto(self, url, wait_until=None, timeout=None):
    self.context.events.append(("goto", url))
    if url in self.context.failing_urls:
      self.context.entries.append(self.context.make_failed_entry(url))
      raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
    for index in range(self.context.requests_per_page):
      self.context.entries.append(self.context.make_entry(url, index))

  def wait_for_load_state(self, state=None, timeout=None):
    url = self.context.events[-1][1]
    if url in self.context.never_idle_urls:
      raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

  def wait_for_timeout(self, timeout):
    self.pauses.append(timeout)
    url = self.context.events[-1][1]
    if url in self.context.interrupted_pause_urls:
      raise PlaywrightError("Target page, context or browser has been closed")


class FakeContext:
  """Recording context that writes its HAR on close, like Playwright."""

  def __init__(self, har_path, events, cookies_by_url, failing_urls, never_idle_urls, requests_per_page, close_payload):
    self.har_path = Path(har_path)
    self.events = events
    self.cookies_by_url = cookies_by_url
    self.failing_urls = failing_urls
    self.never_idle_urls = never_idle_urls
    self.requests_per_page = requests_per_page
    self.close_payload = close_payload
    self.fail_on_close = False
    self.interrupted_pause_urls = set()
    self.entries = []
    self.pages = []
    self.closed = False

  def make_entry(self, url, index):
    request_cookies, response_cookies = self.cookies_by_url.get(url, ([], [])) if index == 0 else ([], [])
    return {
      "startedDateTime": "2026-01-01T00:00:00.000Z",
      "time": 12.5,
      "request": {
        "method": "GET",
        "url": url if index == 0 else f"{url}/asset-{index}.js",
        "httpVersion": "HTTP/1.1",
        "headers": [],
        "cookies": request_cookies,
      },
      "response": {
        "status": 200,
        "statusText": "OK",
        "headers": [],
        "cookies": response_cookies,
        "content": {"size": 0, "mimeType": "text/html"},
      },
      "timings": {"send": 0, "wait": 10, "receive": 2.5},
    }

  def make_failed_entry(self, url):
    """Playwright keeps failed requests with status -1 and a failure text."""
    return {
      "startedDateTime": "2026-01-01T00:00:00.000Z",
      "time": -1,
      "request": {"method": "GET", "url": url + "/", "headers": [], "cookies": []},
      "response": {"status": -1, "statusText": "", "headers": [], "cookies": [], "_failureText": "net::ERR_NAME_NOT_RESOLVED"},
      "timings": {"send": -1, "wait": -1, "receive": -1},
    }

  def new_page(self):
    page = FakePage(self)
    self.pages.append(page)
    return page

  def close(self):
    self.events.append(("close_context", str(self.har_path)))
    self.closed = True
    if self.fail_on_close:
      raise PlaywrightError("Browser has been closed")
    if self.close_payload is not None:
      self.har_path.write_text(self.close_payload, encoding="utf-8")
      return
    har = {"log": {"version": "1.2", "creator": {"name": "Playwright"}, "entries": self.entries}}
    self.har_path.write_text(json.dumps(har), encoding="utf-8")


class FakeBrowser:

  def __init__(self, driver):
    self.driver = driver

  def new_context(self, record_har_path=None, user_agent=None):
    self.driver.events.append(("new_context", user_agent))
    if self.driver.fail_on == "context":
      raise PlaywrightError("Target page, context or browser has been closed")
    return self.driver.build_context(record_har_path)

  def close(self):
    self.driver.events.append(("close_browser", None))
    if self.driver.fail_on == "close_browser":
      raise PlaywrightError("Browser has been closed")


class FakeChromium:

  def __init__(self, driver):
    self.driver = driver

  def launch(self, headless=None, args=None):
    self.driver.events.append(("launch", headless))
    self.driver.launch_kwargs = {"headless": headless, "args": args}
    if self.driver.fail_on == "launch":
      raise PlaywrightError("Executable doesn't exist")
    return FakeBrowser(self.driver)

  def launch_persistent_context(self, user_data_dir, **kwargs):
    self.driver.events.append(("launch_persistent", user_data_dir))
    self.driver.launch_kwargs = dict(kwargs, user_data_dir=user_data_dir)
    if self.driver.fail_on == "launch":
      raise PlaywrightError("Profile directory is locked")
    return self.driver.build_context(kwargs["record_har_path"])


class FakePlaywright:
  """Stands in for the object returned by `sync_playwright().start()`."""

  def __init__(self):
    self.events = []
    self.cookies_by_url = {}
    self.failing_urls = set()
    self.never_idle_urls = set()
    self.interrupted_pause_urls = set()
    self.requests_per_page = 1
    self.close_payload = None
    self.fail_on = None
    self.launch_kwargs = None
    self.contexts = []
    self.chromium = FakeChromium(self)

  def build_context(self, har_path):
    context = FakeContext(
      har_path,
      self.events,
      self.cookies_by_url,
      self.failing_urls,
      self.never_idle_urls,
      self.requests_per_page,
      self.close_payload,
    )
    context.interrupted_pause_urls = self.interrupted_pause_urls
    self.contexts.append(context)
    return context

  def start(self):
    self.events.append(("start", None))
    return self

  def stop(self):
    self.events.append(("stop", None))
    if self.fail_on == "stop":
      raise PlaywrightError("Connection closed")


@pytest.fixture
def capture_settings():
  """Settings with short timeouts and no .env influence."""
  return Settings(
    _env_file=None,
    NAVIGATION_TIMEOUT_MS=1000,
    NETWORK_IDLE_TIMEOUT_MS=500,
    CAPTURE_USER_AGENT="test-agent/1.0",
  )


@pytest.fixture
def fake_playwright():
  """Fake Playwright driver; configure failing/never-idle URLs on it."""
  return FakePlaywright()


@pytest.fixture
def browser_manager(capture_settings, fake_playwright):
  """BrowserManager wired to the fake driver."""
  return BrowserManager(capture_settings, playwright_factory=lambda: fake_playwright)
