"""Command-line entry point for HAR capture.

Visits one or more URLs, records network traffic via Playwright's HAR
recorder, and writes the HAR JSON to disk so it can be inspected or fed into
other HAR tooling.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .capture_session import run_capture
from .config import VALID_LOG_LEVELS, Settings, settings as default_settings
from .exceptions import CaptureError
from .har import default_output_path, write_har
from .models import CrawlOptions, build_capture_options

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _non_negative_int(value: str) -> int:
  try:
    number = int(value)
  except ValueError:
    raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from None
  if number < 0:
    raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
  return number


def _positive_int(value: str) -> int:
  number = _non_negative_int(value)
  if number == 0:
    raise argparse.ArgumentTypeError("must be at least 1")
  return number


def build_parser(settings: Settings) -> argparse.ArgumentParser:
  """Create the argument parser, taking defaults from settings."""
  parser = argparse.ArgumentParser(
    prog="har-capture",
    description="Visit URLs in Chromium and save all network traffic as a HAR file.",
  )
  parser.add_argument("urls", nargs="+", metavar="url", help="URL(s) to visit, in order")
  parser.add_argument(
    "-w", "--wait",
    dest="wait_ms",
    type=_non_negative_int,
    default=None,
    help="Time to wait on each page after it loads, in milliseconds",
  )
  headless = parser.add_mutually_exclusive_group()
  headless.add_argument(
    "--headless",
    dest="headless",
    action="store_true",
    help="Run browser in headless mode",
  )
  headless.add_argument(
    "--headed",
    dest="headless",
    action="store_false",
    help="Force headed mode (window visible)",
  )
  crawl = parser.add_mutually_exclusive_group()
  crawl.add_argument(
    "--crawl",
    dest="crawl",
    action="store_true",
    help="Enable the crawler (default)",
  )
  crawl.add_argument(
    "--no-crawl",
    dest="crawl",
    action="store_false",
    help="Disable the crawler (only visit provided URLs)",
  )
  parser.add_argument(
    "--max-pages",
    type=_positive_int,
    default=settings.DEFAULT_MAX_PAGES,
    help=f"Max pages for the crawler (default: {settings.DEFAULT_MAX_PAGES})",
  )
  parser.add_argument(
    "-o", "--output",
    default=None,
    help=f"Where to save the HAR (default: ./{settings.OUTPUT_PREFIX}-<timestamp>.har)",
  )
  parser.add_argument(
    "--user-data-dir",
    default=None,
    help="Chromium profile directory for persistent auth",
  )
  parser.add_argument(
    "--log-level",
    type=str.upper,
    choices=VALID_LOG_LEVELS,
    default=settings.LOG_LEVEL,
    help=f"Logging level (default: {settings.LOG_LEVEL})",
  )
  parser.set_defaults(headless=settings.CAPTURE_HEADLESS, crawl=True)
  return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
  """Run a capture from the command line and return the exit status."""
  settings = settings or default_settings
  parser = build_parser(settings)
  args = parser.parse_args(argv)

  logging.basicConfig(
    level=settings.log_level_value(args.log_level),
    format=LOG_FORMAT,
    datefmt='%Y-%m-%d %H:%M:%S',
  )

  try:
    options = build_capture_options(
      wait_ms=args.wait_ms,
      headless=args.headless,
      crawl=args.crawl,
      crawl_options=CrawlOptions(max_pages=args.max_pages, discover_openapi=True) if args.crawl else None,
      user_data_dir=args.user_data_dir,
    )
  except CaptureError as exc:
    print(exc.message, file=sys.stderr)
    parser.print_usage(sys.stderr)
    return 2

  print("Capturing via Playwright HAR:")
  print(f"- URLs: {', '.join(args.urls)}")
  print(f"- Headless: {'yes' if options.headless else 'no'}")
  print(f"- Crawl: {'yes' if options.crawl else 'no'}")
  print()

  try:
    result = run_capture(args.urls, options, settings=settings)
  except CaptureError as exc:
    logger.debug("Capture error details: %s", exc.to_dict())
    print(f"Capture failed: {exc.message}", file=sys.stderr)
    return 1

  target = args.output or default_output_path(settings.OUTPUT_PREFIX)
  try:
    output_path = write_har(result.har, target)
  except OSError as exc:
    print(f"Capture failed: could not write HAR to {target}: {exc}", file=sys.stderr)
    return 1

  print(f"Captured {result.request_count} request(s) ({result.method}).")
  if options.crawl and result.crawl_result:
    print(f"Crawler visited {result.crawl_result.pages_crawled} page(s).")
    if result.crawl_result.openapi_source:
      print(f"OpenAPI source detected at {result.crawl_result.openapi_source}")
  print(f"Cookies captured: {len(result.cookies)}")
  print(f"HAR saved to {output_path}")
  return 0


if __name__ == "__main__":
  sys.exit(main())
