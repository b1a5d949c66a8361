"""HAR (HTTP Archive) helpers.

Reads back the trace written by Playwright's recorder, derives the request
count and cookie map, and writes traces to disk unchanged so other HAR tools
can consume them.
"""

import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import urlsplit, urlunsplit

from .exceptions import TraceFinalizationError

PathLike = Union[str, Path]


def load_har(path: PathLike) -> Dict[str, Any]:
  """Load and parse a finalized HAR file.

  Args:
    path: Location of the HAR written by the recording context

  Returns:
    Parsed HAR dictionary

  Raises:
    TraceFinalizationError: If the file is missing, unreadable, not JSON,
      or has no `log.entries` list
  """
  har_path = Path(path)
  try:
    content = har_path.read_text(encoding="utf-8")
  except OSError as exc:
    raise TraceFinalizationError("HAR file could not be read", path=str(har_path), original_error=exc) from exc

  try:
    har = json.loads(content)
  except json.JSONDecodeError as exc:
    raise TraceFinalizationError("HAR file is not valid JSON", path=str(har_path), original_error=exc) from exc

  log = har.get("log") if isinstance(har, dict) else None
  if not isinstance(log, dict) or not isinstance(log.get("entries"), list):
    raise TraceFinalizationError("HAR file has no log.entries list", path=str(har_path))
  return har


def har_entries(har: Dict[str, Any]) -> List[Dict[str, Any]]:
  """Return the exchange records of a HAR, or an empty list."""
  log = har.get("log") or {}
  return log.get("entries") or []


def count_requests(har: Dict[str, Any]) -> int:
  """Number of exchange records in the trace."""
  return len(har_entries(har))


def _normalize_url(url: str) -> str:
  url = (url or "").strip()
  try:
    parts = urlsplit(url)
  except ValueError:
    return url
  return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", parts.query, ""))


def _is_failed_entry(entry: Dict[str, Any]) -> bool:
  response = entry.get("response") or {}
  return "_failureText" in response or (response.get("status") or 0) <= 0


def drop_failed_navigations(har: Dict[str, Any], failed_urls: Sequence[str]) -> Dict[str, Any]:
  """Remove entries the recorder kept for navigations that never got a response.

  Only entries whose request URL matches a skipped target and whose response
  failed (no status, or a `_failureText` from Playwright) are removed; every
  other entry is left untouched and in order.
  """
  if not failed_urls:
    return har
  failed = {_normalize_url(url) for url in failed_urls}
  log = har.get("log") or {}
  log["entries"] = [
    entry for entry in har_entries(har)
    if not (
      _normalize_url((entry.get("request") or {}).get("url", "")) in failed
      and _is_failed_entry(entry)
    )
  ]
  return har


def _merge_cookies(target: Dict[str, str], cookies: Optional[List[Dict[str, Any]]]) -> None:
  for cookie in cookies or []:
    name = cookie.get("name")
    if not name:
      continue
    target[name] = cookie.get("value", "")


def aggregate_cookies(har: Dict[str, Any]) -> Dict[str, str]:
  """Collect cookies from every entry into a single name -> value map.

  Entries are walked in trace order; within an entry request cookies are
  merged before response cookies. The last value seen for a name wins no
  matter which side supplied it.
  """
  cookies: Dict[str, str] = {}
  for entry in har_entries(har):
    _merge_cookies(cookies, (entry.get("request") or {}).get("cookies"))
    _merge_cookies(cookies, (entry.get("response") or {}).get("cookies"))
  return cookies


def default_output_path(prefix: str, now: Optional[float] = None) -> Path:
  """Build `./<prefix>-<epoch millis>.har`."""
  timestamp = now if now is not None else time.time()
  return Path(f"./{prefix}-{int(timestamp * 1000)}.har")


def write_har(har: Dict[str, Any], output_path: PathLike) -> Path:
  """Write a HAR to disk as-is and return its absolute path."""
  path = Path(output_path).resolve()
  path.parent.mkdir(parents=True, exist_ok=True)
  with open(path, "w", encoding="utf-8") as f:
    json.dump(har, f, indent=2)
  return path
