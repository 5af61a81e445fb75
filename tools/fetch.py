"""
tools/fetch.py — Retrieve the raw page for an article URL.

THE CORE CONCEPT: One request, one transport
  A Transport issues exactly one HTTP GET and either returns a FetchResult
  or raises. It never retries and never falls back on its own. Falling back
  is the orchestrator's job, and it does so by trying a *different*
  transport, not by repeating the same one.

TWO TRANSPORTS:

  DirectTransport
    GET the article URL straight from this process. Returns the raw bytes
    plus the charset from the Content-Type header as a hint; decoding is
    left to tools/encoding.py because news sites lie about their charset
    often enough that the bytes need a second opinion.

    Only works where cross-origin restrictions do not apply (a trusted
    backend). In a browser sandbox most news sites reject it.

  RelayTransport
    GET a pass-through relay with the target URL percent-encoded as a query
    parameter. The relay fetches server-side and returns the page body:

      GET https://api.allorigins.win/raw?url=https%3A%2F%2Fexample.com%2Fstory
      → <html>...</html>

    The relay has already decoded the body, so FetchResult.text is set and
    the encoding step is skipped.

WHY BROWSER HEADERS:
  Many news sites return 403 to anything that does not look like a desktop
  browser. Every request carries a Chrome User-Agent, Accept,
  Accept-Language and a Google Referer, all taken from Settings.

TRANSPORT SELECTION:
  transports_for(environment) builds the ordered list once at startup:
    backend → [direct, relay]
    browser → [relay]
    direct  → [direct]

USAGE:
  from config import settings
  from tools.fetch import transports_for

  for transport in transports_for(settings.environment, settings):
      try:
          result = transport.fetch("https://example.com/story")
          break
      except NetworkError as e:
          print(f"{transport.name} failed: {e}")
"""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote, urlparse

import httpx
from loguru import logger

from config import Environment, Settings
from extractor.errors import FetchTimeoutError, InvalidInputError, NetworkError


# ── Result type ────────────────────────────────────────────────────────────────

@dataclass
class FetchResult:
    """
    The page as delivered by one transport.

    raw_bytes is always set. text is set only when the transport already
    decoded the body (the relay); otherwise the caller decodes raw_bytes
    using encoding_hint as a tiebreaker.
    """
    url: str
    raw_bytes: bytes
    transport: str         # "direct" or "relay"
    status_code: int = 200
    encoding_hint: str | None = None
    text: str | None = None

    @property
    def n_bytes(self) -> int:
        return len(self.raw_bytes)

    @property
    def needs_decoding(self) -> bool:
        return self.text is None


class Transport(Protocol):
    name: str

    def fetch(self, url: str) -> FetchResult: ...


# ── URL validation ─────────────────────────────────────────────────────────────

def validate_url(url: str) -> str:
    """
    Return the stripped URL, or raise InvalidInputError.

    Runs before any request is built, so a bad URL never reaches the network.
    """
    if not url or not isinstance(url, str):
        raise InvalidInputError("Empty URL")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidInputError(f"Malformed URL: {url!r}") from e

    if parsed.scheme.lower() not in ("http", "https"):
        raise InvalidInputError(f"Not an http(s) URL: {url!r}")
    if not parsed.netloc:
        raise InvalidInputError(f"URL has no host: {url!r}")
    return url


def browser_headers(settings: Settings) -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": settings.accept_language,
        "Referer": settings.referer,
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


# ── Transports ─────────────────────────────────────────────────────────────────

class DirectTransport:
    """GET the article URL from this process."""

    name = "direct"

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def fetch(self, url: str) -> FetchResult:
        url = validate_url(url)
        response = _get(url, self._settings)

        return FetchResult(
            url=url,
            raw_bytes=response.content,
            transport=self.name,
            status_code=response.status_code,
            encoding_hint=response.charset_encoding,
        )


class RelayTransport:
    """GET the article through a pass-through relay."""

    name = "relay"

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def relay_url(self, url: str) -> str:
        """
        Build the relay request URL.

        The target is percent-encoded with no safe characters, so its own
        query string cannot leak into the relay's.
        """
        endpoint = self._settings.relay_endpoint
        separator = "&" if "?" in endpoint else "?"
        return f"{endpoint}{separator}{self._settings.relay_url_param}={quote(url, safe='')}"

    def fetch(self, url: str) -> FetchResult:
        url = validate_url(url)
        response = _get(self.relay_url(url), self._settings)

        return FetchResult(
            url=url,
            raw_bytes=response.content,
            transport=self.name,
            status_code=response.status_code,
            encoding_hint=response.encoding,
            text=response.text,
        )


def transports_for(environment: Environment, settings: Settings) -> list[Transport]:
    """Ordered transports for an execution environment. Built once at startup."""
    if environment == "backend":
        return [DirectTransport(settings), RelayTransport(settings)]
    if environment == "browser":
        return [RelayTransport(settings)]
    if environment == "direct":
        return [DirectTransport(settings)]
    raise ValueError(f"Unknown environment: {environment!r}")


# ── Private helpers ────────────────────────────────────────────────────────────

def _get(target: str, settings: Settings) -> httpx.Response:
    """
    One GET with browser headers and the configured timeout.

    Raises FetchTimeoutError on timeout, NetworkError on any other transport
    failure or non-200 status.
    """
    try:
        response = httpx.get(
            target,
            timeout=settings.fetch_timeout_seconds,
            headers=browser_headers(settings),
            follow_redirects=True,
        )
    except httpx.TimeoutException as e:
        raise FetchTimeoutError(f"Timeout after {settings.fetch_timeout_seconds}s") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NetworkError(f"{type(e).__name__}: {e}") from e

    if response.status_code != 200:
        raise NetworkError(f"HTTP {response.status_code}", status_code=response.status_code)

    logger.debug("Fetched {} ({} bytes)", target, len(response.content))
    return response
