"""
extractor/errors.py — Exception types raised inside the extraction pipeline.

The transports raise the input and network errors; the tier cascade raises
ExtractionInsufficient. The orchestrator catches every one of these and
turns it into an ExtractionOutcome; callers of extract_article() never see
them.

  ExtractionError
  ├── InvalidInputError      — not an http(s) URL, rejected before any request
  ├── NetworkError           — connection failure or non-200 response
  │   └── FetchTimeoutError  — no response within fetch_timeout_seconds
  └── ExtractionInsufficient — every selector tier came back under length

Lenient HTML parsing and encoding fallback are ParseDegradation: logged at
debug level, never raised.
"""


class ExtractionError(Exception):
    """Base class for all extraction pipeline errors."""


class InvalidInputError(ExtractionError):
    """The URL is missing, malformed, or not http(s)."""


class NetworkError(ExtractionError):
    """One transport could not deliver the page."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchTimeoutError(NetworkError):
    """The transport gave up waiting for a response."""


class ExtractionInsufficient(ExtractionError):
    """The page was fetched but no tier produced enough article text."""

    def __init__(self, length: int, required: int) -> None:
        super().__init__(f"extracted {length} chars, need {required}")
        self.length = length
        self.required = required
