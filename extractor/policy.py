"""
extractor/policy.py — Decide what a finished (or failed) extraction returns.

THE DECISION TABLE:

  description longer than description_shortcut_chars (measured stripped)
      → FALLBACK_TO_DESCRIPTION (description_sufficient), no fetch at all

  page parsed, normalized text ≥ min_content_chars
      → SUCCESS

  page parsed, text too short, description present
      → FALLBACK_TO_DESCRIPTION (insufficient_content)
  page parsed, text too short, no description
      → TERMINAL_FAILURE (insufficient_content)

  fetch failed / URL invalid / unexpected error, description present
      → FALLBACK_TO_DESCRIPTION (fetch_failed / invalid_url / extraction_error)
  same, no description
      → TERMINAL_FAILURE with a message naming the likely cause

"Present" means non-blank after strip. The returned description is the
caller's string exactly as given, never normalized.
"""

from urllib.parse import urlparse

from loguru import logger

from config import Settings
from extractor.outcome import (
    REASON_DESCRIPTION_SUFFICIENT,
    REASON_INSUFFICIENT_CONTENT,
    REASON_INVALID_URL,
    ArticleRequest,
    ExtractionOutcome,
)

FETCH_FAILED_MESSAGE = (
    "Could not retrieve the article content from {domain}. This may be due to "
    "the website's anti-scraping protection or CORS policy. "
    "Please visit the original article: {url}"
)
INSUFFICIENT_MESSAGE = (
    "Could not extract the article content from {domain}. The site may use "
    "JavaScript to load content or have anti-scraping protection. "
    "Please visit the original article: {url}"
)
INVALID_URL_MESSAGE = (
    "Could not retrieve the article content because the article link is invalid. "
    "Please visit the original article using the link below."
)


class FallbackPolicy:
    """Maps extraction results onto the three outcome kinds. Stateless."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def is_sufficient(self, text: str) -> bool:
        return len(text) >= self._settings.min_content_chars

    def shortcut(self, request: ArticleRequest) -> ExtractionOutcome | None:
        """The description alone is substantial enough; skip the fetch."""
        if not request.has_description:
            return None

        n_chars = len(request.description.strip())
        if n_chars > self._settings.description_shortcut_chars:
            logger.info("Using {}-char description as content, skipping fetch", n_chars)
            return ExtractionOutcome.fallback(
                url=request.url,
                description=request.description,
                reason=REASON_DESCRIPTION_SUFFICIENT,
            )
        return None

    def evaluate(
        self,
        request: ArticleRequest,
        text: str,
        tier: str | None,
        transport: str | None,
    ) -> ExtractionOutcome:
        """The page was fetched and parsed; text is the best tier's normalized output."""
        if self.is_sufficient(text):
            return ExtractionOutcome.success(url=request.url, text=text, tier=tier, transport=transport)

        logger.info(
            "Extracted {} chars from {} (need {})",
            len(text), request.url, self._settings.min_content_chars,
        )
        return self.failed(request, REASON_INSUFFICIENT_CONTENT, transport=transport)

    def failed(
        self,
        request: ArticleRequest,
        reason: str,
        transport: str | None = None,
    ) -> ExtractionOutcome:
        """No usable article text. Substitute the description, or give up."""
        if request.has_description:
            return ExtractionOutcome.fallback(
                url=request.url,
                description=request.description,
                reason=reason,
                transport=transport,
            )

        return ExtractionOutcome.failure(
            url=request.url,
            message=failure_message(request.url, reason),
            reason=reason,
            transport=transport,
        )


def failure_message(url: str, reason: str) -> str:
    domain = _domain(url)
    if reason == REASON_INVALID_URL or not domain:
        return INVALID_URL_MESSAGE
    if reason == REASON_INSUFFICIENT_CONTENT:
        return INSUFFICIENT_MESSAGE.format(domain=domain, url=url)
    return FETCH_FAILED_MESSAGE.format(domain=domain, url=url)


def _domain(url: str) -> str:
    try:
        return urlparse(url or "").hostname or ""
    except ValueError:
        return ""
