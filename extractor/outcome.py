"""
extractor/outcome.py — ArticleRequest input and the tagged ExtractionOutcome.

Design principles:
  - The public string API (extract_article_content) conflates three very
    different results. Internally every call ends in exactly one
    OutcomeKind so the caller can still tell them apart.
  - Frozen dataclasses: one request in, one outcome out, nothing mutated
    after construction.

OUTCOME KINDS:
  SUCCESS                 → text is the extracted article body (≥ 200 chars)
  FALLBACK_TO_DESCRIPTION → text is the caller's own description; a soft
                            failure the reader should be told about
  TERMINAL_FAILURE        → text is a fixed human-readable message

REASONS:
  extracted              → SUCCESS
  description_sufficient → description long enough to skip fetching
  insufficient_content   → page fetched, every tier came back short
  fetch_failed           → every transport failed
  invalid_url            → URL rejected before any request
  extraction_error       → unexpected error while parsing or selecting

USAGE:
  from extractor.outcome import ArticleRequest, ExtractionOutcome, OutcomeKind

  outcome = ExtractionOutcome.success(url, text, tier="container", transport="direct")
  if outcome.used_fallback:
      show_disclosure_banner()
  if outcome.allows_summary:
      summarize(outcome.text)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from observability.tracer import Trace


# ── Reasons ────────────────────────────────────────────────────────────────────

REASON_EXTRACTED = "extracted"
REASON_DESCRIPTION_SUFFICIENT = "description_sufficient"
REASON_INSUFFICIENT_CONTENT = "insufficient_content"
REASON_FETCH_FAILED = "fetch_failed"
REASON_INVALID_URL = "invalid_url"
REASON_EXTRACTION_ERROR = "extraction_error"


# ── Kind enum ──────────────────────────────────────────────────────────────────

class OutcomeKind(str, Enum):
    SUCCESS = "success"
    FALLBACK_TO_DESCRIPTION = "fallback_to_description"
    TERMINAL_FAILURE = "terminal_failure"


# ── ArticleRequest ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ArticleRequest:
    """
    Input to one extraction call.

    description is the headline source's summary of the article. It is the
    fallback text when the page itself cannot be scraped.
    """
    url: str
    description: str = ""

    @property
    def has_description(self) -> bool:
        return bool(self.description and self.description.strip())

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> ArticleRequest:
        """
        Build a request from a headline-source article record.

        Records carry both description and content; either may be empty,
        so description falls back to content.
        """
        description = record.get("description") or record.get("content") or ""
        return cls(url=record.get("url") or "", description=description)


# ── ExtractionOutcome ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtractionOutcome:
    """
    The result of one extraction call. Never raised, always returned.

    tier and transport record where the text came from — None when the
    page was never fetched or nothing was extracted from it.
    """
    kind: OutcomeKind
    text: str
    url: str
    reason: str
    tier: str | None = None
    transport: str | None = None
    trace: Trace | None = None

    @classmethod
    def success(
        cls,
        url: str,
        text: str,
        tier: str | None = None,
        transport: str | None = None,
        trace: Trace | None = None,
    ) -> ExtractionOutcome:
        return cls(
            kind=OutcomeKind.SUCCESS,
            text=text,
            url=url,
            reason=REASON_EXTRACTED,
            tier=tier,
            transport=transport,
            trace=trace,
        )

    @classmethod
    def fallback(
        cls,
        url: str,
        description: str,
        reason: str,
        transport: str | None = None,
        trace: Trace | None = None,
    ) -> ExtractionOutcome:
        return cls(
            kind=OutcomeKind.FALLBACK_TO_DESCRIPTION,
            text=description,
            url=url,
            reason=reason,
            transport=transport,
            trace=trace,
        )

    @classmethod
    def failure(
        cls,
        url: str,
        message: str,
        reason: str,
        transport: str | None = None,
        trace: Trace | None = None,
    ) -> ExtractionOutcome:
        return cls(
            kind=OutcomeKind.TERMINAL_FAILURE,
            text=message,
            url=url,
            reason=reason,
            transport=transport,
            trace=trace,
        )

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def used_fallback(self) -> bool:
        return self.kind == OutcomeKind.FALLBACK_TO_DESCRIPTION

    @property
    def allows_summary(self) -> bool:
        """
        Whether the text is substantial enough to hand to a summarizer.

        A long description that short-circuited the fetch is real article
        text. A short description substituted after a failed scrape is not.
        """
        if self.kind == OutcomeKind.SUCCESS:
            return True
        return self.reason == REASON_DESCRIPTION_SUFFICIENT

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "text": self.text,
            "url": self.url,
            "reason": self.reason,
            "tier": self.tier,
            "transport": self.transport,
            "used_fallback": self.used_fallback,
            "allows_summary": self.allows_summary,
            "trace": self.trace.to_dict() if self.trace else None,
        }
