"""
extractor/orchestrator.py — The single entry point: URL in, article text out.

THE PIPELINE (one call, strictly sequential):

  shortcut?  description > 300 chars → return it, no fetch
      │
  fetch      each transport once, in order (direct → relay in a backend,
      │      relay only in a browser); first success wins
      │
  decode     chardet on the raw bytes (direct transport only)
      │
  clean      drop scripts, nav, ads, media, share bars, ...
      │
  select     container tier → paragraph tier → body tier, stopping at the
      │      first whose normalized text reaches 200 chars
      │
  policy     SUCCESS / FALLBACK_TO_DESCRIPTION / TERMINAL_FAILURE

THE CONTRACT: extract() never raises.
  Transport failures are expected: they move on to the next transport and
  then to the fallback policy. Anything unexpected in parsing or selection
  is logged and treated as a failed extraction. The caller always gets an
  ExtractionOutcome.

Progress is monotonic. No transport and no tier runs twice, and nothing
goes back to a cheaper step after a more expensive one.

CONCURRENCY:
  An ArticleExtractor holds only frozen settings and stateless strategy
  objects. One instance can serve concurrent calls from many threads.

USAGE:
  from extractor.orchestrator import extract_article, extract_article_content

  outcome = extract_article("https://example.com/story", description="Short blurb")
  print(outcome.kind, outcome.used_fallback, outcome.allows_summary)

  text = extract_article_content("https://example.com/story")   # just the string
"""

from dataclasses import replace

from bs4 import BeautifulSoup
from loguru import logger

from config import Settings, settings as default_settings
from extractor.errors import ExtractionInsufficient, InvalidInputError, NetworkError
from extractor.outcome import (
    REASON_EXTRACTION_ERROR,
    REASON_FETCH_FAILED,
    REASON_INSUFFICIENT_CONTENT,
    REASON_INVALID_URL,
    ArticleRequest,
    ExtractionOutcome,
)
from extractor.policy import FallbackPolicy
from observability.tracer import Tracer
from tools.clean import clean_markup
from tools.encoding import decode
from tools.fetch import FetchResult, Transport, transports_for, validate_url
from tools.normalize import normalize_text
from tools.tiers import ContentTier, default_tiers


class ArticleExtractor:
    """
    Sequences fetch → decode → clean → select → normalize → policy.

    transports and tiers default to the ones Settings describes; pass your
    own to test or to pin a deployment to one transport.
    """

    def __init__(
        self,
        settings: Settings,
        transports: list[Transport] | None = None,
        tiers: list[ContentTier] | None = None,
    ) -> None:
        self._settings = settings
        self._transports = list(transports) if transports is not None else transports_for(settings.environment, settings)
        self._tiers = list(tiers) if tiers is not None else default_tiers(settings)
        self._policy = FallbackPolicy(settings)

    @property
    def transport_names(self) -> list[str]:
        return [t.name for t in self._transports]

    def extract(self, request: ArticleRequest) -> ExtractionOutcome:
        """Run the pipeline for one request. Never raises."""
        tracer = Tracer(url=request.url)

        try:
            outcome = self._run(request, tracer)
        except Exception as e:
            logger.exception("Unexpected error extracting {}: {}", request.url, e)
            outcome = self._policy.failed(request, REASON_EXTRACTION_ERROR)

        trace = tracer.finish(
            kind=outcome.kind.value,
            reason=outcome.reason,
            tier=outcome.tier,
            transport=outcome.transport,
            text_chars=len(outcome.text),
        )
        logger.info(
            "Extraction {} for {} ({}, {} chars)",
            outcome.kind.value, request.url, outcome.reason, len(outcome.text),
        )
        return replace(outcome, trace=trace)

    # ── Pipeline ────────────────────────────────────────────────────────────────

    def _run(self, request: ArticleRequest, tracer: Tracer) -> ExtractionOutcome:
        shortcut = self._policy.shortcut(request)
        if shortcut is not None:
            return shortcut

        try:
            url = validate_url(request.url)
        except InvalidInputError as e:
            logger.warning("Rejected URL: {}", e)
            return self._policy.failed(request, REASON_INVALID_URL)

        fetched = self._fetch(url, tracer)
        if fetched is None:
            return self._policy.failed(request, REASON_FETCH_FAILED)

        html = self._decode(fetched, tracer)
        tree = self._clean(html, tracer)
        try:
            text, tier = self._select(tree, tracer)
        except ExtractionInsufficient as e:
            logger.info("Insufficient content from {}: {}", url, e)
            return self._policy.failed(request, REASON_INSUFFICIENT_CONTENT, transport=fetched.transport)

        return self._policy.evaluate(request, text, tier=tier, transport=fetched.transport)

    def _fetch(self, url: str, tracer: Tracer) -> FetchResult | None:
        """Each transport once, in order. None when every one of them failed."""
        for transport in self._transports:
            try:
                with tracer.span(f"fetch:{transport.name}") as span:
                    result = transport.fetch(url)
                    span.metadata["status_code"] = result.status_code
                    span.metadata["n_bytes"] = result.n_bytes
            except NetworkError as e:
                logger.warning("{} fetch failed for {}: {}", transport.name, url, e)
                continue
            return result

        logger.warning("All transports failed for {}", url)
        return None

    def _decode(self, fetched: FetchResult, tracer: Tracer) -> str:
        if not fetched.needs_decoding:
            return fetched.text

        with tracer.span("decode") as span:
            html = decode(fetched.raw_bytes, fetched.encoding_hint, self._settings.encoding_min_confidence)
            span.metadata["n_chars"] = len(html)
            return html

    def _clean(self, html: str, tracer: Tracer) -> BeautifulSoup:
        with tracer.span("clean") as span:
            tree = clean_markup(html)
            span.metadata["n_paragraphs"] = len(tree.find_all("p"))
            return tree

    def _select(self, tree: BeautifulSoup, tracer: Tracer) -> tuple[str, str]:
        """
        Run tiers until one reaches min_content_chars.

        Returns that tier's normalized text and name. Raises
        ExtractionInsufficient when every tier came back short.
        """
        text = ""
        for tier in self._tiers:
            with tracer.span(f"select:{tier.name}") as span:
                candidate = tier.select(tree)
                text = normalize_text(candidate.text)
                span.metadata["n_paragraphs"] = len(candidate.paragraphs)
                span.metadata["n_chars"] = len(text)

            if self._policy.is_sufficient(text):
                return text, tier.name
            logger.debug("Tier {} produced {} chars, trying next", tier.name, len(text))

        raise ExtractionInsufficient(len(text), self._settings.min_content_chars)


# ── Module-level API ──────────────────────────────────────────────────────────

# Built once at import from the process settings.
_extractor = ArticleExtractor(default_settings)


def extract_article(url: str, description: str = "") -> ExtractionOutcome:
    """Extract one article with the process-wide extractor."""
    return _extractor.extract(ArticleRequest(url=url, description=description or ""))


def extract_article_content(url: str, description: str = "") -> str:
    """
    Compatibility API: just the text.

    Loses the success / fallback / failure distinction. Use extract_article()
    when the caller needs to know whether it may summarize the result.
    """
    return extract_article(url, description).text
