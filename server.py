"""
server.py — The /api/scrape route: the extractor behind an HTTP endpoint.

A browser cannot fetch most news pages itself (cross-origin restrictions).
This route runs the same pipeline server-side and hands the text back:

  GET /api/scrape?url=https%3A%2F%2Fexample.com%2Fstory
  → 200 {"content": "First paragraph...\\n\\nSecond paragraph..."}

THE CONTRACT: always 200, always {"content": str}.
  A page that cannot be scraped is an expected outcome, not a server error.
  Failures come back as an explanatory message in "content":
    fetch failed      → "Could not retrieve content from {domain}. ..."
    too little text   → "Could not extract content from {domain}. ..."
    bad URL / bug     → "An error occurred while trying to retrieve ..."

The route is itself a relay target, so its extractor uses the direct
transport only and never relays onwards.

Run with:
  uv run python server.py
  uv run uvicorn server:app --port 8000
"""

from contextlib import asynccontextmanager
from urllib.parse import unquote, urlparse

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import Settings, settings as default_settings
from extractor.orchestrator import ArticleExtractor
from extractor.outcome import (
    REASON_FETCH_FAILED,
    REASON_INSUFFICIENT_CONTENT,
    ArticleRequest,
    ExtractionOutcome,
)
from observability.log import configure_logging
from tools.fetch import transports_for

FETCH_FAILED_CONTENT = (
    "Could not retrieve content from {domain}. This may be due to the website's "
    "protection or CORS policy. Please visit the original article."
)
INSUFFICIENT_CONTENT = (
    "Could not extract content from {domain}. The site may use JavaScript to "
    "load content or have anti-scraping protection."
)
GENERIC_ERROR_CONTENT = (
    "An error occurred while trying to retrieve the article content. "
    "Please visit the original article."
)


def create_app(settings: Settings = default_settings, extractor: ArticleExtractor | None = None) -> FastAPI:
    """Build the app. The extractor is created here once and shared by every request."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info("Scrape route ready (transports: {})", app.state.extractor.transport_names)
        yield

    app = FastAPI(
        title="Article Extractor",
        description="Server-side article text extraction for the news reader",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.extractor = extractor or ArticleExtractor(
        settings, transports=transports_for("direct", settings)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get("/api/scrape")
    def scrape(request: Request, url: str = Query(default="")):
        return {"content": scrape_content(request.app.state.extractor, url)}

    return app


def scrape_content(extractor: ArticleExtractor, url: str) -> str:
    """Run one extraction and map the outcome to the route's message. Never raises."""
    try:
        url = _target_url(url)
        logger.info("Scraping content from: {}", url)
        outcome = extractor.extract(ArticleRequest(url=url))
        return content_for(outcome)
    except Exception as e:
        logger.exception("Error in scraping route: {}", e)
        return GENERIC_ERROR_CONTENT


def content_for(outcome: ExtractionOutcome) -> str:
    if outcome.is_success:
        return outcome.text

    domain = urlparse(outcome.url).hostname or ""
    if not domain:
        return GENERIC_ERROR_CONTENT
    if outcome.reason == REASON_FETCH_FAILED:
        return FETCH_FAILED_CONTENT.format(domain=domain)
    if outcome.reason == REASON_INSUFFICIENT_CONTENT:
        return INSUFFICIENT_CONTENT.format(domain=domain)
    return GENERIC_ERROR_CONTENT


def _target_url(raw: str) -> str:
    """
    The url query parameter, decoded once by the framework.

    Some clients encode twice ("https%3A%2F%2F..."); undo the second layer.
    """
    url = (raw or "").strip()
    if "://" not in url and "%3a" in url.lower():
        url = unquote(url)
    return url


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
