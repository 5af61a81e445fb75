"""
config.py — Single source of truth for all article extractor settings.

pydantic-settings reads .env at import time, validates ranges, and the
resulting object is frozen. Build it once at process start and pass it into
the transports and the extractor; nothing deeper in the call path reads the
environment on its own.

THE SETTINGS THAT MATTER:

  1. environment — where the extractor runs:
       backend — trusted server, no cross-origin limits: direct fetch first,
                 relay second
       browser — sandboxed context: relay only
       direct  — direct only (the /api/scrape route, which is itself a relay
                 target and must never relay onwards)

  2. Thresholds:
       min_content_chars          — 200: below this, extracted text is not
                                    an article body
       min_paragraph_chars        — 30: shorter <p> text is a caption, byline,
                                    or boilerplate fragment
       description_shortcut_chars — 300: a headline description longer than
                                    this is used as-is, no fetch

  3. Fetch behaviour:
       fetch_timeout_seconds — per-phase httpx timeout, per transport
       user_agent / referer  — many news sites block non-browser clients

USAGE:
  from config import settings
  print(settings.environment)          # "backend"
  print(settings.min_content_chars)    # 200
  print(settings.relay_endpoint)       # "https://api.allorigins.win/raw"
"""

from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Environment = Literal["backend", "browser", "direct"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ── Execution environment ─────────────────────────────────────────────────
    environment: Environment = Field(
        default="backend",
        description="'backend' = direct then relay, 'browser' = relay only, 'direct' = direct only",
    )

    # ── URL Fetching ──────────────────────────────────────────────────────────
    # WHY 10-15s:
    #   Slow news sites usually answer within a few seconds. Anything beyond
    #   15s is a site that is not going to answer; the reader is waiting.
    # httpx applies this to each phase (connect, read, write, pool), not to the
    # whole request, and each transport gets its own budget: the backend order
    # can wait up to 2x this before falling back, longer if a server drips bytes.
    fetch_timeout_seconds: float = Field(
        default=15.0,
        ge=10.0,
        le=15.0,
        description="httpx timeout per phase of one fetch, applied separately to each transport",
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
        description="Desktop browser User-Agent sent on every fetch",
    )
    accept_language: str = Field(
        default="en-US,en;q=0.9",
        description="Accept-Language header sent on every fetch",
    )
    referer: str = Field(
        default="https://www.google.com/",
        description="Referer header sent on every fetch",
    )

    # ── Relay transport ───────────────────────────────────────────────────────
    relay_endpoint: str = Field(
        default="https://api.allorigins.win/raw",
        description="Pass-through relay that fetches a URL server-side and returns its body",
    )
    relay_url_param: str = Field(
        default="url",
        description="Query parameter carrying the percent-encoded target URL",
    )

    # ── Extraction thresholds ─────────────────────────────────────────────────
    min_content_chars: int = Field(
        default=200,
        ge=1,
        description="Extracted text shorter than this counts as insufficient",
    )
    min_paragraph_chars: int = Field(
        default=30,
        ge=0,
        description="Paragraphs must be longer than this (trimmed) to be kept",
    )
    description_shortcut_chars: int = Field(
        default=300,
        ge=0,
        description="Descriptions longer than this are returned without fetching",
    )
    encoding_min_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="chardet confidence needed to trust a detected encoding over the hint",
    )

    # ── Scrape route (server.py) ──────────────────────────────────────────────
    allowed_origins: list[str] = Field(
        default=["*"],
        description="CORS origins allowed to call /api/scrape from a browser",
    )
    host: str = Field(default="127.0.0.1", description="Bind address for the scrape route")
    port: int = Field(default=8000, ge=1, le=65535, description="Port for the scrape route")

    # ── Observability ─────────────────────────────────────────────────────────
    log_level: str = Field(
        default="INFO",
        description="loguru level for the stderr sink",
    )


# Module-level singleton: built once at import, handed to components by argument.
settings = Settings()
