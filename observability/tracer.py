"""
observability/tracer.py — Span-based tracing for one extraction call.

THE CORE CONCEPT:
  Every stage of the pipeline is a Span: a named unit of work with a start
  time, end time, status, and metadata dict.

  A Trace collects all spans for one call and rides along on the
  ExtractionOutcome. It answers "why did this URL fall back to the
  description?" without re-running the fetch:
    - Which transports were tried, and how each one failed
    - How many bytes came back and how many paragraphs survived cleaning
    - Which selector tiers ran and how much text each produced

  Traces live in memory only. The extractor persists nothing.

WHAT GETS TRACED:
  - fetch:direct / fetch:relay  → status_code, n_bytes, or the error
  - decode                      → n_chars (direct transport only)
  - clean                       → n_paragraphs left after cleaning
  - select:<tier>               → n_paragraphs, n_chars
  - extraction                  → overall: kind, reason, tier, transport

USAGE:
  tracer = Tracer(url="https://example.com/story")

  with tracer.span("fetch:direct") as span:
      result = transport.fetch(url)
      span.metadata["n_bytes"] = len(result.raw_bytes)

  trace = tracer.finish(kind="success", reason="extracted", text_chars=1840)
"""

import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone


# ── Span ──────────────────────────────────────────────────────────────────────

@dataclass
class Span:
    """
    One named stage of the pipeline.

    status is "success" or "error".
    metadata holds stage-specific data (status_code, n_bytes, n_chars, etc.).
    """
    name: str
    step: int
    started_at: float       # time.monotonic() — for duration math
    ended_at: float = 0.0
    duration_ms: float = 0.0
    status: str = "success"
    metadata: dict = field(default_factory=dict)
    error: str = ""

    def finish(self, status: str = "success", error: str = "") -> None:
        self.ended_at = time.monotonic()
        self.duration_ms = round((self.ended_at - self.started_at) * 1000, 2)
        self.status = status
        self.error = error


# ── Trace ─────────────────────────────────────────────────────────────────────

@dataclass
class Trace:
    """Complete record of one extraction call: all spans + summary fields."""
    trace_id: str
    url: str
    started_at: str         # ISO timestamp
    completed_at: str = ""
    spans: list[Span] = field(default_factory=list)

    # Summary fields (filled by finish())
    kind: str = "running"
    reason: str = ""
    tier: str | None = None
    transport: str | None = None
    text_chars: int = 0
    total_duration_ms: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    def span_names(self) -> list[str]:
        return [s.name for s in self.spans]

    def failed_spans(self) -> list[Span]:
        return [s for s in self.spans if s.status == "error"]


# ── Tracer ────────────────────────────────────────────────────────────────────

class Tracer:
    """
    Collects spans for one extraction call.

    Context manager interface:
        with tracer.span("clean") as span:
            span.metadata["n_paragraphs"] = n
        # span is automatically finished when the with-block exits

    On error inside the with-block: span status is set to "error"
    and the exception is re-raised — the tracer never swallows errors.
    """

    def __init__(self, url: str, trace_id: str | None = None) -> None:
        self._started = time.monotonic()
        self._trace = Trace(
            trace_id=trace_id or uuid.uuid4().hex[:12],
            url=url,
            started_at=datetime.now(timezone.utc).isoformat(),
        )
        self._step_counter = 0

    @property
    def trace_id(self) -> str:
        return self._trace.trace_id

    @property
    def trace(self) -> Trace:
        return self._trace

    @contextmanager
    def span(self, name: str):
        """
        Context manager that creates, times, and closes a span.

        On exception: span is marked "error", exception is re-raised.
        """
        self._step_counter += 1
        s = Span(name=name, step=self._step_counter, started_at=time.monotonic())
        self._trace.spans.append(s)
        try:
            yield s
            s.finish(status="success")
        except Exception as exc:
            s.finish(status="error", error=f"{type(exc).__name__}: {exc}")
            raise

    def finish(
        self,
        kind: str,
        reason: str,
        tier: str | None = None,
        transport: str | None = None,
        text_chars: int = 0,
    ) -> Trace:
        """Fill the summary fields and return the finished Trace."""
        elapsed = time.monotonic() - self._started
        self._trace.completed_at = datetime.now(timezone.utc).isoformat()
        self._trace.total_duration_ms = round(elapsed * 1000, 2)
        self._trace.kind = kind
        self._trace.reason = reason
        self._trace.tier = tier
        self._trace.transport = transport
        self._trace.text_chars = text_chars
        return self._trace
