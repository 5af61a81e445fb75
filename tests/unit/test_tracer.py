"""
tests/unit/test_tracer.py — Unit tests for observability/tracer.py
"""

import time

import pytest
from observability.tracer import Tracer, Span, Trace


# ── Span ──────────────────────────────────────────────────────────────────────

class TestSpan:
    def test_finish_sets_duration(self):
        s = Span(name="test", step=1, started_at=time.monotonic())
        time.sleep(0.01)
        s.finish()
        assert s.duration_ms > 5

    def test_finish_default_status_success(self):
        s = Span(name="test", step=1, started_at=time.monotonic())
        s.finish()
        assert s.status == "success"

    def test_finish_error_status(self):
        s = Span(name="test", step=1, started_at=time.monotonic())
        s.finish(status="error", error="NetworkError: HTTP 403")
        assert s.status == "error"
        assert "NetworkError" in s.error


# ── Tracer.span() context manager ─────────────────────────────────────────────

class TestTracerSpan:
    def test_span_added_to_trace(self):
        tracer = Tracer(url="https://example.com/a")
        with tracer.span("fetch:direct"):
            pass
        assert tracer.trace.span_names() == ["fetch:direct"]

    def test_span_status_error_on_exception(self):
        tracer = Tracer(url="https://example.com/a")
        with pytest.raises(ValueError):
            with tracer.span("clean"):
                raise ValueError("bad markup")
        assert tracer.trace.spans[0].status == "error"
        assert "ValueError: bad markup" == tracer.trace.spans[0].error

    def test_steps_increment(self):
        tracer = Tracer(url="https://example.com/a")
        with tracer.span("fetch:direct"):
            pass
        with tracer.span("decode"):
            pass
        assert [s.step for s in tracer.trace.spans] == [1, 2]

    def test_metadata_recorded(self):
        tracer = Tracer(url="https://example.com/a")
        with tracer.span("fetch:relay") as span:
            span.metadata["n_bytes"] = 4096
        assert tracer.trace.spans[0].metadata == {"n_bytes": 4096}

    def test_failed_spans(self):
        tracer = Tracer(url="https://example.com/a")
        with pytest.raises(RuntimeError):
            with tracer.span("fetch:direct"):
                raise RuntimeError("refused")
        with tracer.span("fetch:relay"):
            pass
        assert [s.name for s in tracer.trace.failed_spans()] == ["fetch:direct"]


# ── Tracer.finish() ───────────────────────────────────────────────────────────

class TestTracerFinish:
    def test_summary_fields_filled(self):
        tracer = Tracer(url="https://example.com/a")
        trace = tracer.finish(
            kind="success", reason="extracted", tier="container", transport="direct", text_chars=812,
        )
        assert trace.kind == "success"
        assert trace.reason == "extracted"
        assert trace.tier == "container"
        assert trace.transport == "direct"
        assert trace.text_chars == 812
        assert trace.completed_at
        assert trace.total_duration_ms >= 0

    def test_running_until_finished(self):
        tracer = Tracer(url="https://example.com/a")
        assert tracer.trace.kind == "running"

    def test_trace_id_given_or_generated(self):
        assert Tracer(url="x", trace_id="abc123").trace_id == "abc123"
        assert len(Tracer(url="x").trace_id) == 12

    def test_to_dict_is_plain_data(self):
        tracer = Tracer(url="https://example.com/a")
        with tracer.span("clean") as span:
            span.metadata["n_paragraphs"] = 4
        d = tracer.finish(kind="terminal_failure", reason="fetch_failed").to_dict()
        assert d["url"] == "https://example.com/a"
        assert d["spans"][0]["name"] == "clean"
        assert d["spans"][0]["metadata"]["n_paragraphs"] == 4
        assert isinstance(Trace(**{**d, "spans": []}), Trace)
