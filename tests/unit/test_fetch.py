"""
Unit tests for tools/fetch.py

What we test (no real HTTP calls):
  - validate_url() — scheme and host checks, before any request
  - FetchResult — n_bytes, needs_decoding
  - DirectTransport — raw bytes + charset hint, headers, timeout, errors
  - RelayTransport — relay URL encoding, decoded text, errors
  - transports_for() — transport order per environment
"""

import pytest
from unittest.mock import patch, MagicMock
from urllib.parse import unquote
import httpx

from config import Settings
from extractor.errors import FetchTimeoutError, InvalidInputError, NetworkError
from tools.fetch import (
    DirectTransport,
    FetchResult,
    RelayTransport,
    browser_headers,
    transports_for,
    validate_url,
)


@pytest.fixture
def settings():
    return Settings()


def make_response(status_code=200, content=b"<html></html>", charset="utf-8"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.charset_encoding = charset
    response.encoding = charset or "utf-8"
    response.text = content.decode("utf-8", errors="replace")
    return response


# ── validate_url() ─────────────────────────────────────────────────────────────

class TestValidateUrl:
    def test_accepts_https(self):
        assert validate_url("https://example.com/story") == "https://example.com/story"

    def test_accepts_http(self):
        assert validate_url("http://example.com") == "http://example.com"

    def test_strips_surrounding_whitespace(self):
        assert validate_url("  https://example.com/a  ") == "https://example.com/a"

    def test_rejects_empty(self):
        with pytest.raises(InvalidInputError):
            validate_url("")

    def test_rejects_none(self):
        with pytest.raises(InvalidInputError):
            validate_url(None)

    def test_rejects_unparseable_url(self):
        with pytest.raises(InvalidInputError):
            validate_url("http://[::1")

    def test_rejects_ftp_scheme(self):
        with pytest.raises(InvalidInputError):
            validate_url("ftp://example.com/file")

    def test_rejects_javascript_scheme(self):
        with pytest.raises(InvalidInputError):
            validate_url("javascript:alert(1)")

    def test_rejects_missing_host(self):
        with pytest.raises(InvalidInputError):
            validate_url("https://")

    def test_rejects_relative_path(self):
        with pytest.raises(InvalidInputError):
            validate_url("/news/story")


# ── FetchResult ────────────────────────────────────────────────────────────────

class TestFetchResult:
    def test_n_bytes_counts_raw_bytes(self):
        result = FetchResult(url="https://x.com", raw_bytes=b"12345", transport="direct")
        assert result.n_bytes == 5

    def test_needs_decoding_without_text(self):
        result = FetchResult(url="https://x.com", raw_bytes=b"<p>", transport="direct")
        assert result.needs_decoding is True

    def test_no_decoding_when_text_present(self):
        result = FetchResult(url="https://x.com", raw_bytes=b"<p>", transport="relay", text="<p>")
        assert result.needs_decoding is False


# ── browser_headers() ──────────────────────────────────────────────────────────

class TestBrowserHeaders:
    def test_includes_user_agent_and_referer(self, settings):
        headers = browser_headers(settings)
        assert headers["User-Agent"].startswith("Mozilla/5.0")
        assert headers["Referer"] == "https://www.google.com/"

    def test_uses_configured_values(self):
        custom = Settings(user_agent="TestBrowser/1.0", referer="https://news.example/")
        headers = browser_headers(custom)
        assert headers["User-Agent"] == "TestBrowser/1.0"
        assert headers["Referer"] == "https://news.example/"


# ── DirectTransport ────────────────────────────────────────────────────────────

class TestDirectTransport:
    @patch("tools.fetch.httpx.get")
    def test_returns_raw_bytes_and_charset_hint(self, mock_get, settings):
        mock_get.return_value = make_response(content=b"<html>caf\xe9</html>", charset="iso-8859-1")

        result = DirectTransport(settings).fetch("https://example.com/story")

        assert result.raw_bytes == b"<html>caf\xe9</html>"
        assert result.encoding_hint == "iso-8859-1"
        assert result.transport == "direct"
        assert result.text is None

    @patch("tools.fetch.httpx.get")
    def test_requests_target_url_with_browser_headers(self, mock_get, settings):
        mock_get.return_value = make_response()

        DirectTransport(settings).fetch("https://example.com/story")

        args, kwargs = mock_get.call_args
        assert args[0] == "https://example.com/story"
        assert kwargs["headers"]["User-Agent"] == settings.user_agent
        assert kwargs["timeout"] == settings.fetch_timeout_seconds
        assert kwargs["follow_redirects"] is True

    @patch("tools.fetch.httpx.get")
    def test_invalid_url_never_reaches_network(self, mock_get, settings):
        with pytest.raises(InvalidInputError):
            DirectTransport(settings).fetch("not a url")
        mock_get.assert_not_called()

    @patch("tools.fetch.httpx.get")
    def test_timeout_raises_fetch_timeout(self, mock_get, settings):
        mock_get.side_effect = httpx.TimeoutException("timed out")

        with pytest.raises(FetchTimeoutError) as exc_info:
            DirectTransport(settings).fetch("https://example.com")
        assert "timeout" in str(exc_info.value).lower()

    @patch("tools.fetch.httpx.get")
    def test_connect_error_raises_network_error(self, mock_get, settings):
        mock_get.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(NetworkError):
            DirectTransport(settings).fetch("https://example.com")

    @patch("tools.fetch.httpx.get")
    def test_non_200_raises_with_status_code(self, mock_get, settings):
        mock_get.return_value = make_response(status_code=403)

        with pytest.raises(NetworkError) as exc_info:
            DirectTransport(settings).fetch("https://example.com")
        assert exc_info.value.status_code == 403
        assert "403" in str(exc_info.value)

    @patch("tools.fetch.httpx.get")
    def test_issues_exactly_one_request(self, mock_get, settings):
        mock_get.return_value = make_response(status_code=503)

        with pytest.raises(NetworkError):
            DirectTransport(settings).fetch("https://example.com")
        assert mock_get.call_count == 1

    def test_timeout_is_a_network_error(self):
        assert issubclass(FetchTimeoutError, NetworkError)


# ── RelayTransport ─────────────────────────────────────────────────────────────

class TestRelayTransport:
    def test_relay_url_percent_encodes_target(self, settings):
        relay = RelayTransport(settings)
        url = relay.relay_url("https://example.com/story?id=7&ref=home")

        assert url.startswith("https://api.allorigins.win/raw?url=")
        encoded = url.split("?url=", 1)[1]
        assert "/" not in encoded
        assert "&" not in encoded
        assert unquote(encoded) == "https://example.com/story?id=7&ref=home"

    def test_relay_url_appends_to_existing_query(self):
        custom = Settings(relay_endpoint="https://relay.example/fetch?mode=raw", relay_url_param="target")
        url = RelayTransport(custom).relay_url("https://example.com")
        assert url == "https://relay.example/fetch?mode=raw&target=https%3A%2F%2Fexample.com"

    @patch("tools.fetch.httpx.get")
    def test_returns_decoded_text(self, mock_get, settings):
        mock_get.return_value = make_response(content=b"<html><p>Relayed</p></html>")

        result = RelayTransport(settings).fetch("https://example.com/story")

        assert result.transport == "relay"
        assert result.text == "<html><p>Relayed</p></html>"
        assert result.needs_decoding is False

    @patch("tools.fetch.httpx.get")
    def test_requests_relay_not_target(self, mock_get, settings):
        mock_get.return_value = make_response()

        RelayTransport(settings).fetch("https://example.com/story")

        args, _ = mock_get.call_args
        assert args[0].startswith(settings.relay_endpoint)

    @patch("tools.fetch.httpx.get")
    def test_relay_error_status_raises(self, mock_get, settings):
        mock_get.return_value = make_response(status_code=500)

        with pytest.raises(NetworkError):
            RelayTransport(settings).fetch("https://example.com")

    @patch("tools.fetch.httpx.get")
    def test_relay_timeout_raises(self, mock_get, settings):
        mock_get.side_effect = httpx.ReadTimeout("slow relay")

        with pytest.raises(FetchTimeoutError):
            RelayTransport(settings).fetch("https://example.com")


# ── transports_for() ───────────────────────────────────────────────────────────

class TestTransportsFor:
    def test_backend_tries_direct_then_relay(self, settings):
        names = [t.name for t in transports_for("backend", settings)]
        assert names == ["direct", "relay"]

    def test_browser_uses_relay_only(self, settings):
        names = [t.name for t in transports_for("browser", settings)]
        assert names == ["relay"]

    def test_direct_uses_direct_only(self, settings):
        names = [t.name for t in transports_for("direct", settings)]
        assert names == ["direct"]

    def test_unknown_environment_raises(self, settings):
        with pytest.raises(ValueError):
            transports_for("mobile", settings)

    @patch("tools.fetch.httpx.get")
    def test_each_transport_gets_its_own_timeout(self, mock_get, settings):
        mock_get.return_value = make_response(status_code=503)

        for transport in transports_for("backend", settings):
            with pytest.raises(NetworkError):
                transport.fetch("https://example.com/story")

        assert mock_get.call_count == 2
        assert [c.kwargs["timeout"] for c in mock_get.call_args_list] == [settings.fetch_timeout_seconds] * 2
