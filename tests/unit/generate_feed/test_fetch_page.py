"""Tests for generate_feed.fetch_page.fetch_page module."""

from unittest.mock import patch, Mock

import pytest
import requests

from generate_feed.errors import TransientIOError
from generate_feed.fetch_page.fetch_page import fetch_page


def _response(status: int = 200, text: str = "<html></html>", content_type: str = "text/html; charset=utf-8") -> Mock:
    response = Mock()
    response.status_code = status
    response.text = text
    response.headers = {"Content-Type": content_type}
    response.encoding = "utf-8"
    return response


class TestFetchPage:
    @patch("generate_feed.fetch_page.fetch_page.requests.get")
    def test_returns_body(self, mock_get) -> None:
        mock_get.return_value = _response(text="body")
        result = fetch_page("https://example.com", timeout_ms=5000, user_agent="UA")
        assert result == "body"
        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] == 5.0
        assert kwargs["headers"]["User-Agent"] == "UA"

    @patch("generate_feed.fetch_page.fetch_page.requests.get")
    def test_defaults_to_utf8_without_charset(self, mock_get) -> None:
        response = _response(content_type="text/html")
        response.encoding = "ISO-8859-1"
        mock_get.return_value = response
        fetch_page("https://example.com", timeout_ms=5000, user_agent="UA")
        assert response.encoding == "utf-8"

    @patch("generate_feed.fetch_page.fetch_page.time.sleep")
    @patch("generate_feed.fetch_page.fetch_page.requests.get")
    def test_retries_with_exponential_backoff(self, mock_get, mock_sleep) -> None:
        mock_get.side_effect = [
            requests.ConnectionError("down"),
            _response(status=503),
            _response(text="ok"),
        ]
        result = fetch_page(
            "https://example.com",
            timeout_ms=5000,
            user_agent="UA",
            retries=2,
            retry_base_delay_ms=800,
        )
        assert result == "ok"
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.8, 1.6]

    @patch("generate_feed.fetch_page.fetch_page.time.sleep")
    @patch("generate_feed.fetch_page.fetch_page.requests.get")
    def test_raises_after_exhausting_retries(self, mock_get, mock_sleep) -> None:
        mock_get.return_value = _response(status=404)
        with pytest.raises(TransientIOError) as exc_info:
            fetch_page("https://example.com", timeout_ms=5000, user_agent="UA", retries=1, retry_base_delay_ms=10)
        assert exc_info.value.status_code == 404
        assert mock_get.call_count == 2
        assert mock_sleep.call_count == 1

    @patch("generate_feed.fetch_page.fetch_page.time.sleep")
    @patch("generate_feed.fetch_page.fetch_page.requests.get")
    def test_no_retries_tries_once(self, mock_get, mock_sleep) -> None:
        mock_get.side_effect = requests.Timeout("slow")
        with pytest.raises(TransientIOError):
            fetch_page("https://example.com", timeout_ms=5000, user_agent="UA")
        assert mock_get.call_count == 1
        mock_sleep.assert_not_called()

    @patch("generate_feed.fetch_page.fetch_page.requests.get")
    def test_redirect_status_is_acceptable(self, mock_get) -> None:
        mock_get.return_value = _response(status=304, text="cached")
        assert fetch_page("https://example.com", timeout_ms=5000, user_agent="UA") == "cached"
