"""
Unit Tests for RequestsTransport
================================

Tests for request dispatch, status reporting and mapping of requests/urllib3
failures to TransportFault.
"""

import io
from unittest.mock import Mock, patch

import pytest
import requests
from urllib3.exceptions import ProtocolError

from feedloader.transport import RequestsTransport, TransportResponse
from feedloader.config.settings import HttpSettings
from feedloader.utils.exceptions import TransportFault, ErrorCode


FEED_URL = "http://example.com/rss.xml"


def _mock_response(status_code=200, reason="OK", raw=None):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.raw = raw
    return response


class TestRequestsTransport:
    """Test cases for RequestsTransport."""

    def setup_method(self):
        self.settings = HttpSettings(timeout=5, user_agent="FeedLoaderTest/1.0")
        self.transport = RequestsTransport(self.settings)

    def teardown_method(self):
        self.transport.close()

    def test_session_headers(self):
        assert self.transport.session.headers["User-Agent"] == "FeedLoaderTest/1.0"
        assert "application/rss+xml" in self.transport.session.headers["Accept"]

    def test_adapter_does_not_retry(self):
        adapter = self.transport.session.get_adapter(FEED_URL)
        assert adapter.max_retries.total == 0

    @patch('requests.Session.get')
    def test_get_streams_body(self, mock_get, sample_rss):
        raw = io.BytesIO(sample_rss)
        mock_get.return_value = _mock_response(raw=raw)

        response = self.transport.get(FEED_URL)

        mock_get.assert_called_once_with(FEED_URL, timeout=5, stream=True)
        assert isinstance(response, TransportResponse)
        assert response.ok
        assert response.body.read() == sample_rss
        assert raw.decode_content is True

    @patch('requests.Session.get')
    def test_get_reports_status(self, mock_get):
        mock_get.return_value = _mock_response(404, "Not Found", raw=io.BytesIO(b""))

        response = self.transport.get(FEED_URL)

        assert not response.ok
        assert response.status_code == 404
        assert response.reason == "Not Found"

    @patch('requests.Session.get')
    def test_missing_raw_means_no_body(self, mock_get):
        mock_get.return_value = _mock_response(raw=None)

        response = self.transport.get(FEED_URL)

        assert response.body is None

    @patch('requests.Session.get')
    def test_close_releases_connection(self, mock_get):
        http_response = _mock_response(raw=io.BytesIO(b"<rss/>"))
        mock_get.return_value = http_response

        response = self.transport.get(FEED_URL)
        response.close()

        http_response.close.assert_called_once()

    @patch('requests.Session.get')
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("Connection failed")

        with pytest.raises(TransportFault) as exc_info:
            self.transport.get(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.TRANSPORT_PROTOCOL
        assert exc_info.value.context["feed_url"] == FEED_URL
        assert not exc_info.value.recoverable

    @patch('requests.Session.get')
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("Request timed out")

        with pytest.raises(TransportFault) as exc_info:
            self.transport.get(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.TRANSPORT_TIMEOUT

    @patch('requests.Session.get')
    def test_body_read_error(self, mock_get):
        raw = Mock()
        raw.read.side_effect = ProtocolError("Connection broken")
        mock_get.return_value = _mock_response(raw=raw)

        response = self.transport.get(FEED_URL)

        with pytest.raises(TransportFault):
            response.body.read()

    def test_close_closes_session(self):
        session = Mock()
        session.headers = {}
        transport = RequestsTransport(self.settings, session=session)

        transport.close()

        session.close.assert_called_once()
