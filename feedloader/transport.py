"""
HTTP Transport
=============

Issues feed GET requests and hands back the status line plus an unread body
stream. One transport is shared by every load of a FeedLoader, so it must be
safe for concurrent use; ``requests.Session`` with a pooled adapter is.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from .config.settings import HttpSettings, get_settings
from .utils.logging import get_logger_for_component
from .utils.exceptions import TransportFault, ErrorCode


@dataclass
class TransportResponse:
    """Status line and body stream of a GET response."""

    status_code: int
    reason: str = ""
    body: Optional[BinaryIO] = None
    _release: Optional[Callable[[], None]] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def close(self) -> None:
        """Release the body stream and the underlying connection."""
        try:
            if self.body is not None:
                self.body.close()
        finally:
            if self._release is not None:
                self._release()


class Transport(Protocol):
    """Capability: GET an identifier and return its response."""

    def get(self, identifier: str) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class _ResponseBody:
    """Readable wrapper over a urllib3 stream mapping read errors to TransportFault."""

    def __init__(self, raw, feed_url: str):
        self._raw = raw
        self._feed_url = feed_url

    def read(self, size: int = -1) -> bytes:
        try:
            if size is None or size < 0:
                return self._raw.read()
            return self._raw.read(size)
        except (Urllib3HTTPError, requests.RequestException) as e:
            raise TransportFault(
                f"Failed reading response body: {e}",
                feed_url=self._feed_url,
                error_code=ErrorCode.TRANSPORT_PROTOCOL,
            ) from e

    def close(self) -> None:
        self._raw.close()


class RequestsTransport:
    """Transport backed by a pooled ``requests.Session``.

    No automatic retries are configured: a non-OK status is reported to the
    caller and retry policy stays with them.
    """

    def __init__(
        self,
        http_settings: Optional[HttpSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize transport.

        Args:
            http_settings: HTTP configuration (default from config)
            session: Pre-built session to use instead of creating one
        """
        self.settings = http_settings or get_settings().http
        self.logger = get_logger_for_component("transport")

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.settings.max_connections,
                pool_maxsize=self.settings.max_connections,
                max_retries=0,
            )
            session.mount("http://", adapter)
            session.mount("https://", adapter)

        session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept": self.settings.accept,
            }
        )
        self.session = session

    def get(self, identifier: str) -> TransportResponse:
        """Send a streaming GET request.

        Args:
            identifier: Feed URL

        Returns:
            TransportResponse with the unread body stream

        Raises:
            TransportFault: If the request could not be performed
        """
        self.logger.debug(f"GET {identifier}")

        try:
            response = self.session.get(
                identifier, timeout=self.settings.timeout, stream=True
            )
        except requests.Timeout as e:
            raise TransportFault(
                f"Request timed out after {self.settings.timeout}s: {e}",
                feed_url=identifier,
                error_code=ErrorCode.TRANSPORT_TIMEOUT,
            ) from e
        except requests.RequestException as e:
            raise TransportFault(
                f"Request failed for {identifier}: {e}",
                feed_url=identifier,
                error_code=ErrorCode.TRANSPORT_PROTOCOL,
            ) from e

        body = None
        if response.raw is not None:
            # Undo gzip/deflate transfer encodings while reading
            response.raw.decode_content = True
            body = _ResponseBody(response.raw, identifier)

        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason or "",
            body=body,
            _release=response.close,
        )

    def close(self) -> None:
        """Close pooled connections."""
        self.session.close()
        self.logger.debug("HTTP session closed")
