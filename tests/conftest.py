"""
PyTest Configuration and Fixtures
=================================

Shared fixtures for FeedLoader tests: sample documents and in-memory
collaborators standing in for the network and the disk.
"""

import io
import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
_TEST_ROOT = Path(tempfile.gettempdir()) / "feedloader_tests"
os.environ["FEEDLOADER_CACHE__DIRECTORY"] = str(_TEST_ROOT / "cache")
os.environ["FEEDLOADER_LOGGING__FILE_PATH"] = ""
os.environ["FEEDLOADER_DEBUG"] = "true"


SAMPLE_RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
    <channel>
        <title>Test RSS Feed</title>
        <link>http://example.com</link>
        <description>Test feed for unit testing</description>
        <language>en-us</language>
        <item>
            <title>Test Article 1</title>
            <link>http://example.com/article1</link>
            <description>First test article</description>
            <pubDate>Thu, 05 Sep 2024 12:00:00 GMT</pubDate>
            <guid>article-1-guid</guid>
            <author>test@example.com</author>
            <category>Tech</category>
        </item>
        <item>
            <title>Test Article 2</title>
            <link>http://example.com/article2</link>
            <description>Second test article</description>
            <pubDate>Wed, 04 Sep 2024 15:30:00 GMT</pubDate>
            <guid>article-2-guid</guid>
        </item>
    </channel>
</rss>"""

# No channel <link>: the loader has to fill it in
LINKLESS_RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
    <channel>
        <title>Linkless Feed</title>
        <description>Feed without a link element</description>
        <item>
            <title>Only Item</title>
            <link>http://x/item</link>
        </item>
    </channel>
</rss>"""

NOT_A_FEED = b"this is definitely not a feed document"


class TrackingStream(io.BytesIO):
    """BytesIO that remembers whether it was closed."""

    def __init__(self, data: bytes = b"", fail_on_read: Exception = None):
        super().__init__(data)
        self.fail_on_read = fail_on_read
        self.was_closed = False

    def read(self, size=-1):
        if self.fail_on_read is not None:
            raise self.fail_on_read
        return super().read(size)

    def close(self):
        self.was_closed = True
        super().close()


class FakeTransport:
    """Scripted transport recording every call."""

    def __init__(self):
        self.responses = {}
        self.errors = {}
        self.requests = []
        self.issued = []
        self.closed = False

    def respond(self, identifier, status_code=200, body=b"", reason="OK", has_body=True):
        self.responses[identifier] = (status_code, reason, body, has_body)

    def fail(self, identifier, error):
        self.errors[identifier] = error

    def get(self, identifier):
        from feedloader.transport import TransportResponse

        self.requests.append(identifier)
        if identifier in self.errors:
            raise self.errors[identifier]

        status_code, reason, body, has_body = self.responses[identifier]
        stream = None
        if has_body:
            if isinstance(body, TrackingStream):
                stream = body
            else:
                stream = TrackingStream(body)
        response = TransportResponse(status_code=status_code, reason=reason, body=stream)
        self.issued.append(response)
        return response

    def close(self):
        self.closed = True


class MemoryCacheStore:
    """Dict-backed cache store."""

    def __init__(self):
        self.slots = {}
        self.writes = []
        self.write_error = None
        self.read_error = None

    def write(self, slot, source):
        if slot is None:
            return
        if self.write_error is not None:
            from feedloader.utils.exceptions import CacheWriteFault

            raise CacheWriteFault(str(self.write_error), slot=slot)
        data = source.read()
        self.writes.append((slot, data))
        self.slots[slot] = data

    def read(self, slot):
        if slot is None:
            return None
        if self.read_error is not None:
            from feedloader.utils.exceptions import CacheReadFault

            raise CacheReadFault(str(self.read_error), slot=slot)
        return self.slots.get(slot)


class CountingResolver:
    """Resolver mapping identifiers to fixed slot names."""

    def __init__(self, slot_for=lambda identifier: f"slot:{identifier}"):
        self.slot_for = slot_for
        self.calls = []

    def resolve(self, identifier):
        self.calls.append(identifier)
        return self.slot_for(identifier)


class CountingConnectivity:
    """Connectivity oracle with a fixed answer that counts its calls."""

    def __init__(self, connected=True):
        self.connected = connected
        self.calls = 0

    def is_connected(self):
        self.calls += 1
        return self.connected


@pytest.fixture
def sample_rss():
    return SAMPLE_RSS_FEED


@pytest.fixture
def linkless_rss():
    return LINKLESS_RSS_FEED


@pytest.fixture
def not_a_feed():
    return NOT_A_FEED


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def memory_cache():
    return MemoryCacheStore()


@pytest.fixture
def resolver():
    return CountingResolver()


@pytest.fixture
def connectivity():
    return CountingConnectivity(connected=True)


@pytest.fixture
def tracking_stream():
    """Factory for body streams that record closing."""
    return TrackingStream


@pytest.fixture
def parser_settings():
    from feedloader.config.settings import ParserSettings

    return ParserSettings()


@pytest.fixture
def cache_dir(tmp_path):
    """Empty cache directory for file-backed tests."""
    path = tmp_path / "feed_cache"
    path.mkdir()
    return path
