"""
Feed Loader
==========

Loads a feed from the network when possible and keeps a local copy of every
fetched document so the last known version stays available offline.

Decision flow of ``FeedLoader.load``:

- connected: GET the feed. A non-OK status raises RemoteError; a response
  without a body falls back to the cache; otherwise the body is buffered
  once, parsed, and written to the cache slot.
- not connected: read the cache slot.

Network failures raise TransportFault and never fall back to the cache.
Failures while reading the cache are logged and yield None.
"""

import io
from typing import BinaryIO, Optional
from urllib.parse import urlparse
from pathlib import Path

from .config.settings import FeedLoaderSettings, ParserSettings, get_settings
from .connectivity import ConnectivityOracle
from .models import Feed
from .parser import Parser, FeedParser
from .storage import CacheStore, CacheSlotResolver, FileCacheStore, DirectoryCacheResolver
from .transport import Transport, RequestsTransport
from .utils.logging import LoggerAdapter, PerformanceLogger, get_logger_for_component
from .utils.exceptions import (
    RemoteError,
    TransportFault,
    ParseFault,
    CacheError,
    ErrorCode,
)


class FeedLoader:
    """Fetch, parse and cache feeds, degrading to the cached copy offline.

    A loader holds no per-call state; ``load`` may be called concurrently from
    several threads as long as the transport and parser allow it. Concurrent
    loads of one identifier race on its cache slot and the last writer wins.
    Call ``close()`` once when done, or use the loader as a context manager.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        parser: Optional[Parser] = None,
        cache_store: Optional[CacheStore] = None,
        connectivity: Optional[ConnectivityOracle] = None,
        slot_resolver: Optional[CacheSlotResolver] = None,
        parser_settings: Optional[ParserSettings] = None,
    ):
        """Initialize feed loader.

        Args:
            transport: HTTP transport (default: RequestsTransport from config)
            parser: Feed parser (default: FeedParser built from parser_settings)
            cache_store: Slot storage (default: FileCacheStore)
            connectivity: Network state oracle; None means always connected
            slot_resolver: Identifier to cache slot mapping; None disables caching
            parser_settings: Capacity settings for the default parser
        """
        self.transport = transport if transport is not None else RequestsTransport()
        self.parser = parser if parser is not None else FeedParser(parser_settings)
        self.cache_store = cache_store if cache_store is not None else FileCacheStore()
        self.connectivity = connectivity
        self.slot_resolver = slot_resolver
        self.logger = get_logger_for_component("loader")

    @classmethod
    def from_settings(
        cls,
        settings: Optional[FeedLoaderSettings] = None,
        connectivity: Optional[ConnectivityOracle] = None,
    ) -> "FeedLoader":
        """Build a loader with default collaborators wired from settings."""
        settings = settings or get_settings()

        slot_resolver = None
        if settings.cache.enabled:
            slot_resolver = DirectoryCacheResolver(
                settings.cache.directory, settings.cache.file_suffix
            )

        return cls(
            transport=RequestsTransport(settings.http),
            parser=FeedParser(settings.parser),
            cache_store=FileCacheStore(),
            connectivity=connectivity,
            slot_resolver=slot_resolver,
        )

    def load(self, identifier: str) -> Optional[Feed]:
        """Load a feed, preferring the network and falling back to the cache.

        Args:
            identifier: Feed URL; also the key of its cache slot

        Returns:
            Parsed feed with ``link`` defaulted to ``identifier``, or None when
            neither the network nor the cache produced one

        Raises:
            RemoteError: Server answered with a non-OK status
            TransportFault: Network or protocol failure
            ParseFault: Freshly fetched document could not be parsed
            CacheWriteFault: Freshly fetched document could not be cached
        """
        logger = get_logger_for_component("loader", feed_url=identifier)

        connected = True
        if self.connectivity is not None:
            connected = self.connectivity.is_connected()

        slot = self.slot_resolver.resolve(identifier) if self.slot_resolver else None

        if connected:
            feed = self._load_remote(identifier, slot, logger)
        else:
            logger.info(f"Network unavailable, loading {identifier} from cache")
            feed = self._load_cached(slot, logger)

        if feed is not None and not feed.link:
            feed.link = urlparse(identifier).geturl()

        return feed

    def _load_remote(
        self, identifier: str, slot: Optional[Path], logger: LoggerAdapter
    ) -> Optional[Feed]:
        try:
            with PerformanceLogger(logger, f"GET {identifier}"):
                response = self.transport.get(identifier)
        except OSError as e:
            raise TransportFault(f"Request failed for {identifier}: {e}", feed_url=identifier) from e

        try:
            if not response.ok:
                logger.warning(
                    f"Feed request rejected: HTTP {response.status_code} {response.reason}"
                )
                raise RemoteError(response.status_code, response.reason, feed_url=identifier)

            if response.body is None:
                logger.warning(f"Response for {identifier} has no body, using cache")
                return self._load_cached(slot, logger)

            raw = self._buffer(response.body, identifier)
        finally:
            response.close()

        logger.debug(f"Fetched {len(raw)} bytes from {identifier}")

        # Independent views over the same bytes: one parsed, one persisted
        parse_view = io.BytesIO(raw)
        cache_view = io.BytesIO(raw)
        try:
            feed = self.parser.parse(parse_view)
        finally:
            self.cache_store.write(slot, cache_view)

        logger.info(f"Loaded {identifier} from network ({len(feed.items)} items)")
        return feed

    @staticmethod
    def _buffer(body: BinaryIO, identifier: str) -> bytes:
        try:
            return body.read()
        except OSError as e:
            raise TransportFault(
                f"Failed reading response body for {identifier}: {e}",
                feed_url=identifier,
                error_code=ErrorCode.TRANSPORT_IO,
            ) from e

    def _load_cached(self, slot: Optional[Path], logger: LoggerAdapter) -> Optional[Feed]:
        if slot is None:
            logger.info("No cache slot for feed, nothing to fall back to")
            return None

        try:
            data = self.cache_store.read(slot)
            if data is None:
                logger.info(f"Feed was never cached at {slot}")
                return None
            feed = self.parser.parse(io.BytesIO(data))
        except (ParseFault, CacheError, OSError) as e:
            logger.warning(f"Ignoring unusable cached feed at {slot}: {e}", exc_info=True)
            return None

        logger.info(f"Loaded feed from cache at {slot}")
        return feed

    def close(self) -> None:
        """Release the transport's connections."""
        self.transport.close()

    def __enter__(self) -> "FeedLoader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
