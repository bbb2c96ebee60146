"""
FeedLoader - Offline-capable Feed Retrieval
==========================================

Fetches RSS/Atom feeds over HTTP and keeps the last fetched document on disk
so it can still be served when the network is unavailable.

Main Components:
- Loader: retrieval orchestration with cache fallback
- Transport: pooled requests session
- Parser: feedparser-based document decoding
- Storage: one cache file per feed
- Configuration: environment variables with Pydantic validation
"""

__version__ = "1.0.0"
__description__ = "Offline-capable RSS/Atom feed loader"

from .config.settings import get_settings
from .loader import FeedLoader
from .models import Feed, FeedItem
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import (
    FeedLoaderError,
    RemoteError,
    TransportFault,
    ParseFault,
    CacheReadFault,
    CacheWriteFault,
)

__all__ = [
    "get_settings",
    "FeedLoader",
    "Feed",
    "FeedItem",
    "configure_application_logging",
    "get_logger_for_component",
    "FeedLoaderError",
    "RemoteError",
    "TransportFault",
    "ParseFault",
    "CacheReadFault",
    "CacheWriteFault",
]
