"""
FeedLoader Storage Layer
=======================

Offline cache for fetched feed documents.
"""

from .cache_store import CacheStore, CacheSlotResolver, FileCacheStore, DirectoryCacheResolver

__all__ = [
    "CacheStore",
    "CacheSlotResolver",
    "FileCacheStore",
    "DirectoryCacheResolver",
]
