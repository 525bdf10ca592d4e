"""
In-process caching for BeliX.

- **cache_manager.py**: ``CacheManager``, a TTL key/value store with hit/miss
  metrics, ``get_or_compute`` for wrapping expensive reads, and a periodic
  sweep that evicts expired entries.
- **cache_handlers.py**: ``CacheNamespace`` wrappers binding a fixed key and TTL
  (leaderboard, daily question, terminology, member profiles) onto a shared
  cache, built from configuration.
"""

from belix.cache.cache_handlers import CacheNamespace, build_namespaces
from belix.cache.cache_manager import CacheManager

__all__ = ["CacheManager", "CacheNamespace", "build_namespaces"]
