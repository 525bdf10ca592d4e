"""
Shared data types for BeliX.

- **cache_datatypes.py**: ``CacheEntry`` and the ``CacheStats`` monitoring snapshot.
- **rate_limit_datatypes.py**: tagged results returned by the cooldown manager,
  spam detector and farming guard, plus the per-command ``CooldownRecord``.
"""
