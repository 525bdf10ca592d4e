"""
Background task scheduling for BeliX.

- **sweep_scheduler.py**: ``PeriodicSweeper``, a fixed-interval asyncio task that
  evicts stale entries from an in-memory store. Each cache and rate-limit
  component owns one sweeper, started with ``start()`` and cancelled with
  ``close()``. A failing sweep cycle is logged and the loop keeps running.
"""
