"""
Utility functions and helpers for BeliX.

This package provides reusable utilities:

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Suppresses noise from
  Discord internals and networking layers. Uses prompt_toolkit for non-blocking
  console I/O.

- **clock.py**: The single millisecond "now" accessor shared by the cache and
  rate-limit components, replaceable with a simulated clock in tests.
"""
