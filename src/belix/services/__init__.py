"""
Service layer for BeliX.

- **throttle_service.py**: ``ThrottleService`` builds the cache, cooldown manager,
  spam detector and farming guard from the app configuration, starts and stops
  their sweeps together, and exposes monitoring snapshots.
"""
