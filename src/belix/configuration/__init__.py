"""
Configuration management for BeliX.

- **app_configuration.py**: YAML configuration loader for global settings, read
  once at startup from ``./config/app_config.yml``. Falls back gracefully on
  missing or malformed config files.

- **throttle_settings.py**: Typed accessors for the ``caching`` and
  ``rate_limiting`` sections (default TTLs, cache namespaces, per-command
  cooldowns, spam thresholds, farming interval, sweep intervals) with
  documented defaults for every value.
"""
