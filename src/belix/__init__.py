"""
BeliX - Community Discord Bot, caching and rate-limiting core

BeliX runs a community server: daily questions and terminology, a points
leaderboard, voice attendance. This package holds the in-process layer every
event passes through before touching the database:

- **Cache**: TTL key/value store with hit/miss metrics, ``get_or_compute`` for
  expensive reads, named namespaces (leaderboard, daily question, ...) and a
  periodic sweep
- **Command Cooldowns**: per-user, per-command cooldowns that lengthen for users
  who keep retrying during a cooldown
- **Anti-Spam**: sliding-window message rate detection with a suggested mute
- **Farming Prevention**: minimum interval between point-earning actions
- **Throttle Service**: builds all of the above from ``config/app_config.yml``
  and manages their background sweeps

Usage:
    from belix.services.throttle_service import ThrottleService
    throttle = ThrottleService()
    throttle.start()  # inside the running event loop
"""
