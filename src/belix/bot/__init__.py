"""
Discord integration for BeliX.

- **guards.py**: helpers called by the command, message and points handlers
  before they do any work: cooldown check with an ephemeral notice, spam check
  with a warning reply, and the farming guard for point mutations.
"""
