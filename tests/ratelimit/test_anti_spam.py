"""Tests for the sliding-window spam detector."""

import pytest

from belix.ratelimit.anti_spam import AntiSpamManager


@pytest.fixture()
def detector(clock) -> AntiSpamManager:
    return AntiSpamManager(message_threshold=5, time_window_ms=5000, auto_mute_ms=30_000, clock=clock)


def test_allows_messages_under_threshold(detector) -> None:
    result = detector.check_spam("user-1")

    assert result.is_spamming is False
    assert result.reason is None
    assert result.mute_duration_ms is None


def test_flags_once_window_is_full(detector, clock) -> None:
    results = []
    for _ in range(6):
        results.append(detector.check_spam("user-1"))
        clock.advance(100)

    assert [r.is_spamming for r in results] == [False] * 5 + [True]
    flagged = results[-1]
    assert flagged.reason == "Too many messages"
    assert flagged.mute_duration_ms == 30_000


def test_flagged_message_is_not_recorded(detector, clock) -> None:
    for _ in range(5):
        detector.check_spam("user-1")

    for _ in range(10):
        assert detector.check_spam("user-1").is_spamming is True

    assert len(detector.message_history["user-1"]) == 5


def test_window_slides_after_expiry(detector, clock) -> None:
    for _ in range(5):
        detector.check_spam("user-1")
    assert detector.check_spam("user-1").is_spamming is True

    clock.advance(5001)

    assert detector.check_spam("user-1").is_spamming is False
    assert detector.messages_in_window("user-1") == 1


def test_timestamp_on_window_edge_still_counts(detector, clock) -> None:
    for _ in range(5):
        detector.check_spam("user-1")

    clock.advance(5000)

    assert detector.check_spam("user-1").is_spamming is True


def test_spam_does_not_self_extend_window(detector, clock) -> None:
    for _ in range(5):
        detector.check_spam("user-1")

    # Keep spamming right up to the end of the window
    for _ in range(4):
        clock.advance(1000)
        assert detector.check_spam("user-1").is_spamming is True

    clock.advance(1001)
    assert detector.check_spam("user-1").is_spamming is False


def test_users_are_tracked_independently(detector) -> None:
    for _ in range(5):
        detector.check_spam("user-1")

    assert detector.check_spam("user-1").is_spamming is True
    assert detector.check_spam("user-2").is_spamming is False


def test_clear_history_resets_user(detector) -> None:
    for _ in range(5):
        detector.check_spam("user-1")

    assert detector.clear_history("user-1") is True
    assert detector.clear_history("user-1") is False
    assert detector.check_spam("user-1").is_spamming is False


def test_sweep_drops_idle_users(detector, clock) -> None:
    detector.check_spam("idle")
    clock.advance(4000)
    detector.check_spam("active")
    clock.advance(2000)

    removed = detector.sweep()

    assert removed == 1
    assert "idle" not in detector.message_history
    assert "active" in detector.message_history
