import pytest

from flow_bridge.engine.session import (
    SessionSummary, SessionTracker, achievement_for, calculate_session_stats, format_time,
)


def test_tracks_flow_time_and_longest_streak():
    tracker = SessionTracker()
    tracker.start(0)

    # 3 s in flow, 2 s out, 1 s in flow
    for t in range(0, 10001, 500):
        active = 1000 <= t < 4000 or 6000 <= t < 7000
        tracker.update(active, 0.5, t)

    summary = tracker.end(10000)

    assert summary.duration_ms == 10000
    assert summary.flow_state_ms == pytest.approx(3000 + 1000)
    assert summary.longest_streak_ms == pytest.approx(2500)
    assert summary.avg_coherence == pytest.approx(0.5)
    assert len(summary.coherence_history) == 10


def test_open_streak_counts_at_end():
    tracker = SessionTracker()
    tracker.start(0)
    tracker.update(True, 0.9, 2000)
    tracker.update(True, 0.9, 3000)

    summary = tracker.end(4000)
    assert summary.flow_state_ms == 2000


def test_updates_ignored_without_session():
    tracker = SessionTracker()
    tracker.update(True, 1.0, 1000)

    assert tracker.end(2000) is None
    assert tracker.flow_state_ms == 0


@pytest.mark.parametrize("percent, label", [
    (70, "Mastery"), (69.9, "Flowing"), (50, "Flowing"), (30, "Settled"),
    (15, "Emerging"), (14.9, "Beginning"), (0, "Beginning"),
])
def test_achievement_levels(percent, label):
    assert achievement_for(percent) == label


def test_session_stats():
    summary = SessionSummary(start_ms=0, end_ms=60000, duration_ms=60000,
                             flow_state_ms=33000, longest_streak_ms=20000, avg_coherence=0.6)
    stats = calculate_session_stats(summary)

    assert stats.flow_state_percent == pytest.approx(55)
    assert stats.achievement == "Flowing"

    empty = SessionSummary(0, 0, 0, 0, 0, 0.0)
    assert calculate_session_stats(empty).flow_state_percent == 0


def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(65999) == "01:05"
    assert format_time(600000) == "10:00"
