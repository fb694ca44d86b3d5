"""
Session statistics

Tracks time spent in flow, the longest continuous streak and a once-per-second
coherence trace over a practice session, and summarizes the result. Storing
sessions is left to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional


COHERENCE_SAMPLE_MS = 1000

# (minimum flow percentage, label), checked top to bottom
ACHIEVEMENT_LEVELS = [
    (70, "Mastery"),
    (50, "Flowing"),
    (30, "Settled"),
    (15, "Emerging"),
]


@dataclass
class SessionSummary:
    start_ms: float
    end_ms: float
    duration_ms: float
    flow_state_ms: float
    longest_streak_ms: float
    avg_coherence: float
    coherence_history: List[float] = field(default_factory=list)


@dataclass
class SessionStats:
    total_length_ms: float
    longest_streak_ms: float
    avg_coherence: float
    flow_state_percent: float
    achievement: str


class SessionTracker:
    """Accumulate flow time and coherence for one session"""

    def __init__(self):
        self.active = False
        self.start_ms: Optional[float] = None
        self.flow_state_ms = 0.0
        self.longest_streak_ms = 0.0
        self.current_streak_ms = 0.0
        self.coherence_history: List[float] = []
        self._flow_started_ms: Optional[float] = None
        self._last_sample_ms = 0.0

    def start(self, now_ms: float):
        self.active = True
        self.start_ms = now_ms
        self.flow_state_ms = 0.0
        self.longest_streak_ms = 0.0
        self.current_streak_ms = 0.0
        self.coherence_history = []
        self._flow_started_ms = None
        self._last_sample_ms = now_ms
        logging.info("Session started")

    def update(self, is_active: bool, coherence: float, now_ms: float):
        """
        Record one tick of flow state and coherence

        Args:
            is_active: Flow state decision for this tick
            coherence: Coherence score for this tick
            now_ms: Tick time in milliseconds
        """
        if not self.active:
            return

        if now_ms - self._last_sample_ms >= COHERENCE_SAMPLE_MS:
            self.coherence_history.append(coherence)
            self._last_sample_ms = now_ms

        if is_active:
            if self._flow_started_ms is None:
                self._flow_started_ms = now_ms
            self.current_streak_ms = now_ms - self._flow_started_ms
            self.longest_streak_ms = max(self.longest_streak_ms, self.current_streak_ms)
        else:
            self._close_streak(now_ms)

    def _close_streak(self, now_ms: float):
        if self._flow_started_ms is not None:
            self.flow_state_ms += now_ms - self._flow_started_ms
            self._flow_started_ms = None
        self.current_streak_ms = 0.0

    def end(self, now_ms: float) -> Optional[SessionSummary]:
        """
        Finish the session

        Returns:
            SessionSummary, or None if no session was running
        """
        if not self.active or self.start_ms is None:
            self.active = False
            return None

        # A streak still running at the end counts towards flow time
        self._close_streak(now_ms)
        self.active = False

        history = list(self.coherence_history)
        avg = sum(history) / len(history) if history else 0.0
        summary = SessionSummary(
            start_ms=self.start_ms,
            end_ms=now_ms,
            duration_ms=now_ms - self.start_ms,
            flow_state_ms=self.flow_state_ms,
            longest_streak_ms=self.longest_streak_ms,
            avg_coherence=avg,
            coherence_history=history,
        )
        logging.info(f"Session ended: {format_time(summary.duration_ms)}, "
                    f"flow {format_time(summary.flow_state_ms)}")
        return summary


def achievement_for(flow_state_percent: float) -> str:
    for minimum, label in ACHIEVEMENT_LEVELS:
        if flow_state_percent >= minimum:
            return label
    return "Beginning"


def calculate_session_stats(summary: SessionSummary) -> SessionStats:
    if summary.duration_ms > 0:
        percent = summary.flow_state_ms / summary.duration_ms * 100
    else:
        percent = 0.0
    return SessionStats(
        total_length_ms=summary.duration_ms,
        longest_streak_ms=summary.longest_streak_ms,
        avg_coherence=summary.avg_coherence,
        flow_state_percent=percent,
        achievement=achievement_for(percent),
    )


def format_time(ms: float) -> str:
    """Milliseconds as MM:SS"""
    total_seconds = int(ms // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"
