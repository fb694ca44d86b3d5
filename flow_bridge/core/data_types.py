"""
Core data types for Flow Bridge

This module defines the fundamental data structures used throughout the system
for representing band powers, flow state decisions and per-tick snapshots.
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Dict, Tuple

from .config import (
    BAND_NAMES, SUSTAINED_MS, VARIANCE_THRESHOLD, NOISE_THRESHOLD,
    BETA_ALPHA_RATIO_THRESHOLD, MIN_SIGNAL_POWER, MIN_VARIANCE, MIN_ALPHA,
    DEFAULT_COHERENCE_THRESHOLD,
)


@dataclass
class BrainwaveBands:
    """Relative power per canonical band, each nominally in [0, 1]"""
    delta: float = 0.0
    theta: float = 0.0
    alpha: float = 0.0
    beta: float = 0.0
    gamma: float = 0.0

    def total(self) -> float:
        return self.delta + self.theta + self.alpha + self.beta + self.gamma

    def get(self, band: str) -> float:
        if band not in BAND_NAMES:
            raise ValueError(f"Unknown band: {band}")
        return getattr(self, band)

    def set(self, band: str, value: float):
        if band not in BAND_NAMES:
            raise ValueError(f"Unknown band: {band}")
        setattr(self, band, value)

    def copy(self) -> "BrainwaveBands":
        return replace(self)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class FlowPhase(str, Enum):
    """Flow state machine phases"""
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    ACTIVE = "active"


class Transition(str, Enum):
    """Edge reported by a single flow state machine step"""
    NONE = "none"
    ENTERED = "entered"
    EXITED = "exited"


class CoherenceZone(str, Enum):
    FLOW = "flow"
    STABILIZING = "stabilizing"
    NOISE = "noise"


@dataclass(frozen=True)
class FlowStateConfig:
    """
    Thresholds for flow state detection and the signal quality gate

    Instances are immutable: swap the whole value between ticks with
    dataclasses.replace() or FlowStateMachine.set_config().
    """
    sustained_ms: float = SUSTAINED_MS
    variance_threshold: float = VARIANCE_THRESHOLD
    noise_threshold: float = NOISE_THRESHOLD
    beta_alpha_ratio_threshold: float = BETA_ALPHA_RATIO_THRESHOLD
    min_signal_power: float = MIN_SIGNAL_POWER
    min_variance: float = MIN_VARIANCE
    min_alpha: float = MIN_ALPHA


@dataclass(frozen=True)
class ThresholdSettings:
    """UI-facing thresholds: coherence percentage (0-1) and hold time (ms)"""
    coherence_threshold: float = DEFAULT_COHERENCE_THRESHOLD
    time_threshold_ms: float = SUSTAINED_MS


@dataclass
class FlowState:
    """Flow state output, recomputed every tick"""
    is_active: bool = False
    sustained_ms: float = 0.0
    beta_alpha_ratio: float = 0.0
    signal_variance: float = 0.0
    noise_level: float = 0.0


@dataclass
class BrainSnapshot:
    """State snapshot exposed to the UI, audio and persistence consumers"""
    connected: bool
    touching: bool
    connection_quality: float
    bands: BrainwaveBands
    smoothed_bands: BrainwaveBands
    relaxation_index: float
    meditation_index: float
    focus_index: float
    dominant_band: str = "alpha"
    brain_state: str = "disconnected"
    electrode_codes: Tuple[int, ...] = (4, 4, 4, 4)
    blink: bool = False
    jaw_clench: bool = False
