"""
Signal quality gate

Decides whether the current signal is trustworthy enough to feed the flow
state machine and the coherence score. The gate holds no state: it is
re-evaluated from scratch on every tick.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.config import (
    HORSESHOE_WEIGHTS, MOTION_SCALE, MIN_ELECTRODE_QUALITY, N_CHANNELS,
)
from ..core.data_types import FlowStateConfig


def electrode_quality(codes: Sequence[int]) -> float:
    """
    Aggregate horseshoe codes into a single contact quality in [0, 1]

    1 = good (1.0), 2 = medium (0.5), 3 = poor and 4 = off (0.0).
    Unknown codes count as off.
    """
    if len(codes) == 0:
        return 0.0
    return sum(HORSESHOE_WEIGHTS.get(int(code), 0.0) for code in codes) / len(codes)


def quality_label(code: int) -> str:
    """Display name for one horseshoe code"""
    return {1: "good", 2: "medium", 3: "poor"}.get(code, "off")


def motion_level(x: float, y: float, z: float, scale: float = MOTION_SCALE) -> float:
    """Normalized accelerometer motion, capped at 1"""
    return min(1.0, (abs(x) + abs(y) + abs(z)) / scale)


@dataclass
class QualityReport:
    """Outcome of one gate evaluation with the criteria that failed"""
    valid: bool
    failures: List[str] = field(default_factory=list)


class SignalQualityGate:
    """
    Composite validity predicate over contact, power, variance and alpha

    Rejects flat-line or disconnected signals (low power, low variance),
    unreliable electrode contact and signals with no alpha at all.
    """

    def __init__(self, config: Optional[FlowStateConfig] = None,
                 min_electrode_quality: float = MIN_ELECTRODE_QUALITY):
        self.config = config or FlowStateConfig()
        self.min_electrode_quality = min_electrode_quality

    def check(self, electrode_quality: float, total_power: float,
              variance: float, alpha: float,
              config: Optional[FlowStateConfig] = None) -> QualityReport:
        """
        Evaluate every gate criterion

        Args:
            electrode_quality: Aggregated contact quality (0-1)
            total_power: Sum of the smoothed band values
            variance: Trailing pooled alpha/beta variance
            alpha: Smoothed alpha value
            config: Thresholds to use instead of the gate's own

        Returns:
            QualityReport: Validity plus the names of failed criteria
        """
        cfg = config or self.config
        failures = []
        if total_power < cfg.min_signal_power:
            failures.append("signal_power")
        if variance < cfg.min_variance:
            failures.append("variance")
        if electrode_quality < self.min_electrode_quality:
            failures.append("electrode_contact")
        if alpha < cfg.min_alpha:
            failures.append("alpha")

        if failures:
            logging.debug(f"Signal gate closed: {', '.join(failures)}")
        return QualityReport(valid=not failures, failures=failures)

    def is_valid(self, electrode_quality: float, total_power: float,
                 variance: float, alpha: float,
                 config: Optional[FlowStateConfig] = None) -> bool:
        return self.check(electrode_quality, total_power, variance, alpha, config).valid


def default_electrode_codes() -> List[int]:
    """All electrodes off until the first horseshoe update"""
    return [4] * N_CHANNELS
