"""
Coherence scoring

A continuous 0-1 estimate of how close the wearer is to a calm, stable state.
It is deliberately independent of the flow state machine: the graph can show
a trend before (or without) a sustained flow trigger, and the two may briefly
disagree.
"""

import math
from dataclasses import dataclass
from typing import Optional

from ..core.config import (
    COHERENCE_NO_SIGNAL, COHERENCE_POOR_CONTACT, COHERENCE_NO_ALPHA,
    COHERENCE_FLOW_ZONE, COHERENCE_STABILIZING_ZONE,
    MIN_SIGNAL_POWER, MIN_ELECTRODE_QUALITY, NEGLIGIBLE_ALPHA,
)
from ..core.data_types import BrainwaveBands, CoherenceZone


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class CoherenceConfig:
    """Tuning constants for the coherence heuristic"""
    # Sentinels returned by the guard clauses, in evaluation order
    no_signal_score: float = COHERENCE_NO_SIGNAL
    poor_contact_score: float = COHERENCE_POOR_CONTACT
    no_alpha_score: float = COHERENCE_NO_ALPHA

    min_total_power: float = MIN_SIGNAL_POWER
    min_electrode_quality: float = MIN_ELECTRODE_QUALITY
    min_alpha: float = NEGLIGIBLE_ALPHA

    alpha_weight: float = 0.35
    ratio_weight: float = 0.25
    theta_weight: float = 0.2
    stability_weight: float = 0.2

    flow_zone: float = COHERENCE_FLOW_ZONE
    stabilizing_zone: float = COHERENCE_STABILIZING_ZONE


class CoherenceScorer:
    """Weighted alpha/ratio/theta/stability score with guard sentinels"""

    def __init__(self, config: Optional[CoherenceConfig] = None):
        self.config = config or CoherenceConfig()

    def score(self, bands: BrainwaveBands, variance: float,
              electrode_quality: float, gate_valid: bool = True) -> float:
        """
        Compute the coherence score

        The first matching guard wins: no usable power, unreliable contact,
        no alpha. If none fires but the signal gate is closed, the tick is
        scored as "no usable signal".

        Args:
            bands: Smoothed band values
            variance: Trailing pooled alpha/beta variance
            electrode_quality: Aggregated contact quality (0-1)
            gate_valid: Signal quality gate outcome for this tick

        Returns:
            float: Coherence in [0, 1]
        """
        cfg = self.config
        total = bands.total()

        if total < cfg.min_total_power:
            return cfg.no_signal_score
        if electrode_quality < cfg.min_electrode_quality:
            return cfg.poor_contact_score
        if bands.alpha < cfg.min_alpha:
            return cfg.no_alpha_score
        if not gate_valid:
            return cfg.no_signal_score

        alpha_score = min(1.0, (bands.alpha / total) * 3)
        ratio_score = _clamp(1.5 - bands.beta / bands.alpha)
        theta_score = min(1.0, (bands.theta / total) * 2.5)
        stability_score = _clamp(1 - math.sqrt(max(0.0, variance)) * 3)

        coherence = (alpha_score * cfg.alpha_weight
                     + ratio_score * cfg.ratio_weight
                     + theta_score * cfg.theta_weight
                     + stability_score * cfg.stability_weight)
        return _clamp(coherence)

    def zone(self, coherence: float) -> CoherenceZone:
        if coherence >= self.config.flow_zone:
            return CoherenceZone.FLOW
        if coherence >= self.config.stabilizing_zone:
            return CoherenceZone.STABILIZING
        return CoherenceZone.NOISE


_default_scorer = CoherenceScorer()


def calculate_coherence(bands: BrainwaveBands, variance: float,
                        electrode_quality: float = 1.0) -> float:
    """Coherence with the default tuning constants"""
    return _default_scorer.score(bands, variance, electrode_quality)


def get_coherence_zone(coherence: float) -> CoherenceZone:
    return _default_scorer.zone(coherence)
