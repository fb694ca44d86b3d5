"""
Relaxation, meditation and focus indices

This module derives the display indices from smoothed band powers and assigns
a coarse brain-state label for the UI.
"""

from typing import Tuple

from ..core.config import BAND_NAMES
from ..core.data_types import BrainwaveBands

# Prevent division by zero
EPSILON = 0.001
MAX_RATIO = 2.0

STATE_THRESHOLD = 0.6
DEEP_DELTA = 0.4


def _scaled(ratio: float) -> float:
    return min(ratio, MAX_RATIO) / MAX_RATIO


def compute_indices(bands: BrainwaveBands) -> Tuple[float, float, float]:
    """
    Compute RelaxationIndex, MeditationIndex and FocusIndex

    Each ratio is capped at 2 and scaled to [0, 1].

    Args:
        bands: Smoothed band powers

    Returns:
        Tuple[relaxation, meditation, focus]
    """
    # Relaxation = (Alpha + Theta) / (Beta + Gamma)
    relaxation = _scaled((bands.alpha + bands.theta) / (bands.beta + bands.gamma + EPSILON))

    # Meditation = Theta / Alpha
    meditation = _scaled(bands.theta / (bands.alpha + EPSILON))

    # Focus = Beta / (Alpha + Theta)
    focus = _scaled(bands.beta / (bands.alpha + bands.theta + EPSILON))

    return relaxation, meditation, focus


def dominant_band(bands: BrainwaveBands) -> str:
    """Band with the largest value; ties go to the higher band"""
    return max(reversed(BAND_NAMES), key=bands.get)


def classify_brain_state(bands: BrainwaveBands, connected: bool, touching: bool) -> str:
    """
    Label the current state for display

    Returns:
        str: "disconnected", "deep", "meditative", "relaxed", "focused" or "neutral"
    """
    if not connected or not touching:
        return "disconnected"

    relaxation, meditation, focus = compute_indices(bands)

    if bands.delta > DEEP_DELTA:
        return "deep"
    if meditation > STATE_THRESHOLD:
        return "meditative"
    if relaxation > STATE_THRESHOLD:
        return "relaxed"
    if focus > STATE_THRESHOLD:
        return "focused"
    return "neutral"
