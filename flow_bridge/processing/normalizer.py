"""
Band power normalization and smoothing

This module maps the five canonical EEG bands onto FFT output, corrects for the
1/f spectral slope, converts to relative power and keeps an exponentially
smoothed value plus a short display history per band.

All mutable values live in a BandState owned by the caller, so one normalizer
can serve any number of connections.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional, Tuple
import numpy as np

from ..core.config import (
    FREQ_BANDS, BAND_NAMES, SLOPE_CORRECTION, SMOOTHING_FACTOR,
    HISTORY_LENGTH, MIN_TOTAL_POWER,
)
from ..core.data_types import BrainwaveBands
from .buffer import SampleBuffer
from .spectral import SpectralAnalyzer


def _new_history(length: int) -> Dict[str, Deque[float]]:
    return {band: deque(maxlen=length) for band in BAND_NAMES}


@dataclass
class BandState:
    """Per-connection band values: latest snapshot, EMA and display history"""
    bands: BrainwaveBands = field(default_factory=BrainwaveBands)
    smoothed: BrainwaveBands = field(default_factory=BrainwaveBands)
    history: Dict[str, Deque[float]] = field(default_factory=lambda: _new_history(HISTORY_LENGTH))
    updates: int = 0


class BandPowerNormalizer:
    """
    Convert multi-channel spectra into relative, smoothed band powers

    Args:
        analyzer: Shared spectral analyzer for the connection's window size
        smoothing_factor: EMA weight of the previous value, in (0, 1)
        history_length: Display history kept per band
    """

    def __init__(self, analyzer: SpectralAnalyzer,
                 smoothing_factor: float = SMOOTHING_FACTOR,
                 history_length: int = HISTORY_LENGTH,
                 freq_bands: Dict[str, Tuple[float, float]] = FREQ_BANDS,
                 slope_correction: Dict[str, float] = SLOPE_CORRECTION):
        self.analyzer = analyzer
        self.smoothing_factor = smoothing_factor
        self.history_length = history_length
        self.freq_bands = freq_bands
        self.slope_correction = slope_correction

    def new_state(self) -> BandState:
        return BandState(history=_new_history(self.history_length))

    def channel_band_powers(self, samples: np.ndarray) -> Dict[str, float]:
        """Absolute mean band power for a single channel window"""
        magnitudes = self.analyzer.compute(samples)
        return {band: self.analyzer.band_power(magnitudes, low, high)
                for band, (low, high) in self.freq_bands.items()}

    def relative_powers(self, buffer: SampleBuffer) -> Optional[Dict[str, float]]:
        """
        Average, slope-correct and normalize band powers across channels

        Channels without a full window are skipped.

        Returns:
            Dict of relative powers summing to 1, or None if no channel was
            ready or the corrected total power is negligible
        """
        ready = buffer.ready_channels()
        if not ready:
            logging.debug("No channel has a full window - skipping band update")
            return None

        sums = dict.fromkeys(self.freq_bands, 0.0)
        for ch in ready:
            for band, power in self.channel_band_powers(buffer.window(ch)).items():
                sums[band] += power

        corrected = {band: (sums[band] / len(ready)) * self.slope_correction.get(band, 1.0)
                     for band in sums}

        total = sum(corrected.values())
        if not np.isfinite(total) or total < MIN_TOTAL_POWER:
            logging.debug(f"Total band power {total:.3g} too small - skipping band update")
            return None

        return {band: power / total for band, power in corrected.items()}

    def process(self, state: BandState, buffer: SampleBuffer) -> bool:
        """
        Run one full band update from the sample buffer

        Returns:
            bool: True if the state was updated, False if the update was skipped
                  and the previous values were retained
        """
        relative = self.relative_powers(buffer)
        if relative is None:
            return False
        self.apply_relative(state, relative)
        return True

    def apply_relative(self, state: BandState, relative: Dict[str, float]):
        """Store a full set of relative band values"""
        for band, value in relative.items():
            self.update_band(state, band, value)
        state.updates += 1

    def update_band(self, state: BandState, band: str, value: float):
        """
        Clamp, smooth and record one band value

        Args:
            state: Connection band state to update in place
            band: Canonical band name
            value: Relative power (clamped to [0, 1])
        """
        value = min(1.0, max(0.0, float(value)))
        state.bands.set(band, value)

        factor = self.smoothing_factor
        smoothed = state.smoothed.get(band) * factor + value * (1 - factor)
        state.smoothed.set(band, smoothed)

        state.history[band].append(value)
