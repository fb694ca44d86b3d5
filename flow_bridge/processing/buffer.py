"""
Per-channel sliding sample buffer

Raw samples arrive in small packets per electrode; the buffer keeps the most
recent FFT-window worth of samples for each channel.
"""

import logging
from collections import deque
from typing import Deque, List, Sequence
import numpy as np

from ..core.config import FFT_SIZE, N_CHANNELS


class SampleBuffer:
    """Fixed-capacity, oldest-evicted buffer for each EEG channel"""

    def __init__(self, capacity: int = FFT_SIZE, n_channels: int = N_CHANNELS):
        self.capacity = capacity
        self.n_channels = n_channels
        self._channels: List[Deque[float]] = [deque(maxlen=capacity) for _ in range(n_channels)]

    def push(self, channel: int, samples: Sequence[float]) -> bool:
        """
        Append samples to one channel

        Args:
            channel: Electrode index (0..n_channels-1)
            samples: New time-domain samples, oldest first

        Returns:
            bool: False if the packet was ignored
        """
        if not 0 <= channel < self.n_channels:
            logging.debug(f"Ignoring samples for unknown channel {channel}")
            return False
        if len(samples) == 0:
            return False

        self._channels[channel].extend(float(s) for s in samples)
        return True

    def count(self, channel: int) -> int:
        return len(self._channels[channel])

    def is_ready(self, channel: int) -> bool:
        """True once the channel holds a full transform window"""
        return len(self._channels[channel]) >= self.capacity

    def ready_channels(self) -> List[int]:
        return [ch for ch in range(self.n_channels) if self.is_ready(ch)]

    def window(self, channel: int) -> np.ndarray:
        return np.fromiter(self._channels[channel], dtype=np.float64,
                           count=len(self._channels[channel]))

    def clear(self):
        for channel in self._channels:
            channel.clear()
