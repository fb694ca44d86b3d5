"""
Synthetic EEG data source

Generates four-channel headband data with controllable alpha/beta patterns for
development and testing without hardware. The real device link (Bluetooth or
OSC bridge) lives outside this package and feeds the pipeline through the same
ingest calls.
"""

from typing import List, Optional, Tuple
import numpy as np

from ..core.config import SAMPLE_RATE, N_CHANNELS, SAMPLES_PER_PACKET


class FakeMuseSource:
    """
    Generate synthetic headband packets

    The signal alternates between a calm phase (strong 10 Hz alpha, little
    beta) and a busy phase (strong 20 Hz beta), each lasting half of
    state_cycle_time, on top of Gaussian background noise.
    """

    def __init__(self, fs: float = SAMPLE_RATE, n_channels: int = N_CHANNELS,
                 state_cycle_time: float = 20.0, noise_amp: float = 2.0,
                 seed: Optional[int] = None):
        self.fs = fs
        self.n_channels = n_channels
        self.state_cycle_time = state_cycle_time
        self.noise_amp = noise_amp
        self.time = 0.0
        self.rng = np.random.default_rng(seed)
        self.phases = self.rng.random(n_channels) * 2 * np.pi

    def is_calm(self, t: Optional[float] = None) -> bool:
        t = self.time if t is None else t
        return (t % self.state_cycle_time) < self.state_cycle_time / 2

    def generate_window(self, duration_sec: float) -> np.ndarray:
        """
        Generate synthetic EEG window

        Args:
            duration_sec: Duration of data to generate

        Returns:
            np.ndarray: Synthetic EEG data (channels x samples)
        """
        n_samples = int(round(duration_sec * self.fs))
        t = self.time + np.arange(n_samples) / self.fs

        data = self.rng.standard_normal((self.n_channels, n_samples)) * self.noise_amp
        calm = self.is_calm()
        alpha_amp = 20.0 if calm else 4.0
        beta_amp = 3.0 if calm else 15.0

        for ch in range(self.n_channels):
            data[ch, :] += alpha_amp * np.sin(2 * np.pi * 10 * t + self.phases[ch])
            data[ch, :] += beta_amp * np.sin(2 * np.pi * 20 * t + self.phases[ch])

        self.time += n_samples / self.fs
        return data

    def next_packets(self, n_samples: int = SAMPLES_PER_PACKET) -> List[Tuple[int, np.ndarray]]:
        """One packet per channel, as (channel, samples) pairs"""
        data = self.generate_window(n_samples / self.fs)
        return [(ch, data[ch]) for ch in range(self.n_channels)]

    def accelerometer(self) -> Tuple[float, float, float]:
        """Head mostly still, resting on gravity along z"""
        jitter = self.rng.standard_normal(3) * 0.01
        return float(jitter[0]), float(jitter[1]), float(1.0 + jitter[2])
