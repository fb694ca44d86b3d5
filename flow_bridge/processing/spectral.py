"""
Windowed FFT spectral analysis

This module turns a fixed-size window of raw EEG samples into a magnitude
spectrum using an iterative radix-2 Cooley-Tukey transform, and integrates
power over frequency ranges. All transform tables and scratch buffers are
built once per analyzer so a tick only does arithmetic.
"""

import logging
from typing import List, Sequence, Tuple
import numpy as np
from scipy import signal as sp_signal

from ..core.config import FFT_SIZE, SAMPLE_RATE, HIGH_PASS_HZ


def high_pass_filter(samples: Sequence[float], cutoff: float = HIGH_PASS_HZ,
                     sample_rate: float = SAMPLE_RATE) -> np.ndarray:
    """
    Single-pole RC high-pass filter to remove DC drift

    The first output sample is 0; every following sample is
    a * (y[i-1] + x[i] - x[i-1]) with a = RC / (RC + dt).

    Args:
        samples: Raw samples for one channel
        cutoff: Cutoff frequency (Hz)
        sample_rate: Sampling frequency (Hz)

    Returns:
        np.ndarray: Filtered samples, same length as the input
    """
    x = np.asarray(samples, dtype=np.float64)
    filtered = np.zeros_like(x)
    if x.size < 2:
        return filtered

    rc = 1.0 / (2 * np.pi * cutoff)
    dt = 1.0 / sample_rate
    a = rc / (rc + dt)

    # y[i] = a*y[i-1] + a*(x[i] - x[i-1]), seeded with y[0] = 0
    filtered[1:] = sp_signal.lfilter([a], [1.0, -a], np.diff(x))
    return filtered


class SpectralAnalyzer:
    """
    Radix-2 FFT over a fixed window with a Hann taper

    Construct once per window size and reuse for the lifetime of a connection.
    compute() is a pure function of the input window: calling it twice on the
    same samples gives bit-identical spectra.
    """

    def __init__(self, size: int = FFT_SIZE, sample_rate: float = SAMPLE_RATE,
                 high_pass_cutoff: float = HIGH_PASS_HZ):
        if size < 2 or size & (size - 1):
            raise ValueError(f"FFT size must be a power of two, got {size}")

        self.size = size
        self.sample_rate = float(sample_rate)
        self.high_pass_cutoff = high_pass_cutoff
        self.freq_resolution = self.sample_rate / size

        half = size // 2

        # Symmetric Hann window: 0.5 * (1 - cos(2*pi*i / (N-1)))
        self.window = sp_signal.get_window("hann", size, fftbins=False)

        # Twiddle tables
        angles = 2 * np.pi * np.arange(half) / size
        self.cos_table = np.cos(angles)
        self.sin_table = np.sin(angles)

        self.bit_reversal = self._bit_reversal_permutation(size)
        self.stages = self._butterfly_stages(size)

        # Centre frequency of every meaningful bin
        self.bin_freqs = np.arange(half) * self.freq_resolution

        rc = 1.0 / (2 * np.pi * high_pass_cutoff)
        self._hp_alpha = rc / (rc + 1.0 / self.sample_rate)

        # Scratch buffers reused by every compute() call
        self._input = np.zeros(size)
        self._filtered = np.zeros(size)
        self._windowed = np.zeros(size)
        self._real = np.zeros(size)
        self._imag = np.zeros(size)
        self._top_re = np.zeros(half)
        self._top_im = np.zeros(half)
        self._bot_re = np.zeros(half)
        self._bot_im = np.zeros(half)
        self._t_re = np.zeros(half)
        self._t_im = np.zeros(half)
        self._tmp = np.zeros(half)

        logging.info(f"Spectral analyzer ready: N={size}, fs={self.sample_rate}Hz, "
                    f"resolution={self.freq_resolution:.2f}Hz")

    @staticmethod
    def _bit_reversal_permutation(size: int) -> np.ndarray:
        """Index order that puts samples in bit-reversed position"""
        bits = size.bit_length() - 1
        order = np.zeros(size, dtype=np.intp)
        for i in range(size):
            rev = 0
            value = i
            for _ in range(bits):
                rev = (rev << 1) | (value & 1)
                value >>= 1
            order[i] = rev
        return order

    def _butterfly_stages(self, size: int) -> List[Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]]:
        """
        Precompute index pairs and twiddles for each of the log2(N) stages

        Each stage is a tuple (top, bottom, cos, sin) of length N/2 where
        top/bottom are the butterfly input positions and cos/sin the twiddle
        factor applied to the bottom input.
        """
        stages = []
        span = 2
        while span <= size:
            half_span = span // 2
            step = size // span
            starts = np.arange(0, size, span)
            offsets = np.arange(half_span)
            top = (starts[:, None] + offsets[None, :]).ravel()
            bottom = top + half_span
            twiddle = np.tile(offsets * step, len(starts))
            stages.append((top, bottom, self.cos_table[twiddle], self.sin_table[twiddle]))
            span *= 2
        return stages

    def _high_pass_into(self, x: np.ndarray, out: np.ndarray):
        """Same recurrence as high_pass_filter(), written into out"""
        a = self._hp_alpha
        prev_x = x[0]
        prev_y = 0.0
        out[0] = 0.0
        for i in range(1, self.size):
            xi = x[i]
            prev_y = a * (prev_y + xi - prev_x)
            out[i] = prev_y
            prev_x = xi

    def compute(self, samples: Sequence[float], high_pass: bool = True) -> np.ndarray:
        """
        Compute the magnitude spectrum of one window

        Args:
            samples: At least N time-domain samples; the first N are used
            high_pass: Apply the DC-removal filter before windowing

        Returns:
            np.ndarray: Magnitudes for the first N/2 bins, the only array
                allocated by the call
        """
        n = self.size
        self._input[:] = samples[:n]
        if high_pass:
            self._high_pass_into(self._input, self._filtered)
            data = self._filtered
        else:
            data = self._input

        np.multiply(data, self.window, out=self._windowed)

        re, im = self._real, self._imag
        np.take(self._windowed, self.bit_reversal, out=re)
        im.fill(0.0)

        top_re, top_im = self._top_re, self._top_im
        bot_re, bot_im = self._bot_re, self._bot_im
        t_re, t_im, tmp = self._t_re, self._t_im, self._tmp

        for top, bottom, cos, sin in self.stages:
            np.take(re, top, out=top_re)
            np.take(im, top, out=top_im)
            np.take(re, bottom, out=bot_re)
            np.take(im, bottom, out=bot_im)

            # t = bottom * exp(-i*theta)
            np.multiply(bot_re, cos, out=t_re)
            np.multiply(bot_im, sin, out=tmp)
            np.add(t_re, tmp, out=t_re)
            np.multiply(bot_im, cos, out=t_im)
            np.multiply(bot_re, sin, out=tmp)
            np.subtract(t_im, tmp, out=t_im)

            np.subtract(top_re, t_re, out=tmp)
            re[bottom] = tmp
            np.subtract(top_im, t_im, out=tmp)
            im[bottom] = tmp
            np.add(top_re, t_re, out=tmp)
            re[top] = tmp
            np.add(top_im, t_im, out=tmp)
            im[top] = tmp

        half = n // 2
        return np.hypot(re[:half], im[:half])

    def _band_mask(self, magnitudes: np.ndarray, low_freq: float, high_freq: float) -> np.ndarray:
        freqs = self.bin_freqs[:len(magnitudes)]
        mask = (freqs >= low_freq) & (freqs < high_freq)
        # DC never counts towards a band
        mask[0] = False
        return mask

    def band_power(self, magnitudes: np.ndarray, low_freq: float, high_freq: float) -> float:
        """
        Average power (magnitude squared) over bins in [low_freq, high_freq)

        Returns:
            float: Mean power, or 0.0 when no bin falls in the range
        """
        mask = self._band_mask(magnitudes, low_freq, high_freq)
        if not np.any(mask):
            return 0.0
        return float(np.mean(magnitudes[mask] ** 2))

    def band_power_sum(self, magnitudes: np.ndarray, low_freq: float, high_freq: float) -> float:
        """Total (unnormalized) power over bins in [low_freq, high_freq)"""
        mask = self._band_mask(magnitudes, low_freq, high_freq)
        return float(np.sum(magnitudes[mask] ** 2))
