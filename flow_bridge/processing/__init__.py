"""
EEG signal processing components

This module contains the spectral analysis, sample buffering and band power
normalization stages of the pipeline.
"""

from .spectral import SpectralAnalyzer, high_pass_filter
from .buffer import SampleBuffer
from .normalizer import BandPowerNormalizer, BandState

__all__ = ['SpectralAnalyzer', 'high_pass_filter', 'SampleBuffer',
           'BandPowerNormalizer', 'BandState']
