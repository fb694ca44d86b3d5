"""
EEG data acquisition

This module provides telemetry event decoding and a synthetic data source.
"""

from .events import decode_message, parse_value
from .sources import FakeMuseSource

__all__ = ['decode_message', 'parse_value', 'FakeMuseSource']
