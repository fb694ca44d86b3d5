"""
Core data types and structures for Flow Bridge

This module contains the fundamental data classes used throughout the system.
"""

from .data_types import (
    BrainwaveBands, FlowPhase, Transition, CoherenceZone,
    FlowStateConfig, ThresholdSettings, FlowState, BrainSnapshot,
)
from .config import *

__all__ = [
    'BrainwaveBands', 'FlowPhase', 'Transition', 'CoherenceZone',
    'FlowStateConfig', 'ThresholdSettings', 'FlowState', 'BrainSnapshot',
]
