"""
Flow Bridge - Real-time flow state detection for neurofeedback

A modular Python package that turns raw four-channel headband EEG (or
pre-computed band powers) into a continuous coherence score and a debounced
flow state decision for audio and visual reward front ends.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import (
    BrainwaveBands, FlowState, FlowStateConfig, ThresholdSettings,
    FlowPhase, Transition, CoherenceZone, BrainSnapshot,
)
from .processing.spectral import SpectralAnalyzer
from .processing.buffer import SampleBuffer
from .processing.normalizer import BandPowerNormalizer, BandState
from .detection.quality import SignalQualityGate
from .detection.flow_state import FlowStateMachine, FlowContext
from .detection.coherence import CoherenceScorer, CoherenceConfig, calculate_coherence, get_coherence_zone
from .acquisition.sources import FakeMuseSource
from .engine.pipeline import FlowPipeline, TickResult
from .engine.session import SessionTracker
from .communication.udp_sender import UDPSender

__all__ = [
    'BrainwaveBands', 'FlowState', 'FlowStateConfig', 'ThresholdSettings',
    'FlowPhase', 'Transition', 'CoherenceZone', 'BrainSnapshot',
    'SpectralAnalyzer', 'SampleBuffer', 'BandPowerNormalizer', 'BandState',
    'SignalQualityGate',
    'FlowStateMachine', 'FlowContext',
    'CoherenceScorer', 'CoherenceConfig', 'calculate_coherence', 'get_coherence_zone',
    'FakeMuseSource',
    'FlowPipeline', 'TickResult', 'SessionTracker',
    'UDPSender',
]
