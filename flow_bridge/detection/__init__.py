"""
Signal quality and mental state detection

This module implements the signal quality gate, the debounced flow state
machine, the continuous coherence score and the display indices.
"""

from .quality import SignalQualityGate, QualityReport, electrode_quality, motion_level
from .flow_state import FlowStateMachine, FlowContext, FlowMetrics, FlowUpdate
from .coherence import CoherenceScorer, CoherenceConfig, calculate_coherence, get_coherence_zone
from .relax_focus import compute_indices, dominant_band, classify_brain_state

__all__ = [
    'SignalQualityGate', 'QualityReport', 'electrode_quality', 'motion_level',
    'FlowStateMachine', 'FlowContext', 'FlowMetrics', 'FlowUpdate',
    'CoherenceScorer', 'CoherenceConfig', 'calculate_coherence', 'get_coherence_zone',
    'compute_indices', 'dominant_band', 'classify_brain_state',
]
