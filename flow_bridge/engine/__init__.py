"""
Pipeline orchestration

This module ties the processing and detection stages together per connection
and tracks session statistics.
"""

from .pipeline import FlowPipeline, ConnectionContext, TickResult
from .session import SessionTracker, SessionSummary, SessionStats, calculate_session_stats, format_time

__all__ = [
    'FlowPipeline', 'ConnectionContext', 'TickResult',
    'SessionTracker', 'SessionSummary', 'SessionStats', 'calculate_session_stats', 'format_time',
]
