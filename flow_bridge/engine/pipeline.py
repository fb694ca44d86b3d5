"""
Per-connection processing pipeline

This module wires the stages together for one headband connection:

    raw samples -> SampleBuffer -> SpectralAnalyzer -> BandPowerNormalizer
        -> {FlowStateMachine, CoherenceScorer}, gated by SignalQualityGate

The pipeline is synchronous and pull-based. A host loop pushes samples and
telemetry through the ingest_* methods and calls tick() once per frame. All
mutable state sits in a ConnectionContext that is replaced on connect and
disconnect, so nothing survives a reconnect.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple

from ..core.config import (
    FFT_SIZE, SAMPLE_RATE, HIGH_PASS_HZ, SMOOTHING_FACTOR, HISTORY_LENGTH,
    N_CHANNELS, TOUCHING_QUALITY, STALE_DATA_MS, COHERENCE_HISTORY_LENGTH,
)
from ..core.data_types import (
    BrainSnapshot, CoherenceZone, FlowPhase, FlowState,
    FlowStateConfig, ThresholdSettings, Transition,
)
from ..processing.buffer import SampleBuffer
from ..processing.normalizer import BandPowerNormalizer, BandState
from ..processing.spectral import SpectralAnalyzer
from ..detection.quality import (
    SignalQualityGate, QualityReport, electrode_quality, motion_level,
    default_electrode_codes,
)
from ..detection.flow_state import FlowStateMachine, FlowContext
from ..detection.coherence import CoherenceScorer, CoherenceConfig
from ..detection.relax_focus import compute_indices, dominant_band, classify_brain_state
from ..acquisition.events import (
    ArtifactEvent, BandEvent, HorseshoeEvent, MotionEvent, TelemetryEvent,
    TouchingEvent, decode_message,
)


def now_ms() -> float:
    return time.time() * 1000.0


@dataclass
class ConnectionContext:
    """Everything that belongs to one active device connection"""
    buffer: SampleBuffer
    bands: BandState
    flow: FlowContext
    connected: bool = False
    touching: bool = False
    electrode_codes: List[int] = field(default_factory=default_electrode_codes)
    accel: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    blink: bool = False
    jaw_clench: bool = False
    last_update_ms: Optional[float] = None
    coherence_history: Deque[float] = field(
        default_factory=lambda: deque(maxlen=COHERENCE_HISTORY_LENGTH))


@dataclass
class TickResult:
    """Everything the consumers need after one tick"""
    timestamp_ms: float
    snapshot: BrainSnapshot
    flow: FlowState
    phase: FlowPhase
    transition: Transition
    coherence: float
    zone: CoherenceZone
    quality: QualityReport

    def to_message(self) -> Dict[str, Any]:
        """JSON-ready dictionary for downstream consumers"""
        snap = self.snapshot
        return {
            "t": self.timestamp_ms,
            "connected": snap.connected,
            "touching": snap.touching,
            "connection_quality": snap.connection_quality,
            "bands": snap.bands.as_dict(),
            "bands_smooth": snap.smoothed_bands.as_dict(),
            "relaxation_index": snap.relaxation_index,
            "meditation_index": snap.meditation_index,
            "focus_index": snap.focus_index,
            "brain_state": snap.brain_state,
            "blink": snap.blink,
            "jaw_clench": snap.jaw_clench,
            "flow_active": self.flow.is_active,
            "sustained_ms": self.flow.sustained_ms,
            "beta_alpha_ratio": self.flow.beta_alpha_ratio,
            "signal_variance": self.flow.signal_variance,
            "noise_level": self.flow.noise_level,
            "transition": self.transition.value,
            "coherence": self.coherence,
            "zone": self.zone.value,
            "signal_valid": self.quality.valid,
        }


class FlowPipeline:
    """
    Full processing chain for a single headband connection

    Args:
        config: Initial flow state thresholds
        coherence_config: Coherence tuning constants
        analyzer: Spectral analyzer to reuse; built once here if omitted
    """

    def __init__(self, config: Optional[FlowStateConfig] = None,
                 coherence_config: Optional[CoherenceConfig] = None,
                 analyzer: Optional[SpectralAnalyzer] = None,
                 fft_size: int = FFT_SIZE, sample_rate: float = SAMPLE_RATE,
                 high_pass_cutoff: float = HIGH_PASS_HZ,
                 smoothing_factor: float = SMOOTHING_FACTOR,
                 history_length: int = HISTORY_LENGTH):
        self.analyzer = analyzer or SpectralAnalyzer(fft_size, sample_rate, high_pass_cutoff)
        self.normalizer = BandPowerNormalizer(self.analyzer, smoothing_factor, history_length)
        self.flow_machine = FlowStateMachine(config)
        self.gate = SignalQualityGate(self.flow_machine.config)
        self.scorer = CoherenceScorer(coherence_config)
        self.context = self.new_context()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def new_context(self) -> ConnectionContext:
        return ConnectionContext(
            buffer=SampleBuffer(self.analyzer.size, N_CHANNELS),
            bands=self.normalizer.new_state(),
            flow=self.flow_machine.new_context(),
        )

    def connect(self, assume_contact: bool = False, timestamp_ms: Optional[float] = None):
        """
        Start a fresh connection

        Args:
            assume_contact: Treat all electrodes as good until a horseshoe
                update says otherwise (raw-sample links carry no contact data)
            timestamp_ms: Connection time, defaults to now
        """
        self.context = self.new_context()
        self.context.connected = True
        self.context.last_update_ms = now_ms() if timestamp_ms is None else timestamp_ms
        if assume_contact:
            self.context.electrode_codes = [1] * N_CHANNELS
            self.context.touching = True
        logging.info("Connection started")

    def disconnect(self):
        """Drop all connection state"""
        self.context = self.new_context()
        logging.info("Connection closed - pipeline state reset")

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> FlowStateConfig:
        return self.flow_machine.config

    def set_config(self, config: FlowStateConfig):
        self.flow_machine.set_config(config)

    def apply_threshold_settings(self, settings: ThresholdSettings) -> FlowStateConfig:
        return self.flow_machine.apply_threshold_settings(settings)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _touch(self, timestamp_ms: Optional[float]):
        self.context.last_update_ms = now_ms() if timestamp_ms is None else timestamp_ms

    def ingest_samples(self, channel: int, samples: Sequence[float],
                       timestamp_ms: Optional[float] = None) -> bool:
        """
        Push raw samples for one electrode

        Band powers are recomputed whenever channel 0 completes a packet and
        holds a full window.

        Returns:
            bool: True if this call produced a band update
        """
        ctx = self.context
        if not ctx.buffer.push(channel, samples):
            return False
        self._touch(timestamp_ms)

        if channel == 0 and ctx.buffer.is_ready(0):
            return self.normalizer.process(ctx.bands, ctx.buffer)
        return False

    def ingest_message(self, address: str, args: Any,
                       timestamp_ms: Optional[float] = None) -> bool:
        """
        Decode and apply one telemetry message

        Returns:
            bool: False if the message was unknown or malformed
        """
        event = decode_message(address, args)
        if event is None:
            return False
        self._touch(timestamp_ms)
        self.handle_event(event)
        return True

    def handle_event(self, event: TelemetryEvent):
        ctx = self.context
        if isinstance(event, BandEvent):
            self.normalizer.update_band(ctx.bands, event.band, event.value)
        elif isinstance(event, MotionEvent):
            ctx.accel = (event.x, event.y, event.z)
        elif isinstance(event, HorseshoeEvent):
            self.set_electrode_codes(event.codes)
        elif isinstance(event, TouchingEvent):
            ctx.touching = event.touching
        elif isinstance(event, ArtifactEvent):
            if event.kind == "blink":
                ctx.blink = event.active
            else:
                ctx.jaw_clench = event.active
            if event.active:
                logging.debug(f"Headband reported {event.kind}")

    def ingest_motion(self, x: float, y: float, z: float):
        self.context.accel = (x, y, z)

    def set_electrode_codes(self, codes: Sequence[int]):
        ctx = self.context
        ctx.electrode_codes = [int(c) for c in codes[:N_CHANNELS]]
        ctx.touching = electrode_quality(ctx.electrode_codes) > TOUCHING_QUALITY

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def is_receiving(self, timestamp_ms: Optional[float] = None) -> bool:
        ctx = self.context
        if ctx.last_update_ms is None:
            return False
        now = now_ms() if timestamp_ms is None else timestamp_ms
        return now - ctx.last_update_ms < STALE_DATA_MS

    def snapshot(self, timestamp_ms: Optional[float] = None) -> BrainSnapshot:
        ctx = self.context
        smoothed = ctx.bands.smoothed.copy()
        connected = ctx.connected and self.is_receiving(timestamp_ms)
        relaxation, meditation, focus = compute_indices(smoothed)
        return BrainSnapshot(
            connected=connected,
            touching=ctx.touching,
            connection_quality=electrode_quality(ctx.electrode_codes),
            bands=ctx.bands.bands.copy(),
            smoothed_bands=smoothed,
            relaxation_index=relaxation,
            meditation_index=meditation,
            focus_index=focus,
            dominant_band=dominant_band(smoothed),
            brain_state=classify_brain_state(smoothed, connected, ctx.touching),
            electrode_codes=tuple(ctx.electrode_codes),
            blink=ctx.blink,
            jaw_clench=ctx.jaw_clench,
        )

    def history(self, band: str) -> List[float]:
        return list(self.context.bands.history[band])

    def tick(self, timestamp_ms: Optional[float] = None) -> TickResult:
        """
        Evaluate the gate, flow state and coherence for the current bands

        Args:
            timestamp_ms: Wall-clock time of this tick, defaults to now

        Returns:
            TickResult: Fresh metrics, decision, transition and coherence
        """
        now = now_ms() if timestamp_ms is None else timestamp_ms
        ctx = self.context
        config = self.flow_machine.config
        smoothed = ctx.bands.smoothed

        quality = electrode_quality(ctx.electrode_codes)
        motion = motion_level(*ctx.accel)

        metrics = self.flow_machine.measure(ctx.flow, smoothed, motion)
        report = self.gate.check(quality, smoothed.total(), metrics.signal_variance,
                                 smoothed.alpha, config)
        if not (ctx.connected and self.is_receiving(now)):
            # Frozen bands from a dropped stream must never count as a steady signal
            report = QualityReport(valid=False, failures=report.failures + ["stale"])
        update = self.flow_machine.advance(ctx.flow, metrics, report.valid, now)

        coherence = self.scorer.score(smoothed, metrics.signal_variance, quality, report.valid)
        ctx.coherence_history.append(coherence)

        return TickResult(
            timestamp_ms=now,
            snapshot=self.snapshot(now),
            flow=update.state,
            phase=update.phase,
            transition=update.transition,
            coherence=coherence,
            zone=self.scorer.zone(coherence),
            quality=report,
        )
