"""
Flow state detection

This module implements the time-debounced flow state decision: beta below
alpha, low variance and low noise, all held continuously for a configured
duration. Any single failing tick resets the timer.

The machine itself only holds its (immutable) configuration. Timer anchor,
phase and the trailing alpha/beta windows live in a FlowContext owned by the
caller, and every step returns an explicit transition tag instead of firing
callbacks.
"""

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Optional

import numpy as np

from ..core.config import VARIANCE_WINDOW, NEGLIGIBLE_ALPHA, SENTINEL_RATIO
from ..core.data_types import (
    BrainwaveBands, FlowPhase, FlowState, FlowStateConfig,
    ThresholdSettings, Transition,
)


@dataclass
class FlowContext:
    """Per-connection flow state machine state"""
    phase: FlowPhase = FlowPhase.IDLE
    started_at: Optional[float] = None
    recent_alpha: Deque[float] = field(default_factory=lambda: deque(maxlen=VARIANCE_WINDOW))
    recent_beta: Deque[float] = field(default_factory=lambda: deque(maxlen=VARIANCE_WINDOW))


@dataclass
class FlowMetrics:
    """Per-tick metrics the flow conditions are evaluated on"""
    beta_alpha_ratio: float
    signal_variance: float
    noise_level: float


@dataclass
class FlowUpdate:
    """Result of one step: public state, machine phase and edge"""
    state: FlowState
    phase: FlowPhase
    transition: Transition
    conditions_met: bool


def pooled_variance(ctx: FlowContext) -> float:
    """Population variance of the recent alpha and beta values taken together"""
    values = list(ctx.recent_alpha) + list(ctx.recent_beta)
    if len(values) < 2:
        return 0.0
    return float(np.var(values))


def ratio_threshold_from_coherence(coherence_threshold: float) -> float:
    """Higher coherence threshold -> stricter (lower) beta/alpha ceiling"""
    return 1.0 - (coherence_threshold - 0.7) * 2


class FlowStateMachine:
    """
    Idle -> Accumulating -> Active flow state decision

    Args:
        config: Initial thresholds; replace with set_config() between ticks
    """

    def __init__(self, config: Optional[FlowStateConfig] = None):
        self._config = config or FlowStateConfig()

    @property
    def config(self) -> FlowStateConfig:
        return self._config

    def set_config(self, config: FlowStateConfig):
        """Swap in a new configuration as a whole"""
        self._config = config
        logging.info(f"Flow config updated: {config}")

    def apply_threshold_settings(self, settings: ThresholdSettings) -> FlowStateConfig:
        """Map UI threshold settings onto a new configuration and install it"""
        config = replace(
            self._config,
            sustained_ms=settings.time_threshold_ms,
            beta_alpha_ratio_threshold=ratio_threshold_from_coherence(settings.coherence_threshold),
        )
        self.set_config(config)
        return config

    def new_context(self) -> FlowContext:
        return FlowContext()

    def measure(self, ctx: FlowContext, bands: BrainwaveBands,
                motion_level: float = 0.0) -> FlowMetrics:
        """
        Record the tick's alpha/beta and compute the flow metrics

        Args:
            ctx: Connection context (its trailing windows are updated)
            bands: Smoothed band values
            motion_level: Normalized motion (0-1)
        """
        ctx.recent_alpha.append(bands.alpha)
        ctx.recent_beta.append(bands.beta)

        if bands.alpha > NEGLIGIBLE_ALPHA:
            ratio = bands.beta / bands.alpha
        else:
            ratio = SENTINEL_RATIO

        # Gamma is mostly muscle artifact at the forehead electrodes
        noise = motion_level + bands.gamma * 0.5

        return FlowMetrics(
            beta_alpha_ratio=ratio,
            signal_variance=pooled_variance(ctx),
            noise_level=noise,
        )

    def conditions_met(self, metrics: FlowMetrics, gate_valid: bool) -> bool:
        cfg = self._config
        return (gate_valid
                and metrics.beta_alpha_ratio < cfg.beta_alpha_ratio_threshold
                and metrics.signal_variance < cfg.variance_threshold
                and metrics.noise_level < cfg.noise_threshold)

    def advance(self, ctx: FlowContext, metrics: FlowMetrics,
                gate_valid: bool, now_ms: float) -> FlowUpdate:
        """
        Apply one tick of the transition rules

        Args:
            ctx: Connection context (phase and timer anchor are updated)
            metrics: This tick's metrics from measure()
            gate_valid: Signal quality gate outcome for this tick
            now_ms: Current wall-clock time in milliseconds

        Returns:
            FlowUpdate: New state plus the transition that happened, if any
        """
        met = self.conditions_met(metrics, gate_valid)
        transition = Transition.NONE

        if met:
            if ctx.started_at is None:
                ctx.started_at = now_ms
                ctx.phase = FlowPhase.ACCUMULATING
            sustained = max(0.0, now_ms - ctx.started_at)
            if sustained >= self._config.sustained_ms and ctx.phase != FlowPhase.ACTIVE:
                ctx.phase = FlowPhase.ACTIVE
                transition = Transition.ENTERED
                logging.info(f"Flow state entered after {sustained:.0f}ms")
        else:
            if ctx.phase == FlowPhase.ACTIVE:
                transition = Transition.EXITED
                logging.info("Flow state exited")
            ctx.phase = FlowPhase.IDLE
            ctx.started_at = None
            sustained = 0.0

        state = FlowState(
            is_active=ctx.phase == FlowPhase.ACTIVE,
            sustained_ms=sustained,
            beta_alpha_ratio=metrics.beta_alpha_ratio,
            signal_variance=metrics.signal_variance,
            noise_level=metrics.noise_level,
        )
        return FlowUpdate(state=state, phase=ctx.phase, transition=transition, conditions_met=met)

    def step(self, ctx: FlowContext, bands: BrainwaveBands, motion_level: float,
             gate_valid: bool, now_ms: float) -> FlowUpdate:
        """Measure and advance in one call"""
        metrics = self.measure(ctx, bands, motion_level)
        return self.advance(ctx, metrics, gate_valid, now_ms)

    def reset(self, ctx: FlowContext):
        """Return a context to its initial Idle state"""
        ctx.phase = FlowPhase.IDLE
        ctx.started_at = None
        ctx.recent_alpha.clear()
        ctx.recent_beta.clear()
