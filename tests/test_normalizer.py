import math

import numpy as np
import pytest

from flow_bridge.core.data_types import BrainwaveBands
from flow_bridge.processing.buffer import SampleBuffer
from flow_bridge.processing.normalizer import BandPowerNormalizer

from signals import sine_window


@pytest.fixture
def normalizer(analyzer):
    return BandPowerNormalizer(analyzer)


def filled_buffer(window_for_channel, channels=range(4)) -> SampleBuffer:
    buffer = SampleBuffer(256, 4)
    for ch in channels:
        buffer.push(ch, window_for_channel(ch))
    return buffer


def test_all_zero_window_keeps_previous_smoothed(normalizer):
    state = normalizer.new_state()
    state.smoothed = BrainwaveBands(0.1, 0.2, 0.3, 0.25, 0.15)
    before = state.smoothed.copy()

    buffer = filled_buffer(lambda ch: np.zeros(256))
    assert normalizer.process(state, buffer) is False

    assert state.smoothed == before
    assert state.updates == 0
    assert all(not math.isnan(v) for v in state.smoothed.as_dict().values())


def test_no_ready_channel_skips_update(normalizer):
    state = normalizer.new_state()
    buffer = SampleBuffer(256, 4)
    buffer.push(0, sine_window(10)[:200])

    assert normalizer.process(state, buffer) is False
    assert state.bands == BrainwaveBands()


@pytest.mark.parametrize("freq, band", [(10, "alpha"), (20, "beta")])
def test_pure_tone_lands_in_its_band(normalizer, freq, band):
    state = normalizer.new_state()
    buffer = filled_buffer(lambda ch: sine_window(freq, phase=ch * 0.7))

    assert normalizer.process(state, buffer) is True
    assert state.bands.get(band) >= 0.9


def test_relative_powers_sum_to_one(normalizer):
    rng = np.random.default_rng(3)
    buffer = filled_buffer(lambda ch: rng.standard_normal(256) * 5)

    relative = normalizer.relative_powers(buffer)
    assert relative is not None
    assert sum(relative.values()) == pytest.approx(1.0)
    assert all(0.0 <= v <= 1.0 for v in relative.values())


def test_incomplete_channels_are_ignored(normalizer):
    # Channel 1 would be beta-dominant, but it does not hold a full window
    buffer = SampleBuffer(256, 4)
    buffer.push(0, sine_window(10))
    buffer.push(1, sine_window(20, n_samples=100))

    relative = normalizer.relative_powers(buffer)
    assert relative["alpha"] >= 0.9


def test_update_band_clamps_and_smooths(normalizer):
    state = normalizer.new_state()

    normalizer.update_band(state, "alpha", 1.5)
    assert state.bands.alpha == 1.0
    assert state.smoothed.alpha == pytest.approx(0.15)

    normalizer.update_band(state, "alpha", -0.3)
    assert state.bands.alpha == 0.0
    assert state.smoothed.alpha == pytest.approx(0.15 * 0.85)


def test_smoothing_factor_is_configurable(analyzer):
    normalizer = BandPowerNormalizer(analyzer, smoothing_factor=0.5)
    state = normalizer.new_state()

    normalizer.update_band(state, "theta", 0.8)
    assert state.smoothed.theta == pytest.approx(0.4)


def test_history_is_bounded(analyzer):
    normalizer = BandPowerNormalizer(analyzer, history_length=5)
    state = normalizer.new_state()

    for i in range(8):
        normalizer.update_band(state, "gamma", i / 10)

    assert list(state.history["gamma"]) == pytest.approx([0.3, 0.4, 0.5, 0.6, 0.7])


def test_unknown_band_raises(normalizer):
    with pytest.raises(ValueError):
        normalizer.update_band(normalizer.new_state(), "mu", 0.5)


def test_states_are_independent(normalizer):
    first = normalizer.new_state()
    second = normalizer.new_state()

    normalizer.update_band(first, "beta", 0.9)

    assert second.smoothed.beta == 0.0
    assert len(second.history["beta"]) == 0
