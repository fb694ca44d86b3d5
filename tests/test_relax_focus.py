import pytest

from flow_bridge.core.data_types import BrainwaveBands
from flow_bridge.detection.relax_focus import (
    classify_brain_state, compute_indices, dominant_band,
)


def test_indices_are_scaled_ratios():
    bands = BrainwaveBands(delta=0.1, theta=0.2, alpha=0.3, beta=0.4, gamma=0.1)
    relaxation, meditation, focus = compute_indices(bands)

    assert relaxation == pytest.approx(0.5 / 0.501 / 2)
    assert meditation == pytest.approx(0.2 / 0.301 / 2)
    assert focus == pytest.approx(0.4 / 0.501 / 2)


def test_indices_are_capped_at_one():
    relaxation, meditation, focus = compute_indices(BrainwaveBands(theta=0.9, alpha=0.1))
    assert relaxation == 1.0
    assert meditation == 1.0
    assert focus == 0.0


def test_zero_bands_do_not_divide_by_zero():
    assert compute_indices(BrainwaveBands()) == (0.0, 0.0, 0.0)


def test_dominant_band():
    assert dominant_band(BrainwaveBands(delta=0.1, alpha=0.5, beta=0.2)) == "alpha"
    assert dominant_band(BrainwaveBands(theta=0.3, beta=0.3)) == "beta"
    assert dominant_band(BrainwaveBands()) == "gamma"


@pytest.mark.parametrize("bands, label", [
    (BrainwaveBands(delta=0.5, theta=0.1, alpha=0.2, beta=0.1, gamma=0.1), "deep"),
    (BrainwaveBands(delta=0.1, theta=0.4, alpha=0.25, beta=0.15, gamma=0.1), "meditative"),
    (BrainwaveBands(delta=0.1, theta=0.15, alpha=0.45, beta=0.2, gamma=0.1), "relaxed"),
    (BrainwaveBands(delta=0.1, theta=0.1, alpha=0.15, beta=0.5, gamma=0.15), "focused"),
    (BrainwaveBands(delta=0.2, theta=0.2, alpha=0.2, beta=0.2, gamma=0.2), "neutral"),
])
def test_brain_state_labels(bands, label):
    assert classify_brain_state(bands, connected=True, touching=True) == label


def test_brain_state_requires_contact():
    bands = BrainwaveBands(delta=0.5)
    assert classify_brain_state(bands, connected=True, touching=False) == "disconnected"
    assert classify_brain_state(bands, connected=False, touching=True) == "disconnected"
