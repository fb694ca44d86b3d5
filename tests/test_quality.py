import pytest

from flow_bridge.core.data_types import FlowStateConfig
from flow_bridge.detection.quality import (
    SignalQualityGate, electrode_quality, motion_level, quality_label,
)


def test_electrode_quality_weights():
    assert electrode_quality([1, 1, 1, 1]) == 1.0
    assert electrode_quality([2, 2, 2, 2]) == 0.5
    assert electrode_quality([1, 2, 3, 4]) == pytest.approx(0.375)
    assert electrode_quality([4, 4, 4, 4]) == 0.0
    assert electrode_quality([1, 1, 9, 0]) == 0.5
    assert electrode_quality([]) == 0.0


def test_quality_labels():
    assert [quality_label(c) for c in (1, 2, 3, 4)] == ["good", "medium", "poor", "off"]


def test_motion_level_is_normalized_and_capped():
    assert motion_level(0, 0, 0) == 0.0
    assert motion_level(-3, 3, 9) == pytest.approx(0.5)
    assert motion_level(100, 0, 0) == 1.0


def test_gate_accepts_good_signal():
    gate = SignalQualityGate()
    report = gate.check(electrode_quality=1.0, total_power=1.0, variance=0.01, alpha=0.4)

    assert report.valid
    assert report.failures == []


@pytest.mark.parametrize("kwargs, failure", [
    (dict(total_power=0.049), "signal_power"),
    (dict(variance=0.0009), "variance"),
    (dict(electrode_quality=0.49), "electrode_contact"),
    (dict(alpha=0.019), "alpha"),
])
def test_gate_rejects_each_criterion(kwargs, failure):
    inputs = dict(electrode_quality=1.0, total_power=1.0, variance=0.01, alpha=0.4)
    inputs.update(kwargs)

    report = SignalQualityGate().check(**inputs)

    assert not report.valid
    assert report.failures == [failure]


def test_gate_boundaries_are_inclusive():
    gate = SignalQualityGate()
    assert gate.is_valid(electrode_quality=0.5, total_power=0.05, variance=0.001, alpha=0.02)


def test_flat_line_is_rejected():
    report = SignalQualityGate().check(electrode_quality=1.0, total_power=0.0, variance=0.0, alpha=0.0)
    assert report.failures == ["signal_power", "variance", "alpha"]


def test_gate_uses_supplied_config():
    gate = SignalQualityGate()
    strict = FlowStateConfig(min_alpha=0.5)

    assert gate.is_valid(1.0, 1.0, 0.01, 0.4)
    assert not gate.is_valid(1.0, 1.0, 0.01, 0.4, config=strict)
