import pytest

from flow_bridge.core.data_types import BrainwaveBands, CoherenceZone
from flow_bridge.detection.coherence import (
    CoherenceConfig, CoherenceScorer, calculate_coherence, get_coherence_zone,
)

from signals import calm_bands


def test_low_power_guard_wins_regardless_of_bands():
    bands = BrainwaveBands(delta=0.0, theta=0.0, alpha=0.04, beta=0.0, gamma=0.0)
    assert CoherenceScorer().score(bands, 0.0, electrode_quality=1.0) == 0.1


def test_poor_contact_guard():
    bands = BrainwaveBands(delta=0.1, theta=0.1, alpha=0.2, beta=0.05, gamma=0.05)
    assert bands.total() == pytest.approx(0.5)
    assert CoherenceScorer().score(bands, 0.01, electrode_quality=0.3) == 0.15


def test_guard_order_power_before_contact():
    bands = BrainwaveBands(alpha=0.01, beta=0.01)
    assert CoherenceScorer().score(bands, 0.01, electrode_quality=0.0) == 0.1


def test_no_alpha_guard():
    bands = BrainwaveBands(delta=0.5, theta=0.3, alpha=0.005, beta=0.1, gamma=0.1)
    assert CoherenceScorer().score(bands, 0.01, electrode_quality=1.0) == 0.2


def test_closed_gate_scores_as_no_signal():
    score = CoherenceScorer().score(calm_bands(), 0.0, electrode_quality=1.0, gate_valid=False)
    assert score == 0.1


def test_weighted_score():
    bands = BrainwaveBands(delta=0.1, theta=0.2, alpha=0.4, beta=0.2, gamma=0.1)

    # alpha 1.0*0.35 + ratio 1.0*0.25 + theta 0.5*0.2 + stability 0.7*0.2
    assert calculate_coherence(bands, 0.01) == pytest.approx(0.84)


def test_ratio_and_stability_terms_floor_at_zero():
    bands = BrainwaveBands(delta=0.1, theta=0.0, alpha=0.1, beta=0.7, gamma=0.1)

    # alpha 0.3*0.35, ratio and theta and stability all 0
    assert calculate_coherence(bands, 1.0) == pytest.approx(0.105)


def test_score_is_capped_at_one():
    scorer = CoherenceScorer(CoherenceConfig(alpha_weight=1.0, ratio_weight=1.0))
    assert scorer.score(calm_bands(), 0.0, 1.0) == 1.0


def test_sentinels_are_configurable():
    scorer = CoherenceScorer(CoherenceConfig(no_signal_score=0.0, poor_contact_score=0.05))

    assert scorer.score(BrainwaveBands(), 0.0, 1.0) == 0.0
    assert scorer.score(calm_bands(), 0.0, 0.0) == 0.05


@pytest.mark.parametrize("coherence, zone", [
    (1.0, CoherenceZone.FLOW),
    (0.70, CoherenceZone.FLOW),
    (0.699999, CoherenceZone.STABILIZING),
    (0.40, CoherenceZone.STABILIZING),
    (0.399999, CoherenceZone.NOISE),
    (0.0, CoherenceZone.NOISE),
])
def test_zone_boundaries(coherence, zone):
    assert get_coherence_zone(coherence) == zone
    assert get_coherence_zone(coherence).value == zone.value
