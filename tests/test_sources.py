import numpy as np

from flow_bridge.acquisition.sources import FakeMuseSource
from flow_bridge.engine.pipeline import FlowPipeline


def test_window_shape_and_clock():
    source = FakeMuseSource(seed=1)
    data = source.generate_window(0.5)

    assert data.shape == (4, 128)
    assert source.time == 0.5


def test_packets_cover_every_channel():
    packets = FakeMuseSource(seed=1).next_packets(12)

    assert [ch for ch, _ in packets] == [0, 1, 2, 3]
    assert all(len(samples) == 12 for _, samples in packets)


def test_calm_and_busy_phases_through_pipeline(analyzer):
    source = FakeMuseSource(state_cycle_time=4.0, seed=7)
    pipeline = FlowPipeline(analyzer=analyzer)
    pipeline.connect(assume_contact=True, timestamp_ms=0)

    # 1.5 s of the calm half-cycle
    for _ in range(32):
        for ch, samples in source.next_packets(12):
            pipeline.ingest_samples(ch, samples, 0)
    calm = pipeline.context.bands.bands
    assert calm.alpha > calm.beta

    # skip into the busy half-cycle
    source.time = 2.0
    for _ in range(32):
        for ch, samples in source.next_packets(12):
            pipeline.ingest_samples(ch, samples, 0)
    busy = pipeline.context.bands.bands
    assert busy.beta > busy.alpha


def test_accelerometer_is_near_rest():
    x, y, z = FakeMuseSource(seed=2).accelerometer()
    assert abs(x) < 0.1 and abs(y) < 0.1
    assert np.isclose(z, 1.0, atol=0.1)
