import numpy as np

from flow_bridge.processing.buffer import SampleBuffer


def test_keeps_only_most_recent_samples():
    buffer = SampleBuffer(capacity=4, n_channels=2)
    buffer.push(0, [1, 2, 3])
    buffer.push(0, [4, 5, 6])

    assert buffer.count(0) == 4
    assert buffer.is_ready(0)
    np.testing.assert_array_equal(buffer.window(0), [3, 4, 5, 6])


def test_channels_fill_independently():
    buffer = SampleBuffer(capacity=3, n_channels=2)
    buffer.push(1, [1, 2, 3])

    assert buffer.ready_channels() == [1]
    assert not buffer.is_ready(0)


def test_rejects_unknown_channel_and_empty_packet():
    buffer = SampleBuffer(capacity=3, n_channels=4)

    assert buffer.push(4, [1.0]) is False
    assert buffer.push(-1, [1.0]) is False
    assert buffer.push(0, []) is False
    assert buffer.count(0) == 0


def test_clear():
    buffer = SampleBuffer(capacity=2, n_channels=2)
    buffer.push(0, [1, 2])
    buffer.clear()

    assert buffer.ready_channels() == []
