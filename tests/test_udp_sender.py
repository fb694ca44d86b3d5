import json
import socket

import pytest

from flow_bridge.communication.udp_sender import UDPSender
from flow_bridge.engine.pipeline import FlowPipeline


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def test_sends_tick_result_as_json(receiver, analyzer):
    pipeline = FlowPipeline(analyzer=analyzer)
    pipeline.connect(timestamp_ms=0)
    result = pipeline.tick(0)

    sender = UDPSender("127.0.0.1", receiver.getsockname()[1])
    try:
        assert sender.send_result(result)
        data, _ = receiver.recvfrom(65535)
    finally:
        sender.close()

    message = json.loads(data.decode("utf-8"))
    required_fields = ["t", "bands", "bands_smooth", "coherence", "zone",
                       "flow_active", "sustained_ms", "transition", "signal_valid",
                       "blink", "jaw_clench"]
    for field in required_fields:
        assert field in message
    assert message["coherence"] == pytest.approx(0.1)
    assert message["zone"] == "noise"


def test_send_after_close_fails(analyzer):
    pipeline = FlowPipeline(analyzer=analyzer)
    sender = UDPSender("127.0.0.1", 9)
    sender.close()

    assert sender.send_result(pipeline.tick(0)) is False
