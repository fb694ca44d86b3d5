"""Shared fixtures for the Flow Bridge tests"""

import pytest

from flow_bridge.processing.spectral import SpectralAnalyzer


@pytest.fixture(scope="session")
def analyzer():
    return SpectralAnalyzer(256, 256)
