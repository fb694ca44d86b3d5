"""
Headband telemetry event decoding

When the raw waveform is unavailable (e.g. an OSC bridge such as Mind Monitor),
the headband delivers pre-computed relative band powers and telemetry as
address/argument messages. This module turns those messages into typed events.
Malformed or out-of-range messages decode to None and are dropped.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from ..core.config import BAND_NAMES, N_CHANNELS


BAND_ADDRESSES = {f"/muse/elements/{band}_relative": band for band in BAND_NAMES}
ACC_ADDRESS = "/muse/acc"
HORSESHOE_ADDRESS = "/muse/elements/horseshoe"
TOUCHING_ADDRESS = "/muse/elements/touching_forehead"
BLINK_ADDRESS = "/muse/blink"
JAW_CLENCH_ADDRESS = "/muse/jaw_clench"


@dataclass(frozen=True)
class BandEvent:
    band: str
    value: float


@dataclass(frozen=True)
class MotionEvent:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class HorseshoeEvent:
    codes: Tuple[int, ...]


@dataclass(frozen=True)
class TouchingEvent:
    touching: bool


@dataclass(frozen=True)
class ArtifactEvent:
    """Blink or jaw clench detected by the headband firmware"""
    kind: str
    active: bool


TelemetryEvent = Union[BandEvent, MotionEvent, HorseshoeEvent, TouchingEvent, ArtifactEvent]


def _is_number(value: Any) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


def parse_value(args: Any) -> Optional[float]:
    """
    Reduce a message payload to one float

    Arrays are averaged over their finite numeric entries.

    Returns:
        float, or None if the payload holds no usable number
    """
    if isinstance(args, (list, tuple)):
        valid = [float(v) for v in args if _is_number(v)]
        if not valid:
            return None
        return sum(valid) / len(valid)
    if _is_number(args):
        return float(args)
    return None


def decode_message(address: str, args: Any) -> Optional[TelemetryEvent]:
    """
    Decode one address/arguments message

    Args:
        address: Message address, e.g. "/muse/elements/alpha_relative"
        args: Scalar or list payload

    Returns:
        TelemetryEvent, or None for unknown, malformed or out-of-range messages
    """
    if not address:
        return None

    if address in BAND_ADDRESSES:
        value = parse_value(args)
        if value is None or not 0.0 <= value <= 1.0:
            logging.debug(f"Discarding band event {address}: {args!r}")
            return None
        return BandEvent(band=BAND_ADDRESSES[address], value=value)

    if address == ACC_ADDRESS:
        if not isinstance(args, (list, tuple)) or len(args) < 3 or not all(_is_number(v) for v in args[:3]):
            logging.debug(f"Discarding accelerometer event: {args!r}")
            return None
        return MotionEvent(x=float(args[0]), y=float(args[1]), z=float(args[2]))

    if address == HORSESHOE_ADDRESS:
        if not isinstance(args, (list, tuple)) or len(args) < N_CHANNELS:
            logging.debug(f"Discarding horseshoe event: {args!r}")
            return None
        codes = args[:N_CHANNELS]
        if not all(_is_number(c) and int(c) == c and 1 <= c <= 4 for c in codes):
            logging.debug(f"Discarding horseshoe event with invalid codes: {args!r}")
            return None
        return HorseshoeEvent(codes=tuple(int(c) for c in codes))

    if address == TOUCHING_ADDRESS:
        value = parse_value(args)
        if value is None:
            return None
        return TouchingEvent(touching=value > 0)

    if address in (BLINK_ADDRESS, JAW_CLENCH_ADDRESS):
        value = parse_value(args)
        if value is None:
            return None
        kind = "blink" if address == BLINK_ADDRESS else "jaw_clench"
        return ArtifactEvent(kind=kind, active=value > 0)

    return None
