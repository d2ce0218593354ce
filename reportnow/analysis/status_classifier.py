"""Operating-status classification for GPS pings.

Classifies each ping of a telemetry slice into one of:
  ENGINE_ON, MOVING, STOPPED, ENGINE_OFF

Rules are evaluated in order and the first match wins.  A status hint sent
by the device is trusted verbatim; unknown ignition (``None``) never
triggers the ignition-based rules.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..domain_models import GPSPing, PingStatus, parse_status

# Thresholds (tuneable)
MOVING_SPEED_KMH = 2.0  # strictly above this -> MOVING


def classify_ping_status(pings: Sequence[GPSPing], index: int) -> PingStatus:
    """Classify ``pings[index]`` using its position in the sequence."""
    if index < 0 or index >= len(pings):
        return PingStatus.STOPPED
    ping = pings[index]

    hinted = parse_status(ping.status)
    if hinted is not None:
        return hinted
    if ping.ignition is False:
        return PingStatus.ENGINE_OFF
    speed = ping.speed_or_zero
    if speed > MOVING_SPEED_KMH:
        return PingStatus.MOVING
    if index == 0 and ping.ignition is True:
        return PingStatus.ENGINE_ON
    if index == len(pings) - 1 and speed == 0:
        return PingStatus.ENGINE_OFF
    return PingStatus.STOPPED


def classify_pings(pings: Sequence[GPSPing]) -> list[PingStatus]:
    return [classify_ping_status(pings, idx) for idx in range(len(pings))]
