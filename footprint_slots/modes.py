"""Transportation mode detection from slot-average speed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from footprint_slots.models import TransportMode


@dataclass(frozen=True, slots=True)
class SpeedThresholds:
    """Upper speed bounds (km/h, exclusive) for each mode.

    Conservative values to absorb GPS error: below 1 km/h is drift while parked,
    runners fall under walking, anything from 35 km/h up is driving.
    """

    stationary_kmh: float = 1.0
    walking_kmh: float = 12.0
    cycling_kmh: float = 35.0


DEFAULT_SPEED_THRESHOLDS: Final[SpeedThresholds] = SpeedThresholds()

# Rank for breaking ties between equally frequent modes, fastest first.
MODE_PRIORITY: Final[tuple[TransportMode, ...]] = ("driving", "cycling", "walking", "stationary")


def detect_transport_mode(
    speed_kmh: float,
    thresholds: SpeedThresholds = DEFAULT_SPEED_THRESHOLDS,
) -> TransportMode:
    """Classify one slot by its average speed (no smoothing across slots)."""

    if speed_kmh < thresholds.stationary_kmh:
        return "stationary"
    if speed_kmh < thresholds.walking_kmh:
        return "walking"
    if speed_kmh < thresholds.cycling_kmh:
        return "cycling"
    return "driving"


def is_moving(mode: TransportMode) -> bool:
    return mode != "stationary"
