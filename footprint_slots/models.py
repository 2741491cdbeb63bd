"""Data models for track points, time slots and movement segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

TransportMode = Literal["stationary", "walking", "cycling", "driving"]

SLOTS_PER_DAY: Final[int] = 96
SLOT_MINUTES: Final[int] = 15

DEFAULT_TZ: Final[str] = "Asia/Shanghai"


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single location sample.

    Attributes:
        ts: ISO datetime string, e.g. "2025-01-01T08:05:00+08:00". Only samples
            with an embedded "Thh:mm" component are placed on the slot grid.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        elevation_m: Elevation in meters, None if the device did not report it.
        speed_mps: Speed in meters/second, None if unknown (derived later).
    """

    ts: str
    latitude: float
    longitude: float
    elevation_m: float | None = None
    speed_mps: float | None = None


@dataclass(frozen=True, slots=True)
class SlotTrackData:
    """Aggregated samples of one 15-minute slot.

    Note:
        elevation_delta_m is only set when the change against the last reported
        elevation reaches the threshold; the reference slot never carries one.
    """

    slot_index: int
    label: str
    point_count: int
    avg_speed_mps: float
    avg_speed_kmh: float
    avg_elevation_m: float | None
    elevation_delta_m: int | None
    is_elevation_reference: bool
    mode: TransportMode


@dataclass(frozen=True, slots=True)
class MovementSegment:
    """A continuous trip made of non-stationary slots."""

    start_slot_index: int
    end_slot_index: int
    start_time: str
    end_time: str
    mode: TransportMode
    duration_minutes: int
    distance_m: float
    avg_speed_kmh: float


@dataclass(frozen=True, slots=True)
class FootprintAggregation:
    """One day of track points folded onto the 96-slot grid.

    Attributes:
        slots: Populated slots, ascending by slot index.
        slot_table: Exactly SLOTS_PER_DAY entries, None where a slot has no samples.
        total_distance_m: Sum of distances between consecutive samples of the day.
        reference_elevation_m: Average elevation of the first slot that has one.
        movement_segments: Trips lasting at least the minimum duration.
    """

    slots: tuple[SlotTrackData, ...]
    slot_table: tuple[SlotTrackData | None, ...]
    total_distance_m: float
    reference_elevation_m: float | None
    movement_segments: tuple[MovementSegment, ...]

    def slot_at(self, index: int) -> SlotTrackData | None:
        """Slot data for index, or None when empty or out of range."""

        if 0 <= index < len(self.slot_table):
            return self.slot_table[index]
        return None

    @property
    def is_empty(self) -> bool:
        """True when the day has no usable samples."""

        return not self.slots


def empty_aggregation() -> FootprintAggregation:
    """Aggregation for a day without data."""

    return FootprintAggregation(
        slots=(),
        slot_table=(None,) * SLOTS_PER_DAY,
        total_distance_m=0.0,
        reference_elevation_m=None,
        movement_segments=(),
    )
