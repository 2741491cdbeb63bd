"""Aggregate one day of track points into 96 fifteen-minute slots.

Per slot: sample count, average speed (reported or derived from consecutive
positions), transportation mode and average elevation. On top of the slots the
day gets an elevation narrative, a total distance and a list of trips.

Malformed samples never raise: a sample without a clock time is left off the
grid, a non-finite coordinate contributes no distance and no derived speed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from footprint_slots.elevation import ELEVATION_THRESHOLD_M, track_elevation
from footprint_slots.geo import pair_distance_m, path_distance_m
from footprint_slots.models import (
    SLOTS_PER_DAY,
    FootprintAggregation,
    SlotTrackData,
    TrackPoint,
    empty_aggregation,
)
from footprint_slots.modes import DEFAULT_SPEED_THRESHOLDS, SpeedThresholds, detect_transport_mode
from footprint_slots.segments import MAX_GAP_SLOTS, MIN_SEGMENT_MINUTES, detect_movement_segments
from footprint_slots.slots import slot_index_of, slot_label
from footprint_slots.timeutils import timestamp_epoch_ms

logger = logging.getLogger(__name__)

MPS_TO_KMH = 3.6


@dataclass(frozen=True, slots=True)
class FootprintParams:
    """Parameters controlling slot classification and trip detection."""

    speed_thresholds: SpeedThresholds = DEFAULT_SPEED_THRESHOLDS
    elevation_threshold_m: float = ELEVATION_THRESHOLD_M
    # Empty slots tolerated inside one trip (GPS dropouts, tunnels).
    max_gap_slots: int = MAX_GAP_SLOTS
    min_segment_minutes: int = MIN_SEGMENT_MINUTES


@dataclass(slots=True)
class _SlotBucket:
    point_count: int = 0
    speeds: list[float] = field(default_factory=list)
    elevations: list[float] = field(default_factory=list)


def sort_track_points(points: Sequence[TrackPoint]) -> list[TrackPoint]:
    """Sorted copy by time; samples whose time cannot be parsed go last."""

    def key(p: TrackPoint) -> tuple[bool, int]:
        ms = timestamp_epoch_ms(p.ts)
        return (ms is None, ms if ms is not None else 0)

    return sorted(points, key=key)


def _derived_speed_mps(prev: TrackPoint, cur: TrackPoint) -> float | None:
    prev_ms = timestamp_epoch_ms(prev.ts)
    cur_ms = timestamp_epoch_ms(cur.ts)
    if prev_ms is None or cur_ms is None:
        return None
    elapsed_s = (cur_ms - prev_ms) / 1000.0
    if elapsed_s <= 0:
        return None
    d = pair_distance_m(prev, cur)
    if d is None:
        return None
    return d / elapsed_s


def group_by_slot(sorted_points: Sequence[TrackPoint]) -> list[_SlotBucket | None]:
    """Bucket time-sorted samples into a fixed table of SLOTS_PER_DAY entries.

    A sample without speed gets one derived from the previous sample (distance
    over elapsed time), provided time moved forward.
    """

    table: list[_SlotBucket | None] = [None] * SLOTS_PER_DAY
    unplaced = 0

    for i, point in enumerate(sorted_points):
        index = slot_index_of(point.ts)
        if index is None:
            unplaced += 1
            continue

        bucket = table[index]
        if bucket is None:
            bucket = table[index] = _SlotBucket()
        bucket.point_count += 1

        speed = point.speed_mps
        if speed is None and i > 0:
            speed = _derived_speed_mps(sorted_points[i - 1], point)
        if speed is not None and math.isfinite(speed) and speed >= 0:
            bucket.speeds.append(speed)

        if point.elevation_m is not None and math.isfinite(point.elevation_m):
            bucket.elevations.append(point.elevation_m)

    if unplaced:
        logger.debug("%s samples without a clock time were left off the slot grid", unplaced)
    return table


def _mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def summarize_slot(index: int, bucket: _SlotBucket, thresholds: SpeedThresholds) -> SlotTrackData:
    avg_speed = _mean(bucket.speeds) or 0.0
    avg_speed_kmh = avg_speed * MPS_TO_KMH
    return SlotTrackData(
        slot_index=index,
        label=slot_label(index),
        point_count=bucket.point_count,
        avg_speed_mps=avg_speed,
        avg_speed_kmh=avg_speed_kmh,
        avg_elevation_m=_mean(bucket.elevations),
        elevation_delta_m=None,
        is_elevation_reference=False,
        mode=detect_transport_mode(avg_speed_kmh, thresholds),
    )


def aggregate_footprint(
    points: Sequence[TrackPoint],
    params: FootprintParams | None = None,
) -> FootprintAggregation:
    """Aggregate one day of track points.

    Args:
        points: The day's samples (can be unsorted; the input is not modified).
        params: Tuning parameters; None uses defaults.

    Returns:
        FootprintAggregation. An empty input gives an empty aggregation, which
        means "no data for this day" rather than an error.
    """

    if not points:
        return empty_aggregation()
    if params is None:
        params = FootprintParams()

    sorted_points = sort_track_points(points)
    table = group_by_slot(sorted_points)

    raw_slots = [
        summarize_slot(index, bucket, params.speed_thresholds)
        for index, bucket in enumerate(table)
        if bucket is not None
    ]
    slots, reference_elevation = track_elevation(raw_slots, params.elevation_threshold_m)

    slot_table: list[SlotTrackData | None] = [None] * SLOTS_PER_DAY
    for slot in slots:
        slot_table[slot.slot_index] = slot

    segments = detect_movement_segments(
        slots,
        sorted_points,
        max_gap_slots=params.max_gap_slots,
        min_minutes=params.min_segment_minutes,
    )
    total_distance = path_distance_m(sorted_points)

    logger.debug(
        "aggregated %s samples into %s slots, %s trips, %.1fm",
        len(points),
        len(slots),
        len(segments),
        total_distance,
    )
    return FootprintAggregation(
        slots=tuple(slots),
        slot_table=tuple(slot_table),
        total_distance_m=total_distance,
        reference_elevation_m=reference_elevation,
        movement_segments=tuple(segments),
    )
