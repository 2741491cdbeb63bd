"""Movement segment (trip) detection on the slot grid."""

from __future__ import annotations

from collections import Counter
from typing import Final, Sequence

from footprint_slots.geo import pair_distance_m
from footprint_slots.models import SLOT_MINUTES, MovementSegment, SlotTrackData, TrackPoint, TransportMode
from footprint_slots.modes import MODE_PRIORITY, is_moving
from footprint_slots.slots import slot_index_of, slot_label

# Up to this many empty slots (30 min) inside a trip are treated as a GPS dropout.
MAX_GAP_SLOTS: Final[int] = 2
# Shorter trips are dropped from the summary.
MIN_SEGMENT_MINUTES: Final[int] = 30


def dominant_mode(slots: Sequence[SlotTrackData]) -> TransportMode:
    """Most frequent mode; ties go to the faster mode (see MODE_PRIORITY)."""

    counts = Counter(s.mode for s in slots)
    return max(MODE_PRIORITY, key=lambda m: (counts[m], -MODE_PRIORITY.index(m)))


def distance_in_range_m(points: Sequence[TrackPoint], start_index: int, end_index: int) -> float:
    """Distance between consecutive samples whose slots both lie in [start, end].

    Args:
        points: Samples sorted by time.
        start_index: First slot index (inclusive).
        end_index: Last slot index (inclusive).
    """

    total = 0.0
    for prev, cur in zip(points, points[1:]):
        prev_slot = slot_index_of(prev.ts)
        cur_slot = slot_index_of(cur.ts)
        if prev_slot is None or cur_slot is None:
            continue
        if not (start_index <= prev_slot <= end_index and start_index <= cur_slot <= end_index):
            continue
        d = pair_distance_m(prev, cur)
        if d is not None:
            total += d
    return total


def build_segment(run: Sequence[SlotTrackData], points: Sequence[TrackPoint]) -> MovementSegment:
    """Summarize a run of moving slots (ascending, non-empty)."""

    first = run[0]
    last = run[-1]
    duration_minutes = (last.slot_index - first.slot_index + 1) * SLOT_MINUTES
    distance_m = distance_in_range_m(points, first.slot_index, last.slot_index)
    avg_speed_kmh = (distance_m / 1000.0) / (duration_minutes / 60.0) if duration_minutes > 0 else 0.0
    return MovementSegment(
        start_slot_index=first.slot_index,
        end_slot_index=last.slot_index,
        start_time=first.label,
        end_time=slot_label(last.slot_index + 1),
        mode=dominant_mode(run),
        duration_minutes=duration_minutes,
        distance_m=distance_m,
        avg_speed_kmh=avg_speed_kmh,
    )


def detect_movement_segments(
    slots: Sequence[SlotTrackData],
    points: Sequence[TrackPoint],
    *,
    max_gap_slots: int = MAX_GAP_SLOTS,
    min_minutes: int = MIN_SEGMENT_MINUTES,
) -> list[MovementSegment]:
    """Merge moving slots into trips.

    A moving slot extends the current run when at most max_gap_slots empty
    slots separate it from the run's last slot. A stationary slot or a longer
    gap closes the run. Closed runs shorter than min_minutes are discarded.

    Args:
        slots: Populated slots (any order).
        points: Samples sorted by time, used to recompute trip distance.

    Returns:
        Trips in chronological order.
    """

    segments: list[MovementSegment] = []
    run: list[SlotTrackData] = []

    for slot in sorted(slots, key=lambda s: s.slot_index):
        if not is_moving(slot.mode):
            _close_run(segments=segments, run=run, points=points, min_minutes=min_minutes)
            run = []
            continue

        if run and slot.slot_index - run[-1].slot_index - 1 > max_gap_slots:
            _close_run(segments=segments, run=run, points=points, min_minutes=min_minutes)
            run = []
        run.append(slot)

    _close_run(segments=segments, run=run, points=points, min_minutes=min_minutes)
    return segments


def _close_run(
    *,
    segments: list[MovementSegment],
    run: Sequence[SlotTrackData],
    points: Sequence[TrackPoint],
    min_minutes: int,
) -> None:
    if not run:
        return
    segment = build_segment(run, points)
    if segment.duration_minutes < min_minutes:
        return
    segments.append(segment)
