"""Elevation change tracking across slots.

Only significant changes are reported. The baseline is the last *reported*
elevation, not the previous slot: small drifts accumulate until one slot
crosses the threshold, and only then does the baseline move.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Final, Sequence

from footprint_slots.models import SlotTrackData

ELEVATION_THRESHOLD_M: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class ElevationState:
    """Accumulator threaded through the slots in ascending order."""

    reference_m: float | None = None
    last_reported_m: float | None = None


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def advance(
    state: ElevationState,
    slot: SlotTrackData,
    threshold_m: float = ELEVATION_THRESHOLD_M,
) -> tuple[ElevationState, SlotTrackData]:
    """Fold one slot into the state.

    Returns:
        (next_state, slot annotated with reference flag / delta)
    """

    elevation = slot.avg_elevation_m
    if elevation is None:
        return state, slot

    if state.reference_m is None or state.last_reported_m is None:
        return (
            ElevationState(reference_m=elevation, last_reported_m=elevation),
            replace(slot, is_elevation_reference=True, elevation_delta_m=None),
        )

    delta = elevation - state.last_reported_m
    if abs(delta) >= threshold_m:
        return (
            replace(state, last_reported_m=elevation),
            replace(slot, elevation_delta_m=_round_half_up(delta)),
        )
    return state, slot


def track_elevation(
    slots: Sequence[SlotTrackData],
    threshold_m: float = ELEVATION_THRESHOLD_M,
) -> tuple[list[SlotTrackData], float | None]:
    """Annotate slots (ascending by index) with the elevation narrative.

    Returns:
        (annotated slots, reference elevation or None)
    """

    state = ElevationState()
    out: list[SlotTrackData] = []
    for slot in slots:
        state, annotated = advance(state, slot, threshold_m)
        out.append(annotated)
    return out, state.reference_m
