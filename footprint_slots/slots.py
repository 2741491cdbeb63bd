"""Mapping between wall-clock times and the 96 fixed 15-minute slots."""

from __future__ import annotations

import math

from footprint_slots.models import SLOT_MINUTES, SLOTS_PER_DAY
from footprint_slots.timeutils import extract_time

_QUARTERS_PER_HOUR = 60 // SLOT_MINUTES


def to_slot_index(hour: int, minute: int) -> int:
    """Round a clock time to the nearest slot start.

    Minutes round to the nearest quarter (halves round up). Rounding up to the
    next full hour wraps at midnight, so 23:53..23:59 land in slot 0 of the
    same day.

    Args:
        hour: 0..23.
        minute: 0..59.

    Returns:
        Slot index in 0..95.
    """

    quarter = math.floor(minute / SLOT_MINUTES + 0.5)
    if quarter == _QUARTERS_PER_HOUR:
        return ((hour + 1) % 24) * _QUARTERS_PER_HOUR
    return hour * _QUARTERS_PER_HOUR + quarter


def slot_label(index: int) -> str:
    """Start time "HH:MM" of a slot.

    Index SLOTS_PER_DAY (the close of the last slot) wraps to "00:00".
    """

    index %= SLOTS_PER_DAY
    hour, quarter = divmod(index, _QUARTERS_PER_HOUR)
    return f"{hour:02d}:{quarter * SLOT_MINUTES:02d}"


def slot_index_of(ts: str) -> int | None:
    """Slot index of a timestamp, None if it carries no usable clock time."""

    clock = extract_time(ts)
    if clock is None:
        return None
    return to_slot_index(*clock)
