"""Short text renderings of slots and trips (timeline chips, trip summaries)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from footprint_slots.models import MovementSegment, SlotTrackData, TransportMode


@dataclass(frozen=True, slots=True)
class ModeDisplay:
    emoji: str
    label: str


_MODE_DISPLAY: Final[dict[TransportMode, ModeDisplay]] = {
    "walking": ModeDisplay("🚶", "步行"),
    "cycling": ModeDisplay("🚴", "骑行"),
    "driving": ModeDisplay("🚗", "驾车"),
    "stationary": ModeDisplay("📍", "停留"),
}


def transport_mode_display(mode: TransportMode) -> ModeDisplay:
    """Emoji and Chinese label for a mode."""

    return _MODE_DISPLAY[mode]


def format_elevation(slot: SlotTrackData) -> str | None:
    """Absolute elevation on the reference slot, signed change elsewhere.

    Returns:
        "⛰150m", "⛰+15m", "⛰-15m", or None when nothing should be shown.
    """

    if slot.is_elevation_reference and slot.avg_elevation_m is not None:
        return f"⛰{math.floor(slot.avg_elevation_m + 0.5)}m"
    if slot.elevation_delta_m is not None:
        return f"⛰{slot.elevation_delta_m:+d}m"
    return None


def format_speed(speed_kmh: float) -> str:
    # Below 1 km/h is GPS drift, not worth showing.
    if speed_kmh < 1:
        return ""
    return f"{speed_kmh:.1f}km/h"


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h{mins}m" if mins > 0 else f"{hours}h"
    return f"{mins}m"


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f}km"
    return f"{int(round(meters))}m"


def format_movement_summary(segment: MovementSegment) -> str:
    """One-line trip summary, e.g. "🚗驾车 1h30m · 45.2km · 均速30.1km/h"."""

    d = transport_mode_display(segment.mode)
    return (
        f"{d.emoji}{d.label} {format_duration(segment.duration_minutes)} · "
        f"{format_distance(segment.distance_m)} · 均速{segment.avg_speed_kmh:.1f}km/h"
    )


def format_slot_chip(slot: SlotTrackData) -> str:
    """Compact chip for a timeline slot, e.g. "08:00 🚶步行 4.3km/h ⛰+12m"."""

    d = transport_mode_display(slot.mode)
    parts = [slot.label, f"{d.emoji}{d.label}"]
    speed = format_speed(slot.avg_speed_kmh)
    if speed:
        parts.append(speed)
    elevation = format_elevation(slot)
    if elevation is not None:
        parts.append(elevation)
    return " ".join(parts)
