"""Builders shared by the test modules."""

from footprint_slots.modes import detect_transport_mode
from footprint_slots.models import SlotTrackData, TransportMode
from footprint_slots.slots import slot_label


def make_slot(
    index: int,
    *,
    mode: TransportMode | None = None,
    speed_kmh: float = 0.0,
    elevation: float | None = None,
) -> SlotTrackData:
    return SlotTrackData(
        slot_index=index,
        label=slot_label(index),
        point_count=1,
        avg_speed_mps=speed_kmh / 3.6,
        avg_speed_kmh=speed_kmh,
        avg_elevation_m=elevation,
        elevation_delta_m=None,
        is_elevation_reference=False,
        mode=mode if mode is not None else detect_transport_mode(speed_kmh),
    )
