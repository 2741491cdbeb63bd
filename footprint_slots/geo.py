"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final, Iterable

from footprint_slots.models import TrackPoint

EARTH_RADIUS_M: Final[float] = 6_371_000.0  # mean Earth radius


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters. Identical points give 0.0.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    half_d_phi = math.radians(lat2 - lat1) / 2.0
    half_d_lambda = math.radians(lon2 - lon1) / 2.0

    h = math.sin(half_d_phi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_d_lambda) ** 2
    return EARTH_RADIUS_M * 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


def is_finite_coord(lat: float, lon: float) -> bool:
    return math.isfinite(lat) and math.isfinite(lon)


def pair_distance_m(a: TrackPoint, b: TrackPoint) -> float | None:
    """Distance between two samples, None if either position is unusable."""

    if not (is_finite_coord(a.latitude, a.longitude) and is_finite_coord(b.latitude, b.longitude)):
        return None
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def path_distance_m(points: Iterable[TrackPoint]) -> float:
    """Sum distances between consecutive samples (in the given order)."""

    total = 0.0
    prev: TrackPoint | None = None
    for cur in points:
        if prev is not None:
            d = pair_distance_m(prev, cur)
            if d is not None:
                total += d
        prev = cur
    return total
