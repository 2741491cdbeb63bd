"""CSV input/output for the exported track file and per-day results."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Sequence

from footprint_slots.display import format_elevation, format_movement_summary, transport_mode_display
from footprint_slots.models import MovementSegment, SlotTrackData, TrackPoint
from footprint_slots.timeutils import day_bounds_ms, tzinfo_from_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    rows_in_day: int
    fieldnames: Sequence[str]


def _parse_int(value: str) -> int:
    return int(value.strip())


def _parse_float(value: str) -> float:
    return float(value.strip())


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return _parse_float(value)


def _speed_or_none(value: str | None) -> float | None:
    # The app writes -1 when it has no speed for the fix.
    speed = _optional_float(value)
    if speed is None or speed < 0:
        return None
    return speed


def load_day_track_points(
    csv_path: str | Path,
    day: date,
    tz_name: str,
) -> tuple[list[TrackPoint], CsvSummary]:
    """Load the samples of one local calendar day from Path.csv.

    Args:
        csv_path: Path to the exported CSV.
        day: Local date to keep.
        tz_name: IANA timezone the day is interpreted in.

    Returns:
        (points, summary). Point timestamps are local ISO datetimes, so the
        slot grid follows the local clock.

    Raises:
        KeyError: If a required column (geoTime/latitude/longitude) is missing.

    Notes:
        The export uses these columns (observed):
          - geoTime: epoch milliseconds
          - latitude/longitude: decimal degrees
          - altitude: meters; speed: m/s, -1 when unknown
    """

    tz = tzinfo_from_name(tz_name)
    start_ms, end_ms = day_bounds_ms(day, tz_name)

    p = Path(csv_path)
    rows_total = 0
    rows_parsed = 0
    points: list[TrackPoint] = []

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames: Sequence[str] = reader.fieldnames or ()
        for row in reader:
            rows_total += 1
            try:
                geo_ms = _parse_int(row["geoTime"])
                lat = _parse_float(row["latitude"])
                lon = _parse_float(row["longitude"])
                elevation = _optional_float(row.get("altitude"))
                speed = _speed_or_none(row.get("speed"))
            except KeyError as exc:
                raise KeyError(f"CSV缺少必要字段：{exc}. 实际字段：{fieldnames}") from exc
            except (ValueError, TypeError, AttributeError):
                # 某些行可能损坏/空行，直接跳过
                continue
            rows_parsed += 1

            if not (start_ms <= geo_ms < end_ms):
                continue
            points.append(
                TrackPoint(
                    ts=datetime.fromtimestamp(geo_ms / 1000.0, tz=tz).isoformat(),
                    latitude=lat,
                    longitude=lon,
                    elevation_m=elevation,
                    speed_mps=speed,
                )
            )

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=rows_parsed,
        rows_skipped=rows_total - rows_parsed,
        rows_in_day=len(points),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("CSV中有 %s 行解析失败已跳过", summary.rows_skipped)
    return points, summary


def write_slots_csv(slots: Sequence[SlotTrackData], out_path: str | Path) -> None:
    """Write populated slots, one row per 15-minute slot."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "slot_index",
                "slot",
                "points",
                "mode",
                "mode_label",
                "avg_speed_mps",
                "avg_speed_kmh",
                "avg_elevation_m",
                "elevation_delta_m",
                "is_elevation_reference",
                "elevation_text",
            ],
        )
        w.writeheader()
        for s in slots:
            w.writerow(
                {
                    "slot_index": s.slot_index,
                    "slot": s.label,
                    "points": s.point_count,
                    "mode": s.mode,
                    "mode_label": transport_mode_display(s.mode).label,
                    "avg_speed_mps": f"{s.avg_speed_mps:.3f}",
                    "avg_speed_kmh": f"{s.avg_speed_kmh:.2f}",
                    "avg_elevation_m": "" if s.avg_elevation_m is None else f"{s.avg_elevation_m:.1f}",
                    "elevation_delta_m": "" if s.elevation_delta_m is None else s.elevation_delta_m,
                    "is_elevation_reference": int(s.is_elevation_reference),
                    "elevation_text": format_elevation(s) or "",
                }
            )


def write_segments_csv(segments: Sequence[MovementSegment], out_path: str | Path) -> None:
    """Write trips with their one-line summary."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "start_time",
                "end_time",
                "start_slot_index",
                "end_slot_index",
                "mode",
                "duration_minutes",
                "distance_m",
                "avg_speed_kmh",
                "summary",
            ],
        )
        w.writeheader()
        for seg in segments:
            w.writerow(
                {
                    "start_time": seg.start_time,
                    "end_time": seg.end_time,
                    "start_slot_index": seg.start_slot_index,
                    "end_slot_index": seg.end_slot_index,
                    "mode": seg.mode,
                    "duration_minutes": seg.duration_minutes,
                    "distance_m": f"{seg.distance_m:.1f}",
                    "avg_speed_kmh": f"{seg.avg_speed_kmh:.2f}",
                    "summary": format_movement_summary(seg),
                }
            )
