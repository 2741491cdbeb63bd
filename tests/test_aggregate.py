"""
Tests for the day aggregation (slot grouping, speed backfill, trips).
"""

import math

import pytest

from footprint_slots.aggregate import FootprintParams, aggregate_footprint, sort_track_points
from footprint_slots.models import SLOTS_PER_DAY, TrackPoint
from footprint_slots.modes import SpeedThresholds


class TestEmptyInput:
    def test_empty_result(self):
        agg = aggregate_footprint([])

        assert agg.is_empty
        assert agg.slots == ()
        assert len(agg.slot_table) == SLOTS_PER_DAY
        assert all(s is None for s in agg.slot_table)
        assert agg.total_distance_m == 0.0
        assert agg.reference_elevation_m is None
        assert agg.movement_segments == ()

    def test_only_unparseable_timestamps(self):
        agg = aggregate_footprint([TrackPoint("garbage", 39.9, 116.4), TrackPoint("", 39.9, 116.4)])

        assert agg.is_empty
        assert agg.movement_segments == ()


class TestSlotGrouping:
    def test_points_round_into_same_slot(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, 50.0, 1.5),
            TrackPoint("2024-01-15T08:05:00", 39.901, 116.401, 52.0, 1.4),
            TrackPoint("2024-01-15T08:07:00", 39.902, 116.402, 51.0, 1.6),
        ]
        agg = aggregate_footprint(points)

        assert len(agg.slots) == 1
        slot = agg.slot_at(32)
        assert slot is not None
        assert slot.label == "08:00"
        assert slot.point_count == 3
        assert slot.avg_speed_mps == pytest.approx(1.5)
        assert slot.avg_speed_kmh == pytest.approx(5.4)
        assert slot.avg_elevation_m == pytest.approx(51.0)
        assert slot.mode == "walking"

    def test_point_counts_match_parseable_timestamps(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4),
            TrackPoint("2024-01-15 08:10:00", 39.9, 116.4),
            TrackPoint("no time here", 39.9, 116.4),
            TrackPoint("2024-01-15T12:31:00", 39.9, 116.4),
            TrackPoint("2024-01-15T12:29:00", math.nan, 116.4),
        ]
        agg = aggregate_footprint(points)

        assert sum(s.point_count for s in agg.slots) == 3
        assert agg.slot_at(50).point_count == 2

    def test_slot_table_matches_slots(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, speed_mps=1.0),
            TrackPoint("2024-01-15T09:00:00", 39.9, 116.4, speed_mps=1.0),
        ]
        agg = aggregate_footprint(points)

        assert [s.slot_index for s in agg.slots] == [32, 36]
        assert agg.slot_at(32) is agg.slots[0]
        assert agg.slot_at(36) is agg.slots[1]
        assert agg.slot_at(33) is None
        assert agg.slot_at(200) is None

    def test_late_evening_lands_in_first_slot(self):
        agg = aggregate_footprint([TrackPoint("2024-01-15T23:55:00", 39.9, 116.4)])
        assert agg.slots[0].slot_index == 0

    def test_slots_without_speed_are_stationary(self):
        agg = aggregate_footprint([TrackPoint("2024-01-15T08:00:00", 39.9, 116.4)])

        assert agg.slots[0].avg_speed_mps == 0.0
        assert agg.slots[0].mode == "stationary"
        assert agg.slots[0].avg_elevation_m is None

    def test_custom_speed_thresholds(self):
        points = [TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, speed_mps=3.0)]
        params = FootprintParams(speed_thresholds=SpeedThresholds(walking_kmh=10.0))
        assert aggregate_footprint(points, params).slots[0].mode == "cycling"


class TestSpeedBackfill:
    def test_speed_derived_from_previous_point(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4),
            TrackPoint("2024-01-15T08:05:00", 39.901, 116.4),
        ]
        agg = aggregate_footprint(points)

        # ~111 m in 300 s, the first sample has no predecessor
        assert agg.slots[0].avg_speed_kmh == pytest.approx(111.2 / 300 * 3.6, rel=0.01)

    def test_reported_speed_is_kept(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4),
            TrackPoint("2024-01-15T08:05:00", 39.95, 116.4, speed_mps=0.0),
        ]
        agg = aggregate_footprint(points)
        assert agg.slots[0].avg_speed_mps == 0.0

    def test_same_timestamp_gives_no_speed(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4),
            TrackPoint("2024-01-15T08:00:00", 39.95, 116.4),
        ]
        agg = aggregate_footprint(points)

        assert agg.slots[0].avg_speed_mps == 0.0
        assert agg.slots[0].mode == "stationary"

    def test_negative_reported_speed_is_ignored(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, speed_mps=-1.0),
            TrackPoint("2024-01-15T08:01:00", 39.9, 116.4, speed_mps=2.0),
        ]
        agg = aggregate_footprint(points)
        assert agg.slots[0].avg_speed_mps == pytest.approx(2.0)

    def test_non_finite_coordinate_gives_no_speed(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", math.nan, 116.4),
            TrackPoint("2024-01-15T08:05:00", 39.9, 116.4),
        ]
        agg = aggregate_footprint(points)

        assert agg.slots[0].point_count == 2
        assert agg.slots[0].avg_speed_mps == 0.0
        assert agg.total_distance_m == 0.0


class TestOrderingAndDistance:
    def test_points_are_sorted_before_processing(self):
        points = [
            TrackPoint("2024-01-15T09:00:00", 39.91, 116.41, 110.0, 2.0),
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, 100.0, 1.5),
        ]
        agg = aggregate_footprint(points)

        assert agg.slots[0].label == "08:00"
        assert agg.slots[0].is_elevation_reference is True
        assert agg.reference_elevation_m == 100.0
        assert agg.slots[1].elevation_delta_m == 10

    def test_input_is_not_reordered(self):
        points = [
            TrackPoint("2024-01-15T09:00:00", 39.91, 116.41),
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4),
        ]
        snapshot = list(points)
        aggregate_footprint(points)
        assert points == snapshot

    def test_unparseable_timestamps_sort_last(self):
        points = [
            TrackPoint("bad", 0.0, 0.0),
            TrackPoint("2024-01-15T08:00:00", 1.0, 1.0),
        ]
        assert [p.ts for p in sort_track_points(points)] == ["2024-01-15T08:00:00", "bad"]

    def test_total_distance_spans_slot_boundaries(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4),
            TrackPoint("2024-01-15T08:05:00", 39.901, 116.4),
            TrackPoint("2024-01-15T11:00:00", 39.902, 116.4),
        ]
        agg = aggregate_footprint(points)
        assert agg.total_distance_m == pytest.approx(2 * 111.2, rel=0.01)

    def test_elevation_narrative(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, 100.0),
            TrackPoint("2024-01-15T09:00:00", 39.91, 116.41, 105.0),
            TrackPoint("2024-01-15T10:00:00", 39.92, 116.42, 115.0),
            TrackPoint("2024-01-15T11:00:00", 39.93, 116.43, 118.0),
            TrackPoint("2024-01-15T12:00:00", 39.94, 116.44, 95.0),
        ]
        agg = aggregate_footprint(points)

        assert [s.elevation_delta_m for s in agg.slots] == [None, None, 15, None, -20]


class TestMovementSegments:
    def test_stationary_then_lone_driving_slot(self):
        """A single 15-minute driving slot four slots after a stay is not a trip."""
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, speed_mps=0.05),
            TrackPoint("2024-01-15T08:02:00", 39.9, 116.4, speed_mps=0.05),
            TrackPoint("2024-01-15T09:00:00", 39.95, 116.45, speed_mps=15.0),
        ]
        agg = aggregate_footprint(points)

        assert agg.slot_at(32).mode == "stationary"
        assert agg.slot_at(36).mode == "driving"
        assert agg.movement_segments == ()

    def test_one_hour_drive(self):
        # 08:00..09:00 every 5 minutes, 4.5 km per step at 15 m/s
        points = [
            TrackPoint(f"2024-01-15T{8 + m // 60:02d}:{m % 60:02d}:00", 39.9 + i * 0.04047, 116.4, speed_mps=15.0)
            for i, m in enumerate(range(0, 65, 5))
        ]
        agg = aggregate_footprint(points)

        assert [s.slot_index for s in agg.slots] == [32, 33, 34, 35, 36]
        assert len(agg.movement_segments) == 1
        seg = agg.movement_segments[0]
        assert seg.mode == "driving"
        assert (seg.start_time, seg.end_time) == ("08:00", "09:15")
        assert seg.duration_minutes == 75
        assert seg.distance_m == pytest.approx(agg.total_distance_m)
        assert seg.avg_speed_kmh == pytest.approx(seg.distance_m / 1000 / 1.25)

    def test_trip_length_parameters(self):
        points = [
            TrackPoint("2024-01-15T08:00:00", 39.9, 116.4, speed_mps=2.0),
            TrackPoint("2024-01-15T09:00:00", 39.91, 116.4, speed_mps=2.0),
        ]
        assert aggregate_footprint(points).movement_segments == ()

        params = FootprintParams(max_gap_slots=3, min_segment_minutes=30)
        segments = aggregate_footprint(points, params).movement_segments
        assert len(segments) == 1
        assert segments[0].mode == "walking"
        assert segments[0].duration_minutes == 75
