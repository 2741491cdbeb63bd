"""Command-line interface for footprint_slots.

Run:
    python -m footprint_slots day --csv Path.csv --date 2025-01-01
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime

from footprint_slots.aggregate import FootprintParams, aggregate_footprint
from footprint_slots.csv_io import load_day_track_points, write_segments_csv, write_slots_csv
from footprint_slots.display import format_distance, format_movement_summary, format_slot_chip
from footprint_slots.elevation import ELEVATION_THRESHOLD_M
from footprint_slots.models import DEFAULT_TZ, FootprintAggregation
from footprint_slots.segments import MAX_GAP_SLOTS, MIN_SEGMENT_MINUTES
from footprint_slots.timeutils import parse_day, tzinfo_from_name


def _params_from_args(args: argparse.Namespace) -> FootprintParams:
    return FootprintParams(
        elevation_threshold_m=args.elevation_threshold_m,
        max_gap_slots=args.max_gap_slots,
        min_segment_minutes=args.min_segment_minutes,
    )


def _load_and_aggregate(args: argparse.Namespace) -> FootprintAggregation:
    if args.date:
        day = parse_day(args.date)
    else:
        day = datetime.now(tzinfo_from_name(args.tz)).date()
    points, summary = load_day_track_points(args.csv, day, args.tz)
    print(
        f"{day.isoformat()}: total_rows={summary.rows_total}, parsed={summary.rows_parsed}, "
        f"skipped={summary.rows_skipped}, in_day={summary.rows_in_day}",
        file=sys.stderr,
    )
    return aggregate_footprint(points, _params_from_args(args))


def aggregation_payload(agg: FootprintAggregation) -> dict[str, object]:
    """JSON-friendly view of an aggregation (the fixed slot table is omitted)."""

    return {
        "total_distance_m": agg.total_distance_m,
        "reference_elevation_m": agg.reference_elevation_m,
        "slots": [asdict(s) for s in agg.slots],
        "movement_segments": [asdict(seg) for seg in agg.movement_segments],
    }


def _cmd_day(args: argparse.Namespace) -> int:
    agg = _load_and_aggregate(args)

    if args.json:
        print(json.dumps(aggregation_payload(agg), ensure_ascii=False, indent=2))
        return 0

    if agg.is_empty:
        print("当天没有轨迹数据")
        return 0

    print("### 汇总")
    print(f"distance={format_distance(agg.total_distance_m)}, slots={len(agg.slots)}")
    if agg.reference_elevation_m is not None:
        print(f"reference_elevation={agg.reference_elevation_m:.1f}m")
    print()

    print("### 出行")
    if not agg.movement_segments:
        print("（无超过阈值时长的连续移动）")
    for seg in agg.movement_segments:
        print(f"{seg.start_time}-{seg.end_time} {format_movement_summary(seg)}")
    print()

    print("### 时间槽（15分钟）")
    for slot in agg.slots:
        print(f"{format_slot_chip(slot)}  (n={slot.point_count})")
    return 0


def _cmd_export_day(args: argparse.Namespace) -> int:
    agg = _load_and_aggregate(args)
    write_slots_csv(agg.slots, args.out_slots)
    write_segments_csv(agg.movement_segments, args.out_segments)
    print(f"已导出：{args.out_slots}（{len(agg.slots)} 个时间槽），{args.out_segments}（{len(agg.movement_segments)} 段出行）")
    return 0


def _add_day_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--csv", type=str, default="Path.csv", help="输入CSV路径")
    p.add_argument("--date", type=str, default=None, help="统计日期（本地时区），例如 2025-01-01；默认今天")
    p.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA），默认 Asia/Shanghai")
    p.add_argument(
        "--elevation-threshold-m",
        type=float,
        default=ELEVATION_THRESHOLD_M,
        help="海拔变化显示阈值（米），相对上一次显示的海拔",
    )
    p.add_argument(
        "--max-gap-slots",
        type=int,
        default=MAX_GAP_SLOTS,
        help="同一段出行中允许的空时间槽数（每个15分钟，抵抗GPS断点）",
    )
    p.add_argument(
        "--min-segment-minutes",
        type=int,
        default=MIN_SEGMENT_MINUTES,
        help="出行摘要的最短时长（分钟），更短的连续移动不显示",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="footprint_slots")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_day = sub.add_parser("day", help="按15分钟时间槽汇总某一天的轨迹（交通方式/海拔/出行）")
    _add_day_arguments(p_day)
    p_day.add_argument("--json", action="store_true", help="输出JSON（便于后处理）")
    p_day.set_defaults(func=_cmd_day)

    p_exp = sub.add_parser("export-day", help="导出某一天的时间槽与出行CSV")
    _add_day_arguments(p_exp)
    p_exp.add_argument("--out-slots", type=str, default="slots.csv", help="时间槽CSV输出路径")
    p_exp.add_argument("--out-segments", type=str, default="segments.csv", help="出行CSV输出路径")
    p_exp.set_defaults(func=_cmd_export_day)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
