from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import streamlit as st

from footprint_slots.aggregate import FootprintParams, aggregate_footprint
from footprint_slots.csv_io import load_day_track_points
from footprint_slots.display import (
    format_distance,
    format_elevation,
    format_movement_summary,
    format_speed,
    transport_mode_display,
)
from footprint_slots.elevation import ELEVATION_THRESHOLD_M
from footprint_slots.models import DEFAULT_TZ, TrackPoint
from footprint_slots.segments import MAX_GAP_SLOTS, MIN_SEGMENT_MINUTES
from footprint_slots.timeutils import tzinfo_from_name


@st.cache_data(show_spinner=False)
def _load_day(path_csv: str, day: date, tz_name: str, mtime: float) -> list[TrackPoint]:
    _ = mtime  # part of cache key so updated files reload automatically
    points, _summary = load_day_track_points(path_csv, day, tz_name)
    return points


def main() -> None:
    st.set_page_config(page_title="灵感足迹：一天的时间槽", layout="wide")
    st.title("灵感足迹：按15分钟时间槽查看一天的轨迹")

    with st.sidebar:
        st.subheader("数据与时区")
        tz_name = st.text_input("时区（IANA）", value=DEFAULT_TZ)
        path_csv = st.text_input("Path.csv 路径", value="Path.csv")
        today = datetime.now(tzinfo_from_name(tz_name)).date()
        day = st.date_input("日期", value=today)

        with st.expander("高级参数（通常不用改）", expanded=False):
            elevation_threshold_m = st.number_input(
                "海拔变化阈值（米，默认 10）", value=ELEVATION_THRESHOLD_M, step=1.0
            )
            max_gap_slots = st.number_input("允许的空时间槽数（默认 2）", value=MAX_GAP_SLOTS, step=1)
            min_segment_minutes = st.number_input(
                "出行最短时长（分钟，默认 30）", value=MIN_SEGMENT_MINUTES, step=15
            )

    p = Path(path_csv)
    if not p.exists():
        st.error(f"找不到文件：{path_csv!r}")
        return

    try:
        points = _load_day(path_csv, day, tz_name, p.stat().st_mtime)
    except (KeyError, ValueError) as exc:
        st.exception(exc)
        return

    params = FootprintParams(
        elevation_threshold_m=float(elevation_threshold_m),
        max_gap_slots=int(max_gap_slots),
        min_segment_minutes=int(min_segment_minutes),
    )
    agg = aggregate_footprint(points, params)
    if agg.is_empty:
        st.info(f"{day.isoformat()} 没有轨迹数据。")
        return

    st.subheader("汇总")
    c1, c2, c3 = st.columns(3)
    c1.metric("总距离", format_distance(agg.total_distance_m))
    c2.metric("有数据的时间槽", str(len(agg.slots)))
    c3.metric("出行段数", str(len(agg.movement_segments)))

    st.subheader("出行")
    if not agg.movement_segments:
        st.caption("没有超过最短时长的连续移动。")
    for seg in agg.movement_segments:
        st.markdown(f"**{seg.start_time}–{seg.end_time}** {format_movement_summary(seg)}")

    st.subheader("时间槽明细")
    rows: list[dict[str, object]] = []
    for slot in agg.slots:
        d = transport_mode_display(slot.mode)
        rows.append(
            {
                "slot": slot.label,
                "mode": f"{d.emoji}{d.label}",
                "speed": format_speed(slot.avg_speed_kmh),
                "elevation": format_elevation(slot) or "",
                "points": slot.point_count,
            }
        )
    st.dataframe(rows, use_container_width=True, height=520)

    st.caption(
        "说明：时间按本地时区取整到最近的15分钟；23:53 之后的点会落到当天 00:00 的时间槽。"
    )


if __name__ == "__main__":
    main()
