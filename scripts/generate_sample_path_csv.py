from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Asia/Shanghai"


@dataclass(frozen=True, slots=True)
class Leg:
    """One phase of the synthetic day: stay put or move at a steady speed."""

    minutes: float
    speed_mps: float
    heading_deg: float
    sample_seconds: float
    climb_m: float = 0.0


def _epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def generate_day(*, seed: int, start_local: datetime, lat: float, lon: float) -> list[dict[str, str]]:
    """Generate a fake Path.csv day: home, walk, drive, office, cycle home."""

    rng = random.Random(seed)
    cur = start_local.replace(tzinfo=ZoneInfo(TZ))
    altitude = 40.0

    legs = [
        Leg(minutes=60, speed_mps=0.0, heading_deg=0, sample_seconds=300),
        Leg(minutes=20, speed_mps=1.3, heading_deg=90, sample_seconds=30),
        Leg(minutes=50, speed_mps=14.0, heading_deg=45, sample_seconds=10, climb_m=120.0),
        Leg(minutes=240, speed_mps=0.0, heading_deg=0, sample_seconds=600),
        Leg(minutes=45, speed_mps=5.0, heading_deg=225, sample_seconds=20, climb_m=-100.0),
        Leg(minutes=90, speed_mps=0.0, heading_deg=0, sample_seconds=300),
    ]

    out: list[dict[str, str]] = []
    for leg in legs:
        steps = max(1, int(leg.minutes * 60 / leg.sample_seconds))
        for _ in range(steps):
            dist = leg.speed_mps * leg.sample_seconds
            lat += dist * math.cos(math.radians(leg.heading_deg)) / 111_195.0
            lon += dist * math.sin(math.radians(leg.heading_deg)) / (111_195.0 * math.cos(math.radians(lat)))
            altitude += leg.climb_m / steps
            cur = cur + timedelta(seconds=leg.sample_seconds)

            # Some fixes come without speed (-1), as the app does indoors.
            speed = -1.0 if rng.random() < 0.2 else max(0.0, leg.speed_mps + rng.uniform(-0.3, 0.3))
            out.append(
                {
                    "geoTime": str(_epoch_ms(cur)),
                    "latitude": f"{lat + rng.uniform(-0.00003, 0.00003):.7f}",
                    "longitude": f"{lon + rng.uniform(-0.00003, 0.00003):.7f}",
                    "altitude": f"{altitude + rng.uniform(-2.0, 2.0):.1f}",
                    "speed": f"{speed:.1f}",
                    "horizontalAccuracy": f"{rng.choice([3.0, 5.0, 8.0, 12.0]):.1f}",
                    "locationType": str(rng.choice([0, 1])),
                }
            )

        # Occasional dropout between legs.
        if rng.random() < 0.3:
            cur = cur + timedelta(minutes=rng.uniform(5, 20))

    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake one-day Path.csv for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/Path.csv", help="Output CSV path")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument(
        "--start",
        type=str,
        default="2025-01-01 07:00:00",
        help="Start local time in Asia/Shanghai, e.g. '2025-01-01 07:00:00'",
    )
    args = p.parse_args()

    rows = generate_day(
        seed=args.seed,
        start_local=datetime.fromisoformat(args.start),
        lat=31.2304000,
        lon=121.4737000,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["geoTime", "latitude", "longitude", "altitude", "speed", "horizontalAccuracy", "locationType"]
    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
