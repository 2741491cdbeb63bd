"""Module entry point: python -m footprint_slots ..."""

from __future__ import annotations

from footprint_slots.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
