#!/usr/bin/env python3
"""Compare sprite content bounds across alpha thresholds."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.fusiondex_core.config import build_paths_from_env
from packages.fusiondex_core.sprites.bounds import analyze_sprite_file
from packages.fusiondex_core.sprites.locator import find_sprite_file


def _parse_thresholds(raw: str) -> list[int]:
    try:
        return [int(v) for v in raw.split(",") if v.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid thresholds: {raw}") from exc


def main() -> int:
    parser = argparse.ArgumentParser(description="Debug sprite content bounds")
    parser.add_argument("names", nargs="+", help="Pokemon names to analyze")
    parser.add_argument("--sprites-dir", type=Path, default=build_paths_from_env().sprites_dir)
    parser.add_argument("--thresholds", type=_parse_thresholds, default=[0, 10, 25, 50])
    args = parser.parse_args()

    failures = 0
    for name in args.names:
        print(f"=== {name.upper()} ===")
        filename = find_sprite_file(name, args.sprites_dir)
        if filename is None:
            print(f"ERR: no sprite found for {name}")
            failures += 1
            continue

        for threshold in args.thresholds:
            try:
                width, height, bounds = analyze_sprite_file(args.sprites_dir / filename, threshold=threshold)
            except OSError as exc:
                print(f"ERR: could not read {filename}: {exc}")
                failures += 1
                break
            if bounds is None:
                print(f"Threshold {threshold}: fully transparent ({width}x{height} canvas)")
            else:
                print(
                    f"Threshold {threshold}: {bounds.width}x{bounds.height} at ({bounds.x}, {bounds.y}) "
                    f"of {width}x{height}"
                )
        print()

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
