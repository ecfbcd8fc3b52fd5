#!/usr/bin/env python3
"""Pack per-Pokemon sprites into a single atlas PNG plus JSON metadata."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
import time

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.fusiondex_core.config import build_paths_from_env, packer_options_from_env
from packages.fusiondex_core.names.dataset import DatasetError, PokemonDataset
from packages.fusiondex_core.reporting import format_duration, format_file_size, format_percentage
from packages.fusiondex_core.sprites.atlas import build_atlas, write_atlas
from packages.fusiondex_core.sprites.packer import PackingError


def main() -> int:
    paths = build_paths_from_env()
    parser = argparse.ArgumentParser(description="Generate the Pokemon sprite atlas")
    parser.add_argument("--pokemon-data", type=Path, default=paths.pokemon_data, help="Canonical {id, name} JSON list")
    parser.add_argument("--sprites-dir", type=Path, default=paths.sprites_dir, help="Directory of per-Pokemon PNGs")
    parser.add_argument("--out-image", type=Path, default=paths.atlas_image, help="Output atlas PNG path")
    parser.add_argument("--out-metadata", type=Path, default=paths.atlas_metadata, help="Output metadata JSON path")
    parser.add_argument("--generation", default="default", help="Sprite generation label stored in metadata")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    started = time.perf_counter()
    try:
        options = packer_options_from_env()
        dataset = PokemonDataset(args.pokemon_data)
        metadata, image = build_atlas(
            dataset.dex_entries(),
            args.sprites_dir,
            generation=args.generation,
            options=options,
        )
    except (DatasetError, PackingError, ValueError) as exc:
        print(f"ERR: {exc}")
        print("ERROR: spritesheet generation failed; no files written")
        return 1

    try:
        write_atlas(metadata, image, image_path=args.out_image, metadata_path=args.out_metadata)
    except OSError as exc:
        print(f"ERR: {exc}")
        print("ERROR: could not write spritesheet outputs; no files written")
        return 1
    duration_ms = (time.perf_counter() - started) * 1000

    included = metadata.total_sprites
    print("Spritesheet generation complete")
    print(f"  Total Pokemon:     {len(metadata.sprites)}")
    print(f"  Sprites included:  {included}")
    print(f"  Missing sprites:   {len(metadata.sprites) - included}")
    print(f"  Sheet dimensions:  {metadata.sheet_width}x{metadata.sheet_height}px")
    print(f"  Space efficiency:  {format_percentage(metadata.space_efficiency)}")
    print(f"  File size:         {format_file_size(args.out_image.stat().st_size)}")
    print(f"  Spritesheet:       {args.out_image}")
    print(f"  Metadata:          {args.out_metadata}")
    print(f"  Duration:          {format_duration(duration_ms)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
