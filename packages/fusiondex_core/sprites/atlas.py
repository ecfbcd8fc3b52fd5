"""Sprite atlas assembly: record loading, packing, compositing and output.

The metadata sidecar keeps one record per canonical Pokemon in canonical
order, including sprites that are missing or fully transparent, so the
rendering side can index it by position.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import Any, Iterable, Mapping

from PIL import Image

from ..config import PackerOptions
from .bounds import ContentBounds, analyze_sprite_file
from .locator import find_sprite_file
from .packer import PackingError, PackRect, pack_rectangles

logger = getLogger("fusiondex_core.sprites.atlas")

PNG_COMPRESS_LEVEL = 9


@dataclass
class SpriteRecord:
    id: int
    name: str
    filename: str = ""
    exists: bool = False
    original_width: int = 0
    original_height: int = 0
    content_bounds: ContentBounds | None = None
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def mark_missing(self) -> None:
        self.exists = False
        self.content_bounds = None
        self.x = 0
        self.y = 0
        self.width = 0
        self.height = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "filename": self.filename,
            "exists": self.exists,
            "originalWidth": self.original_width,
            "originalHeight": self.original_height,
            "contentBounds": self.content_bounds.to_dict() if self.content_bounds else None,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class AtlasMetadata:
    sheet_width: int
    sheet_height: int
    space_efficiency: float
    sprites: list[SpriteRecord] = field(default_factory=list)
    generation: str = "default"

    @property
    def total_sprites(self) -> int:
        return sum(1 for s in self.sprites if s.exists)

    def refresh_space_efficiency(self) -> None:
        sheet_area = self.sheet_width * self.sheet_height
        used_area = sum(s.width * s.height for s in self.sprites if s.exists)
        self.space_efficiency = used_area / sheet_area * 100 if sheet_area > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "sheetWidth": self.sheet_width,
            "sheetHeight": self.sheet_height,
            "spaceEfficiency": round(self.space_efficiency, 2),
            "totalSprites": self.total_sprites,
            "sprites": [s.to_dict() for s in self.sprites],
        }


def parse_sprite_key(key: str) -> tuple[int, ...]:
    """Parse ``"25"`` or a ``"head.body"`` fusion key such as ``"25.1"``."""

    parts = str(key).strip().split(".")
    if len(parts) not in (1, 2):
        raise ValueError(f"Invalid sprite key: {key!r}")
    try:
        return tuple(int(p) for p in parts)
    except ValueError as exc:
        raise ValueError(f"Invalid sprite key: {key!r}") from exc


def load_sprite_records(entries: Iterable[Mapping[str, Any]], sprites_dir: Path) -> list[SpriteRecord]:
    records: list[SpriteRecord] = []
    missing = 0
    for entry in entries:
        name = str(entry["name"])
        filename = find_sprite_file(name, sprites_dir)
        if filename is None:
            missing += 1
            logger.warning("[ATLAS] Missing sprite for: %s", name)
        records.append(
            SpriteRecord(
                id=int(entry["id"]),
                name=name,
                filename=filename or "",
                exists=filename is not None,
            )
        )
    logger.info("[ATLAS] Located %d sprites, %d missing", len(records) - missing, missing)
    return records


def analyze_sprite_records(records: list[SpriteRecord], sprites_dir: Path) -> None:
    """Fill in original size and content bounds; unreadable or blank sprites are marked missing."""

    for record in records:
        if not record.exists:
            continue
        try:
            width, height, bounds = analyze_sprite_file(sprites_dir / record.filename)
        except (OSError, ValueError) as exc:
            logger.warning("[ATLAS] Could not analyze %s (%s): %s", record.name, record.filename, exc)
            record.mark_missing()
            continue

        record.original_width = width
        record.original_height = height
        if bounds is None:
            logger.warning("[ATLAS] Sprite is fully transparent: %s (%s)", record.name, record.filename)
            record.mark_missing()
            continue

        record.content_bounds = bounds
        record.width = bounds.width
        record.height = bounds.height


def pack_sprite_records(records: list[SpriteRecord], options: PackerOptions | None = None) -> AtlasMetadata:
    placed = [r for r in records if r.exists and r.content_bounds is not None]
    if not placed:
        raise PackingError("No sprites found to generate spritesheet")

    rects = [PackRect(key=i, width=r.width, height=r.height) for i, r in enumerate(placed)]
    result = pack_rectangles(rects, options)
    for rect in result.placements:
        record = placed[rect.key]
        record.x = rect.x
        record.y = rect.y

    return AtlasMetadata(
        sheet_width=result.sheet_width,
        sheet_height=result.sheet_height,
        space_efficiency=result.space_efficiency,
        sprites=records,
    )


def compose_atlas(metadata: AtlasMetadata, sprites_dir: Path) -> Image.Image:
    """Paste every placed sprite's trimmed content onto a transparent sheet.

    A sprite that cannot be cropped is logged, flagged missing and skipped.
    """

    sheet = Image.new("RGBA", (metadata.sheet_width, metadata.sheet_height), (0, 0, 0, 0))
    for record in metadata.sprites:
        if not record.exists or record.content_bounds is None:
            continue
        try:
            with Image.open(sprites_dir / record.filename) as src:
                rgba = src.convert("RGBA")
            bounds = record.content_bounds
            left = max(0, bounds.x)
            top = max(0, bounds.y)
            right = min(rgba.width, bounds.x + bounds.width)
            bottom = min(rgba.height, bounds.y + bounds.height)
            if right - left != record.width or bottom - top != record.height:
                raise ValueError(
                    f"content bounds {bounds.box()} exceed source image {rgba.width}x{rgba.height}"
                )
            sheet.paste(rgba.crop((left, top, right, bottom)), (record.x, record.y))
        except (OSError, ValueError) as exc:
            logger.error("[ATLAS] Failed to composite %s (%s): %s", record.name, record.filename, exc)
            record.mark_missing()
    return sheet


def build_atlas(
    entries: Iterable[Mapping[str, Any]],
    sprites_dir: Path,
    *,
    generation: str = "default",
    options: PackerOptions | None = None,
) -> tuple[AtlasMetadata, Image.Image]:
    records = load_sprite_records(entries, sprites_dir)
    analyze_sprite_records(records, sprites_dir)
    metadata = pack_sprite_records(records, options)
    metadata.generation = generation
    image = compose_atlas(metadata, sprites_dir)
    metadata.refresh_space_efficiency()
    return metadata, image


def write_atlas(
    metadata: AtlasMetadata,
    image: Image.Image,
    *,
    image_path: Path,
    metadata_path: Path,
) -> None:
    """Write the PNG and its JSON sidecar together.

    Both files are staged next to their targets and only moved into place once
    both were written; on any ``OSError`` neither output is left behind.
    """

    image_path.parent.mkdir(parents=True, exist_ok=True)
    metadata_path.parent.mkdir(parents=True, exist_ok=True)
    staged_image = image_path.with_name(image_path.name + ".tmp")
    staged_metadata = metadata_path.with_name(metadata_path.name + ".tmp")
    committed: list[Path] = []
    try:
        image.save(staged_image, format="PNG", optimize=True, compress_level=PNG_COMPRESS_LEVEL)
        staged_metadata.write_text(
            json.dumps(metadata.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
        )
        os.replace(staged_image, image_path)
        committed.append(image_path)
        os.replace(staged_metadata, metadata_path)
        committed.append(metadata_path)
    except OSError:
        for path in (staged_image, staged_metadata, *committed):
            path.unlink(missing_ok=True)
        logger.error("[ATLAS] Failed to write atlas '%s' / '%s'; removed partial output", image_path, metadata_path)
        raise
    logger.info("[ATLAS] Wrote atlas '%s' and metadata '%s'", image_path, metadata_path)


def load_atlas_metadata(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def sprite_rects(metadata: Mapping[str, Any], key: str) -> list[dict[str, int]] | None:
    """Return atlas rectangles for a sprite key, or None if any part is not placed.

    Raises ``ValueError`` for a malformed key.
    """

    ids = parse_sprite_key(key)
    by_id = {int(s["id"]): s for s in metadata.get("sprites", []) if s.get("exists")}
    rects: list[dict[str, int]] = []
    for pokemon_id in ids:
        sprite = by_id.get(pokemon_id)
        if sprite is None:
            return None
        rects.append(
            {
                "id": pokemon_id,
                "x": int(sprite["x"]),
                "y": int(sprite["y"]),
                "width": int(sprite["width"]),
                "height": int(sprite["height"]),
            }
        )
    return rects
