"""Sprite atlas tooling for FusionDex."""

from .atlas import (
    AtlasMetadata,
    SpriteRecord,
    build_atlas,
    compose_atlas,
    load_atlas_metadata,
    parse_sprite_key,
    sprite_rects,
    write_atlas,
)
from .bounds import ContentBounds, analyze_sprite_file, compute_content_bounds
from .locator import find_sprite_file
from .packer import OverlapError, PackingError, PackRect, pack_rectangles

__all__ = [
    "AtlasMetadata",
    "SpriteRecord",
    "build_atlas",
    "compose_atlas",
    "load_atlas_metadata",
    "parse_sprite_key",
    "sprite_rects",
    "write_atlas",
    "ContentBounds",
    "analyze_sprite_file",
    "compute_content_bounds",
    "find_sprite_file",
    "OverlapError",
    "PackingError",
    "PackRect",
    "pack_rectangles",
]
