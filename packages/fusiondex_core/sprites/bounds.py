"""Content-bounds analysis for sprite rasters."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path

from PIL import Image

logger = getLogger("fusiondex_core.sprites.bounds")


@dataclass(frozen=True)
class ContentBounds:
    """Tight box around the visible pixels of a sprite, in source-image pixels."""

    x: int
    y: int
    width: int
    height: int

    def box(self) -> tuple[int, int, int, int]:
        """Return a PIL crop box (left, upper, right, lower)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


def _alpha_index(channels: int) -> int | None:
    # LA and RGBA carry alpha last; L and RGB are fully opaque.
    if channels in (2, 4):
        return channels - 1
    return None


def compute_content_bounds(
    data: bytes | bytearray | memoryview,
    width: int,
    height: int,
    channels: int,
    *,
    threshold: int = 0,
) -> ContentBounds | None:
    """Return the bounding box of every pixel whose alpha exceeds ``threshold``.

    ``data`` is a row-major interleaved raster. Returns ``None`` when no pixel
    qualifies (fully transparent or empty image).
    """

    if channels <= 0:
        raise ValueError(f"channels must be positive, got {channels}")
    if width <= 0 or height <= 0:
        return None

    stride = width * channels
    if len(data) < stride * height:
        raise ValueError(
            f"raster buffer too short: {len(data)} bytes for {width}x{height}x{channels}"
        )

    alpha_at = _alpha_index(channels)
    if alpha_at is None:
        return ContentBounds(x=0, y=0, width=width, height=height)

    buf = memoryview(data)
    min_x, min_y = width, height
    max_x, max_y = -1, -1

    for y in range(height):
        row = buf[y * stride + alpha_at : (y + 1) * stride : channels]
        for x, alpha in enumerate(row):
            if alpha > threshold:
                if x < min_x:
                    min_x = x
                if x > max_x:
                    max_x = x
                if y < min_y:
                    min_y = y
                if y > max_y:
                    max_y = y

    if max_x < 0:
        return None

    return ContentBounds(
        x=min_x,
        y=min_y,
        width=max_x - min_x + 1,
        height=max_y - min_y + 1,
    )


def image_content_bounds(img: Image.Image, *, threshold: int = 0) -> ContentBounds | None:
    rgba = img.convert("RGBA")
    return compute_content_bounds(
        rgba.tobytes(),
        rgba.width,
        rgba.height,
        4,
        threshold=threshold,
    )


def analyze_sprite_file(
    path: Path, *, threshold: int = 0
) -> tuple[int, int, ContentBounds | None]:
    """Decode ``path`` and return ``(original_width, original_height, bounds)``.

    Decoding errors propagate as ``OSError`` so callers can mark the sprite
    as missing.
    """

    with Image.open(path) as img:
        width, height = img.size
        bounds = image_content_bounds(img, threshold=threshold)
    logger.debug("[BOUNDS] %s: %dx%d -> %s", path.name, width, height, bounds)
    return width, height, bounds
