"""Growing guillotine bin packer for sprite atlases.

Rectangles are placed tallest-first into a binary tree of free regions. A
failed attempt grows the trial canvas and starts over with a fresh tree.
After placement every pair is re-checked for overlap; an overlapping layout
is repaired or rejected, never returned.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Iterable, Optional

from ..config import PackerOptions

logger = getLogger("fusiondex_core.sprites.packer")


class PackingError(RuntimeError):
    pass


class OverlapError(PackingError):
    def __init__(self, message: str, *, pairs: list[tuple["PackRect", "PackRect"]]) -> None:
        super().__init__(message)
        self.pairs = pairs


@dataclass
class PackRect:
    key: Any
    width: int
    height: int
    x: int = 0
    y: int = 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def describe(self) -> str:
        return f"{self.key!r}@({self.x},{self.y},{self.width}x{self.height})"


@dataclass
class PackingNode:
    x: int
    y: int
    width: int
    height: int
    used: bool = False
    right: Optional["PackingNode"] = None
    down: Optional["PackingNode"] = None


@dataclass
class PackResult:
    sheet_width: int
    sheet_height: int
    placements: list[PackRect] = field(default_factory=list)
    attempts: int = 1
    repaired: bool = False

    @property
    def used_area(self) -> int:
        return sum(r.width * r.height for r in self.placements)

    @property
    def space_efficiency(self) -> float:
        sheet_area = self.sheet_width * self.sheet_height
        if sheet_area <= 0:
            return 0.0
        return self.used_area / sheet_area * 100


def rects_overlap(a: PackRect, b: PackRect) -> bool:
    return a.x < b.x + b.width and a.x + a.width > b.x and a.y < b.y + b.height and a.y + a.height > b.y


def find_overlaps(rects: list[PackRect]) -> list[tuple[PackRect, PackRect]]:
    pairs: list[tuple[PackRect, PackRect]] = []
    for i, a in enumerate(rects):
        for b in rects[i + 1 :]:
            if rects_overlap(a, b):
                pairs.append((a, b))
    return pairs


def bounding_size(rects: Iterable[PackRect]) -> tuple[int, int]:
    width = 0
    height = 0
    for r in rects:
        width = max(width, r.right)
        height = max(height, r.bottom)
    return width, height


def sort_for_packing(rects: Iterable[PackRect]) -> list[PackRect]:
    return sorted(rects, key=lambda r: (-r.height, -r.width))


def estimate_canvas(rects: list[PackRect], options: PackerOptions) -> tuple[int, int]:
    total_area = sum(r.width * r.height for r in rects)
    aspect = sum(r.width / r.height for r in rects) / len(rects)
    padded_area = total_area * options.area_slack

    width = math.ceil(math.sqrt(padded_area * aspect)) + options.margin
    height = math.ceil(math.sqrt(padded_area / aspect)) + options.margin
    width = max(width, max(r.width for r in rects))
    height = max(height, max(r.height for r in rects))
    return width, height


def _find_node(root: PackingNode, width: int, height: int) -> PackingNode | None:
    # Depth-first, right subtree before down subtree.
    stack = [root]
    while stack:
        node = stack.pop()
        if node.used:
            if node.down is not None:
                stack.append(node.down)
            if node.right is not None:
                stack.append(node.right)
        elif width <= node.width and height <= node.height:
            return node
    return None


def _split_node(node: PackingNode, width: int, height: int) -> None:
    node.used = True
    node.down = PackingNode(
        x=node.x,
        y=node.y + height,
        width=node.width,
        height=node.height - height,
    )
    node.right = PackingNode(
        x=node.x + width,
        y=node.y,
        width=node.width - width,
        height=height,
    )


def try_pack(rects: list[PackRect], width: int, height: int) -> bool:
    """Place ``rects`` in order onto a ``width`` x ``height`` canvas.

    Returns False as soon as one rectangle has no free region; positions of
    already-placed rectangles are then meaningless.
    """

    root = PackingNode(x=0, y=0, width=width, height=height)
    for rect in rects:
        node = _find_node(root, rect.width, rect.height)
        if node is None:
            return False
        rect.x = node.x
        rect.y = node.y
        _split_node(node, rect.width, rect.height)
    return True


def _overlap_extent(a: PackRect, b: PackRect) -> tuple[int, int]:
    overlap_x = min(a.right, b.right) - max(a.x, b.x)
    overlap_y = min(a.bottom, b.bottom) - max(a.y, b.y)
    return overlap_x, overlap_y


def _sweep_layout(rects: list[PackRect], spacing: int) -> None:
    """Re-lay ``rects`` in rows ordered by their current (y, x)."""

    row_limit = max(bounding_size(rects)[0], max(r.width for r in rects))
    cursor_x = 0
    cursor_y = 0
    row_height = 0
    for rect in sorted(rects, key=lambda r: (r.y, r.x)):
        if cursor_x > 0 and cursor_x + rect.width > row_limit:
            cursor_y += row_height + spacing
            cursor_x = 0
            row_height = 0
        rect.x = cursor_x
        rect.y = cursor_y
        cursor_x += rect.width + spacing
        row_height = max(row_height, rect.height)


def repair_overlaps(
    rects: list[PackRect], options: PackerOptions
) -> list[tuple[PackRect, PackRect]]:
    """Nudge overlapping rectangles apart; return the pairs that still overlap."""

    for iteration in range(options.repair_iterations):
        pairs = find_overlaps(rects)
        if not pairs:
            return []
        logger.debug("[PACKER] Repair iteration %d: %d overlapping pairs", iteration + 1, len(pairs))
        for a, b in pairs:
            if not rects_overlap(a, b):
                continue
            overlap_x, overlap_y = _overlap_extent(a, b)
            if overlap_x <= overlap_y:
                b.x += overlap_x + options.repair_spacing
            else:
                b.y += overlap_y + options.repair_spacing

    pairs = find_overlaps(rects)
    if pairs:
        logger.warning(
            "[PACKER] %d overlaps left after %d repair iterations; falling back to row sweep",
            len(pairs),
            options.repair_iterations,
        )
        _sweep_layout(rects, options.repair_spacing)
        pairs = find_overlaps(rects)
    return pairs


def validate_layout(rects: list[PackRect], options: PackerOptions) -> bool:
    """Check ``rects`` for overlap, repairing in place when needed.

    Returns True if a repair was applied. Raises ``OverlapError`` if overlaps
    survive the repair.
    """

    pairs = find_overlaps(rects)
    if not pairs:
        return False

    logger.warning("[PACKER] Layout has %d overlapping pairs; attempting repair", len(pairs))
    remaining = repair_overlaps(rects, options)
    if remaining:
        for a, b in remaining:
            logger.error("[PACKER] Overlap: %s intersects %s", a.describe(), b.describe())
        raise OverlapError(
            f"Could not repair {len(remaining)} overlapping sprite pairs",
            pairs=remaining,
        )
    logger.info("[PACKER] Overlap repair succeeded")
    return True


def pack_rectangles(rects: list[PackRect], options: PackerOptions | None = None) -> PackResult:
    """Pack ``rects`` in place and return the trimmed sheet size.

    Raises ``PackingError`` when no layout is found within the attempt budget.
    """

    options = options or PackerOptions()
    if not rects:
        raise PackingError("No rectangles to pack")
    for rect in rects:
        if rect.width <= 0 or rect.height <= 0:
            raise PackingError(f"Rectangle {rect.key!r} has non-positive size {rect.width}x{rect.height}")

    ordered = sort_for_packing(rects)
    width, height = estimate_canvas(ordered, options)
    logger.debug("[PACKER] Packing %d rectangles, initial canvas %dx%d", len(ordered), width, height)

    attempts = 0
    while True:
        attempts += 1
        if try_pack(ordered, width, height):
            break
        if attempts >= options.max_attempts:
            raise PackingError(
                f"Failed to pack {len(ordered)} rectangles after {attempts} attempts "
                f"(last canvas {width}x{height})"
            )
        factor = options.growth_factor if attempts <= options.late_after else options.late_growth_factor
        width = math.ceil(width * factor)
        height = math.ceil(height * factor)
        logger.debug("[PACKER] Attempt %d failed; growing canvas to %dx%d", attempts, width, height)

    repaired = validate_layout(ordered, options)
    sheet_width, sheet_height = bounding_size(ordered)
    result = PackResult(
        sheet_width=sheet_width,
        sheet_height=sheet_height,
        placements=list(rects),
        attempts=attempts,
        repaired=repaired,
    )
    logger.info(
        "[PACKER] Packed %d rectangles into %dx%d (%.2f%% efficient, %d attempts)",
        len(rects),
        sheet_width,
        sheet_height,
        result.space_efficiency,
        attempts,
    )
    return result
