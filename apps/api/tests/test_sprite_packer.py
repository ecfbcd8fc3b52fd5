#!/usr/bin/env python3

from __future__ import annotations

import math
import random
import unittest
from unittest.mock import patch

from packages.fusiondex_core.config import PackerOptions
from packages.fusiondex_core.sprites.packer import (
    OverlapError,
    PackingError,
    PackRect,
    find_overlaps,
    pack_rectangles,
    rects_overlap,
    sort_for_packing,
    validate_layout,
)


class GuillotinePackerTests(unittest.TestCase):
    def test_three_sprite_layout(self) -> None:
        rects = [
            PackRect(key="a", width=10, height=10),
            PackRect(key="b", width=10, height=10),
            PackRect(key="c", width=20, height=5),
        ]
        result = pack_rectangles(rects)

        self.assertLessEqual(result.sheet_width, 20)
        self.assertLessEqual(result.sheet_height, 20)
        self.assertEqual(find_overlaps(rects), [])
        expected = (100 + 100 + 100) / (result.sheet_width * result.sheet_height) * 100
        self.assertAlmostEqual(result.space_efficiency, expected)
        self.assertEqual(result.attempts, 1)
        self.assertFalse(result.repaired)

    def test_random_layout_has_no_overlap_and_fits_sheet(self) -> None:
        rng = random.Random(7)
        rects = [
            PackRect(key=i, width=rng.randint(4, 40), height=rng.randint(4, 40))
            for i in range(300)
        ]
        result = pack_rectangles(rects)

        self.assertEqual(find_overlaps(rects), [])
        for r in rects:
            self.assertGreaterEqual(r.x, 0)
            self.assertGreaterEqual(r.y, 0)
            self.assertLessEqual(r.x + r.width, result.sheet_width)
            self.assertLessEqual(r.y + r.height, result.sheet_height)
        self.assertEqual(result.sheet_width, max(r.x + r.width for r in rects))
        self.assertEqual(result.sheet_height, max(r.y + r.height for r in rects))
        self.assertGreater(result.space_efficiency, 0)
        self.assertLessEqual(result.space_efficiency, 100)

    def test_placements_keep_input_order(self) -> None:
        rects = [PackRect(key=i, width=5 + i, height=12 - i) for i in range(6)]
        result = pack_rectangles(rects)
        self.assertEqual([r.key for r in result.placements], list(range(6)))

    def test_sort_is_height_then_width_descending(self) -> None:
        rects = [
            PackRect(key="short_wide", width=20, height=3),
            PackRect(key="tall_narrow", width=5, height=10),
            PackRect(key="tall_wide", width=8, height=10),
        ]
        ordered = [r.key for r in sort_for_packing(rects)]
        self.assertEqual(ordered, ["tall_wide", "tall_narrow", "short_wide"])

    def test_empty_or_degenerate_input_is_rejected(self) -> None:
        with self.assertRaises(PackingError):
            pack_rectangles([])
        with self.assertRaises(PackingError):
            pack_rectangles([PackRect(key="flat", width=10, height=0)])

    def test_exhausted_attempts_raise_with_growth_schedule(self) -> None:
        canvases: list[tuple[int, int]] = []

        def never_fits(rects, width, height):
            canvases.append((width, height))
            return False

        options = PackerOptions(max_attempts=12, late_after=10)
        with patch("packages.fusiondex_core.sprites.packer.try_pack", side_effect=never_fits):
            with self.assertRaises(PackingError):
                pack_rectangles([PackRect(key=1, width=10, height=10)], options)

        self.assertEqual(len(canvases), 12)
        w1, h1 = canvases[0]
        self.assertEqual(canvases[1], (math.ceil(w1 * 1.2), math.ceil(h1 * 1.2)))
        w10, h10 = canvases[10]
        self.assertEqual(canvases[11], (math.ceil(w10 * 1.3), math.ceil(h10 * 1.3)))

    def test_overlap_predicate_uses_open_rectangles(self) -> None:
        a = PackRect(key="a", width=10, height=10, x=0, y=0)
        touching = PackRect(key="b", width=10, height=10, x=10, y=0)
        crossing = PackRect(key="c", width=10, height=10, x=9, y=9)
        self.assertFalse(rects_overlap(a, touching))
        self.assertTrue(rects_overlap(a, crossing))
        self.assertEqual(find_overlaps([a, touching, crossing]), [(a, crossing), (touching, crossing)])

    def test_repair_shifts_later_rectangle(self) -> None:
        a = PackRect(key="a", width=10, height=10, x=0, y=0)
        b = PackRect(key="b", width=10, height=10, x=5, y=0)
        with self.assertLogs("fusiondex_core.sprites.packer", level="WARNING"):
            repaired = validate_layout([a, b], PackerOptions())

        self.assertTrue(repaired)
        self.assertEqual((a.x, a.y), (0, 0))
        self.assertEqual((b.x, b.y), (11, 0))
        self.assertEqual(find_overlaps([a, b]), [])

    def test_sweep_fallback_clears_stacked_rectangles(self) -> None:
        rects = [PackRect(key=i, width=8, height=6, x=0, y=0) for i in range(4)]
        options = PackerOptions(repair_iterations=0)
        with self.assertLogs("fusiondex_core.sprites.packer", level="WARNING"):
            self.assertTrue(validate_layout(rects, options))
        self.assertEqual(find_overlaps(rects), [])

    def test_unrepairable_overlap_is_fatal(self) -> None:
        a = PackRect(key="a", width=10, height=10, x=0, y=0)
        b = PackRect(key="b", width=10, height=10, x=0, y=0)
        options = PackerOptions(repair_iterations=0)
        with patch("packages.fusiondex_core.sprites.packer._sweep_layout"):
            with self.assertLogs("fusiondex_core.sprites.packer", level="ERROR") as logs:
                with self.assertRaises(OverlapError) as ctx:
                    validate_layout([a, b], options)

        self.assertEqual(ctx.exception.pairs, [(a, b)])
        self.assertTrue(any("'a'@(0,0,10x10)" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
