import unittest
from curvestream.vec import vec2
from curvestream.font.font import Point, RawGlyph
from curvestream.font.outline import *

def raw(*contours, unitsPerEm=1, **kwargs) -> RawGlyph:
    """RawGlyph from contours of (x, y, onCurve). Bounding box from the points"""
    points = [Point(*p) for c in contours for p in c]
    ends, n = [], -1
    for c in contours: ends.append(n := n + len(c))
    bbox = (min(p.x for p in points), min(p.y for p in points), max(p.x for p in points), max(p.y for p in points)) if points else (0, 0, 0, 0)
    return RawGlyph(0, *bbox, tuple(points), tuple(ends), **kwargs)

SQUARE = raw([(0, 0, True), (1, 0, True), (1, 1, True), (0, 1, True)])
# bulges above and below its endpoints
WAVE = raw([(0, 0, True), (2, 4, False), (4, 0, True), (2, -4, False)], [(10, 0, False), (12, 3, False), (14, 0, False), (12, -3, False)])

class TestImpliedPoints(unittest.TestCase):
    def test_lines_become_quadratics(self):
        c, = contours_with_implied_points(SQUARE, 1)
        self.assertEqual(c, [vec2(0, 0), vec2(0.5, 0), vec2(1, 0), vec2(1, 0.5), vec2(1, 1), vec2(0.5, 1), vec2(0, 1), vec2(0, 0.5), vec2(0, 0)])

    def test_scale(self):
        c, = contours_with_implied_points(raw([(0, 0, True), (100, 0, True), (100, 100, True), (0, 100, True)]), 1 / 100)
        self.assertEqual(c[4], vec2(1, 1))
        self.assertEqual(c[1], vec2(0.5, 0))

    def test_starts_on_curve(self):
        c, = contours_with_implied_points(raw([(50, 100, False), (100, 0, True), (0, 0, True)]), 1)
        self.assertEqual(c, [vec2(100, 0), vec2(50, 0), vec2(0, 0), vec2(50, 100), vec2(100, 0)])

    def test_consecutive_off_curve(self):
        c, = contours_with_implied_points(raw([(0, 0, True), (0, 10, False), (10, 10, False)]), 1)
        self.assertEqual(c, [vec2(0, 0), vec2(0, 10), vec2(5, 10), vec2(10, 10), vec2(0, 0)])

    def test_all_off_curve(self):
        c, = contours_with_implied_points(raw([(0, 0, False), (10, 0, False), (10, 10, False), (0, 10, False)]), 1)
        self.assertEqual(c, [vec2(0, 5), vec2(0, 0), vec2(5, 0), vec2(10, 0), vec2(10, 5), vec2(10, 10), vec2(5, 10), vec2(0, 10), vec2(0, 5)])

    def test_single_point(self):
        self.assertEqual(contours_with_implied_points(raw([(3, 4, True)]), 1), [[vec2(3, 4)] * 3])

class TestMonotonic(unittest.TestCase):
    def test_split(self):
        self.assertEqual(split_at_turning_point_y(vec2(0, 0), vec2(1, 2), vec2(2, 0)), [vec2(0, 0), vec2(0.5, 1), vec2(1, 1), vec2(1.5, 1), vec2(2, 0)])

    def test_keep_monotonic(self):
        for seg in [(vec2(0, 0), vec2(1, 1), vec2(2, 2)), (vec2(0, 0), vec2(1, 0), vec2(2, 0)), (vec2(0, 2), vec2(5, 2), vec2(1, 0))]:
            self.assertEqual(split_at_turning_point_y(*seg), list(seg))

    def test_flat_overshoot_clamped(self):
        self.assertEqual(split_at_turning_point_y(vec2(0, 0), vec2(1, 1e-10), vec2(2, 0)), [vec2(0, 0), vec2(1, 0), vec2(2, 0)])
        self.assertEqual(split_at_turning_point_y(vec2(0, 1), vec2(1, 1 + 1e-10), vec2(2, 1)), [vec2(0, 1), vec2(1, 1), vec2(2, 1)])

    def test_normalized_contours(self):
        for glyph in [SQUARE, WAVE]:
            g = normalize_glyph(glyph, 10)
            self.assertTrue(len(g.contours) > 0)
            for c in g.contours:
                self.assertEqual(c[0], c[-1])
                self.assertEqual((len(c) - 1) % 2, 0)
                for i in range(0, len(c) - 2, 2):
                    p0, p1, p2 = c[i:i+3]
                    self.assertTrue(min(p0.y, p2.y) <= p1.y <= max(p0.y, p2.y), f"segment {p0} {p1} {p2} is not y-monotonic")

    def test_split_count(self):
        # the wave's outer contour has two bulges, each split once
        self.assertEqual(len(normalize_glyph(WAVE, 1).contours[0]), 9)

class TestNormalize(unittest.TestCase):
    def test_bounds(self):
        centre, size = glyph_bounds(RawGlyph(0, 0, -100, 200, 300), 1000)
        self.assertAlmostEqual(centre.x, 0.1)
        self.assertAlmostEqual(centre.y, 0.1)
        self.assertAlmostEqual(size.x, 0.2 + ANTIALIAS_PADDING)
        self.assertAlmostEqual(size.y, 0.4 + ANTIALIAS_PADDING)

    def test_normalize(self):
        g = normalize_glyph(raw([(0, 0, True), (100, 0, True), (100, 100, True), (0, 100, True)], advanceWidth=500, leftSideBearing=20), 1000)
        self.assertEqual(g.glyphIndex, 0)
        self.assertAlmostEqual(g.advance, 0.5)
        self.assertAlmostEqual(g.bearing, 0.02)
        self.assertEqual(len(g.contours), 1)
        self.assertEqual(len(g.contours[0]), 9)

    def test_empty(self):
        g = normalize_glyph(RawGlyph(3, advanceWidth=250), 1000)
        self.assertEqual((g.glyphIndex, g.contours), (3, ()))
        self.assertAlmostEqual(g.size.x, ANTIALIAS_PADDING)

class TestRenderData(unittest.TestCase):
    def test_layout(self):
        a, b = normalize_glyph(SQUARE, 1), normalize_glyph(WAVE, 1)
        data = RenderData()
        self.assertEqual((data.add(a), data.add(b)), (0, 1))
        self.assertEqual(data.metadata[:3], [0, 1, 8])
        self.assertEqual(data.glyphs[1].contourDataOffset, 3)
        self.assertEqual(data.glyphs[1].pointDataOffset, 9)
        self.assertEqual(data.glyphs[1].numContours, 2)
        self.assertEqual(data.metadata[3:5], [9, 2])
        self.assertEqual(len(data.points), 9 + sum(len(c) for c in b.contours))
        self.assertEqual(len(data.flat_points()), 2 * len(data.points))
        self.assertEqual(data.points[0], vec2(0, 0) - a.centre)

    def test_contours_round_trip(self):
        glyphs = [normalize_glyph(SQUARE, 1), normalize_glyph(WAVE, 1)]
        data = RenderData()
        for g in glyphs: data.add(g)
        for i, g in enumerate(glyphs):
            self.assertEqual(data.contours(i), [[p - g.centre for p in c] for c in g.contours])

if __name__ == "__main__": unittest.main()
