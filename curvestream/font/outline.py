from dataclasses import dataclass
from typing import List, Tuple
from curvestream.vec import vec2
from curvestream.helpers import fully_flatten
from curvestream.font.font import RawGlyph

ANTIALIAS_PADDING = 0.005 # em units added to glyph width and height so antialiased edges are not clipped
EPSILON = 1e-9 # below this a segment's y curvature counts as zero

@dataclass(frozen=True)
class NormalizedGlyph:
    """Outline in em units. Every contour is on, control, on, control, ..., on with the first point repeated at the end and every segment y-monotonic"""
    glyphIndex:int
    centre:vec2
    size:vec2
    contours:Tuple[Tuple[vec2, ...], ...]
    advance:float = 0
    bearing:float = 0

def glyph_bounds(glyph:RawGlyph, unitsPerEm:int) -> Tuple[vec2, vec2]:
    scale = 1 / unitsPerEm
    centre = vec2(glyph.xMin + glyph.xMax, glyph.yMin + glyph.yMax) * (scale / 2)
    return centre, vec2(glyph.width, glyph.height) * scale + ANTIALIAS_PADDING

def contours_with_implied_points(glyph:RawGlyph, scale:float) -> List[List[vec2]]:
    """
    Rebuilds each contour as alternating on-curve and control points.
    Two off-curve points in a row imply an on-curve point halfway between them. Two on-curve points in a row are a straight line,
    stored as a quadratic with its control point in the middle so every segment has the same shape.
    """
    ret = []
    for contour in glyph.contours():
        pts, on = [vec2(p.x, p.y) * scale for p in contour], [p.onCurve for p in contour]
        if True in on: # start on the first on-curve point
            s = on.index(True)
            pts, on = pts[s:] + pts[:s], on[s:] + on[:s]
        else: pts, on = [(pts[-1] + pts[0]) / 2] + pts, [True] + on # no on-curve point at all: start at the implied one
        new_contour = []
        for i, (p, onCurve) in enumerate(zip(pts, on)):
            new_contour.append(p)
            if onCurve == on[(j := (i + 1) % len(pts))]: new_contour.append((p + pts[j]) / 2)
        new_contour.append(new_contour[0])
        assert len(new_contour) % 2 == 1 and len(new_contour) >= 3
        ret.append(new_contour)
    return ret

def split_at_turning_point_y(p0:vec2, p1:vec2, p2:vec2) -> List[vec2]:
    """Returns [p0, p1, p2] if the segment is y-monotonic, else two segments [p0, c0, m, c1, p2] meeting at the y extremum m"""
    if min(p0.y, p2.y) <= p1.y <= max(p0.y, p2.y): return [p0, p1, p2]
    if abs(a := p0.y - 2 * p1.y + p2.y) < EPSILON: return [p0, vec2(p1.x, min(max(p1.y, min(p0.y, p2.y)), max(p0.y, p2.y))), p2] # barely outside: clamp into range
    t = (p0.y - p1.y) / a # where dy/dt = 0
    c0, c1 = p0.lerp(p1, t), p1.lerp(p2, t)
    m = c0.lerp(c1, t)
    # the tangent is horizontal at m, so both new control points sit at its height
    return [p0, vec2(c0.x, m.y), m, vec2(c1.x, m.y), p2]

def make_monotonic(contour:List[vec2]) -> List[vec2]:
    ret = [contour[0]]
    for i in range(0, len(contour) - 2, 2): ret += split_at_turning_point_y(*contour[i:i+3])[1:]
    return ret

def normalize_glyph(glyph:RawGlyph, unitsPerEm:int) -> NormalizedGlyph:
    assert unitsPerEm > 0, f"Invalid unitsPerEm {unitsPerEm}"
    centre, size = glyph_bounds(glyph, unitsPerEm)
    contours = tuple(tuple(make_monotonic(c)) for c in contours_with_implied_points(glyph, 1 / unitsPerEm))
    return NormalizedGlyph(glyph.glyphIndex, centre, size, contours, glyph.advanceWidth / unitsPerEm, glyph.leftSideBearing / unitsPerEm)

# RENDERER LAYOUT

@dataclass(frozen=True)
class GlyphRenderInfo:
    size:vec2
    contourDataOffset:int # index of the glyph's first entry in RenderData.metadata
    pointDataOffset:int # index of the glyph's first point in RenderData.points
    numContours:int

class RenderData:
    """
    All glyphs packed into flat lists for upload to the gpu.
    metadata per glyph: pointOffset, number of contours, then (number of points - 1) for each contour.
    points are relative to the glyph's centre.
    """
    def __init__(self):
        self.points:List[vec2] = []
        self.metadata:List[int] = []
        self.glyphs:List[GlyphRenderInfo] = []

    def add(self, glyph:NormalizedGlyph) -> int:
        """Returns the index of the glyph's GlyphRenderInfo"""
        self.glyphs.append(GlyphRenderInfo(glyph.size, len(self.metadata), len(self.points), len(glyph.contours)))
        self.metadata += [len(self.points), len(glyph.contours)] + [len(c) - 1 for c in glyph.contours]
        self.points += [p - glyph.centre for c in glyph.contours for p in c]
        return len(self.glyphs) - 1

    def contours(self, i:int) -> List[List[vec2]]:
        info = self.glyphs[i]
        pointOffset, numContours = self.metadata[info.contourDataOffset:info.contourDataOffset + 2]
        ret = []
        for n in self.metadata[info.contourDataOffset + 2:info.contourDataOffset + 2 + numContours]:
            ret.append(self.points[pointOffset:pointOffset + n + 1])
            pointOffset += n + 1
        return ret

    def flat_points(self) -> List[float]: return fully_flatten([p.components() for p in self.points])
