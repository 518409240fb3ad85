import math
from bisect import bisect_right
from typing import Iterator, List, Sequence, Tuple
from curvestream.vec import vec2
from curvestream.helpers import quadratic_roots
from curvestream.font.outline import NormalizedGlyph

Contour = Sequence[vec2]

def segments(contours:Sequence[Contour]) -> Iterator[Tuple[vec2, vec2, vec2]]:
    for c in contours:
        for i in range(0, len(c) - 2, 2): yield c[i], c[i+1], c[i+2]

def crossings(y:float, contours:Sequence[Contour]) -> List[float]:
    """x of every point where the horizontal line at y crosses a segment. t=1 belongs to the next segment so shared endpoints count once"""
    xs = []
    for p0, p1, p2 in segments(contours):
        if (p0.y > y and p1.y > y and p2.y > y) or (p0.y < y and p1.y < y and p2.y < y): continue
        ax, bx = p0.x - 2 * p1.x + p2.x, 2 * (p1.x - p0.x)
        for t in quadratic_roots(p0.y - 2 * p1.y + p2.y, 2 * (p1.y - p0.y), p0.y - y):
            if 0 <= t < 1: xs.append(ax * t * t + bx * t + p0.x)
    return xs

def is_inside(point:vec2, contours:Sequence[Contour]) -> bool:
    """Even-odd rule: a ray going right from point crosses the outline an odd number of times if point is inside"""
    return sum(1 for x in crossings(point.y, contours) if x > point.x) % 2 == 1

def probe_inside(centre:vec2, size:float, contours:Sequence[Contour], samples:int=10) -> Tuple[bool, bool]:
    """
    Tests points alternating between the right and left edge of a square box, from its top to its bottom.
    Returns (confident, inside): confident is False if the samples disagree, inside is the majority result.
    """
    assert samples >= 2, f"Need at least 2 samples, got {samples}"
    votes = [is_inside(vec2(centre.x + (size / 2 if i % 2 == 0 else -size / 2), centre.y + size / 2 - size * i / (samples - 1)), contours) for i in range(samples)]
    inside = sum(votes)
    return min(inside, samples - inside) == 0, inside > samples - inside

def rasterize(glyph:NormalizedGlyph, resolution:int, aa:int=1) -> List[List[int]]:
    """
    Renders the glyph's bounding box at resolution pixels per em into rows of coverage values (0-255), top row first.
    aa is the number of samples per pixel along each axis, 1 means no antialiasing.
    """
    assert resolution > 0 and isinstance(aa, int) and aa >= 1, f"Invalid {resolution=} or {aa=}"
    if not glyph.contours: return []
    width, height = math.ceil(glyph.size.x * resolution), math.ceil(glyph.size.y * resolution)
    left, top = glyph.centre.x - glyph.size.x / 2, glyph.centre.y + glyph.size.y / 2
    bitmap = [[0] * width for _ in range(height)]
    for row in range(height):
        scanlines = [sorted(crossings(top - (row + (s + .5) / aa) / resolution, glyph.contours)) for s in range(aa)]
        for col in range(width):
            hits = 0
            for xs in scanlines:
                for s in range(aa):
                    x = left + (col + (s + .5) / aa) / resolution
                    hits += (len(xs) - bisect_right(xs, x)) % 2 # crossings to the right of x
            bitmap[row][col] = int(hits / (aa * aa) * 255)
    return bitmap
