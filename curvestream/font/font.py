import functools
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Tuple, Union
from curvestream.font.errors import NoMissingGlyph

@dataclass(frozen=True)
class Point:
    x:int
    y:int
    onCurve:bool

@dataclass(frozen=True)
class RawGlyph:
    """Glyph outline in font design units. contourEnds are inclusive indices into points"""
    glyphIndex:int
    xMin:int = 0
    yMin:int = 0
    xMax:int = 0
    yMax:int = 0
    points:Tuple[Point, ...] = ()
    contourEnds:Tuple[int, ...] = ()
    advanceWidth:int = 0
    leftSideBearing:int = 0

    @property
    def width(self) -> int: return self.xMax - self.xMin
    @property
    def height(self) -> int: return self.yMax - self.yMin

    def contours(self) -> List[Tuple[Point, ...]]:
        starts = [0] + [end + 1 for end in self.contourEnds[:-1]]
        return [self.points[start:end + 1] for start, end in zip(starts, self.contourEnds)]

@dataclass(frozen=True)
class FontMetrics:
    unitsPerEm:int
    locaEntryWidth:int # bytes per loca entry, 2 or 4
    numGlyphs:int
    hMetrics:Tuple[Tuple[int, int], ...] # (advanceWidth, leftSideBearing) by glyph index
    ascent:int = 0
    descent:int = 0
    lineGap:int = 0

@dataclass(frozen=True)
class FontAsset:
    """All glyphs a font maps codepoints to, built once by TTF.asset() and read-only afterwards"""
    metrics:FontMetrics
    glyphs:Mapping[int, RawGlyph] # by glyph index
    cmap:Mapping[int, int] # codepoint -> glyph index

    def __post_init__(self):
        if 0 not in self.glyphs: raise NoMissingGlyph()
        object.__setattr__(self, "glyphs", MappingProxyType(dict(self.glyphs)))
        object.__setattr__(self, "cmap", MappingProxyType(dict(self.cmap)))

    @property
    def unitsPerEm(self) -> int: return self.metrics.unitsPerEm
    @property
    def missingGlyph(self) -> RawGlyph: return self.glyphs[0]

    def lookup_glyph(self, codepoint:int) -> Tuple[RawGlyph, bool]:
        """Returns the glyph for codepoint and whether the font has one. Falls back to the missing character glyph."""
        if (glyphIndex := self.cmap.get(codepoint)) is None: return self.missingGlyph, False
        return self.glyphs[glyphIndex], True

# ABSTRACT FONT INTERFACE

class Font:
    def __init__(self, path:Union[str, Path]):
        assert (path := Path(path)).suffix == ".ttf", f"Can't load {path}. Only True Type fonts (.ttf) are supported."
        from curvestream.font.ttf import TTF
        self.asset = TTF(path).asset()

    @functools.cache
    def glyph(self, char:str) -> "NormalizedGlyph":
        assert len(char) == 1, f"Can't get '{char}', can only get one character at a time."
        from curvestream.font.outline import normalize_glyph
        return normalize_glyph(self.asset.lookup_glyph(ord(char))[0], self.asset.unitsPerEm)

    def render(self, char:str, resolution:int, antialiasing:int=5) -> List[List[int]]:
        assert resolution > 0, f"Can't render at {resolution=}. Must be positive."
        assert antialiasing >= 1, f"Can't render with antialiasing of {antialiasing}. Must be >=1. If 1, applies no Anti-Aliasing"
        from curvestream.font.raster import rasterize
        return rasterize(self.glyph(char), resolution, aa=antialiasing)
