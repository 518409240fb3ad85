import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Tuple, Union
from curvestream.dtype import uint16, uint32
from curvestream.helpers import DEBUG, WORKERS
from curvestream.font.errors import MissingTable, InvalidMetrics, InvalidGlyphIndex
from curvestream.font.font import Point, RawGlyph, FontMetrics, FontAsset
from curvestream.font.table import *

log = logging.getLogger(__name__)

# Architecture notes:
# - the buffer and self.loca are never written after load, so glyphs can be resolved from several threads
# - every resolve_glyph call uses its own Parser

class TTF:
    REQUIRED_TABLES = ("head", "maxp", "loca", "glyf", "cmap", "hmtx", "hhea")

    def __init__(self, fontfile:Union[str, Path, bytes]): self.load(fontfile)

    def load(self, fontfile:Union[str, Path, bytes]):
        if isinstance(fontfile, (bytes, bytearray)): self.buffer = bytes(fontfile)
        else:
            with open(fontfile, "rb") as f: self.buffer = f.read()
        p = Parser(self.buffer)

        self.offset_subtable = p.parse(offset_subtable_table)
        self.table_directory:Dict[str, int] = {entry.tag:entry.offset for entry in p.parse(table_directory_entry, count=self.offset_subtable.numTables)} # duplicate tags: last one wins
        if DEBUG: log.debug("table directory: %s", ", ".join(f"{tag}@{offset}" for tag, offset in self.table_directory.items()))
        for tag in self.REQUIRED_TABLES:
            if tag not in self.table_directory: raise MissingTable(tag)

        # load tables
        self.head = p.parse(head_table, offset=self.table_directory["head"])
        if self.head.unitsPerEm <= 0: raise InvalidMetrics(f"unitsPerEm must be positive, got {self.head.unitsPerEm}")
        self.maxp = p.parse(maxp_table, offset=self.table_directory["maxp"])
        self.hhea = p.parse(hhea_table, offset=self.table_directory["hhea"])
        if not 0 < self.hhea.numOfLongHorMetrics <= self.maxp.numGlyphs: raise InvalidMetrics(f"numOfLongHorMetrics is {self.hhea.numOfLongHorMetrics}, font has {self.maxp.numGlyphs} glyphs")
        self.hmtx = p.parse(hmtx_table, offset=self.table_directory["hmtx"], numOfLongHorMetrics=self.hhea.numOfLongHorMetrics, numGlyphs=self.maxp.numGlyphs)
        self.metrics = self._metrics()

        # absolute glyph locations. numGlyphs + 1 entries, the last one marks the end of the final glyph
        glyf = self.table_directory["glyf"]
        entries = p.parse(uint16 if self.metrics.locaEntryWidth == 2 else uint32, count=self.maxp.numGlyphs + 1, offset=self.table_directory["loca"])
        self.loca:List[int] = [glyf + (e * 2 if self.metrics.locaEntryWidth == 2 else e) for e in entries] # short entries store half the offset

        self.cmap = p.parse(cmap_table, offset=self.table_directory["cmap"])
        del p

    def _metrics(self) -> FontMetrics:
        lastAdvance = self.hmtx.longHorMetric[-1].advanceWidth
        hMetrics = [(m.advanceWidth, m.leftSideBearing) for m in self.hmtx.longHorMetric] + [(lastAdvance, lsb) for lsb in self.hmtx.leftSideBearing]
        return FontMetrics(self.head.unitsPerEm, 2 if self.head.indexToLocFormat == 0 else 4, self.maxp.numGlyphs, tuple(hMetrics),
                           self.hhea.ascent, self.hhea.descent, self.hhea.lineGap)

    def resolve_glyph(self, glyphIndex:int) -> RawGlyph:
        assert 0 <= glyphIndex < self.metrics.numGlyphs, f"Invalid glyph index {glyphIndex}, font has {self.metrics.numGlyphs} glyphs"
        return self._read_glyph(Parser(self.buffer), glyphIndex, ())

    def _read_glyph(self, p:Parser, glyphIndex:int, chain:Tuple[int, ...]) -> RawGlyph:
        """chain holds the locations of the compound glyphs currently being resolved, to stop cycles"""
        location = self.loca[glyphIndex]
        advanceWidth, leftSideBearing = self.metrics.hMetrics[glyphIndex]
        if location == self.loca[glyphIndex + 1]: return RawGlyph(glyphIndex, advanceWidth=advanceWidth, leftSideBearing=leftSideBearing) # no outline, like space
        header = p.parse(glyph_header, offset=location)
        bbox = (header.xMin, header.yMin, header.xMax, header.yMax)
        match header.numberOfContours:
            case n if n >= 0:
                g = p.parse(simple_glyph, header=header)
                points = tuple(Point(x, y, on) for x, y, on in zip(g.x, g.y, g.onCurve))
                return RawGlyph(glyphIndex, *bbox, points, tuple(g.endPtsOfContours), advanceWidth, leftSideBearing)
            case _:
                g = p.parse(compound_glyph, header=header)
                points:List[Point] = []
                contourEnds:List[int] = []
                for c in g.components:
                    if c.glyphIndex >= self.metrics.numGlyphs: raise InvalidGlyphIndex(glyphIndex, c.glyphIndex, self.metrics.numGlyphs)
                    if (componentLocation := self.loca[c.glyphIndex]) == location or componentLocation in chain:
                        log.warning("glyph %d: component %d refers back to a glyph being resolved, using an empty glyph instead", glyphIndex, c.glyphIndex)
                        continue
                    child = self._read_glyph(p, c.glyphIndex, chain + (location,))
                    if c.USE_MY_METRICS: advanceWidth, leftSideBearing = child.advanceWidth, child.leftSideBearing
                    offset = c.offset
                    contourEnds += [end + len(points) for end in child.contourEnds]
                    for pt in child.points:
                        v = c.transform(pt.x, pt.y) + offset
                        points.append(Point(int(v.x), int(v.y), pt.onCurve))
                return RawGlyph(glyphIndex, *bbox, tuple(points), tuple(contourEnds), advanceWidth, leftSideBearing)

    def asset(self) -> FontAsset:
        cmap:Dict[int, int] = {}
        dropped = duplicates = 0
        for codepoint, glyphIndex in self.cmap.mappings:
            if glyphIndex >= self.metrics.numGlyphs: dropped += 1
            elif codepoint in cmap: duplicates += 1 # first mapping wins
            else: cmap[codepoint] = glyphIndex
        if dropped: log.warning("dropped %d character mappings to glyph indices beyond the font's %d glyphs", dropped, self.metrics.numGlyphs)
        if duplicates: log.warning("ignored %d duplicate character mappings", duplicates)

        indices = sorted(set(cmap.values()) | {0}) # the missing character glyph even if no codepoint maps to it
        if WORKERS > 1:
            with ThreadPoolExecutor(max_workers=WORKERS.value) as executor: glyphs = list(executor.map(self.resolve_glyph, indices))
        else: glyphs = [self.resolve_glyph(i) for i in indices]
        asset = FontAsset(self.metrics, {g.glyphIndex:g for g in glyphs}, cmap)
        log.info("loaded font: %d glyphs, %d mapped characters, %d units per em", len(glyphs), len(cmap), self.metrics.unitsPerEm)
        return asset

def load(fontfile:Union[str, Path, bytes]) -> FontAsset: return TTF(fontfile).asset()
