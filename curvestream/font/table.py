import logging
from typing import List, Tuple, Union
from curvestream.dtype import *
from curvestream.vec import vec2
from curvestream.font.errors import TruncatedData, UnsupportedCharacterMap, UnsupportedCharacterMapFormat, UnsupportedPointMatching

log = logging.getLogger(__name__)

class Parser:
    """Random access cursor over a big-endian font buffer. Every read advances the pointer, seeking is unrestricted."""
    def __init__(self, buffer:bytes, offset:int=0):
        self.b = buffer
        self.p = offset # pointer
    def seek(self, offset:int): self.p = offset
    def skip(self, n:int): self.p += n
    def tell(self) -> int: return self.p
    def read(self, size:int) -> bytes:
        if self.p < 0 or self.p + size > len(self.b): raise TruncatedData(self.p, size, len(self.b))
        ret = self.b[self.p:self.p+size]
        self.p += size
        return ret
    def tag(self, n:int=4) -> str: return self.read(n).decode("latin-1")
    def parse(self, dt:Union[DType, type], count:int=None, offset:int=None, **kwargs):
        """Parse a dtype or a table at the pointer (or at `offset`). Returns one value if count is None, else a list of count values"""
        assert count is None or count >= 0, f"Got invalid count {count}"
        if offset is not None: self.p = offset
        if count is None: return self._parse(dt, **kwargs)
        return [self._parse(dt, **kwargs) for _ in range(count)]
    def _parse(self, dt, **kwargs): return dt(self.read(dt.size)) if isinstance(dt, DType) else dt(self, **kwargs) # tables parse themselves from the parser

# TRUE TYPE TABLES

class table:
    types = {}
    def __init__(self, b:Union[bytes, Parser], **kwargs):
        assert isinstance(b, (bytes, Parser))
        if isinstance(b, bytes): b = Parser(b)
        self._from_bytes(b, **kwargs)
    def _from_bytes(self, b:Parser): [setattr(self, name, b.parse(dt)) for name, dt in self.types.items()]

class offset_subtable_table(table):
    types = {
        "scalerType": uint32,
        "numTables": uint16,
        "searchRange": uint16,
        "entrySelector": uint16,
        "rangeShift": uint16
    }

class table_directory_entry(table):
    def _from_bytes(self, b:Parser):
        self.tag = b.tag(4)
        self.checkSum, self.offset, self.length = b.parse(uint32, 3)

class head_table(table):
    types = {
        "version": Fixed,
        "fontRevision": Fixed,
        "checkSumAdjustment": uint32,
        "magicNumber": uint32,
        "flags": uint16,
        "unitsPerEm": uint16,
        "created": longDateTime,
        "modified": longDateTime,
        "xMin": FWord,
        "yMin": FWord,
        "xMax": FWord,
        "yMax": FWord,
        "macStyle": uint16,
        "lowestRecPPEM": uint16,
        "fontDirectionHint": int16,
        "indexToLocFormat": int16,
        "glyphDataFormat": int16
    }

class maxp_table(table):
    # version 0.5 tables stop after numGlyphs, the rest only matters for hinting
    types = {"version": Fixed, "numGlyphs": uint16}

class hhea_table(table):
    def _from_bytes(self, b:Parser):
        self.version = b.parse(Fixed)
        self.ascent = b.parse(FWord)
        self.descent = b.parse(FWord)
        self.lineGap = b.parse(FWord)
        self.advanceWidthMax = b.parse(uFWord)
        self.minLeftSideBearing = b.parse(FWord)
        self.minRightSideBearing = b.parse(FWord)
        self.xMaxExtent = b.parse(FWord)
        self.caretSlopeRise = b.parse(int16)
        self.caretSlopeRun = b.parse(int16)
        self.caretOffset = b.parse(FWord)
        b.skip(8) # reserved
        self.metricDataFormat = b.parse(int16)
        self.numOfLongHorMetrics = b.parse(uint16)

class longHorMetric(table):
    types = {"advanceWidth": uint16, "leftSideBearing": int16}

class hmtx_table(table):
    def _from_bytes(self, b:Parser, numOfLongHorMetrics:int=None, numGlyphs:int=None):
        assert numOfLongHorMetrics is not None and numGlyphs is not None
        self.longHorMetric = b.parse(longHorMetric, count=numOfLongHorMetrics)
        self.leftSideBearing = b.parse(FWord, count=numGlyphs - numOfLongHorMetrics) # monospaced tail: these reuse the last advance width

# CHARACTER MAP

class cmap_encoding_subtable(table):
    types = {"platformID": uint16, "platformSpecificID": uint16, "offset": uint32}

class cmap_table(table):
    """Picks one subtable and decodes it into (codepoint, glyphIndex) pairs in self.mappings"""
    UNICODE_ENCODINGS = (0, 1, 3, 4)
    MICROSOFT_ENCODINGS = (1, 10) # unicode BMP, unicode full repertoire
    def _from_bytes(self, b:Parser):
        table_offset = b.tell()
        self.version, self.numberSubtables = b.parse(uint16, 2)
        self.encoding_subtables = b.parse(cmap_encoding_subtable, count=self.numberSubtables)
        self.selected = self.select(self.encoding_subtables)
        if self.selected is None: raise UnsupportedCharacterMap([(e.platformID, e.platformSpecificID) for e in self.encoding_subtables])
        log.debug("using cmap subtable platformID=%d platformSpecificID=%d", self.selected.platformID, self.selected.platformSpecificID)
        self.subtable = b.parse(cmap_subtable, offset=table_offset + self.selected.offset)
        self.mappings:List[Tuple[int, int]] = self.subtable.mappings
        if not any(glyphIndex == 0 for _, glyphIndex in self.mappings): self.mappings.append((0xFFFF, 0)) # the missing character glyph must always be reachable

    @classmethod
    def select(cls, records:List[cmap_encoding_subtable]) -> Union[cmap_encoding_subtable, None]:
        # highest supported unicode encoding wins, microsoft only if there is no unicode subtable at all
        selected, unicodeID = None, -1
        for r in records:
            if r.platformID == 0 and r.platformSpecificID in cls.UNICODE_ENCODINGS and r.platformSpecificID > unicodeID: selected, unicodeID = r, r.platformSpecificID
            elif r.platformID == 3 and unicodeID == -1 and r.platformSpecificID in cls.MICROSOFT_ENCODINGS: selected = r
        return selected

class cmap_subtable12_group(table):
    types = {"startCharCode": uint32, "endCharCode": uint32, "startGlyphCode": uint32}

class cmap_subtable(table):
    def _from_bytes(self, b:Parser):
        self.format = b.parse(uint16)
        match self.format:
            case 4:
                self.length, self.language, self.segCountX2 = b.parse(uint16, 3)
                segCount = self.segCountX2 // 2
                b.skip(6) # searchRange, entrySelector, rangeShift
                self.endCode = b.parse(uint16, segCount)
                b.skip(2) # reservedPad
                self.startCode = b.parse(uint16, segCount)
                self.idDelta = b.parse(uint16, segCount) # arithmetic is modulo 65536 so unsigned works for negative deltas too
                idRangeOffsetStart = b.tell()
                self.idRangeOffset = b.parse(uint16, segCount)
                self.mappings = []
                for i, (start, end, delta, rangeOffset) in enumerate(zip(self.startCode, self.endCode, self.idDelta, self.idRangeOffset)):
                    if start == 0xFFFF: break # final segment. Some fonts put garbage after it
                    for code in range(start, end + 1):
                        if rangeOffset == 0: glyphIndex = (code + delta) % 65536
                        # idRangeOffset is relative to where it is stored itself
                        elif (glyphIndex := b.parse(uint16, offset=idRangeOffsetStart + 2*i + rangeOffset + 2*(code - start))) != 0: glyphIndex = (glyphIndex + delta) % 65536
                        self.mappings.append((code, glyphIndex))
            case 12:
                b.skip(2) # reserved
                self.length, self.language, self.nGroups = b.parse(uint32, 3)
                self.groups = b.parse(cmap_subtable12_group, count=self.nGroups)
                self.mappings = [(code, g.startGlyphCode + code - g.startCharCode) for g in self.groups for code in range(g.startCharCode, g.endCharCode + 1)]
            case _: raise UnsupportedCharacterMapFormat(self.format)

# GLYPHS

class glyph_header(table):
    types = {"numberOfContours": int16, "xMin": int16, "yMin": int16, "xMax": int16, "yMax": int16}

# simple glyph flag bits
ON_CURVE_POINT = 0x01
X_SHORT_VECTOR = 0x02
Y_SHORT_VECTOR = 0x04
REPEAT_FLAG = 0x08
X_IS_SAME_OR_POSITIVE = 0x10
Y_IS_SAME_OR_POSITIVE = 0x20

class simple_glyph(table):
    def _from_bytes(self, b:Parser, header:glyph_header=None):
        assert header is not None and header.numberOfContours >= 0
        self.header = header
        self.endPtsOfContours = b.parse(uint16, header.numberOfContours)
        self.x, self.y, self.onCurve = [], [], []
        if header.numberOfContours == 0: return
        numPoints = max(self.endPtsOfContours) + 1
        b.skip(b.parse(uint16)) # hinting instructions
        flags = []
        while len(flags) < numPoints:
            flag = b.parse(uint8)
            count = 1 + (b.parse(uint8) if flag & REPEAT_FLAG else 0)
            flags += [flag] * min(count, numPoints - len(flags))
        self.x = self._coordinates(b, flags, X_SHORT_VECTOR, X_IS_SAME_OR_POSITIVE)
        self.y = self._coordinates(b, flags, Y_SHORT_VECTOR, Y_IS_SAME_OR_POSITIVE)
        self.onCurve = [bool(flag & ON_CURVE_POINT) for flag in flags]

    @staticmethod
    def _coordinates(b:Parser, flags:List[int], short:int, same_or_positive:int) -> List[int]:
        v, ret = 0, []
        for flag in flags:
            if flag & short: v += b.parse(uint8) if flag & same_or_positive else -b.parse(uint8) # 1 byte magnitude, the other bit is the sign
            elif not flag & same_or_positive: v += b.parse(int16)
            ret.append(v) # short bit clear and same bit set: unchanged
        return ret

class glyph_component(table):
    masks = {
        "ARG_1_AND_2_ARE_WORDS": 0x0001,
        "ARGS_ARE_XY_VALUES": 0x0002,
        "ROUND_XY_TO_GRID": 0x0004,
        "WE_HAVE_A_SCALE": 0x0008,
        "MORE_COMPONENTS": 0x0020,
        "WE_HAVE_AN_X_AND_Y_SCALE": 0x0040,
        "WE_HAVE_A_TWO_BY_TWO": 0x0080,
        "WE_HAVE_INSTRUCTIONS": 0x0100,
        "USE_MY_METRICS": 0x0200,
        "OVERLAP_COMPOUND": 0x0400,
        "SCALED_COMPONENT_OFFSET": 0x0800,
        "UNSCALED_COMPONENT_OFFSET": 0x1000
    }
    def _from_bytes(self, b:Parser):
        self.flags, self.glyphIndex = b.parse(uint16, 2)
        [setattr(self, name, bool(self.flags & value)) for name, value in glyph_component.masks.items()]
        self.arg1, self.arg2 = b.parse(int16 if self.ARG_1_AND_2_ARE_WORDS else int8, 2)
        if not self.ARGS_ARE_XY_VALUES: raise UnsupportedPointMatching(self.glyphIndex)
        # columns of the 2x2 matrix: where the component's x and y unit vectors end up
        self.iHat, self.jHat = vec2(1, 0), vec2(0, 1)
        if self.WE_HAVE_A_SCALE:
            scale = b.parse(F2Dot14)
            self.iHat, self.jHat = vec2(scale, 0), vec2(0, scale)
        elif self.WE_HAVE_AN_X_AND_Y_SCALE:
            xscale, yscale = b.parse(F2Dot14, 2)
            self.iHat, self.jHat = vec2(xscale, 0), vec2(0, yscale)
        elif self.WE_HAVE_A_TWO_BY_TWO:
            xscale, scale01, scale10, yscale = b.parse(F2Dot14, 4)
            self.iHat, self.jHat = vec2(xscale, scale01), vec2(scale10, yscale)

    def transform(self, x:float, y:float) -> vec2: return self.iHat * x + self.jHat * y

    @property
    def offset(self) -> vec2:
        # unscaled is the default when the flags are missing or contradict each other
        if self.SCALED_COMPONENT_OFFSET and not self.UNSCALED_COMPONENT_OFFSET: return self.transform(self.arg1, self.arg2)
        return vec2(self.arg1, self.arg2)

class compound_glyph(table):
    def _from_bytes(self, b:Parser, header:glyph_header=None):
        assert header is not None and header.numberOfContours < 0
        self.header = header
        self.components = [glyph_component(b)]
        while self.components[-1].MORE_COMPONENTS: self.components.append(glyph_component(b))
        # trailing instructions are not read: hinting is not supported
