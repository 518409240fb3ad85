"""Errors raised while decoding a TrueType font. Every one of them means the font is unusable: there is no partial result."""
from typing import List, Tuple

class FontError(ValueError):
    """Base class of all font decoding errors"""

class TruncatedData(FontError):
    def __init__(self, offset:int, size:int, length:int):
        self.offset, self.size, self.length = offset, size, length
        super().__init__(f"Can't read {size} byte(s) at offset {offset}, buffer is {length} bytes long")

class MissingTable(FontError):
    def __init__(self, tag:str):
        self.tag = tag
        super().__init__(f"Required table '{tag}' is missing")

class UnsupportedCharacterMap(FontError):
    def __init__(self, records:List[Tuple[int, int]]):
        self.records = records
        super().__init__(f"No supported character map found. Available (platformID, encodingID): {records}")

class UnsupportedCharacterMapFormat(FontError):
    def __init__(self, format:int):
        self.format = format
        super().__init__(f"Character map format {format} is not supported, only formats 4 and 12 are")

class UnsupportedPointMatching(FontError):
    def __init__(self, glyphIndex:int):
        self.glyphIndex = glyphIndex
        super().__init__(f"Component glyph {glyphIndex} is positioned by point matching, only x/y offsets are supported")

class InvalidGlyphIndex(FontError):
    def __init__(self, glyphIndex:int, componentIndex:int, numGlyphs:int):
        self.glyphIndex, self.componentIndex, self.numGlyphs = glyphIndex, componentIndex, numGlyphs
        super().__init__(f"Glyph {glyphIndex} has component {componentIndex}, font has {numGlyphs} glyphs")

class InvalidMetrics(FontError): pass

class NoMissingGlyph(FontError):
    def __init__(self): super().__init__("Font has no missing character glyph (glyph index 0)")
