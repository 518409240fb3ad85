class DType:
    """Big-endian TrueType number type. Calling it decodes bytes (or clamps a python number) into a python value, to_bytes encodes."""
    def __init__(self, name:str, size:int, fractional_bits:int, signed:bool):
        assert fractional_bits < size * 8 - (1 if signed else 0)
        self.name, self.size, self.fractional_bits, self.signed = name, size, fractional_bits, signed
        self.max = (2**(size * 8 - (1 if signed else 0)) - 1) / 2**fractional_bits
        self.min = -(2**(size * 8 - 1)) / 2**fractional_bits if signed else 0
    def __call__(self, v):
        assert isinstance(v, (bytes, int, float)), f"Unsupported type for {self.name}: {type(v)}"
        if isinstance(v, bytes):
            assert len(v) == self.size, f"{self.name} needs {self.size} bytes, got {len(v)}"
            ret = int.from_bytes(v, "big", signed=self.signed)
            return ret / 2**self.fractional_bits if self.fractional_bits else ret
        v = max(min(v, self.max), self.min)
        return int(v * 2**self.fractional_bits) / 2**self.fractional_bits if self.fractional_bits else int(v)
    def to_bytes(self, v) -> bytes: return int(self(v) * 2**self.fractional_bits).to_bytes(self.size, "big", signed=self.signed)
    def __repr__(self): return f"DType({self.name})"

uint8 = DType("uint8", 1, 0, False)
int8 = DType("int8", 1, 0, True)
uint16 = DType("uint16", 2, 0, False)
int16 = DType("int16", 2, 0, True)
FWord = DType("FWord", 2, 0, True)
uFWord = DType("uFWord", 2, 0, False)
F2Dot14 = DType("F2Dot14", 2, 14, True)
uint32 = DType("uint32", 4, 0, False)
int32 = DType("int32", 4, 0, True)
Fixed = DType("Fixed", 4, 16, True)
longDateTime = DType("longDateTime", 8, 0, True)
