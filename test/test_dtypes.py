import unittest
from curvestream.dtype import *

class TestDTypes(unittest.TestCase):
    def test_decode(self):
        self.assertEqual(uint8(b"\xff"), 255)
        self.assertEqual(int8(b"\x80"), -128)
        self.assertEqual(uint16(b"\xff\xfe"), 65534)
        self.assertEqual(int16(b"\xff\xfe"), -2)
        self.assertEqual(uint32(b"\x00\x01\x00\x00"), 65536)
        self.assertEqual(F2Dot14(b"\x40\x00"), 1.0)
        self.assertEqual(F2Dot14(b"\xc0\x00"), -1.0)
        self.assertEqual(F2Dot14(b"\x20\x00"), 0.5)
        self.assertEqual(Fixed(b"\x00\x01\x80\x00"), 1.5)

    def test_clamp(self):
        self.assertEqual(uint8(300), 255)
        self.assertEqual(uint16(-5), 0)
        self.assertEqual(int16(-40000), -32768)
        self.assertEqual(F2Dot14(3), 32767 / 16384)

    def test_encode(self):
        dtypes = [uint8, int8, uint16, int16, FWord, uFWord, F2Dot14, uint32, int32, Fixed, longDateTime]
        values = [0, 1, 123, -13321, 812931, 0.75]
        for dt in dtypes:
            for v in values:
                self.assertEqual(len(dt.to_bytes(v)), dt.size)
                self.assertEqual(dt(v), dt(dt.to_bytes(v)))

    def test_wrong_length(self):
        with self.assertRaises(AssertionError): uint16(b"\x00")
        with self.assertRaises(AssertionError): uint32(b"\x00\x00")

if __name__ == "__main__": unittest.main()
