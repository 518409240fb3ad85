import unittest
from curvestream.helpers import Context, ContextVar, DEBUG, WORKERS, fully_flatten

class TestContext(unittest.TestCase):
    def test_context_restores(self):
        before = WORKERS.value
        with Context(WORKERS=8, DEBUG=2):
            self.assertEqual((WORKERS.value, DEBUG.value), (8, 2))
            self.assertTrue(WORKERS > 1)
        self.assertEqual(WORKERS.value, before)

    def test_no_duplicates(self):
        with self.assertRaises(RuntimeError): ContextVar("DEBUG", 0)

    def test_flatten(self):
        self.assertEqual(fully_flatten([[1, 2], [[3], 4], 5]), [1, 2, 3, 4, 5])

if __name__ == "__main__": unittest.main()
