"""
Unit test file.
"""

import unittest

from s3_multipart import Range, SizeSuffix


class SizeSuffixTester(unittest.TestCase):
    """Test SizeSuffix parsing and formatting."""

    def test_simple_suffix(self) -> None:
        size_suffix = SizeSuffix("16MB")
        self.assertEqual(size_suffix.as_int(), 16 * 1024 * 1024)
        self.assertEqual(SizeSuffix("8M").as_int(), 8 * 1024 * 1024)
        self.assertEqual(SizeSuffix("5G").as_int(), 5 * 1024**3)
        self.assertEqual(SizeSuffix("1024").as_int(), 1024)

    def test_float_suffix(self) -> None:
        size_suffix = SizeSuffix("16.5M")
        self.assertEqual(size_suffix.as_int(), int(16.5 * 1024 * 1024))
        # now assert that the string value is the same as the input
        self.assertEqual(str(size_suffix), "16.5M")

    def test_as_str(self) -> None:
        self.assertEqual(SizeSuffix(0).as_str(), "0B")
        self.assertEqual(SizeSuffix(1023).as_str(), "1023B")
        self.assertEqual(SizeSuffix(5 * 1024 * 1024).as_str(), "5M")

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            SizeSuffix("lots")
        with self.assertRaises(ValueError):
            SizeSuffix("5X")

    def test_comparison(self) -> None:
        self.assertEqual(SizeSuffix("10M"), 10 * 1024 * 1024)
        self.assertEqual(SizeSuffix("5M"), SizeSuffix(5 * 1024 * 1024))
        self.assertNotEqual(SizeSuffix("5M"), "5M")
        self.assertEqual(int(SizeSuffix("1K")), 1024)

    def test_range(self) -> None:
        r = Range(10, 20)
        self.assertEqual(r.length, 10)
        self.assertEqual(r, Range(10, 20))

    def test_range_header(self) -> None:
        # http byte ranges are inclusive at both ends
        self.assertEqual(Range(0, 100).to_header(), {"Range": "bytes=0-99"})
        r = Range(SizeSuffix("5M"), SizeSuffix("10M"))
        self.assertEqual(
            r.to_header(), {"Range": f"bytes={5 * 1024 * 1024}-{10 * 1024 * 1024 - 1}"}
        )


if __name__ == "__main__":
    unittest.main()
