from __future__ import annotations

import unittest

from tarfields.exceptions import CodecError, FormatError, FieldOverflowError
from tarfields.numeric import (
    INT64_MAX,
    INT64_MIN,
    fits_in_base256,
    fits_in_octal,
    format_numeric,
    parse_numeric,
)


class FitsInBase256Tests(unittest.TestCase):
    def test_vectors(self):
        vectors = [
            (+1, 8, True),
            (0, 8, True),
            (-1, 8, True),
            (1 << 56, 8, False),
            ((1 << 56) - 1, 8, True),
            (-1 << 56, 8, True),
            ((-1 << 56) - 1, 8, False),
            (121654, 8, True),
            (-9849849, 8, True),
            (INT64_MAX, 9, True),
            (0, 9, True),
            (INT64_MIN, 9, True),
            (INT64_MAX, 12, True),
            (0, 12, True),
            (INT64_MIN, 12, True),
        ]
        for value, width, ok in vectors:
            with self.subTest(value=value, width=width):
                self.assertEqual(fits_in_base256(width, value), ok)

    def test_boundaries_match_closed_form(self):
        for width in range(1, 13):
            if width >= 9:
                candidates = [INT64_MIN, INT64_MIN + 1, -1, 0, 1, INT64_MAX - 1, INT64_MAX]
                for value in candidates:
                    self.assertTrue(fits_in_base256(width, value))
                continue
            limit = 1 << ((width - 1) * 8)
            with self.subTest(width=width):
                self.assertTrue(fits_in_base256(width, limit - 1))
                self.assertFalse(fits_in_base256(width, limit))
                self.assertTrue(fits_in_base256(width, -limit))
                self.assertFalse(fits_in_base256(width, -limit - 1))

    def test_outside_int64(self):
        self.assertFalse(fits_in_base256(12, INT64_MAX + 1))
        self.assertFalse(fits_in_base256(12, INT64_MIN - 1))

    def test_zero_width(self):
        self.assertFalse(fits_in_base256(0, 0))


class FitsInOctalTests(unittest.TestCase):
    def test_limits(self):
        self.assertTrue(fits_in_octal(8, 0o7777777))
        self.assertFalse(fits_in_octal(8, 0o10000000))
        self.assertTrue(fits_in_octal(12, 0o77777777777))
        self.assertFalse(fits_in_octal(12, 0o100000000000))
        self.assertTrue(fits_in_octal(1, 0))
        self.assertFalse(fits_in_octal(1, 1))
        self.assertFalse(fits_in_octal(8, -1))
        self.assertTrue(fits_in_octal(22, INT64_MAX))
        self.assertFalse(fits_in_octal(0, 0))


class ParseNumericTests(unittest.TestCase):
    def test_base256(self):
        vectors = [
            (b"", 0),
            (b"\x80", 0),
            (b"\x80\x00", 0),
            (b"\x80\x00\x00", 0),
            (b"\xbf", (1 << 6) - 1),
            (b"\xbf\xff", (1 << 14) - 1),
            (b"\xbf\xff\xff", (1 << 22) - 1),
            (b"\xff", -1),
            (b"\xff\xff", -1),
            (b"\xff\xff\xff", -1),
            (b"\xc0", -1 * (1 << 6)),
            (b"\xc0\x00", -1 * (1 << 14)),
            (b"\xc0\x00\x00", -1 * (1 << 22)),
            (b"\x87\x76\xa2\x22\xeb\x8a\x72\x61", 537795476381659745),
            (b"\x80\x00\x00\x00\x07\x76\xa2\x22\xeb\x8a\x72\x61", 537795476381659745),
            (b"\xf7\x76\xa2\x22\xeb\x8a\x72\x61", -615126028225187231),
            (b"\xff\xff\xff\xff\xf7\x76\xa2\x22\xeb\x8a\x72\x61", -615126028225187231),
            (b"\x80\x7f\xff\xff\xff\xff\xff\xff\xff", INT64_MAX),
            (b"\xff\x80\x00\x00\x00\x00\x00\x00\x00", INT64_MIN),
        ]
        for data, want in vectors:
            with self.subTest(data=data):
                self.assertEqual(parse_numeric(data), want)

    def test_base256_overflow(self):
        for data in [
            b"\x80\x80\x00\x00\x00\x00\x00\x00\x00",
            b"\xff\x7f\xff\xff\xff\xff\xff\xff\xff",
            b"\xf5\xec\xd1\xc7\x7e\x5f\x26\x48\x81\x9f\x8f\x9b",
        ]:
            with self.subTest(data=data):
                with self.assertRaises(FieldOverflowError):
                    parse_numeric(data)

    def test_octal(self):
        vectors = [
            (b"0000000\x00", 0),
            (b" \x0000003\x00", 3),
            (b" \x0000000\x00", 0),
            (b"00000000227\x00", 0o227),
            (b"032033\x00 ", 0o32033),
            (b"320330\x00 ", 0o320330),
            (b"0000660\x00 ", 0o660),
            (b"\x00 0000660\x00 ", 0o660),
            (b"01234567\x0089abcdef", 342391),
            (b"        ", 0),
            (b"\x00\x00\x00\x00", 0),
        ]
        for data, want in vectors:
            with self.subTest(data=data):
                self.assertEqual(parse_numeric(data), want)

    def test_octal_invalid(self):
        for data in [
            b"0123456789abcdef",
            b"0123456789\x00abcdef",
            b"0123\x7e\x5f\x264123",
            b"+0000660\x00",
            b"00 0660\x00",
        ]:
            with self.subTest(data=data):
                with self.assertRaises(FormatError):
                    parse_numeric(data)

    def test_octal_overflow(self):
        self.assertEqual(parse_numeric(b"777777777777777777777\x00"), INT64_MAX)
        with self.assertRaises(FieldOverflowError):
            parse_numeric(b"1000000000000000000000\x00")

    def test_errors_are_codec_errors(self):
        with self.assertRaises(CodecError):
            parse_numeric(b"x")


class FormatNumericTests(unittest.TestCase):
    def test_vectors(self):
        vectors = [
            (-1, b"\xff", True),
            (-1, b"\xff\xff", True),
            (-1, b"\xff\xff\xff", True),
            ((1 << 0), b"0", False),
            ((1 << 8) - 1, b"\x80\xff", True),
            ((1 << 8), b"0\x00", False),
            ((1 << 16) - 1, b"\x80\xff\xff", True),
            ((1 << 16), b"00\x00", False),
            (-1 * (1 << 0), b"\xff", True),
            (-1 * (1 << 0) - 1, b"0", False),
            (-1 * (1 << 8), b"\xff\x00", True),
            (-1 * (1 << 8) - 1, b"0\x00", False),
            (-1 * (1 << 16), b"\xff\x00\x00", True),
            (-1 * (1 << 16) - 1, b"00\x00", False),
            (537795476381659745, b"0000000\x00", False),
            (537795476381659745, b"\x80\x00\x00\x00\x07\x76\xa2\x22\xeb\x8a\x72\x61", True),
            (-615126028225187231, b"0000000\x00", False),
            (-615126028225187231, b"\xff\xff\xff\xff\xf7\x76\xa2\x22\xeb\x8a\x72\x61", True),
            (INT64_MAX, b"0000000\x00", False),
            (INT64_MAX, b"\x80\x00\x00\x00\x7f\xff\xff\xff\xff\xff\xff\xff", True),
            (INT64_MIN, b"0000000\x00", False),
            (INT64_MIN, b"\xff\xff\xff\xff\x80\x00\x00\x00\x00\x00\x00\x00", True),
            (INT64_MAX, b"\x80\x7f\xff\xff\xff\xff\xff\xff\xff", True),
            (INT64_MIN, b"\xff\x80\x00\x00\x00\x00\x00\x00\x00", True),
        ]
        for value, want, ok in vectors:
            with self.subTest(value=value, width=len(want)):
                # garbage, to check the whole field gets overwritten
                buf = bytearray(b"\xaa" * len(want))
                if ok:
                    format_numeric(buf, value)
                else:
                    with self.assertRaises(FieldOverflowError):
                        format_numeric(buf, value)
                self.assertEqual(bytes(buf), want)

    def test_octal(self):
        buf = bytearray(8)
        format_numeric(buf, 0o644)
        self.assertEqual(bytes(buf), b"0000644\x00")

        buf = bytearray(12)
        format_numeric(buf, 1350244992)
        self.assertEqual(bytes(buf), b"12036615200\x00")

        buf = bytearray(1)
        format_numeric(buf, 0)
        self.assertEqual(bytes(buf), b"0")

    def test_switches_to_base256(self):
        buf = bytearray(8)
        format_numeric(buf, 0o10000000)
        self.assertEqual(bytes(buf), b"\x80\x00\x00\x00\x00\x20\x00\x00")

    def test_writes_into_memoryview_slice(self):
        header = bytearray(b"\xaa" * 32)
        format_numeric(memoryview(header)[8:20], 0o1234)
        self.assertEqual(bytes(header[8:20]), b"00000001234\x00")
        self.assertEqual(bytes(header[:8]), b"\xaa" * 8)
        self.assertEqual(bytes(header[20:]), b"\xaa" * 12)

    def test_outside_int64(self):
        buf = bytearray(12)
        with self.assertRaises(FieldOverflowError):
            format_numeric(buf, INT64_MAX + 1)
        self.assertEqual(bytes(buf), b"00000000000\x00")

    def test_zero_width(self):
        buf = bytearray()
        with self.assertRaises(FieldOverflowError):
            format_numeric(buf, 0)
        self.assertEqual(buf, bytearray())

    def test_round_trip(self):
        for width in range(1, 13):
            if width >= 9:
                values = [INT64_MIN, -1, 0, 1, 0o7777777, INT64_MAX]
            else:
                limit = 1 << ((width - 1) * 8)
                values = sorted({-limit, -limit + 1, -1, 0, limit - 2, limit - 1})
            for value in values:
                with self.subTest(width=width, value=value):
                    self.assertTrue(fits_in_base256(width, value))
                    buf = bytearray(width)
                    format_numeric(buf, value)
                    self.assertEqual(parse_numeric(bytes(buf)), value)


if __name__ == "__main__":
    unittest.main()
