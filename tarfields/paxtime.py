# This file is a part of tarfields project.
#
# This file can be distributed under the terms of the MIT-style license given
# below or Python Software Foundation License version 2 (PSF-2.0) as published
# by Python Software Foundation.
#
# Copyright (c) 2018-2024 Jan Malakhovski <oxij@oxij.org>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""PAX timestamps, i.e. `atime`, `ctime`, and `mtime` record values.

These are decimal numbers of seconds since the epoch with an optional
fractional part, e.g. `1350244992.023960108`.  Fractions are kept with
nanosecond precision.
"""

import dataclasses as _dc
import typing as _t

from .exceptions import *
from .numeric import fits_in_int64

NANOSECOND_DIGITS = 9
NANOSECONDS = 10 ** NANOSECOND_DIGITS

DECIMAL_DIGITS = "0123456789"

@_dc.dataclass(frozen=True)
class PAXTime:
    """A point in time with nanosecond precision.
       `nanoseconds` is always in `[0, 10 ** 9)`, even for negative `seconds`.
    """
    seconds : int
    nanoseconds : int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanoseconds < NANOSECONDS:
            raise ValueError("nanoseconds out of range: %d" % (self.nanoseconds,))

    @classmethod
    def normalized(cls, seconds : int, nanoseconds : int) -> "PAXTime":
        s, ns = divmod(nanoseconds, NANOSECONDS)
        return cls(seconds + s, ns)

    @classmethod
    def from_ns(cls, ns : int) -> "PAXTime":
        return cls(*divmod(ns, NANOSECONDS))

    def to_ns(self) -> int:
        return self.seconds * NANOSECONDS + self.nanoseconds

def _is_decimal(s : str) -> bool:
    return len(s) > 0 and all(c in DECIMAL_DIGITS for c in s)

def parse_pax_time(text : _t.Union[str, bytes]) -> PAXTime:
    """Parse a PAX timestamp.

       Fractional parts shorter than 9 digits are padded with zeros, longer
       ones are truncated, not rounded.
    """
    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            text = bytes(text).decode("ascii", "strict")
        except UnicodeDecodeError:
            raise FormatError("invalid PAX timestamp %s", repr(text))

    ss, dot, sn = text.partition(".")

    digits = ss[1:] if ss[:1] in ("-", "+") else ss
    if not _is_decimal(digits):
        raise FormatError("invalid PAX timestamp %s", repr(text))
    digits = digits.lstrip("0") or "0"
    # int64 has at most 19 decimal digits
    if len(digits) > 19:
        raise FieldOverflowError("PAX timestamp %s overflows int64", repr(text))
    secs = -int(digits) if ss.startswith("-") else int(digits)
    if not fits_in_int64(secs):
        raise FieldOverflowError("PAX timestamp %s overflows int64", repr(text))

    if dot == "":
        return PAXTime(secs)

    if not _is_decimal(sn):
        raise FormatError("invalid PAX timestamp %s", repr(text))
    nsecs = int(sn[:NANOSECOND_DIGITS].ljust(NANOSECOND_DIGITS, "0"))
    if ss.startswith("-"):
        # the fraction has the same sign as the whole number
        nsecs = -nsecs
    return PAXTime.normalized(secs, nsecs)

def format_pax_time(ts : PAXTime) -> str:
    """Format a `PAXTime` as a PAX timestamp, the inverse of `parse_pax_time`.
    """
    secs, nsecs = ts.seconds, ts.nanoseconds
    if nsecs == 0:
        return str(secs)

    sign = ""
    if secs < 0:
        sign = "-"
        secs = -(secs + 1)
        nsecs = NANOSECONDS - nsecs
    return ("%s%d.%09d" % (sign, secs, nsecs)).rstrip("0")
