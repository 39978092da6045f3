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

"""Numeric fields of TAR headers.

There are two possible encodings for a number field of `width` bytes.

POSIX 1003.1-1988 requires numbers to be encoded as a string of octal digits
followed by a NUL byte, this allows values up to `8 ** (width - 1) - 1`.

GNU tar allows storing larger and negative numbers by setting the highest bit
of the first byte of the field.  The rest of the field, that is, the lower 7
bits of the first byte followed by all the other bytes, is then a big-endian
two's-complement number of `width * 8 - 1` bits.

Both encodings are limited to what fits into a signed 64-bit integer here.
"""

import typing as _t

from .exceptions import *
from .strfield import parse_string, format_string

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

OCTAL_DIGITS = b"01234567"

def fits_in_int64(x : int) -> bool:
    return INT64_MIN <= x <= INT64_MAX

def fits_in_octal(width : int, x : int) -> bool:
    """Check if `x` can be encoded as octal digits followed by a terminator
       in a field of `width` bytes.
    """
    if width < 1 or x < 0:
        return False
    # 21 octal digits cover all positive int64 values
    return width >= 22 or x < 1 << ((width - 1) * 3)

def fits_in_base256(width : int, x : int) -> bool:
    """Check if `x` can be encoded in GNU base-256 format in a field of
       `width` bytes.

       The top bit of the field is the base-256 flag and the next one is the
       sign, so `width` bytes can hold `(width - 1) * 8 + 1` bits of
       two's-complement number.  9 bytes or more hold any int64 value.
    """
    if width < 1:
        return False
    if width >= 9:
        return fits_in_int64(x)
    bin_bits = (width - 1) * 8
    return -(1 << bin_bits) <= x < 1 << bin_bits

def parse_octal(s : bytes) -> int:
    s = parse_string(bytes(s).strip(b" \0"))
    if len(s) == 0:
        return 0
    if any(c not in OCTAL_DIGITS for c in s):
        raise FormatError("invalid octal number field %s", repr(s))
    n = int(s, 8)
    if n > INT64_MAX:
        raise FieldOverflowError("octal number field %s overflows int64", repr(s))
    return n

def parse_base256(s : bytes) -> int:
    s = bytes(s)
    bits = len(s) * 8 - 1
    n = int.from_bytes(bytes([s[0] & 0x7f]) + s[1:], "big")
    if n >> (bits - 1):
        # sign-extend from the top bit of the number, not the flag
        n -= 1 << bits
    if not fits_in_int64(n):
        raise FieldOverflowError("base-256 number field %s overflows int64", repr(s))
    return n

def parse_numeric(s : bytes) -> int:
    """Convert a number field to a python number.
    """
    if len(s) > 0 and s[0] & 0x80:
        return parse_base256(s)
    return parse_octal(s)

def format_octal(buf : _t.Any, x : int) -> None:
    s = "%o" % (x,)
    pad = len(buf) - len(s) - 1
    if pad > 0:
        s = "0" * pad + s
    format_string(buf, s)

def format_base256(buf : _t.Any, x : int) -> None:
    res = bytearray(x.to_bytes(len(buf), "big", signed=True))
    res[0] |= 0x80
    buf[:] = res

def format_numeric(buf : _t.Any, x : int) -> None:
    """Encode `x` into the writable number field `buf`, overwriting all of
       its `len(buf)` bytes.

       Octal is used when `x` fits, base-256 otherwise.  When `x` fits in
       neither, `buf` gets filled with an octal zero and `FieldOverflowError`
       is raised.
    """
    width = len(buf)
    if fits_in_octal(width, x):
        format_octal(buf, x)
    elif fits_in_base256(width, x):
        format_base256(buf, x)
    else:
        if width > 0:
            format_octal(buf, 0)
        raise FieldOverflowError("number %d does not fit into a %d byte field", x, width)
