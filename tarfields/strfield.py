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

"""Fixed-width NUL-terminated string fields of TAR headers.
"""

import typing as _t

from .exceptions import *

def parse_string(s : bytes) -> bytes:
    """Return the contents of a NUL-terminated bytes field.
    """
    s = bytes(s)
    p = s.find(b"\0")
    if p != -1:
        s = s[:p]
    return s

def nts(s : bytes, encoding : str, errors : str) -> str:
    """Convert a null-terminated bytes object to a string.
    """
    return parse_string(s).decode(encoding, errors)

def format_string(buf : _t.Any, s : _t.Union[str, bytes]) -> None:
    """Write `s` into a writable fixed-width buffer `buf` and fill the rest of
       it with NULs.

       If `s` does not fit, its prefix gets written anyway, so that `buf` is
       always fully initialized, and `FieldOverflowError` is raised.
    """
    if isinstance(s, str):
        s = s.encode("utf-8")
    width = len(buf)
    buf[:] = s[:width] + b"\0" * (width - len(s[:width]))
    if len(s) > width:
        raise FieldOverflowError("string of %d bytes does not fit into a %d byte field", len(s), width)

def is_ascii(s : str) -> bool:
    return all(ord(c) < 0x80 for c in s)

def to_ascii(s : str) -> str:
    """Drop all non-ASCII characters from `s`.
    """
    if is_ascii(s):
        return s
    return "".join(c for c in s if ord(c) < 0x80)
