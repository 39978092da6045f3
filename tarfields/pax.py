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

"""PAX extended header records, see "pax Header Block" section in `man 1 pax`.

A record looks like `b"%d %s=%s\n" % (length, key, value)` where `length` is
the size of the complete record including the length field itself and the
newline.  Values are not escaped, only `length` determines where a record
ends.
"""

import typing as _t

from .exceptions import *

PAX_ATIME = "atime"
PAX_CTIME = "ctime"
PAX_MTIME = "mtime"
PAX_PATH = "path"
PAX_LINKPATH = "linkpath"
PAX_UNAME = "uname"
PAX_GNAME = "gname"

PAX_TIME_KEYS = (PAX_ATIME, PAX_CTIME, PAX_MTIME)
PAX_NAME_KEYS = (PAX_PATH, PAX_LINKPATH, PAX_UNAME, PAX_GNAME)

DIGITS = b"0123456789"

def _to_bytes(s : _t.Union[str, bytes]) -> bytes:
    if isinstance(s, str):
        return s.encode("utf-8")
    return bytes(s)

def _malformed(cls : _t.Any, data : bytes, what : str, *args : _t.Any) -> CodecError:
    exc : CodecError = cls(what, *args)
    exc.residual = data
    return exc

def parse_pax_record(data : bytes) -> _t.Tuple[bytes, bytes, bytes]:
    """Parse a single PAX record from the start of `data`.

       Returns `(key, value, residual)`, where `residual` is the rest of
       `data` following the record.  On failure, raises a `CodecError` with
       `residual` set to `data`.
    """
    data = bytes(data)

    sp = 0
    while sp < len(data) and data[sp] in DIGITS:
        sp += 1
    if sp == 0:
        raise _malformed(FormatError, data, "invalid PAX record: missing length")
    if data[sp:sp + 1] != b" ":
        raise _malformed(FormatError, data, "invalid PAX record: expecting a space after length")

    digits = data[:sp].lstrip(b"0") or b"0"
    # a length with more digits than `len(data)` can never be satisfied
    if len(digits) > len(str(len(data))):
        raise _malformed(TruncationError, data, "invalid PAX record: length of %d digits exceeds available %d bytes", len(digits), len(data))

    length = int(digits)
    # shortest valid record is b"%d k=\n"
    if length < sp + 4:
        raise _malformed(FormatError, data, "invalid PAX record: length %d is too small", length)
    if length > len(data):
        raise _malformed(TruncationError, data, "invalid PAX record: length %d exceeds available %d bytes", length, len(data))

    rec = data[sp + 1:length - 1]
    key, eq, value = rec.partition(b"=")
    if eq == b"":
        raise _malformed(FormatError, data, "invalid PAX record: missing `=`")
    if key == b"" or b"\n" in key:
        raise _malformed(FormatError, data, "invalid PAX record: invalid key %s", repr(key))
    if data[length - 1:length] != b"\n":
        raise _malformed(FormatError, data, "invalid PAX record: length %d does not end at a newline", length)

    return key, value, data[length:]

def format_pax_record(key : _t.Union[str, bytes], value : _t.Union[str, bytes]) -> bytes:
    """Format a single PAX record.  `str` arguments are encoded to UTF-8.
    """
    key = _to_bytes(key)
    value = _to_bytes(value)
    if key == b"" or b"=" in key or b"\n" in key:
        raise FormatError("invalid PAX record key %s", repr(key))

    size = len(key) + len(value) + 3 # ' ' + '=' + '\n'
    # adding digits to the length can make it need more digits
    digits = 1
    while len(str(size + digits)) > digits:
        digits += 1
    return b"%d %s=%s\n" % (size + digits, key, value)

def valid_pax_record(key : _t.Union[str, bytes], value : _t.Union[str, bytes]) -> bool:
    """Check if a record is fit for writing into an archive.
    """
    key = _to_bytes(key)
    value = _to_bytes(value)
    if key == b"" or b"=" in key:
        return False
    if key.decode("utf-8", "replace") in PAX_NAME_KEYS:
        return b"\0" not in value
    return b"\0" not in key

def parse_pax_headers(data : bytes) -> _t.Dict[str, bytes]:
    """Parse all PAX records of an extended header data block.
       Later records override earlier ones with the same key.
    """
    res = dict()
    data = bytes(data)
    total = len(data)
    while len(data) > 0:
        offset = total - len(data)
        try:
            key, value, rest = parse_pax_record(data)
        except CodecError as exc:
            exc.elaborate("at offset %d", offset)
            raise
        try:
            res[key.decode("utf-8", "strict")] = value
        except UnicodeDecodeError:
            exc = _malformed(FormatError, data, "invalid PAX header data: can't decode key %s", repr(key))
            exc.elaborate("at offset %d", offset)
            raise exc
        data = rest
    return res

def format_pax_headers(headers : _t.Mapping[_t.Union[str, bytes], _t.Union[str, bytes]]) -> bytes:
    """Format `headers` into an extended header data block.
    """
    return b"".join(format_pax_record(k, v) for k, v in headers.items())
