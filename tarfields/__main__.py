#!/usr/bin/env python3
#
# This file is a part of tarfields project.
#
# Copyright (c) 2018-2024 Jan Malakhovski <oxij@oxij.org>
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program. If not, see <http://www.gnu.org/licenses/>.


import os
import sys
import time
import typing as _t

from argparse import ArgumentParser, Namespace
from gettext import gettext

from .exceptions import *
from .numeric import parse_numeric, format_numeric
from .pax import PAX_TIME_KEYS, parse_pax_headers, format_pax_headers, valid_pax_record
from .paxtime import PAXTime, parse_pax_time, format_pax_time

def get_version(prog : str) -> str:
    import importlib.metadata as meta
    try:
        return meta.version(prog)
    except meta.PackageNotFoundError:
        return "dev"

def read_input(cfg : Namespace) -> bytes:
    if cfg.input_file == "-":
        return sys.stdin.buffer.read()

    cfg.input_file = os.path.expanduser(cfg.input_file)
    try:
        with open(cfg.input_file, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise CatastrophicFailure(gettext("file `%s` does not exist"), cfg.input_file)

def write_output(cfg : Namespace, data : bytes) -> None:
    if cfg.output_file == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return

    cfg.output_file = os.path.expanduser(cfg.output_file)
    try:
        with open(cfg.output_file, "xb") as f:
            f.write(data)
    except FileExistsError:
        raise CatastrophicFailure(gettext("file `%s` already exists"), cfg.output_file)

def str_time(ts : PAXTime) -> str:
    try:
        return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts.seconds))
    except (OverflowError, OSError, ValueError):
        # out of range for the platform's `time_t` or `struct tm`
        return "?"

def str_value(value : bytes) -> str:
    return value.decode("utf-8", "backslashreplace")

def num_decode(cfg : Namespace) -> None:
    for field in cfg.fields:
        try:
            data = bytes.fromhex(field)
        except ValueError:
            raise CatastrophicFailure(gettext("`%s` is not a hex string"), field)

        try:
            value = parse_numeric(data)
        except CodecError as exc:
            exc.elaborate(gettext("field `%s`"), field)
            raise
        print(value)

def num_encode(cfg : Namespace) -> None:
    if cfg.width < 1:
        raise CatastrophicFailure(gettext("field width must be positive, not %d"), cfg.width)

    for value in cfg.values:
        buf = bytearray(cfg.width)
        try:
            format_numeric(buf, value)
        except CodecError as exc:
            exc.elaborate(gettext("value %d"), value)
            raise
        print(buf.hex())

def pax_ls(cfg : Namespace) -> None:
    data = read_input(cfg)
    try:
        headers = parse_pax_headers(data)
    except CodecError as exc:
        exc.elaborate("%s", cfg.input_file)
        raise

    for key, value in headers.items():
        if key in PAX_TIME_KEYS:
            try:
                ts = parse_pax_time(value)
            except CodecError as exc:
                exc.elaborate("%s: %s", cfg.input_file, key)
                raise
            print("%s=%s (%s)" % (key, format_pax_time(ts), str_time(ts)))
        else:
            print("%s=%s" % (key, str_value(value)))

def pax_mk(cfg : Namespace) -> None:
    headers : _t.Dict[bytes, bytes] = dict()
    for record in cfg.records:
        key, eq, value = record.partition("=")
        if eq == "":
            raise CatastrophicFailure(gettext("`%s` is not a KEY=VALUE pair"), record)

        if key in PAX_TIME_KEYS:
            # normalize, this also checks the syntax
            value = format_pax_time(parse_pax_time(value))

        bkey, bvalue = os.fsencode(key), os.fsencode(value)
        if not valid_pax_record(bkey, bvalue):
            raise CatastrophicFailure(gettext("invalid PAX record `%s`"), record)
        headers[bkey] = bvalue

    write_output(cfg, format_pax_headers(headers))

def time_decode(cfg : Namespace) -> None:
    for text in cfg.texts:
        ts = parse_pax_time(text)
        print(ts.seconds, ts.nanoseconds, str_time(ts))

def make_argparser() -> ArgumentParser:
    _ = gettext

    prog = __package__
    parser = ArgumentParser(
        prog=prog,
        description = _("""Inspect and produce fields of TAR headers.

Numeric fields are given and printed as hex strings, which makes it possible to check both the octal and the GNU base-256 encodings byte for byte.
PAX extended header data blocks are read from and written to files.
"""),
        allow_abbrev = False)
    parser.add_argument("--version", action="version", version="%(prog)s " + get_version(prog))

    def no_cmd(cfg : Namespace) -> None:
        parser.print_help(sys.stderr)
        parser.error(_("no subcommand specified"))
    parser.set_defaults(func=no_cmd)

    subparsers = parser.add_subparsers(title="subcommands")

    cmd = subparsers.add_parser("num-decode",
                                help=_("decode numeric fields"),
                                description=_("Decode numeric fields of TAR headers, either octal or base-256 encoded, and print their values."))
    cmd.add_argument("fields", metavar="FIELD_HEX", nargs="+", type=str, help=_("raw field bytes as a hex string"))
    cmd.set_defaults(func=num_decode)

    cmd = subparsers.add_parser("num-encode",
                                help=_("encode numeric fields"),
                                description=_("Encode numbers into numeric fields of TAR headers and print them as hex strings. Octal encoding is used when the number fits, base-256 otherwise."))
    cmd.add_argument("-w", "--width", type=int, default=12, help=_("field width in bytes (default: %(default)s)"))
    cmd.add_argument("values", metavar="VALUE", nargs="+", type=int, help=_("numbers to encode"))
    cmd.set_defaults(func=num_encode)

    cmd = subparsers.add_parser("pax-ls",
                                help=_("list records of a PAX extended header"),
                                description=_("List records of a PAX extended header data block, decoding timestamps."))
    cmd.add_argument("input_file", metavar="INPUT_FILE", type=str, help=_('a file containing PAX header data, set to "-" to use standard input'))
    cmd.set_defaults(func=pax_ls)

    cmd = subparsers.add_parser("pax-mk",
                                help=_("make a PAX extended header"),
                                description=_("Produce a PAX extended header data block from given records."))
    cmd.add_argument("-o", "--output", dest="output_file", default="-", type=str, help=_('file to write the output to, set to "-" to use standard output (default: %(default)s)'))
    cmd.add_argument("records", metavar="KEY=VALUE", nargs="+", type=str, help=_("records to write"))
    cmd.set_defaults(func=pax_mk)

    cmd = subparsers.add_parser("time-decode",
                                help=_("decode PAX timestamps"),
                                description=_("Decode PAX timestamps and print their seconds, nanoseconds, and local time."))
    cmd.add_argument("texts", metavar="TIMESTAMP", nargs="+", type=str, help=_("PAX timestamps"))
    cmd.set_defaults(func=time_decode)

    return parser

def main(args : _t.Optional[_t.List[str]] = None) -> None:
    parser = make_argparser()
    cfg = parser.parse_args(sys.argv[1:] if args is None else args)

    try:
        cfg.func(cfg)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(1)
    except CatastrophicFailure as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
