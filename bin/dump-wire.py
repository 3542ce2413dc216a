#!/usr/bin/env python3
"""Print the top-level fields of an encoded message, one per line.

Varint payloads are shown as int32 values, which is how enum fields are
encoded. Use it to see which enum codes a peer actually sent, including codes
the local schema does not define.

Usage:
    python bin/dump-wire.py --hex 0802120301e707
    python bin/dump-wire.py path/to/payload.bin
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

from shared.logging import setup_logging
from wire import int32
from wire.buffer import ReadBuffer
from wire.encoding import decode_key
from wire.enums import WireType
from wire.errors import DecodeError
from wire.varint import decode_varint

logger = structlog.get_logger()

_FIXED_LEN = {WireType.THIRTY_TWO_BIT: 4, WireType.SIXTY_FOUR_BIT: 8}


def dump_fields(data: bytes) -> list[str]:
    """Describe each top-level field as "<tag> <WIRE_TYPE> <value>"."""
    buf = ReadBuffer(data)
    lines = []
    while buf.has_remaining():
        tag, wire_type = decode_key(buf)
        match wire_type:
            case WireType.VARINT:
                value = str(int32.decode_raw(buf))
            case WireType.LENGTH_DELIMITED:
                payload = buf.read(decode_varint(buf))
                value = f"{len(payload)} bytes {payload.hex()}"
            case WireType.THIRTY_TWO_BIT | WireType.SIXTY_FOUR_BIT:
                value = buf.read(_FIXED_LEN[wire_type]).hex()
            case WireType.START_GROUP | WireType.END_GROUP:
                value = ""
        lines.append(f"{tag} {wire_type.name} {value}".rstrip())
    return lines


def _read_payload(args: argparse.Namespace, parser: argparse.ArgumentParser) -> bytes:
    if args.hex is not None:
        try:
            return bytes.fromhex(args.hex)
        except ValueError as e:
            parser.error(f"--hex: {e}")
    try:
        return args.file.read_bytes()
    except OSError as e:
        parser.error(f"{args.file}: {e.strerror}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the fields of an encoded message.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--hex", help="Payload as a hex string")
    source.add_argument("file", nargs="?", type=Path, help="File containing the raw payload")
    args = parser.parse_args(argv)

    setup_logging()
    data = _read_payload(args, parser)

    try:
        lines = dump_fields(data)
    except DecodeError as e:
        logger.error("failed to decode payload", error=str(e), size=len(data))
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
