"""Scalar codec for signed 32-bit integer fields (protobuf ``int32``).

The value is sign-extended to 64 bits and written as an unsigned varint, so
every negative value occupies the full 10 bytes:

    -1 -> 0xFFFF_FFFF_FFFF_FFFF -> [0xFF x 9, 0x01]

Decoding reads a 64-bit varint and keeps the low 32 bits as a signed value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wire.encoding import check_wire_type, encode_key, key_len, merge_loop
from wire.enums import WireType
from wire.varint import MAX_UINT64, decode_varint, encode_varint, encoded_len_varint

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wire.buffer import ReadBuffer
    from wire.encoding import DecodeContext

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

_UINT32_MASK = (1 << 32) - 1
_SIGN_BIT = 1 << 31


def is_strict_int(value: object) -> bool:
    """Return True if value is an int but not a bool."""
    return isinstance(value, int) and not isinstance(value, bool)


def check_int32(value: object) -> int:
    """Validate that value is an int in the signed 32-bit range and return it."""
    if not is_strict_int(value):
        msg = f"int32 value must be an integer, got {type(value).__name__}"
        raise TypeError(msg)
    if value < INT32_MIN or value > INT32_MAX:
        msg = f"int32 value must be {INT32_MIN}-{INT32_MAX}, got {value}"
        raise ValueError(msg)
    return value


def _to_wire(value: int) -> int:
    return check_int32(value) & MAX_UINT64


def _from_wire(value: int) -> int:
    value &= _UINT32_MASK
    return value - (1 << 32) if value & _SIGN_BIT else value


def decode_raw(buf: ReadBuffer) -> int:
    """Read a bare varint payload and truncate it to a signed 32-bit value."""
    return _from_wire(decode_varint(buf))


def encode_raw(value: int, buf: bytearray) -> None:
    """Write the bare varint payload, without a key."""
    encode_varint(_to_wire(value), buf)


def encoded_len_raw(value: int) -> int:
    return encoded_len_varint(_to_wire(value))


def encode(tag: int, value: int, buf: bytearray) -> None:
    encode_key(tag, WireType.VARINT, buf)
    encode_raw(value, buf)


def encoded_len(tag: int, value: int) -> int:
    return key_len(tag) + encoded_len_raw(value)


def merge(wire_type: WireType, buf: ReadBuffer, ctx: DecodeContext) -> int:  # noqa: ARG001
    """Decode one int32 occurrence and return it.

    The caller has already consumed the key. Raises DecodeError when the wire
    type is not VARINT or the varint is malformed.
    """
    check_wire_type(WireType.VARINT, wire_type)
    return decode_raw(buf)


def merge_repeated(wire_type: WireType, values: list[int], buf: ReadBuffer, ctx: DecodeContext) -> None:
    """Append one occurrence of a repeated int32 field to values.

    Accepts both packed (LENGTH_DELIMITED) and unpacked (VARINT) occurrences,
    as receivers must regardless of how the sender's schema declared the field.
    """
    if wire_type == WireType.LENGTH_DELIMITED:

        def _merge_one(inner: ReadBuffer, _ctx: DecodeContext) -> None:
            values.append(decode_raw(inner))

        merge_loop(buf, ctx, _merge_one)
        return
    values.append(merge(wire_type, buf, ctx))


def _packed_payload_len(values: Iterable[int]) -> int:
    return sum(encoded_len_raw(value) for value in values)


def encode_packed_raw(values: list[int], buf: bytearray) -> None:
    """Write the length prefix and every value, without a key."""
    encode_varint(_packed_payload_len(values), buf)
    for value in values:
        encode_raw(value, buf)


def encoded_len_packed_raw(values: list[int]) -> int:
    payload_len = _packed_payload_len(values)
    return encoded_len_varint(payload_len) + payload_len


def encode_packed(tag: int, values: list[int], buf: bytearray) -> None:
    """Write a packed repeated field. Empty lists are omitted entirely."""
    if not values:
        return
    encode_key(tag, WireType.LENGTH_DELIMITED, buf)
    encode_packed_raw(values, buf)


def encoded_len_packed(tag: int, values: list[int]) -> int:
    if not values:
        return 0
    return key_len(tag) + encoded_len_packed_raw(values)
