"""Field keys, decode context and generic field skipping.

Every field on the wire starts with a key:

    key = varint((tag << 3) | wire_type)

The payload that follows is interpreted according to the wire type. Unknown
tags are skipped with skip_field() so that newer senders can add fields
without breaking older receivers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wire.enums import WireType
from wire.errors import DecodeError
from wire.varint import decode_varint, encode_varint, encoded_len_varint

if TYPE_CHECKING:
    from collections.abc import Callable

    from wire.buffer import ReadBuffer

MIN_TAG = 1
MAX_TAG = (1 << 29) - 1

DEFAULT_RECURSION_LIMIT = 100
# Skipping groups costs two Python frames per level of nesting.
MAX_RECURSION_LIMIT = 200

_MAX_KEY = (1 << 32) - 1
_WIRE_TYPE_BITS = 3
_WIRE_TYPE_MASK = 0b111
_FIXED32_LEN = 4
_FIXED64_LEN = 8


class DecodeContext:
    """Per-decode state threaded through nested merges.

    Tracks how many more levels of nesting (groups, length-delimited
    sub-messages) the decoder may enter.
    """

    __slots__ = ("recursion_limit",)

    def __init__(self, recursion_limit: int = DEFAULT_RECURSION_LIMIT) -> None:
        self.recursion_limit = recursion_limit

    def enter_recursion(self) -> DecodeContext:
        return DecodeContext(self.recursion_limit - 1)

    def limit_reached(self) -> None:
        """Raise DecodeError if no further nesting is allowed."""
        if self.recursion_limit <= 0:
            raise DecodeError("recursion limit reached")


def _check_tag(tag: int) -> None:
    if tag < MIN_TAG or tag > MAX_TAG:
        msg = f"tag must be {MIN_TAG}-{MAX_TAG}, got {tag}"
        raise ValueError(msg)


def encode_key(tag: int, wire_type: WireType, buf: bytearray) -> None:
    _check_tag(tag)
    encode_varint((tag << _WIRE_TYPE_BITS) | wire_type, buf)


def key_len(tag: int) -> int:
    """Return the encoded length of a key for tag (independent of wire type)."""
    return encoded_len_varint(tag << _WIRE_TYPE_BITS)


def decode_key(buf: ReadBuffer) -> tuple[int, WireType]:
    """Read a field key and return (tag, wire_type)."""
    key = decode_varint(buf)
    if key > _MAX_KEY:
        raise DecodeError(f"invalid key value: {key}")
    raw_wire_type = key & _WIRE_TYPE_MASK
    try:
        wire_type = WireType(raw_wire_type)
    except ValueError as e:
        raise DecodeError(f"invalid wire type value: {raw_wire_type}") from e
    tag = key >> _WIRE_TYPE_BITS
    if tag < MIN_TAG:
        raise DecodeError("invalid tag value: 0")
    return tag, wire_type


def check_wire_type(expected: WireType, actual: WireType) -> None:
    if expected != actual:
        raise DecodeError(f"invalid wire type: {actual.name} (expected {expected.name})")


def skip_field(wire_type: WireType, tag: int, buf: ReadBuffer, ctx: DecodeContext) -> None:
    """Consume the payload of a field the receiver does not know about."""
    ctx.limit_reached()
    match wire_type:
        case WireType.VARINT:
            decode_varint(buf)
            length = 0
        case WireType.THIRTY_TWO_BIT:
            length = _FIXED32_LEN
        case WireType.SIXTY_FOUR_BIT:
            length = _FIXED64_LEN
        case WireType.LENGTH_DELIMITED:
            length = decode_varint(buf)
        case WireType.START_GROUP:
            _skip_group(tag, buf, ctx)
            length = 0
        case WireType.END_GROUP:
            raise DecodeError("unexpected end group tag")

    if length > buf.remaining():
        raise DecodeError("buffer underflow")
    buf.advance(length)


def _skip_group(tag: int, buf: ReadBuffer, ctx: DecodeContext) -> None:
    while True:
        inner_tag, inner_wire_type = decode_key(buf)
        if inner_wire_type == WireType.END_GROUP:
            if inner_tag != tag:
                raise DecodeError("unexpected end group tag")
            return
        skip_field(inner_wire_type, inner_tag, buf, ctx.enter_recursion())


def merge_loop(
    buf: ReadBuffer,
    ctx: DecodeContext,
    merge: Callable[[ReadBuffer, DecodeContext], None],
) -> None:
    """Run merge repeatedly over one length-delimited payload.

    Reads the varint length, then calls merge until exactly that many bytes
    have been consumed. A merge that reads past the declared length fails
    with "buffer underflow" instead of consuming bytes of the next field.
    """
    length = decode_varint(buf)
    if length > buf.remaining():
        raise DecodeError("buffer underflow")
    limited = buf.split_to(length)
    while limited.has_remaining():
        merge(limited, ctx)
