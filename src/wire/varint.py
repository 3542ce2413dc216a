"""Base-128 variable-length integer encoding.

Each byte carries 7 bits of the value, least significant group first. The
high bit of a byte is set when more bytes follow.

    300 -> 0b1_0010_1100 -> [0xAC, 0x02]

Values are unsigned 64-bit. Signed integers are converted by the scalar
codecs before they reach this module (see wire.int32).
"""

from wire.buffer import ReadBuffer
from wire.errors import DecodeError

MAX_VARINT_LEN = 10
MAX_UINT64 = (1 << 64) - 1

_PAYLOAD_MASK = 0x7F
_CONTINUATION_BIT = 0x80
# The tenth byte may only carry the single remaining bit of a 64-bit value.
_MAX_LAST_BYTE = 0x01


def encode_varint(value: int, buf: bytearray) -> None:
    """Append the varint encoding of an unsigned 64-bit value to buf."""
    if value < 0 or value > MAX_UINT64:
        msg = f"varint value must be 0-{MAX_UINT64}, got {value}"
        raise ValueError(msg)
    while value > _PAYLOAD_MASK:
        buf.append((value & _PAYLOAD_MASK) | _CONTINUATION_BIT)
        value >>= 7
    buf.append(value)


def encoded_len_varint(value: int) -> int:
    """Return the number of bytes encode_varint() writes for value."""
    return max(1, (value.bit_length() + 6) // 7)


def decode_varint(buf: ReadBuffer) -> int:
    """Read one varint from buf.

    Raises DecodeError if the input ends before the terminating byte, or if
    the encoding runs past 10 bytes or overflows 64 bits.
    """
    value = 0
    for count in range(MAX_VARINT_LEN):
        if not buf.has_remaining():
            break
        byte = buf.get_u8()
        value |= (byte & _PAYLOAD_MASK) << (7 * count)
        if byte < _CONTINUATION_BIT:
            if count == MAX_VARINT_LEN - 1 and byte > _MAX_LAST_BYTE:
                break
            return value
    raise DecodeError("invalid varint")
