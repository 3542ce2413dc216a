"""Read cursor over an immutable byte payload."""

from __future__ import annotations

from wire.errors import DecodeError


class ReadBuffer:
    """Forward-only cursor over encoded bytes.

    Sub-buffers returned by split_to() are memoryview slices of the same payload.
    """

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = memoryview(data)
        self._pos = 0

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def has_remaining(self) -> bool:
        return self._pos < len(self._data)

    def peek_u8(self) -> int:
        if not self.has_remaining():
            raise DecodeError("buffer underflow")
        return self._data[self._pos]

    def get_u8(self) -> int:
        byte = self.peek_u8()
        self._pos += 1
        return byte

    def read(self, length: int) -> bytes:
        """Consume ``length`` bytes and return a copy of them."""
        return bytes(self._take(length))

    def advance(self, length: int) -> None:
        self._take(length)

    def split_to(self, length: int) -> ReadBuffer:
        """Consume ``length`` bytes and return them as an independent buffer."""
        return ReadBuffer(self._take(length))

    def _take(self, length: int) -> memoryview:
        if length < 0 or length > self.remaining():
            raise DecodeError("buffer underflow")
        chunk = self._data[self._pos : self._pos + length]
        self._pos += length
        return chunk
