"""Field serialization contract and the Message base that frames fields.

A Message owns a set of Field objects keyed by tag. Encoding writes a key
followed by each field's payload; decoding reads keys and dispatches each
occurrence to the field registered for that tag. Tags the message does not
know are skipped, so payloads from newer senders still decode.

Subclasses declare their fields with a tag -> attribute mapping and create
the Field instances in ``__init__`` (which must accept no arguments, since
decode() constructs an empty message first):

    class Reading(Message):
        FIELDS: ClassVar[dict[int, str]] = {1: "status"}

        def __init__(self) -> None:
            self.status = OpenEnumField(Status)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Self

import structlog

from wire.buffer import ReadBuffer
from wire.encoding import DecodeContext, decode_key, encode_key, key_len, merge_loop, skip_field
from wire.errors import DecodeError
from wire.settings import WireSettings
from wire.varint import encode_varint

if TYPE_CHECKING:
    from collections.abc import Iterator

    from wire.enums import WireType

logger = structlog.get_logger()


class Field(ABC):
    """Serialization contract for one typed field of a message.

    The enclosing Message writes the key. A Field reads and writes only the
    payload after it, and reports the wire type its payload uses.
    """

    wire_type: ClassVar[WireType]

    @abstractmethod
    def encoded_len(self) -> int:
        """Return the number of bytes encode_raw() writes."""

    @abstractmethod
    def encode_raw(self, buf: bytearray) -> None:
        """Append the payload (no key) to buf."""

    @abstractmethod
    def merge_field(self, tag: int, wire_type: WireType, buf: ReadBuffer, ctx: DecodeContext) -> None:
        """Apply one decoded occurrence of this field. The key is already consumed."""

    @abstractmethod
    def clear(self) -> None:
        """Reset to the value an absent field decodes to."""

    @abstractmethod
    def is_default(self) -> bool:
        """Return True if the field is omitted from the encoded message."""


def _check_size(data: bytes | bytearray, settings: WireSettings) -> None:
    if len(data) > settings.max_message_len:
        raise DecodeError(f"payload too large: {len(data)} bytes (max {settings.max_message_len})")


class Message:
    """Base class for messages composed of tagged fields."""

    FIELDS: ClassVar[dict[int, str]] = {}

    def _iter_fields(self) -> Iterator[tuple[int, str, Field]]:
        for tag in sorted(self.FIELDS):
            name = self.FIELDS[tag]
            yield tag, name, getattr(self, name)

    def encoded_len(self) -> int:
        return sum(
            key_len(tag) + field.encoded_len() for tag, _, field in self._iter_fields() if not field.is_default()
        )

    def encode_raw(self, buf: bytearray) -> None:
        for tag, _, field in self._iter_fields():
            if field.is_default():
                continue
            encode_key(tag, field.wire_type, buf)
            field.encode_raw(buf)

    def merge_field(self, tag: int, wire_type: WireType, buf: ReadBuffer, ctx: DecodeContext) -> None:
        name = self.FIELDS.get(tag)
        if name is None:
            logger.debug("skipping unknown field", message=type(self).__name__, tag=tag, wire_type=wire_type)
            skip_field(wire_type, tag, buf, ctx)
            return
        try:
            getattr(self, name).merge_field(tag, wire_type, buf, ctx)
        except DecodeError as e:
            e.push(type(self).__name__, name)
            raise

    def clear(self) -> None:
        for _, _, field in self._iter_fields():
            field.clear()

    def encode(self, buf: bytearray) -> None:
        """Append the encoded message to buf."""
        self.encode_raw(buf)

    def encode_to_bytes(self) -> bytes:
        buf = bytearray()
        self.encode_raw(buf)
        return bytes(buf)

    def encode_length_delimited(self) -> bytes:
        """Encode the message prefixed with its varint byte length."""
        buf = bytearray()
        encode_varint(self.encoded_len(), buf)
        self.encode_raw(buf)
        return bytes(buf)

    def _merge_next(self, buf: ReadBuffer, ctx: DecodeContext) -> None:
        tag, wire_type = decode_key(buf)
        self.merge_field(tag, wire_type, buf, ctx)

    def merge(self, data: bytes | bytearray, settings: WireSettings | None = None) -> None:
        """Decode data into this message, field by field.

        Scalar fields already set are overwritten by the decoded occurrences;
        repeated fields are appended to.
        """
        if settings is None:
            settings = WireSettings()
        _check_size(data, settings)
        buf = ReadBuffer(data)
        ctx = DecodeContext(settings.recursion_limit)
        while buf.has_remaining():
            self._merge_next(buf, ctx)

    def merge_length_delimited(self, data: bytes | bytearray, settings: WireSettings | None = None) -> None:
        """Decode a length-prefixed message from the start of data.

        Bytes after the declared length are left unread.
        """
        if settings is None:
            settings = WireSettings()
        _check_size(data, settings)
        ctx = DecodeContext(settings.recursion_limit)
        ctx.limit_reached()
        merge_loop(ReadBuffer(data), ctx.enter_recursion(), self._merge_next)

    @classmethod
    def decode(cls, data: bytes | bytearray, settings: WireSettings | None = None) -> Self:
        message = cls()
        message.merge(data, settings)
        return message

    @classmethod
    def decode_length_delimited(cls, data: bytes | bytearray, settings: WireSettings | None = None) -> Self:
        message = cls()
        message.merge_length_delimited(data, settings)
        return message

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.FIELDS.values())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.FIELDS.values())
        return f"{type(self).__name__}({fields})"
