"""Message fields holding open enum values.

OpenEnumField holds a singular enum field with proto3 implicit presence;
RepeatedOpenEnumField holds a repeated one. Both implement wire.message.Field
on top of the int32 codec, so an unrecognized code survives decode and
re-encode unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, SupportsInt

import structlog

from openenum.value import Known, Unknown, default, from_raw
from wire import int32
from wire.enums import WireType
from wire.message import Field

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from openenum.value import OpenEnum
    from wire.buffer import ReadBuffer
    from wire.encoding import DecodeContext

logger = structlog.get_logger()


def _is_member(enum_type: Callable[[int], object], value: object) -> bool:
    return isinstance(enum_type, type) and isinstance(value, enum_type)


def _coerce[T: SupportsInt](enum_type: Callable[[int], T], value: OpenEnum[T] | T | int) -> OpenEnum[T]:
    """Normalize an assigned value to an OpenEnum of enum_type.

    Members are wrapped as Known and plain integers go through from_raw().
    A member of another enum type, bare or wrapped in Known, raises TypeError.
    """
    if isinstance(value, Unknown):
        return value
    if isinstance(value, Known):
        if not _is_member(enum_type, value.value):
            msg = f"expected a {_enum_name(enum_type)} member, got {value.value!r}"
            raise TypeError(msg)
        return value
    if _is_member(enum_type, value):
        return Known(value)
    if int32.is_strict_int(value) and not isinstance(value, Enum):
        return from_raw(enum_type, value)
    msg = f"expected a {_enum_name(enum_type)} member or int32 code, got {value!r}"
    raise TypeError(msg)


def _enum_name(enum_type: Callable[[int], object]) -> str:
    return getattr(enum_type, "__name__", repr(enum_type))


class OpenEnumField[T: SupportsInt](Field):
    """A singular enum field.

    Encodes as a bare int32 varint payload. Each decoded occurrence replaces
    the whole value, so when a tag repeats on the wire the last one wins.
    """

    wire_type = WireType.VARINT

    def __init__(self, enum_type: Callable[[int], T], value: OpenEnum[T] | T | None = None) -> None:
        self._enum_type = enum_type
        self._value: OpenEnum[T] = default(enum_type) if value is None else _coerce(enum_type, value)

    @property
    def enum_type(self) -> Callable[[int], T]:
        return self._enum_type

    @property
    def value(self) -> OpenEnum[T]:
        return self._value

    @value.setter
    def value(self, value: OpenEnum[T] | T) -> None:
        self._value = _coerce(self._enum_type, value)

    def encoded_len(self) -> int:
        return int32.encoded_len_raw(self._value.to_raw())

    def encode_raw(self, buf: bytearray) -> None:
        int32.encode_raw(self._value.to_raw(), buf)

    def merge_field(self, tag: int, wire_type: WireType, buf: ReadBuffer, ctx: DecodeContext) -> None:
        raw = int32.merge(wire_type, buf, ctx)
        self._value = from_raw(self._enum_type, raw)
        if isinstance(self._value, Unknown):
            logger.debug("unknown enum value preserved", enum=_enum_name(self._enum_type), tag=tag, raw=raw)

    def clear(self) -> None:
        self._value = from_raw(self._enum_type, 0)

    def is_default(self) -> bool:
        return self._value.to_raw() == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OpenEnumField):
            return NotImplemented
        return self._enum_type is other._enum_type and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"OpenEnumField({_enum_name(self._enum_type)}, {self._value!r})"


class RepeatedOpenEnumField[T: SupportsInt](Field):
    """A repeated enum field, written packed.

    Decoding accepts packed and unpacked occurrences alike and appends every
    code in wire order, known or not.
    """

    wire_type = WireType.LENGTH_DELIMITED

    def __init__(self, enum_type: Callable[[int], T], values: Iterable[OpenEnum[T] | T] = ()) -> None:
        self._enum_type = enum_type
        self._values: list[OpenEnum[T]] = [_coerce(enum_type, value) for value in values]

    @property
    def enum_type(self) -> Callable[[int], T]:
        return self._enum_type

    @property
    def values(self) -> list[OpenEnum[T]]:
        return list(self._values)

    def raw_values(self) -> list[int]:
        return [value.to_raw() for value in self._values]

    def append(self, value: OpenEnum[T] | T) -> None:
        self._values.append(_coerce(self._enum_type, value))

    def extend(self, values: Iterable[OpenEnum[T] | T]) -> None:
        self._values.extend([_coerce(self._enum_type, value) for value in values])

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[OpenEnum[T]]:
        return iter(self._values)

    def encoded_len(self) -> int:
        return int32.encoded_len_packed_raw(self.raw_values())

    def encode_raw(self, buf: bytearray) -> None:
        int32.encode_packed_raw(self.raw_values(), buf)

    def merge_field(self, tag: int, wire_type: WireType, buf: ReadBuffer, ctx: DecodeContext) -> None:
        raws: list[int] = []
        int32.merge_repeated(wire_type, raws, buf, ctx)
        decoded = [from_raw(self._enum_type, raw) for raw in raws]
        unknown = [value.value for value in decoded if isinstance(value, Unknown)]
        if unknown:
            logger.debug("unknown enum values preserved", enum=_enum_name(self._enum_type), tag=tag, raw=unknown)
        self._values.extend(decoded)

    def clear(self) -> None:
        self._values.clear()

    def is_default(self) -> bool:
        return not self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepeatedOpenEnumField):
            return NotImplemented
        return self._enum_type is other._enum_type and self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RepeatedOpenEnumField({_enum_name(self._enum_type)}, {self._values!r})"
