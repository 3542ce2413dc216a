"""Open enumeration values.

An enum field on the wire is a plain int32. A receiver built against an older
schema may see codes that its enum type does not define. Instead of failing
or dropping them, decoding produces one of two values:

    Known(member)   the code mapped to a member of the enum type
    Unknown(code)   the code mapped to nothing; the integer is kept verbatim

so re-encoding writes back exactly what was received.

The enum type only needs the two conversions IntEnum already provides:

    int(member)       member -> code (total)
    enum_type(code)   code -> member, raising ValueError for unmapped codes

Consumers branch with ``match``:

    match status:
        case Known(member):
            ...
        case Unknown(code):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Never, SupportsInt

from wire.int32 import check_int32

if TYPE_CHECKING:
    from collections.abc import Callable


class UnknownEnumValueError(Exception):
    """Raised by unwrap() on an Unknown value.

    Signals a caller bug: unwrap() is for code paths where the value has
    already been proven known. Use one of the non-raising extractions otherwise.
    """

    def __init__(self, value: int) -> None:
        super().__init__(f"unknown field value {value}")
        self.value = value


@dataclass(frozen=True, slots=True)
class Known[T: SupportsInt]:
    """An enum code that mapped to a member of the enum type."""

    value: T

    @property
    def is_known(self) -> bool:
        return True

    def to_raw(self) -> int:
        return int(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def unwrap_or_else(self, fn: Callable[[int], T]) -> T:  # noqa: ARG002
        return self.value

    def unwrap_or_default(self, enum_type: Callable[[int], T]) -> T:  # noqa: ARG002
        return self.value

    def known(self) -> T | None:
        return self.value

    def known_or(self, err: BaseException) -> T:  # noqa: ARG002
        return self.value

    def known_or_else(self, fn: Callable[[int], BaseException]) -> T:  # noqa: ARG002
        return self.value


@dataclass(frozen=True, slots=True)
class Unknown:
    """An enum code that mapped to no member, kept exactly as received."""

    value: int

    def __post_init__(self) -> None:
        check_int32(self.value)

    @property
    def is_known(self) -> bool:
        return False

    def to_raw(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value

    def unwrap(self) -> Never:
        raise UnknownEnumValueError(self.value)

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_or_else[T](self, fn: Callable[[int], T]) -> T:
        return fn(self.value)

    def unwrap_or_default[T](self, enum_type: Callable[[int], T]) -> T:
        """Return the enum type's default member, the one with code 0.

        Raises the enum type's own ValueError if it defines no such member.
        """
        return enum_type(0)

    def known(self) -> None:
        return None

    def known_or(self, err: BaseException) -> Never:
        raise err

    def known_or_else(self, fn: Callable[[int], BaseException]) -> Never:
        raise fn(self.value)


type OpenEnum[T: SupportsInt] = Known[T] | Unknown


def from_raw[T: SupportsInt](enum_type: Callable[[int], T], raw: int) -> OpenEnum[T]:
    """Map a wire integer to Known(member), or Unknown(raw) when no member matches."""
    check_int32(raw)
    try:
        return Known(enum_type(raw))
    except ValueError:
        return Unknown(raw)


def default[T: SupportsInt](enum_type: Callable[[int], T]) -> OpenEnum[T]:
    """Return the value an absent field decodes to.

    Known(member with code 0) when the enum type has one, otherwise Unknown(0).
    """
    return from_raw(enum_type, 0)
