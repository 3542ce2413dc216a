"""Wire type enum for the tag/wire-type key that precedes every field.

The integer values are fixed by the wire format: the low three bits of every
field key carry one of them.
"""

from enum import IntEnum


class WireType(IntEnum):
    """Integer wire encoding for field payload framing."""

    VARINT = 0
    SIXTY_FOUR_BIT = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    THIRTY_TWO_BIT = 5
