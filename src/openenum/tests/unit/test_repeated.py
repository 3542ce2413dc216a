"""Tests for RepeatedOpenEnumField: packed encoding and order-preserving decode."""

import pytest

from openenum import Known, RepeatedOpenEnumField, Unknown
from openenum.tests.helpers.schema import Priority, TrafficLight
from wire.buffer import ReadBuffer
from wire.encoding import DecodeContext
from wire.enums import WireType
from wire.errors import DecodeError


def _encode(field: RepeatedOpenEnumField) -> bytes:
    buf = bytearray()
    field.encode_raw(buf)
    return bytes(buf)


class TestEncode:
    def test_packed_payload_has_length_prefix(self):
        field = RepeatedOpenEnumField(TrafficLight, [TrafficLight.GREEN, Unknown(999), TrafficLight.RED])
        assert _encode(field) == b"\x04\x02\xe7\x07\x00"

    def test_encoded_len_includes_prefix(self):
        field = RepeatedOpenEnumField(TrafficLight, [Unknown(-1), TrafficLight.YELLOW])
        assert field.encoded_len() == 1 + 10 + 1
        assert field.encoded_len() == len(_encode(field))

    def test_empty_is_default(self):
        field = RepeatedOpenEnumField(TrafficLight)
        assert field.is_default()
        assert len(field) == 0


class TestMergeField:
    def test_packed_round_trip_keeps_order_and_unknowns(self):
        original = RepeatedOpenEnumField(TrafficLight, [Unknown(7), TrafficLight.YELLOW, Unknown(-2)])
        decoded = RepeatedOpenEnumField(TrafficLight)
        decoded.merge_field(2, WireType.LENGTH_DELIMITED, ReadBuffer(_encode(original)), DecodeContext())

        assert decoded.values == [Unknown(7), Known(TrafficLight.YELLOW), Unknown(-2)]
        assert decoded == original

    def test_unpacked_occurrences_append(self):
        field = RepeatedOpenEnumField(TrafficLight)
        buf = ReadBuffer(b"\x02\x2a")
        ctx = DecodeContext()
        field.merge_field(2, WireType.VARINT, buf, ctx)
        field.merge_field(2, WireType.VARINT, buf, ctx)
        assert field.values == [Known(TrafficLight.GREEN), Unknown(42)]

    def test_packed_and_unpacked_mix(self):
        field = RepeatedOpenEnumField(TrafficLight, [TrafficLight.RED])
        ctx = DecodeContext()
        field.merge_field(2, WireType.LENGTH_DELIMITED, ReadBuffer(b"\x02\x01\x02"), ctx)
        field.merge_field(2, WireType.VARINT, ReadBuffer(b"\x05"), ctx)
        assert field.raw_values() == [0, 1, 2, 5]

    def test_packed_length_past_end_raises(self):
        field = RepeatedOpenEnumField(TrafficLight)
        with pytest.raises(DecodeError, match="buffer underflow"):
            field.merge_field(2, WireType.LENGTH_DELIMITED, ReadBuffer(b"\x05\x01"), DecodeContext())
        assert len(field) == 0

    def test_truncated_packed_value_leaves_field_unchanged(self):
        field = RepeatedOpenEnumField(TrafficLight, [TrafficLight.GREEN])
        with pytest.raises(DecodeError, match="invalid varint"):
            field.merge_field(2, WireType.LENGTH_DELIMITED, ReadBuffer(b"\x02\x01\x80"), DecodeContext())
        assert field.values == [Known(TrafficLight.GREEN)]

    def test_fixed_width_wire_type_rejected(self):
        field = RepeatedOpenEnumField(TrafficLight)
        with pytest.raises(DecodeError, match="invalid wire type: THIRTY_TWO_BIT"):
            field.merge_field(2, WireType.THIRTY_TWO_BIT, ReadBuffer(b"\x00\x00\x00\x00"), DecodeContext())


class TestMutation:
    def test_append_and_extend_wrap_members(self):
        field = RepeatedOpenEnumField(TrafficLight)
        field.append(TrafficLight.GREEN)
        field.extend([Unknown(3), TrafficLight.RED])
        assert list(field) == [Known(TrafficLight.GREEN), Unknown(3), Known(TrafficLight.RED)]

    def test_bare_ints_go_through_from_raw(self):
        field = RepeatedOpenEnumField(TrafficLight, [1, 9])
        field.append(0)
        assert list(field) == [Known(TrafficLight.YELLOW), Unknown(9), Known(TrafficLight.RED)]

    def test_foreign_member_rejected(self):
        with pytest.raises(TypeError, match="expected a TrafficLight member"):
            RepeatedOpenEnumField(TrafficLight, [Priority.LOW])

    def test_rejected_extend_leaves_field_unchanged(self):
        field = RepeatedOpenEnumField(TrafficLight, [TrafficLight.GREEN])
        with pytest.raises(TypeError, match="expected a TrafficLight member"):
            field.extend([TrafficLight.RED, Known(Priority.HIGH)])
        assert field.values == [Known(TrafficLight.GREEN)]

    def test_values_is_a_copy(self):
        field = RepeatedOpenEnumField(TrafficLight, [TrafficLight.GREEN])
        field.values.append(Unknown(1))
        assert len(field) == 1

    def test_clear_empties(self):
        field = RepeatedOpenEnumField(TrafficLight, [TrafficLight.GREEN, Unknown(9)])
        field.clear()
        assert field.is_default()
        field.clear()
        assert field.values == []
