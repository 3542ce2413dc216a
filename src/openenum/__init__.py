from openenum.field import OpenEnumField, RepeatedOpenEnumField
from openenum.value import Known, OpenEnum, Unknown, UnknownEnumValueError, default, from_raw

__all__ = [
    "Known",
    "OpenEnum",
    "OpenEnumField",
    "RepeatedOpenEnumField",
    "Unknown",
    "UnknownEnumValueError",
    "default",
    "from_raw",
]
