"""
Integer enum mappings between protobuf messages and CAP models

Members are paired by name. The protobuf schema prefixes its "Unknown"
values (UNKNOWN_URGENCY, ...) and has one certainty scale for every CAP
version, so a few names are aliased per version:

    protobuf          CAP 1.0        CAP 1.1 / 1.2
    OBSERVED          -              OBSERVED
    VERY_LIKELY       VERY_LIKELY    LIKELY
    UNKNOWN_*         UNKNOWN        UNKNOWN

A protobuf member with no CAP counterpart (DRAFT or CBRNE in 1.0, AVOID in
1.1, ...) is unrepresentable in that version.
"""

from enum import Enum, IntEnum
from typing import Dict, Optional, Type

from .. import v1dot0, v1dot1, v1dot2
from ..errors import InvalidEnumValueError, UnrepresentableValueError
from . import messages as pb

UNKNOWN_ALIASES = {
    'UNKNOWN_URGENCY': 'UNKNOWN',
    'UNKNOWN_SEVERITY': 'UNKNOWN',
    'UNKNOWN_CERTAINTY': 'UNKNOWN',
}


class EnumMapping:
    """
    Pairs a protobuf IntEnum with a CAP Enum.

    cap_enum may be None for a field the CAP version lacks entirely, in which
    case every valid value is unrepresentable.
    """

    def __init__(self, binary_enum: Type[IntEnum], cap_enum: Optional[Type[Enum]],
                 aliases: Optional[Dict[str, str]] = None):
        self.binary_enum = binary_enum
        self.cap_enum = cap_enum
        self._decode = {}
        self._encode = {}

        aliases = dict(UNKNOWN_ALIASES, **(aliases or {}))
        for member in binary_enum:
            name = aliases.get(member.name, member.name)
            if cap_enum is None or name not in cap_enum.__members__:
                continue
            target = cap_enum[name]
            self._decode[member] = target
            # an exact name match wins over an alias when encoding
            if name == member.name:
                self._encode[target] = member
            else:
                self._encode.setdefault(target, member)

    def decode(self, message: str, field: str, value: int) -> Enum:
        """
        Map a protobuf integer to a CAP member.

        Raises:
            InvalidEnumValueError: If value is not in the protobuf enum
            UnrepresentableValueError: If the CAP version has no equivalent
        """
        try:
            member = self.binary_enum(value)
        except ValueError:
            raise InvalidEnumValueError(message, field, value) from None
        try:
            return self._decode[member]
        except KeyError:
            raise UnrepresentableValueError(message, field, member) from None

    def encode(self, member: Enum) -> int:
        return int(self._encode[member])


class VersionMappings:
    """All enum mappings for one CAP version."""

    def __init__(self, module, certainty_aliases: Dict[str, str]):
        self.status = EnumMapping(pb.Status, module.Status)
        self.msg_type = EnumMapping(pb.MsgType, module.MsgType)
        self.scope = EnumMapping(pb.Scope, module.Scope)
        self.category = EnumMapping(pb.Category, module.Category)
        self.urgency = EnumMapping(pb.Urgency, module.Urgency)
        self.severity = EnumMapping(pb.Severity, module.Severity)
        self.certainty = EnumMapping(pb.Certainty, module.Certainty, certainty_aliases)
        self.response_type = EnumMapping(pb.ResponseType, getattr(module, 'ResponseType', None))


V1DOT0 = VersionMappings(v1dot0, {})
V1DOT1 = VersionMappings(v1dot1, {'VERY_LIKELY': 'LIKELY'})
V1DOT2 = VersionMappings(v1dot2, {'VERY_LIKELY': 'LIKELY'})
