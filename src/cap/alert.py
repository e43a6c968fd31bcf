"""
Version-independent CAP alerts

Alert wraps exactly one of v1dot0.Alert, v1dot1.Alert or v1dot2.Alert and
dispatches on the XML namespace when parsing:

    alert = parse_alert(xml)
    alert.version          # Version.V1DOT1
    alert.identifier       # same accessor for every version
    alert.into_latest()    # v1dot2.Alert
"""

import logging
from enum import Enum
from typing import Protocol, Union

from . import codec, v1dot0, v1dot1, v1dot2
from .constants import NS_V1DOT0, NS_V1DOT1, NS_V1DOT2
from .errors import UnknownNamespaceError
from .identifier import Id
from .timestamp import DateTime
from .upgrade import upgrade_to_latest

logger = logging.getLogger(__name__)

AnyAlert = Union[v1dot0.Alert, v1dot1.Alert, v1dot2.Alert]


class Version(Enum):
    """CAP versions, oldest first."""
    V1DOT0 = '1.0'
    V1DOT1 = '1.1'
    V1DOT2 = '1.2'

    @property
    def namespace(self) -> str:
        return _NAMESPACES[self]

    @property
    def module(self):
        """The model module for this version."""
        return _MODULES[self]

    @classmethod
    def from_namespace(cls, namespace: str) -> 'Version':
        """
        Raises:
            UnknownNamespaceError: If namespace is not a CAP namespace
        """
        for version, ns in _NAMESPACES.items():
            if ns == namespace:
                return version
        raise UnknownNamespaceError(namespace)

    @classmethod
    def of(cls, alert: AnyAlert) -> 'Version':
        for version, module in _MODULES.items():
            if type(alert) is module.Alert:
                return version
        raise TypeError(f"Expected a CAP alert, got {type(alert).__name__}")


_NAMESPACES = {
    Version.V1DOT0: NS_V1DOT0,
    Version.V1DOT1: NS_V1DOT1,
    Version.V1DOT2: NS_V1DOT2,
}

_MODULES = {
    Version.V1DOT0: v1dot0,
    Version.V1DOT1: v1dot1,
    Version.V1DOT2: v1dot2,
}


class AlertHeader(Protocol):
    """What every version's alert has in common."""
    identifier: Id
    sender: Id
    sent: DateTime


class Alert:
    """
    A CAP alert of any supported version.

    Equality compares the wrapped alert, so alerts of different versions are
    never equal even if they carry the same content.
    """

    __slots__ = ('_inner',)

    def __init__(self, inner: AnyAlert):
        Version.of(inner)
        self._inner = inner

    @classmethod
    def parse(cls, xml: Union[str, bytes]) -> 'Alert':
        """
        Parse a CAP alert, detecting its version from the root namespace.

        Raises:
            UnknownNamespaceError: If the namespace is not a CAP namespace
            XMLFormatError: If the XML is malformed or fails validation
        """
        root = codec.parse_document(xml)
        version = Version.from_namespace(codec.root_namespace(root))
        logger.debug("Parsing CAP %s alert", version.value)
        module = version.module
        return cls(codec.decode(module.Alert, root, module.NAMESPACE))

    @property
    def inner(self) -> AnyAlert:
        """The wrapped version-specific alert."""
        return self._inner

    @property
    def version(self) -> Version:
        return Version.of(self._inner)

    @property
    def xml_namespace(self) -> str:
        return self.version.namespace

    @property
    def identifier(self) -> Id:
        return self._inner.identifier

    @property
    def sender(self) -> Id:
        return self._inner.sender

    @property
    def sent(self) -> DateTime:
        return self._inner.sent

    def into_latest(self) -> v1dot2.Alert:
        """Upgrade to CAP 1.2. Never fails."""
        return upgrade_to_latest(self._inner)

    def to_xml(self) -> str:
        return self._inner.to_xml()

    def __str__(self) -> str:
        return self.to_xml()

    def __repr__(self) -> str:
        return f"Alert({self._inner!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Alert):
            return self._inner == other._inner
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._inner)


def parse_alert(xml: Union[str, bytes]) -> Alert:
    """Parse a CAP alert of any version; see Alert.parse."""
    return Alert.parse(xml)


def parse_alert_file(filepath: str) -> Alert:
    """Parse a CAP alert from a file."""
    with open(filepath, 'rb') as f:
        return Alert.parse(f.read())
