"""
Google CAP protocol buffer message shapes

Mirrors the messages of Google's cap.proto (publicalerts) as plain
dataclasses. Enum fields hold plain integers; use the IntEnums below to name
them. Field names follow the .proto file, so repeated fields are singular
(Info.category, Info.area, ...).

Messages are permissive: any string is accepted where CAP requires a
timestamp or identifier. See convert.py for the checked conversion into CAP
models.
"""

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class Status(IntEnum):
    ACTUAL = 0
    EXERCISE = 1
    SYSTEM = 2
    TEST = 3
    DRAFT = 4


class MsgType(IntEnum):
    ALERT = 0
    UPDATE = 1
    CANCEL = 2
    ACK = 3
    ERROR = 4


class Scope(IntEnum):
    PUBLIC = 0
    RESTRICTED = 1
    PRIVATE = 2


class Category(IntEnum):
    GEO = 0
    MET = 1
    SAFETY = 2
    SECURITY = 3
    RESCUE = 4
    FIRE = 5
    HEALTH = 6
    ENV = 7
    TRANSPORT = 8
    INFRA = 9
    CBRNE = 10
    OTHER = 11


class ResponseType(IntEnum):
    SHELTER = 0
    EVACUATE = 1
    PREPARE = 2
    EXECUTE = 3
    AVOID = 4
    MONITOR = 5
    ASSESS = 6
    ALL_CLEAR = 7
    NONE = 8


class Urgency(IntEnum):
    IMMEDIATE = 0
    EXPECTED = 1
    FUTURE = 2
    PAST = 3
    UNKNOWN_URGENCY = 4


class Severity(IntEnum):
    EXTREME = 0
    SEVERE = 1
    MODERATE = 2
    MINOR = 3
    UNKNOWN_SEVERITY = 4


class Certainty(IntEnum):
    OBSERVED = 0
    VERY_LIKELY = 1
    LIKELY = 2
    POSSIBLE = 3
    UNLIKELY = 4
    UNKNOWN_CERTAINTY = 5


@dataclass
class Group:
    """A list of strings (addresses, references, incidents)."""
    value: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Group':
        return cls(value=list(data.get('value', [])))


@dataclass
class ValuePair:
    value_name: str = ''
    value: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ValuePair':
        return cls(value_name=data.get('value_name', ''), value=data.get('value', ''))


@dataclass
class Point:
    latitude: float = 0.0
    longitude: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Point':
        return cls(latitude=float(data['latitude']), longitude=float(data['longitude']))


@dataclass
class Polygon:
    point: List[Point] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Polygon':
        return cls(point=[Point.from_dict(p) for p in data.get('point', [])])


@dataclass
class Circle:
    point: Point = field(default_factory=Point)
    radius: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Circle':
        return cls(point=Point.from_dict(data['point']), radius=float(data['radius']))


@dataclass
class Area:
    area_desc: str = ''
    polygon: List[Polygon] = field(default_factory=list)
    circle: List[Circle] = field(default_factory=list)
    geocode: List[ValuePair] = field(default_factory=list)
    altitude: Optional[float] = None
    ceiling: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Area':
        return cls(
            area_desc=data.get('area_desc', ''),
            polygon=[Polygon.from_dict(p) for p in data.get('polygon', [])],
            circle=[Circle.from_dict(c) for c in data.get('circle', [])],
            geocode=[ValuePair.from_dict(v) for v in data.get('geocode', [])],
            altitude=data.get('altitude'),
            ceiling=data.get('ceiling'),
        )


@dataclass
class Resource:
    """
    A resource.

    deref_uri holds base64 text, exactly as it appears in CAP XML.
    digest holds the SHA-1 as hex text.
    """
    resource_desc: str = ''
    mime_type: Optional[str] = None
    size: Optional[int] = None
    uri: Optional[str] = None
    deref_uri: Optional[str] = None
    digest: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Resource':
        return cls(
            resource_desc=data.get('resource_desc', ''),
            mime_type=data.get('mime_type'),
            size=data.get('size'),
            uri=data.get('uri'),
            deref_uri=data.get('deref_uri'),
            digest=data.get('digest'),
        )


@dataclass
class Info:
    language: Optional[str] = None
    category: List[int] = field(default_factory=list)
    event: str = ''
    response_type: List[int] = field(default_factory=list)
    urgency: int = 0
    severity: int = 0
    certainty: int = 0
    audience: Optional[str] = None
    event_code: List[ValuePair] = field(default_factory=list)
    effective: Optional[str] = None
    onset: Optional[str] = None
    expires: Optional[str] = None
    sender_name: Optional[str] = None
    headline: Optional[str] = None
    description: Optional[str] = None
    instruction: Optional[str] = None
    web: Optional[str] = None
    contact: Optional[str] = None
    parameter: List[ValuePair] = field(default_factory=list)
    resource: List[Resource] = field(default_factory=list)
    area: List[Area] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Info':
        simple = {
            name: data.get(name) for name in (
                'language', 'audience', 'effective', 'onset', 'expires', 'sender_name',
                'headline', 'description', 'instruction', 'web', 'contact',
            )
        }
        return cls(
            category=[int(c) for c in data.get('category', [])],
            event=data.get('event', ''),
            response_type=[int(r) for r in data.get('response_type', [])],
            urgency=int(data.get('urgency', 0)),
            severity=int(data.get('severity', 0)),
            certainty=int(data.get('certainty', 0)),
            event_code=[ValuePair.from_dict(v) for v in data.get('event_code', [])],
            parameter=[ValuePair.from_dict(v) for v in data.get('parameter', [])],
            resource=[Resource.from_dict(r) for r in data.get('resource', [])],
            area=[Area.from_dict(a) for a in data.get('area', [])],
            **simple,
        )


@dataclass
class Alert:
    """
    The top-level message.

    xmlns names the CAP version the message was produced from, and selects
    the CAP model it decodes into.
    """
    xmlns: str = ''
    identifier: str = ''
    sender: str = ''
    password: Optional[str] = None
    sent: str = ''
    status: int = 0
    msg_type: int = 0
    source: Optional[str] = None
    scope: Optional[int] = None
    restriction: Optional[str] = None
    addresses: Optional[Group] = None
    code: List[str] = field(default_factory=list)
    note: Optional[str] = None
    references: Optional[Group] = None
    incidents: Optional[Group] = None
    info: List[Info] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Alert':
        """Create from a dictionary produced by to_dict()."""
        def group(name):
            value = data.get(name)
            return Group.from_dict(value) if value is not None else None

        scope = data.get('scope')
        return cls(
            xmlns=data.get('xmlns', ''),
            identifier=data.get('identifier', ''),
            sender=data.get('sender', ''),
            password=data.get('password'),
            sent=data.get('sent', ''),
            status=int(data.get('status', 0)),
            msg_type=int(data.get('msg_type', 0)),
            source=data.get('source'),
            scope=int(scope) if scope is not None else None,
            restriction=data.get('restriction'),
            addresses=group('addresses'),
            code=list(data.get('code', [])),
            note=data.get('note'),
            references=group('references'),
            incidents=group('incidents'),
            info=[Info.from_dict(i) for i in data.get('info', [])],
        )
