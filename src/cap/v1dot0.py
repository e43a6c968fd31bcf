"""
CAP v1.0 data model

Reference: http://www.oasis-open.org/committees/download.php/6334/oasis-200402-cap-core-1.0.pdf

Namespace: http://www.incident.com/cap/1.0

CAP 1.0 predates the OASIS namespace and differs from later versions:
- <alert> carries an optional <password>, and its elements are ordered
  differently (source before sent, msgType after code)
- <eventCode>, <parameter> and <geocode> are "key=value" strings
- there is no <responseType>, no <derefUri>, no Draft status, no CBRNE
  category, and certainty uses "Very Likely" where later versions use
  Observed
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from . import codec, fields
from .codec import EnumKind, ModelKind, Tag
from .constants import NS_V1DOT0
from .digest import Sha1Digest
from .errors import ModelError
from .geo import Circle, Polygon
from .identifier import Id
from .items import Items
from .language import Language
from .multimap import StringMap
from .references import References
from .timestamp import DateTime

NAMESPACE = NS_V1DOT0


class Status(Enum):
    ACTUAL = 'Actual'
    EXERCISE = 'Exercise'
    SYSTEM = 'System'
    TEST = 'Test'


class MsgType(Enum):
    ALERT = 'Alert'
    UPDATE = 'Update'
    CANCEL = 'Cancel'
    ACK = 'Ack'
    ERROR = 'Error'


class Scope(Enum):
    PUBLIC = 'Public'
    RESTRICTED = 'Restricted'
    PRIVATE = 'Private'


class Category(Enum):
    GEO = 'Geo'
    MET = 'Met'
    SAFETY = 'Safety'
    SECURITY = 'Security'
    RESCUE = 'Rescue'
    FIRE = 'Fire'
    HEALTH = 'Health'
    ENV = 'Env'
    TRANSPORT = 'Transport'
    INFRA = 'Infra'
    OTHER = 'Other'


class Urgency(Enum):
    IMMEDIATE = 'Immediate'
    EXPECTED = 'Expected'
    FUTURE = 'Future'
    PAST = 'Past'
    UNKNOWN = 'Unknown'

    @property
    def description(self) -> str:
        return URGENCY_DESCRIPTIONS[self]


class Severity(Enum):
    EXTREME = 'Extreme'
    SEVERE = 'Severe'
    MODERATE = 'Moderate'
    MINOR = 'Minor'
    UNKNOWN = 'Unknown'

    @property
    def description(self) -> str:
        return SEVERITY_DESCRIPTIONS[self]


class Certainty(Enum):
    VERY_LIKELY = 'Very Likely'
    LIKELY = 'Likely'
    POSSIBLE = 'Possible'
    UNLIKELY = 'Unlikely'
    UNKNOWN = 'Unknown'

    @property
    def description(self) -> str:
        return CERTAINTY_DESCRIPTIONS[self]


URGENCY_DESCRIPTIONS = {
    Urgency.IMMEDIATE: 'Responsive action should be taken immediately',
    Urgency.EXPECTED: 'Responsive action should be taken soon (within next hour)',
    Urgency.FUTURE: 'Responsive action should be taken in the near future',
    Urgency.PAST: 'Responsive action is no longer required',
    Urgency.UNKNOWN: 'Urgency not known',
}

SEVERITY_DESCRIPTIONS = {
    Severity.EXTREME: 'Extraordinary threat to life or property',
    Severity.SEVERE: 'Significant threat to life or property',
    Severity.MODERATE: 'Possible threat to life or property',
    Severity.MINOR: 'Minimal threat to life or property',
    Severity.UNKNOWN: 'Severity unknown',
}

CERTAINTY_DESCRIPTIONS = {
    Certainty.VERY_LIKELY: 'Highly likely (p > ~ 85%) or certain',
    Certainty.LIKELY: 'Likely (p > ~50%)',
    Certainty.POSSIBLE: 'Possible but not likely (p <= ~50%)',
    Certainty.UNLIKELY: 'Not expected to occur (p ~ 0)',
    Certainty.UNKNOWN: 'Certainty unknown',
}


@dataclass(frozen=True)
class Area:
    area_desc: str
    polygons: Tuple[Polygon, ...] = ()
    circles: Tuple[Circle, ...] = ()
    geocodes: StringMap = field(default_factory=StringMap)
    altitude: Optional[float] = None
    ceiling: Optional[float] = None

    ELEMENT = 'area'
    TAGS = (
        Tag('area_desc', 'areaDesc', codec.TEXT, required=True),
        Tag('polygons', 'polygon', codec.POLYGON, repeated=True),
        Tag('circles', 'circle', codec.CIRCLE, repeated=True),
        Tag('geocodes', 'geocode', codec.STRING_MAP),
        Tag('altitude', 'altitude', codec.DECIMAL),
        Tag('ceiling', 'ceiling', codec.DECIMAL),
    )

    def __post_init__(self):
        fields.coerce(self, 'area_desc', fields.text)
        fields.coerce(self, 'polygons', fields.tuple_of(fields.polygon))
        fields.coerce(self, 'circles', fields.tuple_of(fields.circle))
        fields.coerce(self, 'geocodes', fields.map_of(StringMap))
        fields.coerce(self, 'altitude', fields.decimal, optional=True)
        fields.coerce(self, 'ceiling', fields.decimal, optional=True)
        if self.ceiling is not None and self.altitude is None:
            raise ModelError("Area.ceiling must not be specified without altitude")


@dataclass(frozen=True)
class Resource:
    """
    Supplemental file attached to an info block.

    CAP 1.0 can only reference content by uri; there is no embedded content.
    """
    resource_desc: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    uri: Optional[str] = None
    digest: Optional[Sha1Digest] = None

    ELEMENT = 'resource'
    TAGS = (
        Tag('resource_desc', 'resourceDesc', codec.TEXT, required=True),
        Tag('mime_type', 'mimeType', codec.TEXT),
        Tag('size', 'size', codec.UNSIGNED),
        Tag('uri', 'uri', codec.URL),
        Tag('digest', 'digest', codec.DIGEST),
    )

    def __post_init__(self):
        fields.coerce(self, 'resource_desc', fields.text)
        fields.coerce(self, 'mime_type', fields.text, optional=True)
        fields.coerce(self, 'size', fields.size, optional=True)
        fields.coerce(self, 'uri', fields.url, optional=True)
        fields.coerce(self, 'digest', fields.digest, optional=True)


@dataclass(frozen=True)
class Info:
    """Alert information block (language-specific)."""
    event: str
    urgency: Urgency
    severity: Severity
    certainty: Certainty
    language: Language = field(default_factory=Language)
    categories: Tuple[Category, ...] = ()
    audience: Optional[str] = None
    event_codes: StringMap = field(default_factory=StringMap)
    effective: Optional[DateTime] = None
    onset: Optional[DateTime] = None
    expires: Optional[DateTime] = None
    sender_name: Optional[str] = None
    headline: Optional[str] = None
    description: Optional[str] = None
    instruction: Optional[str] = None
    web: Optional[str] = None
    contact: Optional[str] = None
    parameters: StringMap = field(default_factory=StringMap)
    resources: Tuple[Resource, ...] = ()
    areas: Tuple[Area, ...] = ()

    ELEMENT = 'info'
    TAGS = (
        Tag('language', 'language', codec.LANGUAGE),
        Tag('categories', 'category', EnumKind(Category), repeated=True),
        Tag('event', 'event', codec.TEXT, required=True),
        Tag('urgency', 'urgency', EnumKind(Urgency), required=True),
        Tag('severity', 'severity', EnumKind(Severity), required=True),
        Tag('certainty', 'certainty', EnumKind(Certainty), required=True),
        Tag('audience', 'audience', codec.TEXT),
        Tag('event_codes', 'eventCode', codec.STRING_MAP),
        Tag('effective', 'effective', codec.DATETIME),
        Tag('onset', 'onset', codec.DATETIME),
        Tag('expires', 'expires', codec.DATETIME),
        Tag('sender_name', 'senderName', codec.TEXT),
        Tag('headline', 'headline', codec.TEXT),
        Tag('description', 'description', codec.TEXT),
        Tag('instruction', 'instruction', codec.TEXT),
        Tag('web', 'web', codec.URL),
        Tag('contact', 'contact', codec.TEXT),
        Tag('parameters', 'parameter', codec.STRING_MAP),
        Tag('resources', 'resource', ModelKind(Resource), repeated=True),
        Tag('areas', 'area', ModelKind(Area), repeated=True),
    )

    def __post_init__(self):
        fields.coerce(self, 'event', fields.text)
        fields.coerce(self, 'urgency', fields.enum_of(Urgency))
        fields.coerce(self, 'severity', fields.enum_of(Severity))
        fields.coerce(self, 'certainty', fields.enum_of(Certainty))
        fields.coerce(self, 'language', fields.language)
        fields.coerce(self, 'categories', fields.tuple_of(fields.enum_of(Category)))
        fields.coerce(self, 'event_codes', fields.map_of(StringMap))
        for name in ('effective', 'onset', 'expires'):
            fields.coerce(self, name, fields.timestamp, optional=True)
        for name in ('audience', 'sender_name', 'headline', 'description',
                     'instruction', 'contact'):
            fields.coerce(self, name, fields.text, optional=True)
        fields.coerce(self, 'web', fields.url, optional=True)
        fields.coerce(self, 'parameters', fields.map_of(StringMap))
        fields.coerce(self, 'resources', fields.tuple_of(fields.instance_of(Resource)))
        fields.coerce(self, 'areas', fields.tuple_of(fields.instance_of(Area)))


@dataclass(frozen=True)
class Alert:
    """
    A CAP v1.0 alert message.

    password is carried as-is; CAP 1.1 dropped it and upgrading discards it.
    """
    identifier: Id
    sender: Id
    sent: DateTime
    status: Status
    msg_type: MsgType
    scope: Scope
    password: Optional[str] = None
    source: Optional[str] = None
    restriction: Optional[str] = None
    addresses: Optional[Items] = None
    codes: Tuple[str, ...] = ()
    note: Optional[str] = None
    references: Optional[References] = None
    incidents: Optional[Items] = None
    info: Tuple[Info, ...] = ()

    ELEMENT = 'alert'
    TAGS = (
        Tag('identifier', 'identifier', codec.ID, required=True),
        Tag('sender', 'sender', codec.ID, required=True),
        Tag('password', 'password', codec.TEXT),
        Tag('source', 'source', codec.TEXT),
        Tag('sent', 'sent', codec.DATETIME, required=True),
        Tag('status', 'status', EnumKind(Status), required=True),
        Tag('scope', 'scope', EnumKind(Scope), required=True),
        Tag('restriction', 'restriction', codec.TEXT),
        Tag('addresses', 'addresses', codec.ITEMS),
        Tag('codes', 'code', codec.TEXT, repeated=True),
        Tag('msg_type', 'msgType', EnumKind(MsgType), required=True),
        Tag('note', 'note', codec.TEXT),
        Tag('references', 'references', codec.REFERENCES),
        Tag('incidents', 'incidents', codec.ITEMS),
        Tag('info', 'info', ModelKind(Info), repeated=True),
    )

    def __post_init__(self):
        fields.coerce(self, 'identifier', fields.identifier)
        fields.coerce(self, 'sender', fields.identifier)
        fields.coerce(self, 'sent', fields.timestamp)
        fields.coerce(self, 'status', fields.enum_of(Status))
        fields.coerce(self, 'msg_type', fields.enum_of(MsgType))
        fields.coerce(self, 'scope', fields.enum_of(Scope))
        for name in ('password', 'source', 'restriction', 'note'):
            fields.coerce(self, name, fields.text, optional=True)
        fields.coerce(self, 'addresses', fields.items, optional=True)
        fields.coerce(self, 'codes', fields.tuple_of(fields.text))
        fields.coerce(self, 'references', fields.references, optional=True)
        fields.coerce(self, 'incidents', fields.items, optional=True)
        fields.coerce(self, 'info', fields.tuple_of(fields.instance_of(Info)))

    @property
    def is_actual(self) -> bool:
        return self.status == Status.ACTUAL

    @property
    def primary_info(self) -> Optional[Info]:
        return self.info[0] if self.info else None

    @property
    def languages(self) -> List[str]:
        return [str(info.language) for info in self.info]

    @classmethod
    def from_xml(cls, xml: Union[str, bytes]) -> 'Alert':
        """Parse a CAP v1.0 alert; see codec.from_xml for errors."""
        return codec.from_xml(cls, xml, NAMESPACE)

    def to_xml(self) -> str:
        return codec.to_xml(self, NAMESPACE)

    def __str__(self) -> str:
        return self.to_xml()
