"""
CAP v1.1 data model

Reference: http://docs.oasis-open.org/emergency/cap/v1.1/CAP-v1.1.html

Namespace: urn:oasis:names:tc:emergency:cap:1.1

Differences from v1.0:
- <alert><password> is removed
- <info><responseType> is added
- <resource><derefUri> carries base64 embedded content
- <eventCode>, <parameter> and <geocode> use <valueName>/<value> pairs
- Status gains Draft, Category gains CBRNE
- Certainty "Very Likely" is replaced by Observed (still accepted as Likely)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from . import codec, fields
from .codec import EnumKind, ModelKind, Tag
from .constants import NS_V1DOT1
from .digest import Sha1Digest
from .embedded import EmbeddedContent
from .errors import ModelError
from .geo import Circle, Polygon
from .identifier import Id
from .items import Items
from .language import Language
from .multimap import Map
from .references import References
from .timestamp import DateTime

NAMESPACE = NS_V1DOT1


class Status(Enum):
    ACTUAL = 'Actual'
    EXERCISE = 'Exercise'
    SYSTEM = 'System'
    TEST = 'Test'
    DRAFT = 'Draft'


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
    CBRNE = 'CBRNE'
    OTHER = 'Other'


class ResponseType(Enum):
    SHELTER = 'Shelter'
    EVACUATE = 'Evacuate'
    PREPARE = 'Prepare'
    EXECUTE = 'Execute'
    MONITOR = 'Monitor'
    ASSESS = 'Assess'
    NONE = 'None'


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
    OBSERVED = 'Observed'
    LIKELY = 'Likely'
    POSSIBLE = 'Possible'
    UNLIKELY = 'Unlikely'
    UNKNOWN = 'Unknown'

    @classmethod
    def _missing_(cls, value):
        # "Very Likely" was deprecated in 1.1 and means Likely
        if value == 'Very Likely':
            return cls.LIKELY
        return None

    @property
    def description(self) -> str:
        return CERTAINTY_DESCRIPTIONS[self]


URGENCY_DESCRIPTIONS = {
    Urgency.IMMEDIATE: 'Responsive action SHOULD be taken immediately',
    Urgency.EXPECTED: 'Responsive action SHOULD be taken soon (within next hour)',
    Urgency.FUTURE: 'Responsive action SHOULD be taken in the near future',
    Urgency.PAST: 'Responsive action is no longer required',
    Urgency.UNKNOWN: 'Urgency not known',
}

SEVERITY_DESCRIPTIONS = {
    Severity.EXTREME: 'Extraordinary threat to life or property',
    Severity.SEVERE: 'Significant threat to life or property',
    Severity.MODERATE: 'Possible threat to life or property',
    Severity.MINOR: 'Minimal to no known threat to life or property',
    Severity.UNKNOWN: 'Severity unknown',
}

CERTAINTY_DESCRIPTIONS = {
    Certainty.OBSERVED: 'Determined to have occurred or to be ongoing',
    Certainty.LIKELY: 'Likely (p > ~50%)',
    Certainty.POSSIBLE: 'Possible but not likely (p <= ~50%)',
    Certainty.UNLIKELY: 'Not expected to occur (p ~ 0)',
    Certainty.UNKNOWN: 'Certainty unknown',
}


@dataclass(frozen=True)
class Area:
    """Geographic area affected by an info block."""
    area_desc: str
    polygons: Tuple[Polygon, ...] = ()
    circles: Tuple[Circle, ...] = ()
    geocodes: Map = field(default_factory=Map)
    altitude: Optional[float] = None
    ceiling: Optional[float] = None

    ELEMENT = 'area'
    TAGS = (
        Tag('area_desc', 'areaDesc', codec.TEXT, required=True),
        Tag('polygons', 'polygon', codec.POLYGON, repeated=True),
        Tag('circles', 'circle', codec.CIRCLE, repeated=True),
        Tag('geocodes', 'geocode', codec.PAIR_MAP),
        Tag('altitude', 'altitude', codec.DECIMAL),
        Tag('ceiling', 'ceiling', codec.DECIMAL),
    )

    def __post_init__(self):
        fields.coerce(self, 'area_desc', fields.text)
        fields.coerce(self, 'polygons', fields.tuple_of(fields.polygon))
        fields.coerce(self, 'circles', fields.tuple_of(fields.circle))
        fields.coerce(self, 'geocodes', fields.map_of(Map))
        fields.coerce(self, 'altitude', fields.decimal, optional=True)
        fields.coerce(self, 'ceiling', fields.decimal, optional=True)
        if self.ceiling is not None and self.altitude is None:
            raise ModelError("Area.ceiling must not be specified without altitude")


@dataclass(frozen=True)
class Resource:
    """Supplemental file; embedded_content is the decoded <derefUri>."""
    resource_desc: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    uri: Optional[str] = None
    embedded_content: Optional[EmbeddedContent] = None
    digest: Optional[Sha1Digest] = None

    ELEMENT = 'resource'
    TAGS = (
        Tag('resource_desc', 'resourceDesc', codec.TEXT, required=True),
        Tag('mime_type', 'mimeType', codec.TEXT),
        Tag('size', 'size', codec.UNSIGNED),
        Tag('uri', 'uri', codec.URL),
        Tag('embedded_content', 'derefUri', codec.EMBEDDED),
        Tag('digest', 'digest', codec.DIGEST),
    )

    def __post_init__(self):
        fields.coerce(self, 'resource_desc', fields.text)
        fields.coerce(self, 'mime_type', fields.text, optional=True)
        fields.coerce(self, 'size', fields.size, optional=True)
        fields.coerce(self, 'uri', fields.url, optional=True)
        fields.coerce(self, 'embedded_content', fields.embedded, optional=True)
        fields.coerce(self, 'digest', fields.digest, optional=True)

    def verify_digest(self) -> bool:
        """True if the embedded content is present and matches digest."""
        if self.digest is None or self.embedded_content is None:
            return False
        return Sha1Digest.of(self.embedded_content.data) == self.digest


@dataclass(frozen=True)
class Info:
    """Alert information block (language-specific)."""
    event: str
    urgency: Urgency
    severity: Severity
    certainty: Certainty
    language: Language = field(default_factory=Language)
    categories: Tuple[Category, ...] = ()
    response_types: Tuple[ResponseType, ...] = ()
    audience: Optional[str] = None
    event_codes: Map = field(default_factory=Map)
    effective: Optional[DateTime] = None
    onset: Optional[DateTime] = None
    expires: Optional[DateTime] = None
    sender_name: Optional[str] = None
    headline: Optional[str] = None
    description: Optional[str] = None
    instruction: Optional[str] = None
    web: Optional[str] = None
    contact: Optional[str] = None
    parameters: Map = field(default_factory=Map)
    resources: Tuple[Resource, ...] = ()
    areas: Tuple[Area, ...] = ()

    ELEMENT = 'info'
    TAGS = (
        Tag('language', 'language', codec.LANGUAGE),
        Tag('categories', 'category', EnumKind(Category), repeated=True),
        Tag('event', 'event', codec.TEXT, required=True),
        Tag('response_types', 'responseType', EnumKind(ResponseType), repeated=True),
        Tag('urgency', 'urgency', EnumKind(Urgency), required=True),
        Tag('severity', 'severity', EnumKind(Severity), required=True),
        Tag('certainty', 'certainty', EnumKind(Certainty), required=True),
        Tag('audience', 'audience', codec.TEXT),
        Tag('event_codes', 'eventCode', codec.PAIR_MAP),
        Tag('effective', 'effective', codec.DATETIME),
        Tag('onset', 'onset', codec.DATETIME),
        Tag('expires', 'expires', codec.DATETIME),
        Tag('sender_name', 'senderName', codec.TEXT),
        Tag('headline', 'headline', codec.TEXT),
        Tag('description', 'description', codec.TEXT),
        Tag('instruction', 'instruction', codec.TEXT),
        Tag('web', 'web', codec.URL),
        Tag('contact', 'contact', codec.TEXT),
        Tag('parameters', 'parameter', codec.PAIR_MAP),
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
        fields.coerce(self, 'response_types', fields.tuple_of(fields.enum_of(ResponseType)))
        fields.coerce(self, 'event_codes', fields.map_of(Map))
        for name in ('effective', 'onset', 'expires'):
            fields.coerce(self, name, fields.timestamp, optional=True)
        for name in ('audience', 'sender_name', 'headline', 'description',
                     'instruction', 'contact'):
            fields.coerce(self, name, fields.text, optional=True)
        fields.coerce(self, 'web', fields.url, optional=True)
        fields.coerce(self, 'parameters', fields.map_of(Map))
        fields.coerce(self, 'resources', fields.tuple_of(fields.instance_of(Resource)))
        fields.coerce(self, 'areas', fields.tuple_of(fields.instance_of(Area)))


@dataclass(frozen=True)
class Alert:
    """A CAP v1.1 alert message."""
    identifier: Id
    sender: Id
    sent: DateTime
    status: Status
    msg_type: MsgType
    scope: Scope
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
        Tag('sent', 'sent', codec.DATETIME, required=True),
        Tag('status', 'status', EnumKind(Status), required=True),
        Tag('msg_type', 'msgType', EnumKind(MsgType), required=True),
        Tag('source', 'source', codec.TEXT),
        Tag('scope', 'scope', EnumKind(Scope), required=True),
        Tag('restriction', 'restriction', codec.TEXT),
        Tag('addresses', 'addresses', codec.ITEMS),
        Tag('codes', 'code', codec.TEXT, repeated=True),
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
        for name in ('source', 'restriction', 'note'):
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
        """Get primary (first) info block."""
        return self.info[0] if self.info else None

    @property
    def languages(self) -> List[str]:
        return [str(info.language) for info in self.info]

    @classmethod
    def from_xml(cls, xml: Union[str, bytes]) -> 'Alert':
        """
        Parse a CAP v1.1 alert.

        Raises:
            XMLFormatError: If the XML is malformed or fails validation
            UnknownNamespaceError: If the alert is not CAP v1.1
        """
        return codec.from_xml(cls, xml, NAMESPACE)

    def to_xml(self) -> str:
        return codec.to_xml(self, NAMESPACE)

    def __str__(self) -> str:
        return self.to_xml()
