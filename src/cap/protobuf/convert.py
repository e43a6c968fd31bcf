"""
Conversion between protobuf messages and CAP models

Encoding (CAP -> protobuf) always succeeds. Decoding (protobuf -> CAP) checks
every field the protobuf schema leaves unconstrained and raises a
ConversionError subclass naming the message and field that failed:

    InvalidEnumValueError       integer outside the protobuf enum
    UnrepresentableValueError   valid protobuf value the CAP version lacks
    MissingFieldError           scope is absent
    InvalidFieldValueError      timestamp, identifier, URL, size, ... invalid
    DerefUriPresentError        embedded content in a CAP 1.0 resource
    UnknownNamespaceError       xmlns is not a CAP namespace (decode_alert)
"""

import logging
import math
from typing import Any, Callable, List, Optional, Union

from .. import v1dot0, v1dot1, v1dot2
from ..alert import Alert, Version
from ..constants import DEFAULT_MIME_TYPE
from ..digest import Sha1Digest
from ..embedded import EmbeddedContent
from ..errors import (
    CAPError, DerefUriPresentError, InvalidFieldValueError, InvalidNumberError,
    MissingFieldError,
)
from ..geo import Circle, Point, Polygon
from ..identifier import Id
from ..items import Items
from ..language import Language
from ..multimap import Map, StringMap
from ..references import Reference, References
from ..text import check_text
from ..timestamp import DateTime
from ..url import parse_url
from . import enums
from . import messages as pb

logger = logging.getLogger(__name__)

# protobuf size is an int64
MAX_SIZE = 2 ** 63 - 1

AnyAlert = Union[v1dot0.Alert, v1dot1.Alert, v1dot2.Alert]

_MAPPINGS = {
    Version.V1DOT0: enums.V1DOT0,
    Version.V1DOT1: enums.V1DOT1,
    Version.V1DOT2: enums.V1DOT2,
}


def _check(message: str, field: str, parse: Callable[[Any], Any], value: Any) -> Any:
    """Run a scalar parser, reporting failures against message.field."""
    try:
        return parse(value)
    except CAPError as e:
        raise InvalidFieldValueError(message, field, value, e) from e


def _optional(message: str, field: str, parse: Callable[[Any], Any], value: Any) -> Any:
    if value is None:
        return None
    return _check(message, field, parse, value)


def _group(message: str, field: str, parse: Callable[[list], Any],
           group: Optional[pb.Group]) -> Any:
    if group is None:
        return None
    return _check(message, field, parse, list(group.value))


def _pairs(pairs: List[pb.ValuePair]):
    return [(pair.value_name, pair.value) for pair in pairs]


class _Decoder:
    """Decodes protobuf messages into the models of one CAP version."""

    def __init__(self, version: Version):
        self.version = version
        self.module = version.module
        self.enums = _MAPPINGS[version]

    def map(self, message: str, field: str, pairs: List[pb.ValuePair]) -> Map:
        map_cls = StringMap if self.version is Version.V1DOT0 else Map
        return _check(message, field, map_cls, _pairs(pairs))

    def point(self, message: str, field: str, point: pb.Point) -> Point:
        return _check(message, field, lambda p: Point(p.latitude, p.longitude), point)

    def polygon(self, polygon: pb.Polygon) -> Polygon:
        points = [self.point('Area', 'polygon', p) for p in polygon.point]
        return _check('Area', 'polygon', Polygon, points)

    def circle(self, circle: pb.Circle) -> Circle:
        center = self.point('Area', 'circle', circle.point)
        return _check('Area', 'circle', lambda r: Circle(center, r), circle.radius)

    def area(self, area: pb.Area):
        altitude = _optional('Area', 'altitude', _finite, area.altitude)
        ceiling = _optional('Area', 'ceiling', _finite, area.ceiling)
        if ceiling is not None and altitude is None:
            raise InvalidFieldValueError('Area', 'ceiling', ceiling, "ceiling without altitude")

        return self.module.Area(
            area_desc=_check('Area', 'area_desc', check_text, area.area_desc),
            polygons=[self.polygon(p) for p in area.polygon],
            circles=[self.circle(c) for c in area.circle],
            geocodes=self.map('Area', 'geocode', area.geocode),
            altitude=altitude,
            ceiling=ceiling,
        )

    def resource(self, resource: pb.Resource):
        if resource.size is not None and not 0 <= resource.size <= MAX_SIZE:
            raise InvalidFieldValueError('Resource', 'size', resource.size, "out of range")

        values = dict(
            resource_desc=_check('Resource', 'resource_desc', check_text, resource.resource_desc),
            mime_type=_optional('Resource', 'mime_type', check_text, resource.mime_type),
            size=resource.size,
            uri=_optional('Resource', 'uri', parse_url, resource.uri),
            digest=_optional('Resource', 'digest', Sha1Digest.parse, resource.digest),
        )

        if self.version is Version.V1DOT0:
            if resource.deref_uri is not None:
                raise DerefUriPresentError('Resource', 'deref_uri')
        else:
            values['embedded_content'] = _optional(
                'Resource', 'deref_uri', EmbeddedContent.parse, resource.deref_uri
            )

        if self.version is Version.V1DOT2 and values['mime_type'] is None:
            values['mime_type'] = DEFAULT_MIME_TYPE

        return self.module.Resource(**values)

    def info(self, info: pb.Info):
        values = dict(
            language=_check('Info', 'language', Language, info.language),
            categories=[self.enums.category.decode('Info', 'category', c) for c in info.category],
            event=_check('Info', 'event', check_text, info.event),
            urgency=self.enums.urgency.decode('Info', 'urgency', info.urgency),
            severity=self.enums.severity.decode('Info', 'severity', info.severity),
            certainty=self.enums.certainty.decode('Info', 'certainty', info.certainty),
            audience=_optional('Info', 'audience', check_text, info.audience),
            event_codes=self.map('Info', 'event_code', info.event_code),
            effective=_optional('Info', 'effective', DateTime.parse, info.effective),
            onset=_optional('Info', 'onset', DateTime.parse, info.onset),
            expires=_optional('Info', 'expires', DateTime.parse, info.expires),
            sender_name=_optional('Info', 'sender_name', check_text, info.sender_name),
            headline=_optional('Info', 'headline', check_text, info.headline),
            description=_optional('Info', 'description', check_text, info.description),
            instruction=_optional('Info', 'instruction', check_text, info.instruction),
            web=_optional('Info', 'web', parse_url, info.web),
            contact=_optional('Info', 'contact', check_text, info.contact),
            parameters=self.map('Info', 'parameter', info.parameter),
            resources=[self.resource(r) for r in info.resource],
            areas=[self.area(a) for a in info.area],
        )
        response_types = [
            self.enums.response_type.decode('Info', 'response_type', r) for r in info.response_type
        ]
        if self.version is not Version.V1DOT0:
            values['response_types'] = response_types
        return self.module.Info(**values)

    def alert(self, alert: pb.Alert):
        if alert.scope is None:
            raise MissingFieldError('Alert', 'scope')

        values = dict(
            identifier=_check('Alert', 'identifier', Id, alert.identifier),
            sender=_check('Alert', 'sender', Id, alert.sender),
            sent=_check('Alert', 'sent', DateTime.parse, alert.sent),
            status=self.enums.status.decode('Alert', 'status', alert.status),
            msg_type=self.enums.msg_type.decode('Alert', 'msg_type', alert.msg_type),
            source=_optional('Alert', 'source', check_text, alert.source),
            scope=self.enums.scope.decode('Alert', 'scope', alert.scope),
            restriction=_optional('Alert', 'restriction', check_text, alert.restriction),
            addresses=_group('Alert', 'addresses', Items, alert.addresses),
            codes=[_check('Alert', 'code', check_text, c) for c in alert.code],
            note=_optional('Alert', 'note', check_text, alert.note),
            references=_group('Alert', 'references', _references, alert.references),
            incidents=_group('Alert', 'incidents', Items, alert.incidents),
            info=[self.info(i) for i in alert.info],
        )
        if self.version is Version.V1DOT0:
            values['password'] = _optional('Alert', 'password', check_text, alert.password)
        return self.module.Alert(**values)


def _finite(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidNumberError(f"Expected a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidNumberError(f"Expected a finite number, got {value}")
    return value


def _references(values: List[str]) -> References:
    return References(Reference.parse(v) for v in values)


def decode_v1dot0_alert(message: pb.Alert) -> v1dot0.Alert:
    """Decode a protobuf Alert as CAP 1.0, regardless of its xmlns."""
    return _Decoder(Version.V1DOT0).alert(message)


def decode_v1dot1_alert(message: pb.Alert) -> v1dot1.Alert:
    """Decode a protobuf Alert as CAP 1.1, regardless of its xmlns."""
    return _Decoder(Version.V1DOT1).alert(message)


def decode_v1dot2_alert(message: pb.Alert) -> v1dot2.Alert:
    """Decode a protobuf Alert as CAP 1.2, regardless of its xmlns."""
    return _Decoder(Version.V1DOT2).alert(message)


def decode_alert(message: pb.Alert) -> Alert:
    """
    Decode a protobuf Alert into the CAP version named by its xmlns.

    Raises:
        UnknownNamespaceError: If xmlns is not a CAP namespace
        ConversionError: If a field cannot be represented in that version
    """
    version = Version.from_namespace(message.xmlns)
    logger.debug("Decoding protobuf alert as CAP %s", version.value)
    return Alert(_Decoder(version).alert(message))


def _value_pairs(entries: Map) -> List[pb.ValuePair]:
    return [pb.ValuePair(value_name=str(name), value=value) for name, value in entries]


def _point(point: Point) -> pb.Point:
    return pb.Point(latitude=point.latitude, longitude=point.longitude)


def _encode_area(area) -> pb.Area:
    return pb.Area(
        area_desc=area.area_desc,
        polygon=[pb.Polygon(point=[_point(p) for p in polygon]) for polygon in area.polygons],
        circle=[pb.Circle(point=_point(c.center), radius=c.radius) for c in area.circles],
        geocode=_value_pairs(area.geocodes),
        altitude=area.altitude,
        ceiling=area.ceiling,
    )


def _encode_resource(resource) -> pb.Resource:
    size = resource.size
    if size is not None and size > MAX_SIZE:
        logger.debug("Dropping resource size %d, too large for int64", size)
        size = None

    embedded = getattr(resource, 'embedded_content', None)
    return pb.Resource(
        resource_desc=resource.resource_desc,
        mime_type=resource.mime_type,
        size=size,
        uri=resource.uri,
        deref_uri=embedded.format() if embedded is not None else None,
        digest=resource.digest.format() if resource.digest is not None else None,
    )


def _encode_info(info, mappings: enums.VersionMappings) -> pb.Info:
    def timestamp(value: Optional[DateTime]) -> Optional[str]:
        return str(value) if value is not None else None

    return pb.Info(
        language=info.language.value,
        category=[mappings.category.encode(c) for c in info.categories],
        event=info.event,
        response_type=[mappings.response_type.encode(r)
                       for r in getattr(info, 'response_types', ())],
        urgency=mappings.urgency.encode(info.urgency),
        severity=mappings.severity.encode(info.severity),
        certainty=mappings.certainty.encode(info.certainty),
        audience=info.audience,
        event_code=_value_pairs(info.event_codes),
        effective=timestamp(info.effective),
        onset=timestamp(info.onset),
        expires=timestamp(info.expires),
        sender_name=info.sender_name,
        headline=info.headline,
        description=info.description,
        instruction=info.instruction,
        web=info.web,
        contact=info.contact,
        parameter=_value_pairs(info.parameters),
        resource=[_encode_resource(r) for r in info.resources],
        area=[_encode_area(a) for a in info.areas],
    )


def encode_alert(alert: Union[Alert, AnyAlert]) -> pb.Alert:
    """
    Encode an alert of any CAP version as a protobuf Alert.

    Never fails for a valid alert. A resource size beyond the int64 range is
    dropped.
    """
    if isinstance(alert, Alert):
        alert = alert.inner
    version = Version.of(alert)
    mappings = _MAPPINGS[version]

    def group(values) -> Optional[pb.Group]:
        if values is None:
            return None
        return pb.Group(value=[str(v) for v in values])

    return pb.Alert(
        xmlns=version.namespace,
        identifier=str(alert.identifier),
        sender=str(alert.sender),
        password=getattr(alert, 'password', None),
        sent=str(alert.sent),
        status=mappings.status.encode(alert.status),
        msg_type=mappings.msg_type.encode(alert.msg_type),
        source=alert.source,
        scope=mappings.scope.encode(alert.scope),
        restriction=alert.restriction,
        addresses=group(alert.addresses),
        code=list(alert.codes),
        note=alert.note,
        references=group(alert.references),
        incidents=group(alert.incidents),
        info=[_encode_info(i, mappings) for i in alert.info],
    )
