"""
CAP version upgrades

Upgrades are one-directional (1.0 -> 1.1 -> 1.2) and never fail: every valid
older alert has a valid newer representation. Some information is lost on
the way:

1.0 -> 1.1
    - <password> is dropped
    - certainty "Very Likely" becomes Likely
    - response types start empty
    - "key=value" maps become <valueName>/<value> pairs
    - resources have no embedded content
1.1 -> 1.2
    - a missing <mimeType> becomes application/octet-stream
"""

import logging
from typing import Union

from . import v1dot0, v1dot1, v1dot2
from .constants import DEFAULT_MIME_TYPE

logger = logging.getLogger(__name__)

AnyAlert = Union[v1dot0.Alert, v1dot1.Alert, v1dot2.Alert]

# enums are matched by wire value, except for the renamed certainty
_CERTAINTY_V1DOT0 = {
    v1dot0.Certainty.VERY_LIKELY: v1dot1.Certainty.LIKELY,
    v1dot0.Certainty.LIKELY: v1dot1.Certainty.LIKELY,
    v1dot0.Certainty.POSSIBLE: v1dot1.Certainty.POSSIBLE,
    v1dot0.Certainty.UNLIKELY: v1dot1.Certainty.UNLIKELY,
    v1dot0.Certainty.UNKNOWN: v1dot1.Certainty.UNKNOWN,
}


def _same(enum_cls, member):
    return enum_cls(member.value)


def _area_v1dot0(area: v1dot0.Area) -> v1dot1.Area:
    return v1dot1.Area(
        area_desc=area.area_desc,
        polygons=area.polygons,
        circles=area.circles,
        geocodes=area.geocodes.to_map(),
        altitude=area.altitude,
        ceiling=area.ceiling,
    )


def _resource_v1dot0(resource: v1dot0.Resource) -> v1dot1.Resource:
    return v1dot1.Resource(
        resource_desc=resource.resource_desc,
        mime_type=resource.mime_type,
        size=resource.size,
        uri=resource.uri,
        embedded_content=None,
        digest=resource.digest,
    )


def _info_v1dot0(info: v1dot0.Info) -> v1dot1.Info:
    return v1dot1.Info(
        language=info.language,
        categories=[_same(v1dot1.Category, c) for c in info.categories],
        event=info.event,
        response_types=(),
        urgency=_same(v1dot1.Urgency, info.urgency),
        severity=_same(v1dot1.Severity, info.severity),
        certainty=_CERTAINTY_V1DOT0[info.certainty],
        audience=info.audience,
        event_codes=info.event_codes.to_map(),
        effective=info.effective,
        onset=info.onset,
        expires=info.expires,
        sender_name=info.sender_name,
        headline=info.headline,
        description=info.description,
        instruction=info.instruction,
        web=info.web,
        contact=info.contact,
        parameters=info.parameters.to_map(),
        resources=[_resource_v1dot0(r) for r in info.resources],
        areas=[_area_v1dot0(a) for a in info.areas],
    )


def upgrade_v1dot0(alert: v1dot0.Alert) -> v1dot1.Alert:
    """Upgrade a CAP 1.0 alert to CAP 1.1."""
    if alert.password is not None:
        logger.debug("Dropping <password> from alert %s", alert.identifier)
    return v1dot1.Alert(
        identifier=alert.identifier,
        sender=alert.sender,
        sent=alert.sent,
        status=_same(v1dot1.Status, alert.status),
        msg_type=_same(v1dot1.MsgType, alert.msg_type),
        source=alert.source,
        scope=_same(v1dot1.Scope, alert.scope),
        restriction=alert.restriction,
        addresses=alert.addresses,
        codes=alert.codes,
        note=alert.note,
        references=alert.references,
        incidents=alert.incidents,
        info=[_info_v1dot0(i) for i in alert.info],
    )


def _area_v1dot1(area: v1dot1.Area) -> v1dot2.Area:
    return v1dot2.Area(
        area_desc=area.area_desc,
        polygons=area.polygons,
        circles=area.circles,
        geocodes=area.geocodes,
        altitude=area.altitude,
        ceiling=area.ceiling,
    )


def _resource_v1dot1(resource: v1dot1.Resource) -> v1dot2.Resource:
    mime_type = resource.mime_type
    if mime_type is None:
        mime_type = DEFAULT_MIME_TYPE
    return v1dot2.Resource(
        resource_desc=resource.resource_desc,
        mime_type=mime_type,
        size=resource.size,
        uri=resource.uri,
        embedded_content=resource.embedded_content,
        digest=resource.digest,
    )


def _info_v1dot1(info: v1dot1.Info) -> v1dot2.Info:
    return v1dot2.Info(
        language=info.language,
        categories=[_same(v1dot2.Category, c) for c in info.categories],
        event=info.event,
        response_types=[_same(v1dot2.ResponseType, r) for r in info.response_types],
        urgency=_same(v1dot2.Urgency, info.urgency),
        severity=_same(v1dot2.Severity, info.severity),
        certainty=_same(v1dot2.Certainty, info.certainty),
        audience=info.audience,
        event_codes=info.event_codes,
        effective=info.effective,
        onset=info.onset,
        expires=info.expires,
        sender_name=info.sender_name,
        headline=info.headline,
        description=info.description,
        instruction=info.instruction,
        web=info.web,
        contact=info.contact,
        parameters=info.parameters,
        resources=[_resource_v1dot1(r) for r in info.resources],
        areas=[_area_v1dot1(a) for a in info.areas],
    )


def upgrade_v1dot1(alert: v1dot1.Alert) -> v1dot2.Alert:
    """Upgrade a CAP 1.1 alert to CAP 1.2."""
    return v1dot2.Alert(
        identifier=alert.identifier,
        sender=alert.sender,
        sent=alert.sent,
        status=_same(v1dot2.Status, alert.status),
        msg_type=_same(v1dot2.MsgType, alert.msg_type),
        source=alert.source,
        scope=_same(v1dot2.Scope, alert.scope),
        restriction=alert.restriction,
        addresses=alert.addresses,
        codes=alert.codes,
        note=alert.note,
        references=alert.references,
        incidents=alert.incidents,
        info=[_info_v1dot1(i) for i in alert.info],
    )


def upgrade_to_latest(alert: AnyAlert) -> v1dot2.Alert:
    """
    Upgrade an alert of any version to CAP 1.2.

    A CAP 1.2 alert is returned unchanged.

    Raises:
        TypeError: If alert is not a CAP alert model
    """
    if isinstance(alert, v1dot0.Alert):
        logger.debug("Upgrading alert %s from CAP 1.0", alert.identifier)
        return upgrade_v1dot1(upgrade_v1dot0(alert))
    if isinstance(alert, v1dot1.Alert):
        logger.debug("Upgrading alert %s from CAP 1.1", alert.identifier)
        return upgrade_v1dot1(alert)
    if isinstance(alert, v1dot2.Alert):
        return alert
    raise TypeError(f"Expected a CAP alert, got {type(alert).__name__}")
