"""
Tests for version dispatch and upgrades
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.cap import (
    Alert, UnknownNamespaceError, Version, XMLFormatError, parse_alert, parse_alert_file,
    upgrade_to_latest, upgrade_v1dot0, upgrade_v1dot1, v1dot0, v1dot1, v1dot2,
)
from src.cap.constants import DEFAULT_MIME_TYPE
from src.cap.multimap import Map

FIXTURES = os.path.join(os.path.dirname(__file__), 'fixtures')


def fixture_path(name):
    return os.path.join(FIXTURES, name)


def read_fixture(name):
    with open(fixture_path(name), encoding='utf-8') as f:
        return f.read()


class TestParseAlert:
    """Tests for namespace dispatch."""

    @pytest.mark.parametrize('name,version,model', [
        ('v1dot0_homeland_security.xml', Version.V1DOT0, v1dot0.Alert),
        ('v1dot0_thunderstorm.xml', Version.V1DOT0, v1dot0.Alert),
        ('v1dot1_earthquake.xml', Version.V1DOT1, v1dot1.Alert),
        ('v1dot2_tsunami_cancellation.xml', Version.V1DOT2, v1dot2.Alert),
        ('v1dot2_evacuation.xml', Version.V1DOT2, v1dot2.Alert),
    ])
    def test_dispatch(self, name, version, model):
        """Test that the root namespace selects the model."""
        alert = parse_alert(read_fixture(name))

        assert alert.version is version
        assert alert.xml_namespace == version.namespace
        assert isinstance(alert.inner, model)
        assert alert == Alert(model.from_xml(read_fixture(name)))

    def test_common_header(self):
        alert = parse_alert(read_fixture('v1dot1_earthquake.xml'))

        assert alert.identifier == 'TRI13970876.1'
        assert alert.sender == 'trinet@caltech.edu'
        assert str(alert.sent) == '2003-06-11T20:56:00-07:00'

    def test_bytes_input(self):
        with open(fixture_path('v1dot2_evacuation.xml'), 'rb') as f:
            alert = parse_alert(f.read())
        assert alert.inner.info[1].event == 'Liberación química'

    def test_parse_file(self):
        alert = parse_alert_file(fixture_path('v1dot0_thunderstorm.xml'))
        assert alert.identifier == 'KSTO1055887203'

    def test_unknown_namespace(self):
        xml = '<alert xmlns="urn:example:not-cap"><identifier>x</identifier></alert>'
        with pytest.raises(UnknownNamespaceError) as exc_info:
            parse_alert(xml)
        assert exc_info.value.namespace == 'urn:example:not-cap'

    def test_no_namespace(self):
        with pytest.raises(UnknownNamespaceError):
            parse_alert('<alert><identifier>x</identifier></alert>')

    def test_wrong_root(self):
        with pytest.raises(XMLFormatError):
            parse_alert('<info xmlns="urn:oasis:names:tc:emergency:cap:1.2"/>')

    def test_not_xml(self):
        with pytest.raises(XMLFormatError):
            parse_alert('this is not xml')

    def test_to_xml_round_trip(self):
        alert = parse_alert(read_fixture('v1dot0_homeland_security.xml'))
        assert parse_alert(alert.to_xml()) == alert
        assert str(alert) == alert.to_xml()


class TestAlertWrapper:
    """Tests for the version-independent Alert wrapper."""

    def test_rejects_non_alerts(self):
        with pytest.raises(TypeError):
            Alert('not an alert')

    def test_versions_never_equal(self):
        """Test that an upgraded alert differs from its source."""
        alert = parse_alert(read_fixture('v1dot1_earthquake.xml'))
        assert Alert(alert.into_latest()) != alert

    def test_hashable(self):
        first = parse_alert(read_fixture('v1dot1_earthquake.xml'))
        second = parse_alert(read_fixture('v1dot1_earthquake.xml'))
        assert len({first, second}) == 1


class TestVersion:
    """Tests for the Version enum."""

    def test_from_namespace(self):
        assert Version.from_namespace('urn:oasis:names:tc:emergency:cap:1.1') is Version.V1DOT1
        with pytest.raises(UnknownNamespaceError):
            Version.from_namespace('urn:oasis:names:tc:emergency:cap:1.3')

    def test_of(self):
        assert Version.of(v1dot2.Alert.from_xml(read_fixture('v1dot2_evacuation.xml'))) \
            is Version.V1DOT2
        with pytest.raises(TypeError):
            Version.of(object())

    def test_ordering_of_members(self):
        assert [v.value for v in Version] == ['1.0', '1.1', '1.2']
        assert Version.V1DOT0.module is v1dot0


class TestUpgrade:
    """Tests for upgrading older alerts."""

    def test_v1dot0_to_v1dot1(self):
        """Test password removal, certainty mapping and map conversion."""
        alert = v1dot0.Alert.from_xml(read_fixture('v1dot0_homeland_security.xml'))
        upgraded = upgrade_v1dot0(alert)

        assert isinstance(upgraded, v1dot1.Alert)
        assert not hasattr(upgraded, 'password')
        info = upgraded.primary_info
        assert info.certainty is v1dot1.Certainty.LIKELY
        assert info.parameters == Map([('HSAS', 'ORANGE')])
        assert info.response_types == ()
        # mime type stays absent until 1.2
        assert info.resources[0].mime_type is None

    def test_v1dot1_to_v1dot2(self):
        alert = upgrade_v1dot0(v1dot0.Alert.from_xml(read_fixture('v1dot0_homeland_security.xml')))
        upgraded = upgrade_v1dot1(alert)

        assert isinstance(upgraded, v1dot2.Alert)
        assert upgraded.primary_info.resources[0].mime_type == DEFAULT_MIME_TYPE
        assert upgraded.primary_info.resources[0].mime_type == 'application/octet-stream'

    def test_upgrade_composes(self):
        """Test that the one-step upgrade equals the chained upgrades."""
        for name in ('v1dot0_homeland_security.xml', 'v1dot0_thunderstorm.xml'):
            alert = v1dot0.Alert.from_xml(read_fixture(name))
            latest = upgrade_to_latest(alert)

            assert latest == upgrade_v1dot1(upgrade_v1dot0(alert))
            assert latest == Alert(alert).into_latest()

    def test_thunderstorm_keeps_content(self):
        alert = v1dot0.Alert.from_xml(read_fixture('v1dot0_thunderstorm.xml'))
        latest = upgrade_to_latest(alert)

        area = latest.primary_info.areas[0]
        assert area.polygons == alert.primary_info.areas[0].polygons
        assert area.geocodes.get_all('fips6') == ['006109', '006009', '006003']
        assert latest.primary_info.event_codes == Map([('same', 'SVR')])
        assert latest.primary_info.certainty is v1dot2.Certainty.LIKELY
        assert latest.sent == alert.sent

    def test_v1dot1_values_carry_over(self):
        alert = v1dot1.Alert.from_xml(read_fixture('v1dot1_earthquake.xml'))
        latest = upgrade_to_latest(alert)

        assert latest.msg_type is v1dot2.MsgType.UPDATE
        assert latest.primary_info.certainty is v1dot2.Certainty.OBSERVED
        assert latest.references == alert.references
        assert latest.primary_info.parameters == alert.primary_info.parameters

    def test_latest_is_unchanged(self):
        alert = v1dot2.Alert.from_xml(read_fixture('v1dot2_evacuation.xml'))
        assert upgrade_to_latest(alert) is alert

    def test_upgraded_alert_serializes(self):
        latest = parse_alert(read_fixture('v1dot0_homeland_security.xml')).into_latest()
        xml = latest.to_xml()

        assert 'urn:oasis:names:tc:emergency:cap:1.2' in xml
        assert '<password>' not in xml
        assert v1dot2.Alert.from_xml(xml) == latest

    def test_rejects_non_alerts(self):
        with pytest.raises(TypeError):
            upgrade_to_latest({'identifier': 'x'})
