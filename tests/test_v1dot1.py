"""
Tests for the CAP 1.1 model and XML form
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.cap import v1dot1
from src.cap.embedded import EmbeddedContent
from src.cap.errors import ModelError, XMLFormatError
from src.cap.geo import Point
from src.cap.multimap import Map, StringMap
from src.cap.timestamp import DateTime

FIXTURES = os.path.join(os.path.dirname(__file__), 'fixtures')


def read_fixture(name):
    with open(os.path.join(FIXTURES, name), encoding='utf-8') as f:
        return f.read()


@pytest.fixture
def earthquake():
    return read_fixture('v1dot1_earthquake.xml')


class TestParseEarthquake:
    """Tests for decoding a CAP 1.1 alert."""

    def test_header(self, earthquake):
        alert = v1dot1.Alert.from_xml(earthquake)

        assert alert.identifier == 'TRI13970876.1'
        assert alert.sent == DateTime.parse('2003-06-11T20:56:00-07:00')
        assert alert.msg_type is v1dot1.MsgType.UPDATE
        assert alert.references[0].sender == 'trinet@caltech.edu'
        assert alert.references[0].sent == DateTime.parse('2003-06-11T20:30:00-07:00')

    def test_info(self, earthquake):
        info = v1dot1.Alert.from_xml(earthquake).primary_info

        assert info.categories == (v1dot1.Category.GEO,)
        assert info.certainty is v1dot1.Certainty.OBSERVED
        assert info.response_types == ()
        assert info.parameters.get('EventID') == '13970876'
        assert info.parameters.get('Magnitude') == '3.4 Ml'
        assert len(info.parameters) == 5

    def test_circle(self, earthquake):
        area = v1dot1.Alert.from_xml(earthquake).primary_info.areas[0]

        assert area.circles[0].center == Point(32.9525, -115.5527)
        assert area.circles[0].radius == 0.0

    def test_round_trip(self, earthquake):
        alert = v1dot1.Alert.from_xml(earthquake)
        xml = alert.to_xml()

        assert 'xmlns="urn:oasis:names:tc:emergency:cap:1.1"' in xml
        assert v1dot1.Alert.from_xml(xml) == alert


class TestVersionDifferences:
    """Tests for what CAP 1.1 allows and forbids."""

    def test_very_likely_is_read_as_likely(self, earthquake):
        """Test that the deprecated 'Very Likely' is accepted and written as 'Likely'."""
        xml = earthquake.replace('<certainty>Observed</certainty>',
                                 '<certainty>Very Likely</certainty>')
        alert = v1dot1.Alert.from_xml(xml)

        assert alert.primary_info.certainty is v1dot1.Certainty.LIKELY
        assert '<certainty>Likely</certainty>' in alert.to_xml()

    def test_mime_type_is_optional(self):
        resource = v1dot1.Resource(resource_desc='photo')
        assert resource.mime_type is None

    def test_embedded_content(self):
        resource = v1dot1.Resource(resource_desc='note', mime_type='text/plain',
                                   embedded_content=EmbeddedContent(b'hello'))
        info = v1dot1.Info(event='x', urgency='Past', severity='Minor', certainty='Observed',
                           resources=[resource])
        alert = v1dot1.Alert(identifier='a', sender='b', sent='2005-01-01T00:00:00Z',
                             status='Test', msg_type='Alert', scope='Public', info=[info])

        xml = alert.to_xml()
        assert '<derefUri>aGVsbG8=</derefUri>' in xml
        assert v1dot1.Alert.from_xml(xml) == alert

    def test_response_types(self, earthquake):
        xml = earthquake.replace('<urgency>', '<responseType>Monitor</responseType><urgency>')
        info = v1dot1.Alert.from_xml(xml).primary_info
        assert info.response_types == (v1dot1.ResponseType.MONITOR,)

    def test_avoid_is_not_a_response_type(self, earthquake):
        xml = earthquake.replace('<urgency>', '<responseType>Avoid</responseType><urgency>')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot1.Alert.from_xml(xml)
        assert exc_info.value.field == 'responseType'

    def test_no_avoid_or_all_clear_members(self):
        assert not hasattr(v1dot1.ResponseType, 'AVOID')
        assert not hasattr(v1dot1.ResponseType, 'ALL_CLEAR')

    def test_pair_maps(self):
        area = v1dot1.Area(area_desc='x', geocodes=[('UGC', 'CAZ017'), ('UGC', 'CAZ018')])
        assert area.geocodes == Map([('UGC', 'CAZ017'), ('UGC', 'CAZ018')])

    def test_draft_status(self):
        alert = v1dot1.Alert(identifier='a', sender='b', sent='2005-01-01T00:00:00Z',
                             status='Draft', msg_type='Alert', scope='Public')
        assert alert.status is v1dot1.Status.DRAFT

    def test_string_map_rejected(self):
        with pytest.raises(ModelError):
            v1dot1.Area(area_desc='x', geocodes=StringMap([('fips6', '006109')]))
