"""
Tests for the CAP 1.2 model and XML form
"""

import dataclasses

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.cap import v1dot0, v1dot1, v1dot2
from src.cap.errors import ModelError, UnknownNamespaceError, XMLFormatError
from src.cap.digest import Sha1Digest
from src.cap.embedded import EmbeddedContent
from src.cap.geo import Circle, Point, Polygon
from src.cap.items import Items
from src.cap.language import Language
from src.cap.multimap import Map
from src.cap.references import References
from src.cap.timestamp import DateTime

FIXTURES = os.path.join(os.path.dirname(__file__), 'fixtures')


def read_fixture(name):
    with open(os.path.join(FIXTURES, name), encoding='utf-8') as f:
        return f.read()


@pytest.fixture
def tsunami():
    return read_fixture('v1dot2_tsunami_cancellation.xml')


@pytest.fixture
def evacuation():
    return read_fixture('v1dot2_evacuation.xml')


def make_alert(**overrides):
    values = dict(
        identifier='KSTO1055887203',
        sender='KSTO@NWS.NOAA.GOV',
        sent='2003-06-17T14:57:00-07:00',
        status='Actual',
        msg_type='Alert',
        scope='Public',
    )
    values.update(overrides)
    return v1dot2.Alert(**values)


class TestParseTsunami:
    """Tests for decoding a real-world CAP 1.2 alert."""

    def test_header(self, tsunami):
        """Test parsing the alert header."""
        alert = v1dot2.Alert.from_xml(tsunami)

        assert alert.identifier == 'PAAQ-4-mg5a94'
        assert alert.sender == 'wcatwc@noaa.gov'
        assert alert.sent == DateTime.parse('2013-01-05T10:58:23Z')
        assert alert.status is v1dot2.Status.ACTUAL
        assert alert.msg_type is v1dot2.MsgType.UPDATE
        assert alert.scope is v1dot2.Scope.PUBLIC
        assert alert.source == 'WCATWC'
        assert alert.codes == ('IPAWSv1.0',)
        assert alert.incidents == Items(['mg5a94'])
        assert alert.addresses is None
        assert alert.is_actual

    def test_references(self, tsunami):
        alert = v1dot2.Alert.from_xml(tsunami)

        assert len(alert.references) == 3
        assert [str(r.identifier) for r in alert.references] == [
            'PAAQ-1-mg5a94', 'PAAQ-2-mg5a94', 'PAAQ-3-mg5a94',
        ]

    def test_info(self, tsunami):
        """Test parsing the info block."""
        info = v1dot2.Alert.from_xml(tsunami).primary_info

        assert info.language == Language('en-US')
        assert info.language.is_empty()
        assert info.categories == (v1dot2.Category.GEO,)
        assert info.response_types == (v1dot2.ResponseType.NONE,)
        assert info.urgency is v1dot2.Urgency.PAST
        assert info.severity is v1dot2.Severity.UNKNOWN
        assert info.certainty is v1dot2.Certainty.UNLIKELY
        assert info.description.endswith('non-damaging levels. ')
        assert info.web.startswith('http://wcatwc.arh.noaa.gov/')

    def test_parameters_keep_order(self, tsunami):
        """Test that parameters keep document order and entity-decoded text."""
        parameters = v1dot2.Alert.from_xml(tsunami).primary_info.parameters

        names = [name for name, _ in parameters]
        assert names[0] == 'EventLocationName'
        assert names[-1] == 'EAS-ORG'
        assert len(parameters) == 9
        assert parameters.get('EventPreliminaryMagnitude') == '7.5'
        assert 'AKZ026>029' in parameters.get('NWSUGC')

    def test_resource_and_area(self, tsunami):
        info = v1dot2.Alert.from_xml(tsunami).primary_info

        resource = info.resources[0]
        assert resource.mime_type == 'application/json'
        assert resource.uri.endswith('PAAQ.json')
        assert resource.embedded_content is None

        area = info.areas[0]
        assert area.area_desc == '95 miles NW of Dixon Entrance, Alaska'
        assert area.circles == (Circle(Point(55.3, -134.9), 0),)
        assert area.polygons == ()

    def test_round_trip(self, tsunami):
        """Test that re-serialized XML decodes to an equal alert."""
        alert = v1dot2.Alert.from_xml(tsunami)
        assert v1dot2.Alert.from_xml(alert.to_xml()) == alert


class TestParseEvacuation:
    """Tests for the less common CAP 1.2 elements."""

    def test_header(self, evacuation):
        alert = v1dot2.Alert.from_xml(evacuation)

        assert alert.status is v1dot2.Status.EXERCISE
        assert alert.scope is v1dot2.Scope.RESTRICTED
        assert alert.restriction == 'Emergency management staff only'
        assert list(alert.addresses) == ['eoc-staff', 'county fire', 'sheriff']
        assert alert.codes == ('drill', 'IPAWSv1.0')
        assert alert.incidents == Items(['drill-2024', 'chem-07'])
        assert alert.languages == ['en-US', 'es-US']
        assert not alert.is_actual

    def test_info(self, evacuation):
        alert = v1dot2.Alert.from_xml(evacuation)
        info = alert.info[0]

        assert info.categories == (v1dot2.Category.CBRNE, v1dot2.Category.SAFETY)
        assert info.response_types == (v1dot2.ResponseType.EVACUATE, v1dot2.ResponseType.AVOID)
        assert info.event_codes == Map([('SAME', 'HMW')])
        assert info.parameters.get_all('EAS-ORG') == ['CIV', 'EAN']
        # fractional seconds are discarded
        assert info.onset == DateTime.parse('2024-08-15T18:15:00+02:00')
        assert alert.info[1].event == 'Liberación química'

    def test_scheme_less_web_is_fixed(self, evacuation):
        info = v1dot2.Alert.from_xml(evacuation).primary_info
        assert info.web == 'http://www.example.gov/drill'

    def test_embedded_resource(self, evacuation):
        """Test derefUri decoding and digest verification."""
        resource = v1dot2.Alert.from_xml(evacuation).primary_info.resources[0]

        assert resource.mime_type == 'text/plain'
        assert resource.size == 42
        assert resource.embedded_content.data == b'Shelter locations: Central High School gym'
        assert str(resource.digest) == '508c00d7906100d4a72a1c0357762b812b8158c9'
        assert resource.verify_digest()

    def test_area(self, evacuation):
        """Test that the empty polygon is skipped."""
        area = v1dot2.Alert.from_xml(evacuation).primary_info.areas[0]

        assert len(area.polygons) == 1
        assert len(area.polygons[0]) == 5
        assert area.circles[0].radius == 3.2
        assert area.geocodes.get('SAME') == '041051'
        assert area.altitude == 100.0
        assert area.ceiling == 2500.5

    def test_round_trip(self, evacuation):
        alert = v1dot2.Alert.from_xml(evacuation)
        xml = alert.to_xml()

        assert v1dot2.Alert.from_xml(xml) == alert
        # unknown elements are not carried over
        assert 'Signature' not in xml
        assert '<altitude>100</altitude>' in xml
        assert '<digest>508c00d7906100d4a72a1c0357762b812b8158c9</digest>' in xml


class TestSerialize:
    """Tests for XML output."""

    def test_document_shape(self):
        xml = make_alert(note='test & <check>').to_xml()

        assert xml.startswith('<?xml')
        assert 'xmlns="urn:oasis:names:tc:emergency:cap:1.2"' in xml
        assert '<note>test &amp; &lt;check&gt;</note>' in xml
        assert '<restriction>' not in xml

    def test_schema_order(self):
        """Test that elements are written in schema order."""
        alert = make_alert(source='NWS', codes=['IPAWSv1.0'], note='n')
        xml = alert.to_xml()

        positions = [xml.index(f'<{name}>') for name in
                     ('identifier', 'sender', 'sent', 'status', 'msgType', 'source',
                      'scope', 'code', 'note')]
        assert positions == sorted(positions)

    def test_maps_are_written_as_pairs(self):
        info = v1dot2.Info(
            event='Test', urgency='Unknown', severity='Unknown', certainty='Unknown',
            parameters=[('a', '1'), ('a', '2')],
        )
        xml = make_alert(info=[info]).to_xml()

        assert xml.count('<valueName>a</valueName>') == 2
        assert v1dot2.Alert.from_xml(xml).info[0].parameters.get_all('a') == ['1', '2']

    def test_str_is_xml(self):
        alert = make_alert()
        assert str(alert) == alert.to_xml()

    def test_full_round_trip(self):
        """Test a programmatically built alert with every field set."""
        resource = v1dot2.Resource(
            resource_desc='map', mime_type='image/png', size=3, uri='http://example.com/map.png',
            embedded_content=EmbeddedContent(b'png'), digest=Sha1Digest.of(b'png'),
        )
        area = v1dot2.Area(
            area_desc='box', polygons=[Polygon.parse('1,1 1,2 2,2 1,1')],
            circles=['1.5,1.5 0.25'], geocodes=[('FIPS6', '006109')], altitude=-10.5, ceiling=0,
        )
        info = v1dot2.Info(
            event='Test', urgency='Expected', severity='Moderate', certainty='Possible',
            language='fr-CA', categories=['Other'], response_types=['AllClear'],
            audience='all', event_codes={'SAME': 'DMO'}, effective='2024-01-01T00:00:00Z',
            onset='2024-01-01T01:00:00+05:30', expires='2024-01-02T00:00:00-05:00',
            sender_name='s', headline='h', description='d', instruction='i',
            web='https://example.com', contact='c', parameters=[('k', '')],
            resources=[resource], areas=[area],
        )
        alert = make_alert(
            status='Draft', msg_type='Error', scope='Private', source='src',
            restriction='r', addresses='a "b c"', codes=['x', 'y'], note='',
            references='s,i,2024-01-01T00:00:00Z', incidents='inc', info=[info],
        )

        assert v1dot2.Alert.from_xml(alert.to_xml()) == alert


class TestDecodeErrors:
    """Tests for rejected CAP 1.2 documents."""

    def test_missing_required(self, tsunami):
        xml = tsunami.replace('<identifier>PAAQ-4-mg5a94</identifier>', '')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'identifier'

    def test_duplicate_element(self, tsunami):
        xml = tsunami.replace('<source>WCATWC</source>', '<source>A</source><source>B</source>')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'source'

    def test_missing_mime_type(self, tsunami):
        """Test that <mimeType> is required in CAP 1.2."""
        xml = tsunami.replace('<mimeType>application/json</mimeType>', '')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'mimeType'

    def test_invalid_enum(self, tsunami):
        xml = tsunami.replace('<status>Actual</status>', '<status>Real</status>')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'status'

    def test_invalid_polygon(self, evacuation):
        xml = evacuation.replace('-122.6 45.5,-122.7</polygon>', '-122.6 45.5,-122.8</polygon>')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'polygon'

    def test_ceiling_without_altitude(self, evacuation):
        xml = evacuation.replace('<altitude>100</altitude>', '')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'area'

    def test_missing_value_name(self, tsunami):
        xml = tsunami.replace('<valueName>VTEC</valueName>', '')
        with pytest.raises(XMLFormatError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.field == 'valueName'

    def test_wrong_namespace(self):
        xml = read_fixture('v1dot1_earthquake.xml')
        with pytest.raises(UnknownNamespaceError) as exc_info:
            v1dot2.Alert.from_xml(xml)
        assert exc_info.value.namespace == v1dot1.NAMESPACE

    def test_malformed_xml(self):
        with pytest.raises(XMLFormatError):
            v1dot2.Alert.from_xml('<alert xmlns="urn:oasis:names:tc:emergency:cap:1.2">')


class TestModel:
    """Tests for direct model construction."""

    def test_values_are_coerced(self):
        """Test that raw strings become CAP types."""
        alert = make_alert(addresses='a b')

        assert alert.status is v1dot2.Status.ACTUAL
        assert isinstance(alert.sent, DateTime)
        assert isinstance(alert.addresses, Items)
        assert alert.info == ()

    def test_references_from_text(self):
        alert = make_alert(references='a,b,2024-01-01T00:00:00Z')
        assert isinstance(alert.references, References)

    def test_invalid_identifier(self):
        with pytest.raises(ModelError):
            make_alert(identifier='has space')

    def test_missing_required(self):
        with pytest.raises(ModelError, match='scope'):
            make_alert(scope=None)

    def test_other_dialect_enum(self):
        """Test that enum members of another CAP version are rejected."""
        with pytest.raises(ModelError):
            v1dot2.Info(
                event='x', urgency=v1dot0.Urgency.IMMEDIATE,
                severity='Severe', certainty='Likely',
            )

    def test_nested_models_must_match_dialect(self):
        area = v1dot1.Area(area_desc='x')
        with pytest.raises(ModelError):
            v1dot2.Info(event='x', urgency='Past', severity='Minor', certainty='Observed',
                        areas=[area])

    def test_web_must_be_valid(self):
        """Test that direct construction does not guess a scheme."""
        with pytest.raises(ModelError):
            v1dot2.Info(event='x', urgency='Past', severity='Minor', certainty='Observed',
                        web='www.example.gov')

    def test_size_range(self):
        with pytest.raises(ModelError):
            v1dot2.Resource(resource_desc='x', mime_type='text/plain', size=-1)

    def test_ceiling_requires_altitude(self):
        with pytest.raises(ModelError):
            v1dot2.Area(area_desc='x', ceiling=10)

    def test_text_must_be_xml_characters(self):
        """Test that free text XML cannot carry is refused at construction."""
        with pytest.raises(ModelError, match='description'):
            v1dot2.Info(event='x', urgency='Past', severity='Minor',
                        certainty='Observed', description='bell\x07')
        with pytest.raises(ModelError, match='codes'):
            make_alert(codes=['IPAWSv1.0', '\x1f'])
        with pytest.raises(ModelError, match='parameters'):
            v1dot2.Info(event='x', urgency='Past', severity='Minor',
                        certainty='Observed', parameters=[('SAME', '\x00')])
        with pytest.raises(ModelError, match='note'):
            make_alert(note='\ufffe')

    def test_carriage_returns_round_trip(self):
        """Test that CR survives writing and reading back."""
        info = v1dot2.Info(event='x', urgency='Past', severity='Minor',
                           certainty='Observed', description='line1\r\nline2\rline3',
                           parameters=[('note', 'a\rb')])
        alert = make_alert(note='a\rb', info=[info], addresses=['x\ry'])

        xml = alert.to_xml()
        assert '\r' not in xml
        assert 'line1&#13;' in xml

        parsed = v1dot2.Alert.from_xml(xml)
        assert parsed.info[0].description == 'line1\r\nline2\rline3'
        assert parsed == alert

    def test_frozen(self):
        alert = make_alert()
        with pytest.raises(dataclasses.FrozenInstanceError):
            alert.identifier = 'other'

    def test_hashable(self):
        assert hash(make_alert()) == hash(make_alert())

    def test_verify_digest_mismatch(self):
        resource = v1dot2.Resource(
            resource_desc='x', mime_type='text/plain',
            embedded_content=EmbeddedContent(b'abc'), digest=Sha1Digest.of(b'abd'),
        )
        assert not resource.verify_digest()


class TestEnums:
    """Tests for CAP 1.2 enum extras."""

    def test_descriptions(self):
        assert v1dot2.Urgency.IMMEDIATE.description == 'Responsive action SHOULD be taken immediately'
        assert v1dot2.Severity.EXTREME.description == 'Extraordinary threat to life or property'
        assert v1dot2.Certainty.OBSERVED.description == 'Determined to have occurred or to be ongoing'

    def test_very_likely_reads_as_likely(self):
        assert v1dot2.Certainty('Very Likely') is v1dot2.Certainty.LIKELY

    def test_wire_values(self):
        assert v1dot2.ResponseType.ALL_CLEAR.value == 'AllClear'
        assert v1dot2.Category.CBRNE.value == 'CBRNE'
