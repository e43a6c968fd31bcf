"""
Tests for the CAP codec web API
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.cap.constants import NS_V1DOT0, NS_V1DOT2
from src.cap.protobuf import messages as pb
from src.web import create_app

FIXTURES = os.path.join(os.path.dirname(__file__), 'fixtures')


def read_fixture(name):
    with open(os.path.join(FIXTURES, name), encoding='utf-8') as f:
        return f.read()


@pytest.fixture
def client():
    app = create_app({'TESTING': True})
    return app.test_client()


class TestStatus:

    def test_versions(self, client):
        response = client.get('/api/cap/status')
        data = response.get_json()

        assert response.status_code == 200
        assert data['available'] is True
        assert [v['version'] for v in data['versions']] == ['1.0', '1.1', '1.2']
        assert data['versions'][2]['namespace'] == NS_V1DOT2

    def test_openapi(self, client):
        data = client.get('/api/docs/openapi.json').get_json()

        assert data['openapi'] == '3.0.0'
        assert '/cap/parse' in data['paths']
        assert '/cap/decode' in data['paths']


class TestParse:
    """Tests for POST /api/cap/parse."""

    def test_parse_json_body(self, client):
        xml = read_fixture('v1dot2_tsunami_cancellation.xml')
        response = client.post('/api/cap/parse', json={'xml': xml})
        data = response.get_json()

        assert response.status_code == 200
        assert data['success'] is True
        assert data['version'] == '1.2'
        assert data['identifier'] == 'PAAQ-4-mg5a94'
        assert data['sent'] == '2013-01-05T10:58:23-00:00'
        assert data['alert']['xmlns'] == NS_V1DOT2
        assert data['alert']['info'][0]['event'] == 'Tsunami Cancellation'

    def test_parse_raw_xml(self, client):
        """Test sending the document itself with an XML content type."""
        xml = read_fixture('v1dot0_thunderstorm.xml')
        response = client.post('/api/cap/parse', data=xml.encode('utf-8'),
                               content_type='application/xml')
        data = response.get_json()

        assert response.status_code == 200
        assert data['version'] == '1.0'
        assert data['namespace'] == NS_V1DOT0

    def test_parse_invalid(self, client):
        xml = read_fixture('v1dot2_tsunami_cancellation.xml').replace(
            '<status>Actual</status>', '<status>Real</status>')
        response = client.post('/api/cap/parse', json={'xml': xml})
        data = response.get_json()

        assert response.status_code == 400
        assert data['success'] is False
        assert data['field'] == 'status'

    def test_parse_empty(self, client):
        response = client.post('/api/cap/parse', json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'No CAP XML provided'

    def test_parse_non_string_xml(self, client):
        """Test that a non-string xml field is a client error."""
        for value in (42, ['<alert/>'], {'alert': 1}):
            response = client.post('/api/cap/parse', json={'xml': value})

            assert response.status_code == 400
            assert response.get_json()['error'] == "'xml' must be a string"

    def test_parse_json_array_body(self, client):
        response = client.post('/api/cap/parse', json=['<alert/>'])

        assert response.status_code == 400
        assert response.get_json()['error'] == 'No CAP XML provided'

    def test_parse_unknown_namespace(self, client):
        response = client.post('/api/cap/parse', json={'xml': '<alert xmlns="urn:x"/>'})
        assert response.status_code == 400


class TestValidate:
    """Tests for POST /api/cap/validate."""

    def test_valid(self, client):
        xml = read_fixture('v1dot2_evacuation.xml')
        data = client.post('/api/cap/validate', json={'xml': xml}).get_json()

        assert data['valid'] is True
        assert data['version'] == '1.2'
        assert data['info_count'] == 2

    def test_invalid_is_not_an_http_error(self, client):
        xml = read_fixture('v1dot1_earthquake.xml').replace('<identifier>TRI13970876.1</identifier>', '')
        response = client.post('/api/cap/validate', json={'xml': xml})
        data = response.get_json()

        assert response.status_code == 200
        assert data['valid'] is False
        assert data['field'] == 'identifier'


class TestUpgrade:
    """Tests for POST /api/cap/upgrade."""

    def test_upgrade_v1dot0(self, client):
        xml = read_fixture('v1dot0_homeland_security.xml')
        data = client.post('/api/cap/upgrade', json={'xml': xml}).get_json()

        assert data['from_version'] == '1.0'
        assert data['version'] == '1.2'
        assert NS_V1DOT2 in data['xml']
        assert '<mimeType>application/octet-stream</mimeType>' in data['xml']
        assert '<certainty>Likely</certainty>' in data['xml']
        assert '<password>' not in data['xml']


class TestMessages:
    """Tests for POST /api/cap/encode and /api/cap/decode."""

    def test_encode(self, client):
        xml = read_fixture('v1dot1_earthquake.xml')
        data = client.post('/api/cap/encode', json={'xml': xml}).get_json()

        assert data['version'] == '1.1'
        message = data['message']
        assert message['identifier'] == 'TRI13970876.1'
        assert message['msg_type'] == pb.MsgType.UPDATE
        assert message['info'][0]['certainty'] == pb.Certainty.OBSERVED

    def test_encode_with_upgrade(self, client):
        xml = read_fixture('v1dot0_homeland_security.xml')
        data = client.post('/api/cap/encode', json={'xml': xml, 'upgrade': True}).get_json()

        assert data['version'] == '1.2'
        assert data['message']['xmlns'] == NS_V1DOT2
        assert data['message']['password'] is None

    def test_decode_round_trip(self, client):
        """Test that an encoded message decodes back to the same alert."""
        xml = read_fixture('v1dot2_evacuation.xml')
        message = client.post('/api/cap/encode', json={'xml': xml}).get_json()['message']
        data = client.post('/api/cap/decode', json={'message': message}).get_json()

        assert data['success'] is True
        assert data['version'] == '1.2'
        assert data['identifier'] == 'EOC-2024-0815-01'

        parsed = client.post('/api/cap/parse', json={'xml': data['xml']}).get_json()
        original = client.post('/api/cap/parse', json={'xml': xml}).get_json()
        assert parsed['alert'] == original['alert']

    def test_decode_unrepresentable(self, client):
        message = pb.Alert(
            xmlns=NS_V1DOT0, identifier='a', sender='b', sent='2024-01-01T00:00:00Z',
            status=pb.Status.DRAFT, scope=pb.Scope.PUBLIC,
        ).to_dict()
        response = client.post('/api/cap/decode', json={'message': message})
        data = response.get_json()

        assert response.status_code == 400
        assert data['field'] == 'status'

    def test_decode_text_field_with_control_character(self, client):
        xml = read_fixture('v1dot2_evacuation.xml')
        message = client.post('/api/cap/encode', json={'xml': xml}).get_json()['message']
        message['info'][0]['headline'] = 'bell\u0007'

        response = client.post('/api/cap/decode', json={'message': message})

        assert response.status_code == 400
        assert response.get_json()['field'] == 'headline'

    def test_decode_missing_message(self, client):
        response = client.post('/api/cap/decode', json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'No message provided'

    def test_decode_malformed_message(self, client):
        message = {'xmlns': NS_V1DOT2, 'scope': 'everyone'}
        response = client.post('/api/cap/decode', json={'message': message})

        assert response.status_code == 400
        assert response.get_json()['error'].startswith('Malformed message')
