"""
Flask routes for the CAP codec
"""

import logging
from typing import Any

from flask import Blueprint, jsonify, request

from ..cap import Alert, CAPError, Version
from ..cap.alert import AlertHeader
from ..cap.protobuf import decode_alert, encode_alert
from ..cap.protobuf.messages import Alert as AlertMessage

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


def _error(message: str, status: int = 400, **extra):
    body = {'success': False, 'error': message}
    body.update(extra)
    return jsonify(body), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _read_xml() -> Any:
    """
    Get CAP XML from the request.

    Accepts:
        - JSON with 'xml' field containing CAP XML string
        - Plain text CAP XML (Content-Type: application/xml or text/xml)
    """
    if request.content_type and ('xml' in request.content_type or 'text/plain' in request.content_type):
        return request.get_data(as_text=True)
    return _json_body().get('xml', '')


def _require_xml():
    """Return (xml, None), or (None, error response) when no usable XML was sent."""
    xml_content = _read_xml()
    if xml_content is None or xml_content == '':
        return None, _error('No CAP XML provided')
    if not isinstance(xml_content, str):
        return None, _error("'xml' must be a string")
    return xml_content, None


def _header(alert: AlertHeader) -> dict:
    return {
        'identifier': str(alert.identifier),
        'sender': str(alert.sender),
        'sent': str(alert.sent),
    }


@api_bp.route('/cap/status', methods=['GET'])
def cap_status():
    """List the supported CAP versions."""
    return jsonify({
        'available': True,
        'versions': [
            {'version': v.value, 'namespace': v.namespace} for v in Version
        ],
    })


@api_bp.route('/cap/parse', methods=['POST'])
def parse_cap_xml():
    """
    Parse CAP XML of any version and return structured data.

    Returns:
        JSON with the detected version, the alert header, and the alert as
        a protobuf-shaped dictionary
    """
    xml_content, error = _require_xml()
    if error:
        return error

    try:
        alert = Alert.parse(xml_content)
    except CAPError as e:
        logger.warning("Rejected CAP XML: %s", e)
        return _error(str(e), field=getattr(e, 'field', None))

    return jsonify({
        'success': True,
        'version': alert.version.value,
        'namespace': alert.xml_namespace,
        **_header(alert),
        'alert': encode_alert(alert).to_dict(),
    })


@api_bp.route('/cap/validate', methods=['POST'])
def validate_cap():
    """
    Validate CAP XML.

    Request JSON:
        xml: str - CAP XML content

    Returns:
        Validation result; invalid XML is reported with valid=false and the
        failing element, not as an HTTP error
    """
    xml_content, error = _require_xml()
    if error:
        return error

    try:
        alert = Alert.parse(xml_content)
    except CAPError as e:
        return jsonify({
            'success': True,
            'valid': False,
            'error': str(e),
            'field': getattr(e, 'field', None),
        })

    return jsonify({
        'success': True,
        'valid': True,
        'version': alert.version.value,
        'info_count': len(alert.inner.info),
    })


@api_bp.route('/cap/upgrade', methods=['POST'])
def upgrade_cap():
    """
    Upgrade CAP XML of any version to CAP 1.2.

    Request JSON:
        xml: str - CAP XML content

    Returns:
        JSON with the original version and the CAP 1.2 XML
    """
    xml_content, error = _require_xml()
    if error:
        return error

    try:
        alert = Alert.parse(xml_content)
    except CAPError as e:
        logger.warning("Rejected CAP XML: %s", e)
        return _error(str(e), field=getattr(e, 'field', None))

    latest = alert.into_latest()
    return jsonify({
        'success': True,
        'from_version': alert.version.value,
        'version': Version.V1DOT2.value,
        'xml': latest.to_xml(),
    })


@api_bp.route('/cap/encode', methods=['POST'])
def encode_cap():
    """
    Convert CAP XML to a protobuf-shaped message.

    Request JSON:
        xml: str - CAP XML content
        upgrade: bool - upgrade to CAP 1.2 first (optional, default false)

    Returns:
        JSON with the message dictionary
    """
    xml_content, error = _require_xml()
    if error:
        return error

    data = _json_body()
    try:
        alert = Alert.parse(xml_content)
    except CAPError as e:
        logger.warning("Rejected CAP XML: %s", e)
        return _error(str(e), field=getattr(e, 'field', None))

    if data.get('upgrade'):
        alert = Alert(alert.into_latest())

    return jsonify({
        'success': True,
        'version': alert.version.value,
        'message': encode_alert(alert).to_dict(),
    })


@api_bp.route('/cap/decode', methods=['POST'])
def decode_cap():
    """
    Convert a protobuf-shaped message to CAP XML.

    Request JSON:
        message: dict - message as returned by /cap/encode; its xmlns
            selects the CAP version
        upgrade: bool - upgrade to CAP 1.2 (optional, default false)

    Returns:
        JSON with the CAP XML
    """
    data = _json_body()
    message = data.get('message')
    if not isinstance(message, dict):
        return _error('No message provided')

    try:
        alert = decode_alert(AlertMessage.from_dict(message))
    except CAPError as e:
        logger.warning("Rejected protobuf message: %s", e)
        return _error(str(e), field=getattr(e, 'field', None))
    except (KeyError, TypeError, ValueError) as e:
        return _error(f'Malformed message: {e}')

    if data.get('upgrade'):
        alert = Alert(alert.into_latest())

    return jsonify({
        'success': True,
        'version': alert.version.value,
        **_header(alert),
        'xml': alert.to_xml(),
    })


@api_bp.route('/docs/openapi.json', methods=['GET'])
def get_openapi_spec():
    """Generate OpenAPI 3.0 specification."""
    def xml_operation(summary, operation_id):
        return {
            'post': {
                'tags': ['cap'],
                'summary': summary,
                'operationId': operation_id,
                'requestBody': {
                    'required': True,
                    'content': {
                        'application/json': {
                            'schema': {
                                'type': 'object',
                                'required': ['xml'],
                                'properties': {'xml': {'type': 'string'}},
                            }
                        },
                        'application/xml': {'schema': {'type': 'string'}},
                    },
                },
                'responses': {
                    '200': {'description': 'Success'},
                    '400': {'description': 'Invalid CAP'},
                },
            }
        }

    spec = {
        'openapi': '3.0.0',
        'info': {
            'title': 'CAP Codec API',
            'version': '1.0.0',
            'description': 'Parse, validate, upgrade and convert Common Alerting Protocol alerts',
        },
        'servers': [
            {'url': '/api', 'description': 'Local development server'}
        ],
        'tags': [
            {'name': 'cap', 'description': 'CAP parsing and conversion'}
        ],
        'paths': {
            '/cap/status': {
                'get': {
                    'tags': ['cap'],
                    'summary': 'List supported CAP versions',
                    'operationId': 'capStatus',
                    'responses': {'200': {'description': 'Supported versions'}},
                }
            },
            '/cap/parse': xml_operation('Parse CAP XML', 'parseCap'),
            '/cap/validate': xml_operation('Validate CAP XML', 'validateCap'),
            '/cap/upgrade': xml_operation('Upgrade CAP XML to CAP 1.2', 'upgradeCap'),
            '/cap/encode': xml_operation('Convert CAP XML to a protobuf-shaped message', 'encodeCap'),
            '/cap/decode': {
                'post': {
                    'tags': ['cap'],
                    'summary': 'Convert a protobuf-shaped message to CAP XML',
                    'operationId': 'decodeCap',
                    'requestBody': {
                        'required': True,
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'object',
                                    'required': ['message'],
                                    'properties': {
                                        'message': {'type': 'object'},
                                        'upgrade': {'type': 'boolean', 'default': False},
                                    },
                                }
                            }
                        },
                    },
                    'responses': {
                        '200': {'description': 'CAP XML'},
                        '400': {'description': 'Message cannot be represented'},
                    },
                }
            },
        },
    }
    return jsonify(spec)
