"""
CAP (Common Alerting Protocol) codec

Implements OASIS CAP v1.0, v1.1 and v1.2 for alert interchange.
Parses and writes CAP XML, upgrades older alerts to v1.2, and converts to and
from Google's CAP protocol buffer message shapes.
"""

from . import v1dot0, v1dot1, v1dot2
from .alert import Alert, Version, parse_alert, parse_alert_file
from .errors import CAPError, ConversionError, UnknownNamespaceError, XMLFormatError
from .upgrade import upgrade_to_latest, upgrade_v1dot0, upgrade_v1dot1

__all__ = [
    'v1dot0', 'v1dot1', 'v1dot2',
    'Alert', 'Version', 'parse_alert', 'parse_alert_file',
    'CAPError', 'ConversionError', 'UnknownNamespaceError', 'XMLFormatError',
    'upgrade_to_latest', 'upgrade_v1dot0', 'upgrade_v1dot1',
]
