"""
CAP protocol constants

Namespaces and defaults shared by the three CAP dialects.
Reference: http://docs.oasis-open.org/emergency/cap/v1.2/CAP-v1.2.html
"""

# XML namespaces, one per dialect
NS_V1DOT0 = 'http://www.incident.com/cap/1.0'
NS_V1DOT1 = 'urn:oasis:names:tc:emergency:cap:1.1'
NS_V1DOT2 = 'urn:oasis:names:tc:emergency:cap:1.2'

NAMESPACES = (NS_V1DOT0, NS_V1DOT1, NS_V1DOT2)

# <language> when absent or empty
DEFAULT_LANGUAGE = 'en-US'

# <mimeType> became mandatory in CAP 1.2
DEFAULT_MIME_TYPE = 'application/octet-stream'

# geometry limits
MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0
MAX_CIRCLE_RADIUS_KM = 20000.0
POLYGON_MIN_POINTS = 4

SHA1_HEX_LENGTH = 40

# top-level labels for which a scheme-less URL gets "http://" prepended
URL_ASSUMED_TLDS = ('com', 'org', 'net', 'gov', 'us')
URL_EMPTY_VALUES = ('http://', 'https://')
