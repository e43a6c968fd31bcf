"""
Bridge between CAP models and Google's CAP protocol buffer messages
"""

from . import messages
from .convert import (
    decode_alert, decode_v1dot0_alert, decode_v1dot1_alert, decode_v1dot2_alert,
    encode_alert,
)

__all__ = [
    'messages',
    'decode_alert', 'decode_v1dot0_alert', 'decode_v1dot1_alert', 'decode_v1dot2_alert',
    'encode_alert',
]
