"""
Decimal number grammar shared by coordinates, radii, altitudes and sizes
"""

import re
from decimal import Decimal

from .errors import InvalidNumberError

DECIMAL_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
INTEGER_PATTERN = re.compile(r'^\+?\d+$')

MAX_UNSIGNED = 2 ** 64 - 1


def parse_decimal(text: str) -> float:
    """Parse a plain decimal number ("38.47", "-120", "1e3")."""
    text = text.strip()
    if not DECIMAL_PATTERN.fullmatch(text):
        raise InvalidNumberError(f"Invalid number: {text!r}")
    return float(text)


def parse_unsigned(text: str) -> int:
    """Parse a 64-bit unsigned integer, as used by <size>."""
    text = text.strip()
    if not INTEGER_PATTERN.fullmatch(text):
        raise InvalidNumberError(f"Invalid unsigned integer: {text!r}")
    value = int(text)
    if value > MAX_UNSIGNED:
        raise InvalidNumberError(f"Integer too large: {text!r}")
    return value


def format_decimal(value: float) -> str:
    """
    Format a number in its shortest form.

    Whole numbers drop the fractional part (100.0 -> "100") and exponents are
    expanded (1e-05 -> "0.00001").
    """
    text = repr(float(value))
    if 'e' in text or 'E' in text:
        text = format(Decimal(text), 'f')
    if text.endswith('.0'):
        text = text[:-2]
    return text
