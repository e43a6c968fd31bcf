"""
Base64 embedded content for <resource><derefUri> (CAP 1.1 and later)
"""

import base64
import binascii

from .errors import InvalidEmbeddedContentError

_ASCII_WHITESPACE = b' \t\n\r\x0b\x0c'


class EmbeddedContent:
    """Raw resource bytes carried inline as base64 text."""

    __slots__ = ('_data',)

    def __init__(self, data: bytes):
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidEmbeddedContentError(
                f"Embedded content must be bytes, got {type(data).__name__}"
            )
        self._data = bytes(data)

    @classmethod
    def parse(cls, text: str) -> 'EmbeddedContent':
        """Decode base64 text. Whitespace anywhere in the text is ignored."""
        raw = text.encode('ascii', errors='replace').translate(None, _ASCII_WHITESPACE)
        try:
            return cls(base64.b64decode(raw, validate=True))
        except (binascii.Error, ValueError) as e:
            raise InvalidEmbeddedContentError(f"Invalid base64 data: {e}") from e

    @property
    def data(self) -> bytes:
        return self._data

    def format(self) -> str:
        return base64.b64encode(self._data).decode('ascii')

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"EmbeddedContent({len(self._data)} bytes)"

    def __eq__(self, other) -> bool:
        if isinstance(other, EmbeddedContent):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray)):
            return self._data == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data)
