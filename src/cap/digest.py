"""
SHA-1 digests for <resource><digest>
"""

import binascii
import hashlib
from typing import Union

from .constants import SHA1_HEX_LENGTH
from .errors import InvalidDigestError


class Sha1Digest:
    """A 20-byte SHA-1 digest, written as 40 hexadecimal characters."""

    __slots__ = ('_bytes',)

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray)) or len(value) != SHA1_HEX_LENGTH // 2:
            raise InvalidDigestError("SHA-1 digest must be exactly 20 bytes")
        self._bytes = bytes(value)

    @classmethod
    def parse(cls, text: str) -> 'Sha1Digest':
        """
        Parse a hex digest, ignoring case and surrounding whitespace.

        Raises:
            InvalidDigestError: If the text is not 40 hex characters
        """
        text = text.strip()
        if len(text) != SHA1_HEX_LENGTH:
            raise InvalidDigestError(
                f"SHA-1 digest must be {SHA1_HEX_LENGTH} characters long: got {len(text)}"
            )
        try:
            return cls(binascii.unhexlify(text))
        except (binascii.Error, ValueError) as e:
            raise InvalidDigestError(f"SHA-1 digest must be hexadecimal: got {text!r}") from e

    @classmethod
    def of(cls, data: Union[bytes, 'bytearray']) -> 'Sha1Digest':
        """Compute the digest of some content."""
        return cls(hashlib.sha1(bytes(data)).digest())

    def __bytes__(self) -> bytes:
        return self._bytes

    def format(self) -> str:
        return self._bytes.hex()

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Sha1Digest({self.format()!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Sha1Digest):
            return self._bytes == other._bytes
        if isinstance(other, (bytes, bytearray)):
            return self._bytes == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)
