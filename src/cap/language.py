"""
RFC 3066 language tags for <info><language>
"""

import re
from typing import Optional

from .constants import DEFAULT_LANGUAGE
from .errors import InvalidLanguageError

LANGUAGE_PATTERN = re.compile(r'^[A-Za-z]{1,8}(-[A-Za-z0-9]{1,8})*$')


class Language:
    """
    An optional language tag.

    An absent or empty tag is "unspecified" and reads as en-US. Two languages
    compare equal when they read the same, so Language(None) == Language('en-US').
    """

    __slots__ = ('_value',)

    def __init__(self, value: Optional[str] = None):
        if value is not None and not isinstance(value, str):
            raise InvalidLanguageError(f"Language must be a string, got {type(value).__name__}")
        if value:
            if not LANGUAGE_PATTERN.fullmatch(value):
                raise InvalidLanguageError(f"Invalid language value: {value!r}")
            self._value = value
        else:
            self._value = None

    @classmethod
    def parse(cls, text: Optional[str]) -> 'Language':
        return cls(text.strip() if text else None)

    @classmethod
    def coerce(cls, value) -> 'Language':
        if isinstance(value, Language):
            return value
        return cls(value)

    @property
    def value(self) -> Optional[str]:
        """The tag as given, or None when unspecified."""
        return self._value

    def is_empty(self) -> bool:
        return self._value is None

    def __str__(self) -> str:
        return self._value or DEFAULT_LANGUAGE

    def __repr__(self) -> str:
        return f"Language({self._value!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Language):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))
