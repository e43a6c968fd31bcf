"""
Ordered multimaps for <eventCode>, <parameter> and <geocode>

CAP allows repeated names, so these are ordered lists of (name, value) pairs
rather than dicts.

CAP 1.1 and 1.2 write each entry as a pair of elements:
    <parameter><valueName>SAME</valueName><value>CEM</value></parameter>

CAP 1.0 writes each entry as a single string, split at the first '=':
    <parameter>SAME=CEM</parameter>
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import InvalidKeyError, InvalidMapEntryError
from .text import check_text

KEY_PROHIBITED_CHARACTERS = (' ', '<', '>', '&', ',', '=')


class Map:
    """
    An immutable ordered multimap of string names to string values.

    push() returns a new map; the receiver is unchanged.
    """

    __slots__ = ('_entries',)

    def __init__(self, entries: Iterable[Tuple[str, str]] = ()):
        self._entries = tuple(self._entry(name, value) for name, value in entries)

    def _entry(self, name, value) -> Tuple[str, str]:
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError(f"Map entries must be (str, str), got ({name!r}, {value!r})")
        return (check_text(name), check_text(value))

    def get(self, name: str) -> Optional[str]:
        """Return the first value for name, or None."""
        for key, value in self._entries:
            if key == name:
                return value
        return None

    def get_all(self, name: str) -> List[str]:
        """Return every value for name, in order."""
        return [value for key, value in self._entries if key == name]

    def push(self, name: str, value: str) -> 'Map':
        return type(self)(self._entries + ((name, value),))

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Map):
            return NotImplemented
        return type(self) is type(other) and self._entries == other._entries

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._entries))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._entries)!r})"


class Key(str):
    """A CAP 1.0 map key."""

    def __new__(cls, value: str):
        if not isinstance(value, str):
            raise InvalidKeyError(f"Key must be a string, got {type(value).__name__}")
        for c in KEY_PROHIBITED_CHARACTERS:
            if c in value:
                raise InvalidKeyError(f"Invalid map key: {value!r}")
        return super().__new__(cls, value)


class StringMap(Map):
    """
    CAP 1.0 multimap, whose entries are "key=value" strings.

    Keys are restricted: no spaces and none of '<', '>', '&', ',' or '='.
    """

    __slots__ = ()

    def _entry(self, name, value) -> Tuple[str, str]:
        name, value = super()._entry(name, value)
        return (name if isinstance(name, Key) else Key(name), value)

    @staticmethod
    def parse_entry(text: str) -> Tuple[Key, str]:
        """
        Split a "key=value" entry at the first '='.

        Raises:
            InvalidMapEntryError: If there is no '='
            InvalidKeyError: If the key contains a restricted character
        """
        key, sep, value = text.partition('=')
        if not sep:
            raise InvalidMapEntryError(f'Invalid map entry: missing "=": {text!r}')
        return Key(key), value

    @staticmethod
    def format_entry(key: str, value: str) -> str:
        return f"{key}={value}"

    @classmethod
    def parse(cls, entries: Iterable[str]) -> 'StringMap':
        return cls(cls.parse_entry(e) for e in entries)

    def to_map(self) -> Map:
        """Re-encode as a CAP 1.1+ map."""
        return Map((str(key), value) for key, value in self)
