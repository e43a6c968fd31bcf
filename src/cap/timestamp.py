"""
CAP timestamps

CAP dateTime values carry second resolution and an explicit numeric offset,
e.g. "2002-05-24T16:49:00-07:00". UTC MUST be written as "-00:00"; on input
"Z" and "+00:00" are accepted as synonyms.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Union

from .errors import InvalidDateTimeError


class DateTime:
    """
    An instant with a fixed UTC offset, truncated to whole seconds.

    Equality compares instants, so "16:49:00-07:00" equals "23:49:00-00:00".
    """

    __slots__ = ('_value',)

    PATTERN = re.compile(
        r'^(\d{4})-(\d{2})-(\d{2})'        # date
        r'T(\d{2}):(\d{2}):(\d{2})'        # time
        r'(?:\.\d+)?'                      # fraction, discarded
        r'(Z|[+-]\d{2}:\d{2})$'            # offset, mandatory
    )

    def __init__(self, value: datetime):
        if not isinstance(value, datetime):
            raise InvalidDateTimeError(f"Expected datetime, got {type(value).__name__}")
        if value.tzinfo is None or value.utcoffset() is None:
            raise InvalidDateTimeError(f"Timestamp must have a UTC offset: {value.isoformat()}")
        offset = value.utcoffset()
        if offset % timedelta(minutes=1):
            raise InvalidDateTimeError(f"UTC offset must be whole minutes: {offset}")
        self._value = value.replace(microsecond=0, tzinfo=timezone(offset))

    @classmethod
    def parse(cls, text: str) -> 'DateTime':
        """
        Parse a CAP dateTime string.

        Args:
            text: Timestamp such as "2002-05-24T16:49:00-07:00"

        Returns:
            DateTime instance

        Raises:
            InvalidDateTimeError: If the text is malformed or has no offset
        """
        match = cls.PATTERN.fullmatch(text.strip())
        if not match:
            raise InvalidDateTimeError(f"Invalid timestamp: {text!r}")

        year, month, day, hour, minute, second, offset = match.groups()
        if offset == 'Z':
            tz = timezone.utc
        else:
            sign = -1 if offset[0] == '-' else 1
            hours, minutes = int(offset[1:3]), int(offset[4:6])
            if hours > 23 or minutes > 59:
                raise InvalidDateTimeError(f"Invalid UTC offset: {text!r}")
            tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

        try:
            value = datetime(int(year), int(month), int(day),
                             int(hour), int(minute), int(second), tzinfo=tz)
        except ValueError as e:
            raise InvalidDateTimeError(f"Invalid timestamp: {text!r} ({e})") from e
        return cls(value)

    @classmethod
    def coerce(cls, value: Union['DateTime', datetime, str]) -> 'DateTime':
        """Accept a DateTime, an aware datetime, or CAP text."""
        if isinstance(value, DateTime):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        return cls(value)

    @property
    def datetime(self) -> datetime:
        return self._value

    def format(self) -> str:
        offset = self._value.utcoffset()
        stamp = self._value.strftime('%Y-%m-%dT%H:%M:%S')
        if offset == timedelta(0):
            return stamp + '-00:00'

        total = int(offset.total_seconds()) // 60
        sign = '-' if total < 0 else '+'
        hours, minutes = divmod(abs(total), 60)
        return f"{stamp}{sign}{hours:02d}:{minutes:02d}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"DateTime({self.format()!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, DateTime):
            return self._value == other._value
        if isinstance(other, datetime) and other.tzinfo is not None:
            return self._value == other.replace(microsecond=0)
        return NotImplemented

    def __lt__(self, other: 'DateTime') -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)
