"""
CAP identifiers

Used for <identifier>, <sender> and the parts of <references>. Identifiers
MUST NOT include spaces, commas or the restricted characters < and &.
"""

from .errors import InvalidIdError
from .text import check_text

PROHIBITED_CHARACTERS = (',', '<', '&')


class Id(str):
    """
    A validated CAP identifier.

    Id(value) validates the string as given; Id.parse(text) trims surrounding
    whitespace first.
    """

    def __new__(cls, value: str):
        if not isinstance(value, str):
            raise InvalidIdError(f"ID must be a string, got {type(value).__name__}")
        if not value:
            raise InvalidIdError("ID is empty")
        if any(c.isspace() for c in value):
            raise InvalidIdError(f"ID contains whitespace: {value!r}")
        for c in value:
            if c in PROHIBITED_CHARACTERS:
                raise InvalidIdError(f"ID contains prohibited character {c!r}: {value!r}")
        check_text(value)
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, text: str) -> 'Id':
        return cls(text.strip())

    def __repr__(self) -> str:
        return f"Id({str.__repr__(self)})"
