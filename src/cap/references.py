"""
Alert references for <references>

Each reference names an earlier message as "sender,identifier,sent"; multiple
references are separated by whitespace.
"""

from dataclasses import dataclass
from typing import Iterable

from .errors import CAPError, InvalidReferenceError
from .identifier import Id
from .timestamp import DateTime


@dataclass(frozen=True)
class Reference:
    """The extended identifier of an earlier CAP message."""
    sender: Id
    identifier: Id
    sent: DateTime

    def __post_init__(self):
        """Coerce raw strings into their CAP types."""
        try:
            if not isinstance(self.sender, Id):
                object.__setattr__(self, 'sender', Id(self.sender))
            if not isinstance(self.identifier, Id):
                object.__setattr__(self, 'identifier', Id(self.identifier))
            object.__setattr__(self, 'sent', DateTime.coerce(self.sent))
        except CAPError as e:
            raise InvalidReferenceError(f"Invalid reference: {e}") from e

    @classmethod
    def parse(cls, text: str) -> 'Reference':
        """
        Parse one "sender,identifier,sent" triple.

        Raises:
            InvalidReferenceError: If the triple is malformed or a part is invalid
        """
        parts = text.split(',')
        if len(parts) != 3:
            raise InvalidReferenceError(f"Invalid reference format: {text!r}")

        sender, identifier, sent = parts
        try:
            sender = Id(sender)
        except CAPError as e:
            raise InvalidReferenceError(f"Invalid sender: {e}") from e
        try:
            identifier = Id(identifier)
        except CAPError as e:
            raise InvalidReferenceError(f"Invalid identifier: {e}") from e
        try:
            sent = DateTime.parse(sent)
        except CAPError as e:
            raise InvalidReferenceError(f"Invalid sent timestamp: {e}") from e
        return cls(sender, identifier, sent)

    def format(self) -> str:
        return f"{self.sender},{self.identifier},{self.sent}"

    def __str__(self) -> str:
        return self.format()


class References(tuple):
    """An immutable sequence of Reference values."""

    def __new__(cls, references: Iterable[Reference] = ()):
        references = tuple(references)
        for ref in references:
            if not isinstance(ref, Reference):
                raise InvalidReferenceError(f"Expected Reference, got {type(ref).__name__}")
        return super().__new__(cls, references)

    @classmethod
    def parse(cls, text: str) -> 'References':
        return cls(Reference.parse(part) for part in text.split())

    def format(self) -> str:
        return ' '.join(ref.format() for ref in self)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"References({self.format()!r})"
