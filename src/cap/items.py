"""
Whitespace-delimited item lists

<addresses> and <incidents> hold space-separated items where an item
containing whitespace is enclosed in double quotes, e.g.
    foo "bar baz" qux
"""

from typing import Iterable

from .errors import InvalidItemError, UnclosedQuotesError
from .text import check_text


def _needs_quotes(item: str) -> bool:
    return not item or any(c.isspace() for c in item)


class Item(str):
    """A single delimited item. Items cannot contain double quotes."""

    def __new__(cls, value: str):
        if not isinstance(value, str):
            raise InvalidItemError(f"Item must be a string, got {type(value).__name__}")
        if '"' in value:
            raise InvalidItemError(f"Item contains a double quote: {value!r}")
        check_text(value)
        return super().__new__(cls, value)


class Items(tuple):
    """An immutable sequence of Item values."""

    def __new__(cls, items: Iterable[str] = ()):
        return super().__new__(cls, (i if isinstance(i, Item) else Item(i) for i in items))

    @classmethod
    def parse(cls, text: str) -> 'Items':
        """
        Parse a delimited item list.

        Args:
            text: Space-separated items, quoted where they contain spaces

        Returns:
            Items instance (possibly empty)

        Raises:
            UnclosedQuotesError: If a quoted span is not terminated
        """
        items = []
        current = []
        in_quotes = False

        for char in text:
            if in_quotes:
                if char == '"':
                    items.append(''.join(current))
                    current = []
                    in_quotes = False
                else:
                    current.append(char)
            elif char == '"':
                # a quote also terminates any unquoted token before it
                token = ''.join(current).strip()
                if token:
                    items.append(token)
                current = []
                in_quotes = True
            elif char.isspace():
                token = ''.join(current).strip()
                if token:
                    items.append(token)
                current = []
            else:
                current.append(char)

        if in_quotes:
            raise UnclosedQuotesError(f"Unclosed quotes in item list: {text!r}")

        token = ''.join(current).strip()
        if token:
            items.append(token)
        return cls(items)

    def format(self) -> str:
        return ' '.join(f'"{item}"' if _needs_quotes(item) else item for item in self)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Items({list(self)!r})"
