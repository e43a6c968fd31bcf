"""
Free text carried in CAP elements

XML 1.0 documents can only hold characters of its Char production:
    #x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]
Any other character (C0 controls, lone surrogates, U+FFFE, U+FFFF) would make
the written document unparseable, so models refuse it up front.
"""

import re

from .errors import InvalidTextError

INVALID_XML_CHARS = re.compile('[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]')


def check_text(value: str) -> str:
    """
    Return value unchanged if XML can carry it.

    Raises:
        InvalidTextError: If value is not a string or holds a non-XML character
    """
    if not isinstance(value, str):
        raise InvalidTextError(f"Expected str, got {type(value).__name__}")
    match = INVALID_XML_CHARS.search(value)
    if match:
        raise InvalidTextError(
            f"Character {match.group()!r} at position {match.start()} cannot appear in XML"
        )
    return value
