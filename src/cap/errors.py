"""
CAP error types

Every error raised by the codec derives from CAPError, which is a ValueError,
so callers that only catch ValueError keep working.
"""

from typing import Any, Optional


class CAPError(ValueError):
    """Base class for all CAP validation and conversion errors."""


# scalar validation errors

class InvalidDateTimeError(CAPError):
    """Timestamp does not match YYYY-MM-DDTHH:MM:SS with an explicit offset."""


class InvalidIdError(CAPError):
    """Identifier is empty or contains whitespace, ',', '<' or '&'."""


class InvalidLanguageError(CAPError):
    """Language tag is not a valid RFC 3066 code."""


class InvalidItemError(CAPError):
    """Delimited item contains a double quote."""


class UnclosedQuotesError(CAPError):
    """Delimited item list has an unterminated quoted span."""


class InvalidNumberError(CAPError):
    """Numeric text is not a plain decimal number."""


class InvalidPointError(CAPError):
    """Point is malformed or its coordinates are out of range."""


class InvalidPolygonError(CAPError):
    """Polygon has too few points, is not closed, or has a bad point."""


class InvalidCircleError(CAPError):
    """Circle is malformed, has a bad center, or an out of range radius."""


class InvalidDigestError(CAPError):
    """SHA-1 digest is not 40 hexadecimal characters."""


class InvalidEmbeddedContentError(CAPError):
    """Embedded content is not valid base64."""


class InvalidKeyError(CAPError):
    """CAP 1.0 map key contains a space or one of '<', '>', '&', ',', '='."""


class InvalidMapEntryError(CAPError):
    """CAP 1.0 map entry is missing its '=' separator."""


class InvalidReferenceError(CAPError):
    """Reference is not a valid sender,identifier,sent triple."""


class InvalidUrlError(CAPError):
    """URL could not be parsed, even after assuming a missing scheme."""


class InvalidTextError(CAPError):
    """Text contains a character that XML 1.0 cannot carry."""


# model errors

class ModelError(CAPError):
    """Aggregate was constructed with a value of the wrong type or dialect."""


# text form errors

class XMLFormatError(CAPError):
    """
    CAP XML could not be decoded.

    Attributes:
        field: Element name that failed, if the failure is field specific
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnknownNamespaceError(CAPError):
    """Namespace does not identify a supported CAP dialect."""

    def __init__(self, namespace: str):
        super().__init__(f"Unknown CAP namespace: {namespace!r}")
        self.namespace = namespace


# binary bridge errors

class ConversionError(CAPError):
    """
    A protobuf message could not be converted into a CAP model.

    Attributes:
        message: Name of the protobuf message being converted (e.g. 'Info')
        field: Name of the offending protobuf field (e.g. 'certainty')
    """

    def __init__(self, message: str, field: str, detail: str):
        super().__init__(f"{message}.{field}: {detail}")
        self.message = message
        self.field = field


class InvalidEnumValueError(ConversionError):
    """Integer enum value has no meaning in the protobuf schema."""

    def __init__(self, message: str, field: str, value: int):
        super().__init__(message, field, f"invalid enum value {value}")
        self.value = value


class UnrepresentableValueError(ConversionError):
    """Enum value is valid but the target CAP dialect has no equivalent."""

    def __init__(self, message: str, field: str, value: Any):
        name = getattr(value, 'name', value)
        super().__init__(message, field, f"{name} cannot be represented in this CAP version")
        self.value = value


class MissingFieldError(ConversionError):
    """Field required by the target CAP dialect is absent."""

    def __init__(self, message: str, field: str):
        super().__init__(message, field, "missing")


class InvalidFieldValueError(ConversionError):
    """Field value fails its own grammar or does not fit the target type."""

    def __init__(self, message: str, field: str, value: Any, reason: Any = None):
        detail = f"invalid value {value!r}"
        if reason is not None:
            detail = f"{detail} ({reason})"
        super().__init__(message, field, detail)
        self.value = value


class DerefUriPresentError(ConversionError):
    """derefUri is set but CAP 1.0 has no embedded content."""

    def __init__(self, message: str = 'Resource', field: str = 'deref_uri'):
        super().__init__(message, field, "not supported by CAP 1.0")
