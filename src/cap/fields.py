"""
Field coercion for the CAP dialect models

Each dialect dataclass calls coerce() from __post_init__ so that models can be
built from raw strings ("Actual", "2002-05-24T16:49:00-07:00") as well as
from the scalar types. Values of the wrong type, or enum members belonging to
another dialect, raise ModelError.
"""

import math
from enum import Enum
from typing import Any, Callable, Iterable

from .digest import Sha1Digest
from .embedded import EmbeddedContent
from .errors import CAPError, ModelError
from .geo import Circle, Polygon
from .identifier import Id
from .items import Items
from .language import Language
from .multimap import Map
from .numbers import MAX_UNSIGNED
from .references import References
from .text import check_text
from .timestamp import DateTime
from .url import check_url


def coerce(obj: Any, name: str, convert: Callable[[Any], Any], optional: bool = False) -> None:
    """
    Replace obj.<name> with convert(value) on a frozen dataclass.

    Raises:
        ModelError: If a required value is None or the conversion fails
    """
    value = getattr(obj, name)
    if value is None:
        if optional:
            return
        raise ModelError(f"{type(obj).__name__}.{name} is required")
    try:
        converted = convert(value)
    except ModelError:
        raise
    except (CAPError, TypeError, ValueError) as e:
        raise ModelError(f"{type(obj).__name__}.{name}: {e}") from e
    object.__setattr__(obj, name, converted)


def enum_of(enum_cls: type) -> Callable[[Any], Enum]:
    def convert(value):
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, Enum):
            raise ModelError(
                f"{type(value).__module__}.{type(value).__name__}.{value.name} "
                f"is not a {enum_cls.__module__}.{enum_cls.__name__}"
            )
        if isinstance(value, str):
            return enum_cls(value)
        raise ModelError(f"Expected {enum_cls.__name__}, got {type(value).__name__}")
    return convert


def tuple_of(convert: Callable[[Any], Any]) -> Callable[[Iterable], tuple]:
    def convert_all(values):
        if isinstance(values, (str, bytes)):
            raise ModelError(f"Expected a sequence, got {type(values).__name__}")
        return tuple(convert(v) for v in values)
    return convert_all


def instance_of(cls: type) -> Callable[[Any], Any]:
    """For nested models, which are never built implicitly."""
    def convert(value):
        if not isinstance(value, cls):
            raise ModelError(
                f"Expected {cls.__module__}.{cls.__name__}, got "
                f"{type(value).__module__}.{type(value).__name__}"
            )
        return value
    return convert


def map_of(map_cls: type) -> Callable[[Any], Map]:
    def convert(value):
        if type(value) is map_cls:
            return value
        if isinstance(value, Map):
            raise ModelError(f"Expected {map_cls.__name__}, got {type(value).__name__}")
        if isinstance(value, dict):
            return map_cls(value.items())
        if isinstance(value, (str, bytes)):
            raise ModelError(f"Expected {map_cls.__name__}, got {type(value).__name__}")
        return map_cls(value)
    return convert


def text(value: Any) -> str:
    if not isinstance(value, str):
        raise ModelError(f"Expected str, got {type(value).__name__}")
    return check_text(value)


def identifier(value: Any) -> Id:
    return value if isinstance(value, Id) else Id(value)


def timestamp(value: Any) -> DateTime:
    return DateTime.coerce(value)


def language(value: Any) -> Language:
    return Language.coerce(value)


def items(value: Any) -> Items:
    if isinstance(value, Items):
        return value
    if isinstance(value, str):
        return Items.parse(value)
    return Items(value)


def references(value: Any) -> References:
    if isinstance(value, References):
        return value
    if isinstance(value, str):
        return References.parse(value)
    return References(value)


def url(value: Any) -> str:
    return check_url(value)


def size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ModelError(f"Size must be an integer, got {type(value).__name__}")
    if not 0 <= value <= MAX_UNSIGNED:
        raise ModelError(f"Size out of range: {value}")
    return value


def decimal(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ModelError(f"Expected a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ModelError(f"Expected a finite number, got {value}")
    return float(value)


def polygon(value: Any) -> Polygon:
    if isinstance(value, Polygon):
        return value
    if isinstance(value, str):
        return Polygon.parse(value)
    return Polygon(value)


def circle(value: Any) -> Circle:
    if isinstance(value, Circle):
        return value
    if isinstance(value, str):
        return Circle.parse(value)
    raise ModelError(f"Expected Circle, got {type(value).__name__}")


def digest(value: Any) -> Sha1Digest:
    if isinstance(value, Sha1Digest):
        return value
    if isinstance(value, str):
        return Sha1Digest.parse(value)
    return Sha1Digest(value)


def embedded(value: Any) -> EmbeddedContent:
    if isinstance(value, EmbeddedContent):
        return value
    return EmbeddedContent(value)
