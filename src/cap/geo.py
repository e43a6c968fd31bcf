"""
CAP geometry: points, polygons and circles

Coordinates are WGS 84 latitude/longitude pairs written "lat,lon".
A polygon is a whitespace-separated list of at least four points whose first
and last points are equal. A circle is a center point and a radius in
kilometers, written "lat,lon radius".
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from .constants import (
    MAX_CIRCLE_RADIUS_KM, MAX_LATITUDE, MAX_LONGITUDE, POLYGON_MIN_POINTS,
)
from .errors import (
    InvalidCircleError, InvalidNumberError, InvalidPointError, InvalidPolygonError,
)
from .numbers import format_decimal, parse_decimal


@dataclass(frozen=True)
class Point:
    """A WGS 84 coordinate pair."""
    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinate ranges."""
        lat, lon = self.latitude, self.longitude
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            raise InvalidPointError(f"Coordinates must be numbers: {lat!r}, {lon!r}")
        # NaN fails both comparisons
        if not (-MAX_LATITUDE <= lat <= MAX_LATITUDE and -MAX_LONGITUDE <= lon <= MAX_LONGITUDE):
            raise InvalidPointError(
                f"Coordinates out of range: {lat} latitude, {lon} longitude"
            )
        object.__setattr__(self, 'latitude', float(lat))
        object.__setattr__(self, 'longitude', float(lon))

    @classmethod
    def parse(cls, text: str) -> 'Point':
        parts = text.split(',')
        if len(parts) != 2:
            raise InvalidPointError(f"Bad point format: {text!r}")
        try:
            latitude, longitude = (parse_decimal(p) for p in parts)
        except InvalidNumberError as e:
            raise InvalidPointError(f"Bad point format: {text!r}") from e
        return cls(latitude, longitude)

    def format(self) -> str:
        return f"{format_decimal(self.latitude)},{format_decimal(self.longitude)}"

    def __str__(self) -> str:
        return self.format()


class Polygon:
    """
    A closed ring of points.

    Raises InvalidPolygonError when given fewer than four points or when the
    first and last points differ.
    """

    __slots__ = ('_points',)

    def __init__(self, points: Iterable[Point]):
        points = tuple(points)
        for point in points:
            if not isinstance(point, Point):
                raise InvalidPolygonError(f"Polygon points must be Point, got {type(point).__name__}")
        if len(points) < POLYGON_MIN_POINTS:
            raise InvalidPolygonError(
                f"Polygon contains too few points: got {len(points)} vs {POLYGON_MIN_POINTS} minimum"
            )
        if points[0] != points[-1]:
            raise InvalidPolygonError(
                f"Shape not closed: first point {points[0]} != last point {points[-1]}"
            )
        self._points = points

    @classmethod
    def parse(cls, text: str) -> 'Polygon':
        try:
            points = [Point.parse(p) for p in text.split()]
        except InvalidPointError as e:
            raise InvalidPolygonError(f"Polygon contains invalid point: {e}") from e
        return cls(points)

    @property
    def points(self) -> Tuple[Point, ...]:
        return self._points

    def format(self) -> str:
        return ' '.join(p.format() for p in self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Polygon({self.format()!r})"


@dataclass(frozen=True)
class Circle:
    """A center point and a radius in kilometers."""
    center: Point
    radius: float

    def __post_init__(self):
        """Validate center and radius."""
        if not isinstance(self.center, Point):
            raise InvalidCircleError(f"Circle center must be a Point, got {type(self.center).__name__}")
        radius = self.radius
        if not isinstance(radius, (int, float)) or not (0.0 <= radius < MAX_CIRCLE_RADIUS_KM):
            raise InvalidCircleError(f"Circle radius out of range: {radius!r} km")
        object.__setattr__(self, 'radius', float(radius))

    @classmethod
    def parse(cls, text: str) -> 'Circle':
        parts = text.split()
        if len(parts) != 2:
            raise InvalidCircleError(f"Unparseable circle string: {text!r}")
        try:
            radius = parse_decimal(parts[1])
        except InvalidNumberError as e:
            raise InvalidCircleError(f"Unparseable circle string: {text!r}") from e
        try:
            center = Point.parse(parts[0])
        except InvalidPointError as e:
            raise InvalidCircleError(f"Circle center point is invalid: {e}") from e
        return cls(center, radius)

    def format(self) -> str:
        return f"{self.center.format()} {format_decimal(self.radius)}"

    def __str__(self) -> str:
        return self.format()
