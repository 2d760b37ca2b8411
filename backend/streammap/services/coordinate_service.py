"""Coordinate normalization into canonical SRID-tagged points"""

import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

import shapely
from shapely.geometry import Point

logger = logging.getLogger(__name__)

WGS84_SRID = 4326
DEFAULT_PRECISION = 6

Number = Union[int, float, str, Decimal]


class CoordinateServiceError(Exception):
    """Base exception for coordinate normalization errors"""
    pass


class MissingCoordinatesError(CoordinateServiceError):
    """Latitude or longitude absent at normalization time"""
    pass


class InvalidCoordinateError(CoordinateServiceError):
    """Coordinate value is not a decimal number"""
    pass


def is_blank(value) -> bool:
    """True for None and whitespace-only strings"""
    return value is None or (isinstance(value, str) and not value.strip())


def round_coordinate(value: Number, precision: int = DEFAULT_PRECISION) -> str:
    """
    Round a coordinate to a fixed number of decimal places.

    Ties round away from zero (ROUND_HALF_UP), so 44.0000005 becomes
    "44.000001" and -44.0000005 becomes "-44.000001". The value is returned
    as a fixed-point string so no binary float rounding enters the result.

    Args:
        value: Raw coordinate (number or numeric string)
        precision: Number of decimal places to keep

    Returns:
        Rounded coordinate as a decimal string

    Raises:
        InvalidCoordinateError: If value is not numeric
    """
    try:
        decimal_value = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidCoordinateError(f"Coordinate {value!r} is not a decimal number") from e

    if not decimal_value.is_finite():
        raise InvalidCoordinateError(f"Coordinate {value!r} is not a finite number")

    quantum = Decimal(1).scaleb(-precision)
    return format(decimal_value.quantize(quantum, rounding=ROUND_HALF_UP), "f")


class GeometryFactory:
    """
    Builds points tagged with a fixed spatial reference identifier.
    """

    def __init__(self, srid: int = WGS84_SRID):
        self.srid = srid

    def point(self, x: Number, y: Number) -> Point:
        """
        Create a point in (x, y) axis order.

        Args:
            x: Longitude
            y: Latitude

        Returns:
            Immutable shapely Point carrying this factory's SRID
        """
        return shapely.set_srid(Point(float(x), float(y)), self.srid)


class CoordinateService:
    """
    Turns raw latitude/longitude input into the canonical point stored on a
    project record.
    """

    def __init__(self, geometry_factory: GeometryFactory, precision: int = DEFAULT_PRECISION):
        self.geometry_factory = geometry_factory
        self.precision = precision

    def normalize(self, latitude: Optional[Number], longitude: Optional[Number]) -> Point:
        """
        Round both coordinates and build a (longitude, latitude) point.

        Args:
            latitude: Raw latitude
            longitude: Raw longitude

        Returns:
            Canonical point whose x/y equal the rounded longitude/latitude

        Raises:
            MissingCoordinatesError: If either coordinate is absent
            InvalidCoordinateError: If either coordinate is not numeric
        """
        if is_blank(latitude) or is_blank(longitude):
            raise MissingCoordinatesError("Both latitude and longitude are required")

        rounded_latitude = round_coordinate(latitude, self.precision)
        rounded_longitude = round_coordinate(longitude, self.precision)

        logger.debug(
            f"Normalized ({latitude}, {longitude}) to ({rounded_latitude}, {rounded_longitude})"
        )
        return self.geometry_factory.point(rounded_longitude, rounded_latitude)
