"""Great-circle distance utilities."""

from math import asin, cos, pi, radians, sin, sqrt

from georecon.core.geohash.codec import cell_size_degrees
from georecon.models.location import GeoPoint

# Mean Earth radius in meters
EARTH_RADIUS_METERS = 6_371_000.0

# Length of one degree of arc on the mean sphere
METERS_PER_DEGREE = pi * EARTH_RADIUS_METERS / 180.0


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Calculate the great circle distance between two points in meters.

    Near-antipodal pairs are only as accurate as floating point allows;
    that is a known limitation of the formula, not something corrected here.
    """
    lat1, lon1, lat2, lon2 = map(
        radians, [a.latitude, a.longitude, b.latitude, b.longitude]
    )

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    h = min(1.0, h)

    return 2 * EARTH_RADIUS_METERS * asin(sqrt(h))


def cell_diagonal_meters(precision: int) -> float:
    """Diagonal of a geohash cell at *precision*, measured at the equator.

    Cells shrink east-west away from the equator, so this is the largest
    diagonal a cell of this precision can have.
    """
    height_deg, width_deg = cell_size_degrees(precision)
    height = height_deg * METERS_PER_DEGREE
    width = width_deg * METERS_PER_DEGREE
    return sqrt(height**2 + width**2)
