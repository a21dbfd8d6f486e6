"""Geohash encoding, decoding and precision classification.

A geohash interleaves longitude and latitude bisection bits, longitude
first, five bits per base32 character. The decoded coordinate is the
midpoint of the final cell.
"""

from georecon.core.constants import (
    ACCURACY_LABELS,
    ACCURACY_RADIUS_METERS,
    BASE32,
    BASE32_DECODE_MAP,
    BITS_PER_CHAR,
    MAX_PRECISION,
    MIN_PRECISION,
    PRECISION_DESCRIPTIONS,
    UNKNOWN_ACCURACY,
)
from georecon.core.exceptions import InvalidGeohash, InvalidPrecision, OutOfRange
from georecon.models.location import DecodedLocation, GeoPoint

BoundingBox = tuple[float, float, float, float]

_MASKS = (16, 8, 4, 2, 1)


def validate_precision(precision: object) -> int:
    """Return *precision* if it is an integer level between 1 and 10.

    Raises:
        InvalidPrecision: For anything else, including bools
    """
    if (
        isinstance(precision, bool)
        or not isinstance(precision, int)
        or not MIN_PRECISION <= precision <= MAX_PRECISION
    ):
        raise InvalidPrecision(precision)
    return precision


def normalize_geohash(geohash: object) -> str:
    """Validate a geohash string and return it in lower case.

    Raises:
        InvalidGeohash: If the value is empty, too long or uses characters
            outside the geohash alphabet
    """
    if not isinstance(geohash, str):
        raise InvalidGeohash(geohash, "not a string")
    if not geohash:
        raise InvalidGeohash(geohash, "empty")
    if len(geohash) > MAX_PRECISION:
        raise InvalidGeohash(geohash, f"longer than {MAX_PRECISION} characters")

    normalized = geohash.lower()
    for char in normalized:
        if char not in BASE32_DECODE_MAP:
            raise InvalidGeohash(geohash, f"invalid character {char!r}")
    return normalized


def is_valid_geohash(geohash: object) -> bool:
    """Return True if *geohash* would decode."""
    try:
        normalize_geohash(geohash)
    except InvalidGeohash:
        return False
    return True


def decode_bbox(geohash: str) -> BoundingBox:
    """Return (lat_min, lat_max, lon_min, lon_max) of the geohash cell."""
    normalized = normalize_geohash(geohash)

    lat_min, lat_max = -90.0, 90.0
    lon_min, lon_max = -180.0, 180.0
    even = True

    for char in normalized:
        value = BASE32_DECODE_MAP[char]
        for mask in _MASKS:
            if even:
                mid = (lon_min + lon_max) / 2
                if value & mask:
                    lon_min = mid
                else:
                    lon_max = mid
            else:
                mid = (lat_min + lat_max) / 2
                if value & mask:
                    lat_min = mid
                else:
                    lat_max = mid
            even = not even

    return lat_min, lat_max, lon_min, lon_max


def ensure_in_range(latitude: float, longitude: float) -> None:
    """Raise OutOfRange unless the coordinate is a valid WGS84 position."""
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise OutOfRange(latitude, longitude)


def decode_point(geohash: str) -> GeoPoint:
    """Decode a geohash to the midpoint of its cell."""
    lat_min, lat_max, lon_min, lon_max = decode_bbox(geohash)
    latitude = (lat_min + lat_max) / 2
    longitude = (lon_min + lon_max) / 2
    ensure_in_range(latitude, longitude)
    return GeoPoint(latitude=latitude, longitude=longitude)


def decode(geohash: str, record_id: str = "") -> DecodedLocation:
    """Decode a geohash into a DecodedLocation.

    Args:
        geohash: Geohash of 1-10 base32 characters (case-insensitive)
        record_id: Identifier of the record the geohash belongs to

    Returns:
        DecodedLocation with the cell midpoint, precision and accuracy label

    Raises:
        InvalidGeohash: If the geohash is malformed
        OutOfRange: If the decoded point is outside the valid range
    """
    normalized = normalize_geohash(geohash)
    precision = len(normalized)
    return DecodedLocation(
        id=record_id,
        point=decode_point(normalized),
        precision=precision,
        accuracy=accuracy_label(precision),
        source_geohash=normalized,
    )


def encode(latitude: float, longitude: float, precision: int) -> str:
    """Encode a coordinate to a geohash of *precision* characters.

    Raises:
        OutOfRange: If the coordinate is invalid
        InvalidPrecision: If precision is not between 1 and 10
    """
    validate_precision(precision)
    ensure_in_range(latitude, longitude)

    lat_min, lat_max = -90.0, 90.0
    lon_min, lon_max = -180.0, 180.0
    even = True
    chars: list[str] = []

    while len(chars) < precision:
        value = 0
        for mask in _MASKS:
            if even:
                mid = (lon_min + lon_max) / 2
                if longitude >= mid:
                    value |= mask
                    lon_min = mid
                else:
                    lon_max = mid
            else:
                mid = (lat_min + lat_max) / 2
                if latitude >= mid:
                    value |= mask
                    lat_min = mid
                else:
                    lat_max = mid
            even = not even
        chars.append(BASE32[value])

    return "".join(chars)


def snap(point: GeoPoint, precision: int) -> tuple[str, GeoPoint]:
    """Re-encode *point* at *precision* and return (geohash, cell midpoint)."""
    geohash = encode(point.latitude, point.longitude, precision)
    return geohash, decode_point(geohash)


def cell_size_degrees(precision: int) -> tuple[float, float]:
    """Return (height, width) in degrees of a cell at *precision*."""
    validate_precision(precision)
    total_bits = precision * BITS_PER_CHAR
    lon_bits = (total_bits + 1) // 2
    lat_bits = total_bits // 2
    return 180.0 / (1 << lat_bits), 360.0 / (1 << lon_bits)


def accuracy_label(precision: int) -> str:
    """Human-readable accuracy radius for a precision level."""
    return ACCURACY_LABELS.get(precision, UNKNOWN_ACCURACY)


def accuracy_radius_meters(precision: int) -> float | None:
    """Accuracy radius in meters, or None for unknown levels."""
    return ACCURACY_RADIUS_METERS.get(precision)


def describe_precision(precision: int) -> str:
    """Short description of what a precision level resolves (e.g. "City level")."""
    return PRECISION_DESCRIPTIONS.get(precision, UNKNOWN_ACCURACY)
