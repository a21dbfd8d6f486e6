"""Geohash codec package.

This package provides:
- Geohash decoding to cell midpoints and bounding boxes
- Geohash encoding at a chosen precision
- Static precision/accuracy lookup tables
"""

from georecon.core.constants import (
    ACCURACY_LABELS,
    ACCURACY_RADIUS_METERS,
    BASE32,
    MAX_PRECISION,
    MIN_PRECISION,
    UNKNOWN_ACCURACY,
)
from georecon.core.geohash.codec import (
    accuracy_label,
    accuracy_radius_meters,
    cell_size_degrees,
    decode,
    decode_bbox,
    decode_point,
    describe_precision,
    encode,
    ensure_in_range,
    is_valid_geohash,
    normalize_geohash,
    snap,
    validate_precision,
)

__all__ = [
    "ACCURACY_LABELS",
    "ACCURACY_RADIUS_METERS",
    "BASE32",
    "MAX_PRECISION",
    "MIN_PRECISION",
    "UNKNOWN_ACCURACY",
    "accuracy_label",
    "accuracy_radius_meters",
    "cell_size_degrees",
    "decode",
    "decode_bbox",
    "decode_point",
    "describe_precision",
    "encode",
    "ensure_in_range",
    "is_valid_geohash",
    "normalize_geohash",
    "snap",
    "validate_precision",
]
