"""Static geohash tables.

Every table here is built once at import time and exposed read-only.
"""

from types import MappingProxyType
from typing import Mapping

# Standard geohash base32 alphabet (no a, i, l, o)
BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"

BASE32_DECODE_MAP: Mapping[str, int] = MappingProxyType(
    {char: index for index, char in enumerate(BASE32)}
)

BITS_PER_CHAR = 5

MIN_PRECISION = 1
MAX_PRECISION = 10

UNKNOWN_ACCURACY = "Unknown"

ACCURACY_LABELS: Mapping[int, str] = MappingProxyType(
    {
        1: "±2500 km",
        2: "±630 km",
        3: "±78 km",
        4: "±20 km",
        5: "±2.4 km",
        6: "±610 m",
        7: "±76 m",
        8: "±19 m",
        9: "±2.4 m",
        10: "±60 cm",
    }
)

# Same radii as ACCURACY_LABELS, in meters
ACCURACY_RADIUS_METERS: Mapping[int, float] = MappingProxyType(
    {
        1: 2_500_000.0,
        2: 630_000.0,
        3: 78_000.0,
        4: 20_000.0,
        5: 2_400.0,
        6: 610.0,
        7: 76.0,
        8: 19.0,
        9: 2.4,
        10: 0.6,
    }
)

PRECISION_DESCRIPTIONS: Mapping[int, str] = MappingProxyType(
    {
        1: "Country level",
        2: "Large region",
        3: "City level",
        4: "District level",
        5: "Neighborhood",
        6: "Village/Town",
        7: "Street level",
        8: "Building level",
        9: "Room level",
        10: "Very precise",
    }
)
