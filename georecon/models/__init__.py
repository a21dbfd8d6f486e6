"""Data models for the reconciliation engine."""

from georecon.models.adapters import record_from_event, records_from_events
from georecon.models.location import (
    DecodedLocation,
    GeoPoint,
    LocationRecord,
    LowPrecisionMarker,
    ReconciledLocation,
    UpgradeResult,
    UpgradeStrategy,
)
from georecon.models.photo import PhotoMetadata
from georecon.models.stats import UpgradeStats

__all__ = [
    "DecodedLocation",
    "GeoPoint",
    "LocationRecord",
    "LowPrecisionMarker",
    "PhotoMetadata",
    "ReconciledLocation",
    "UpgradeResult",
    "UpgradeStats",
    "UpgradeStrategy",
    "record_from_event",
    "records_from_events",
]
