"""Location models shared by every stage of the reconciliation pipeline."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from georecon.core.constants import (
    ACCURACY_LABELS,
    MAX_PRECISION,
    MIN_PRECISION,
    UNKNOWN_ACCURACY,
)


class GeoPoint(BaseModel):
    """Geographic point coordinates."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(
        ...,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees",
        examples=[37.7749],
    )
    longitude: float = Field(
        ...,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees",
        examples=[-122.4194],
    )

    def as_tuple(self) -> tuple[float, float]:
        """Return (latitude, longitude)."""
        return self.latitude, self.longitude


class LocationRecord(BaseModel):
    """A raw content record as seen by the engine.

    Only the location-related fields are carried; everything else on the
    source record is left to the adapter layer.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Record identifier")
    geohash: Optional[str] = Field(
        default=None, description="Primary geohash location tag"
    )
    geohash_hints: tuple[str, ...] = Field(
        default=(), description="Additional geohash tags carried by the same record"
    )
    photo_urls: tuple[str, ...] = Field(
        default=(), description="Photo references attached to the record"
    )
    author: str = Field(default="", description="Author/owner identifier")
    created_at: int = Field(
        default=0, ge=0, description="Creation time as a unix timestamp (seconds)"
    )


class DecodedLocation(BaseModel):
    """A geohash decoded into a coordinate with its precision label."""

    model_config = ConfigDict(frozen=True)

    id: str
    point: GeoPoint
    precision: int = Field(..., ge=MIN_PRECISION, le=MAX_PRECISION)
    accuracy: str
    source_geohash: str


class UpgradeStrategy(str, Enum):
    """How a corrected coordinate was obtained."""

    NEIGHBOR_UPGRADE = "neighbor_upgrade"
    PHOTO_GPS = "photo_gps"


class UpgradeResult(BaseModel):
    """A corrected coordinate for one record, tagged with its provenance."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    original_geohash: str
    original_precision: int = Field(..., ge=MIN_PRECISION, le=MAX_PRECISION)
    corrected_point: GeoPoint
    corrected_precision: int = Field(..., ge=MIN_PRECISION, le=MAX_PRECISION)
    corrected_geohash: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    distance_correction_meters: float = Field(..., ge=0.0)
    strategy: UpgradeStrategy
    evidence: str = Field(
        default="",
        description="Where the correction came from: hint:<geohash>, neighbor:<id> or photo:<url>",
    )

    @model_validator(mode="after")
    def validate_corrected_geohash(self) -> "UpgradeResult":
        """The corrected geohash must have exactly corrected_precision characters."""
        if len(self.corrected_geohash) != self.corrected_precision:
            raise ValueError(
                "corrected_geohash length must equal corrected_precision "
                f"({len(self.corrected_geohash)} != {self.corrected_precision})"
            )
        return self

    @property
    def corrected_accuracy(self) -> str:
        """Accuracy label of the corrected precision."""
        return ACCURACY_LABELS.get(self.corrected_precision, UNKNOWN_ACCURACY)

    @property
    def precision_gain(self) -> int:
        """Number of geohash characters gained by the correction."""
        return self.corrected_precision - self.original_precision


class LowPrecisionMarker(BaseModel):
    """A coarse map marker that may be corrected from photo metadata."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    geohash: str
    point: GeoPoint
    precision: int = Field(..., ge=MIN_PRECISION, le=MAX_PRECISION)
    accuracy: str
    has_photos: bool = False
    photo_urls: tuple[str, ...] = ()


class ReconciledLocation(BaseModel):
    """Render-ready location.

    Deliberately not a DecodedLocation subclass: reconciled output can never
    be passed back into reconcile().
    """

    model_config = ConfigDict(frozen=True)

    id: str
    point: GeoPoint
    precision: int = Field(..., ge=MIN_PRECISION, le=MAX_PRECISION)
    accuracy: str
    source_geohash: str
    upgraded: bool = False
    gps_corrected: bool = False
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_flags(self) -> "ReconciledLocation":
        """A location is corrected by at most one strategy."""
        if self.upgraded and self.gps_corrected:
            raise ValueError("upgraded and gps_corrected are mutually exclusive")
        return self

    @property
    def is_enhanced(self) -> bool:
        """Whether any correction was applied."""
        return self.upgraded or self.gps_corrected
