"""Photo GPS correction for low-precision markers."""

from collections.abc import Sequence
from typing import Optional

from georecon.core.config import settings
from georecon.core.distance import haversine_meters
from georecon.core.exceptions import InvalidGeohash, OutOfRange, PhotoFetchError
from georecon.core.geohash import decode, decode_point, encode, validate_precision
from georecon.core.logging import get_logger
from georecon.models.location import (
    GeoPoint,
    LocationRecord,
    LowPrecisionMarker,
    UpgradeResult,
    UpgradeStrategy,
)
from georecon.models.photo import PhotoMetadata
from georecon.photo.base import BaseMetadataExtractor, BasePhotoFetcher
from georecon.photo.exif import ExifMetadataExtractor
from georecon.photo.fetcher import HttpxPhotoFetcher

logger = get_logger(__name__)


def identify_low_precision_markers(
    records: Sequence[LocationRecord], precision_threshold: Optional[int] = None
) -> list[LowPrecisionMarker]:
    """Find records whose location is at or below *precision_threshold*.

    Args:
        records: Records to scan, in display order
        precision_threshold: Highest precision still considered coarse,
            defaults to settings.PHOTO_PRECISION_THRESHOLD

    Returns:
        Markers in input order, flagged with whether they carry photos

    Raises:
        InvalidPrecision: If the threshold is not between 1 and 10
    """
    if precision_threshold is None:
        precision_threshold = settings.PHOTO_PRECISION_THRESHOLD
    validate_precision(precision_threshold)

    markers = []
    for record in records:
        if not record.geohash:
            continue
        try:
            location = decode(record.geohash, record_id=record.id)
        except (InvalidGeohash, OutOfRange) as e:
            logger.warning("marker_skipped", record_id=record.id, reason=str(e))
            continue
        if location.precision > precision_threshold:
            continue
        markers.append(
            LowPrecisionMarker(
                record_id=record.id,
                geohash=location.source_geohash,
                point=location.point,
                precision=location.precision,
                accuracy=location.accuracy,
                has_photos=bool(record.photo_urls),
                photo_urls=record.photo_urls,
            )
        )
    return markers


class PhotoGpsCorrector:
    """Corrects coarse markers from the GPS position embedded in their photos."""

    def __init__(
        self,
        fetcher: Optional[BasePhotoFetcher] = None,
        extractor: Optional[BaseMetadataExtractor] = None,
        attempts_per_marker: Optional[int] = None,
        confidence_with_timestamp: Optional[float] = None,
        confidence_coordinates_only: Optional[float] = None,
        outside_cell_factor: Optional[float] = None,
    ) -> None:
        """Initialize the corrector.

        Args:
            fetcher: Photo fetcher, defaults to an HttpxPhotoFetcher
            extractor: Metadata extractor, defaults to an ExifMetadataExtractor
            attempts_per_marker: How many of a marker's photos to try in order
            confidence_with_timestamp: Confidence when the photo has
                coordinates and a capture time
            confidence_coordinates_only: Confidence when it has coordinates only
            outside_cell_factor: Multiplier applied when the photo position
                falls outside the marker's original cell
        """
        self.fetcher = fetcher or HttpxPhotoFetcher()
        self.extractor = extractor or ExifMetadataExtractor()
        self.attempts_per_marker = (
            attempts_per_marker
            if attempts_per_marker is not None
            else settings.PHOTO_ATTEMPTS_PER_MARKER
        )
        if self.attempts_per_marker < 1:
            raise ValueError(
                f"attempts_per_marker must be at least 1, got {self.attempts_per_marker}"
            )
        self.confidence_with_timestamp = (
            confidence_with_timestamp
            if confidence_with_timestamp is not None
            else settings.PHOTO_CONFIDENCE_WITH_TIMESTAMP
        )
        self.confidence_coordinates_only = (
            confidence_coordinates_only
            if confidence_coordinates_only is not None
            else settings.PHOTO_CONFIDENCE_COORDINATES_ONLY
        )
        self.outside_cell_factor = (
            outside_cell_factor
            if outside_cell_factor is not None
            else settings.PHOTO_OUTSIDE_CELL_FACTOR
        )

    def identify_low_precision_markers(
        self,
        records: Sequence[LocationRecord],
        precision_threshold: Optional[int] = None,
    ) -> list[LowPrecisionMarker]:
        """See identify_low_precision_markers()."""
        return identify_low_precision_markers(records, precision_threshold)

    async def correct_with_photo_gps(
        self, marker: LowPrecisionMarker, target_precision: Optional[int] = None
    ) -> Optional[UpgradeResult]:
        """Correct a marker from the GPS metadata of its photos.

        Args:
            marker: Marker to correct
            target_precision: Precision of the corrected geohash, defaults to
                settings.PHOTO_TARGET_PRECISION

        Returns:
            UpgradeResult with strategy PHOTO_GPS, or None when the marker has
            no photos or none of the tried photos carries usable coordinates

        Raises:
            InvalidPrecision: If target_precision is not between 1 and 10
        """
        if target_precision is None:
            target_precision = settings.PHOTO_TARGET_PRECISION
        validate_precision(target_precision)

        if not marker.has_photos or not marker.photo_urls:
            return None

        for url in marker.photo_urls[: self.attempts_per_marker]:
            metadata = await self._read_metadata(marker, url)
            if metadata is None or metadata.latitude is None or metadata.longitude is None:
                continue
            position = GeoPoint(latitude=metadata.latitude, longitude=metadata.longitude)
            return self._build_result(
                marker, url, position, metadata.has_capture_time, target_precision
            )

        return None

    async def _read_metadata(
        self, marker: LowPrecisionMarker, url: str
    ) -> Optional[PhotoMetadata]:
        try:
            data = await self.fetcher.fetch(url)
        except PhotoFetchError as e:
            logger.warning(
                "photo_fetch_failed", record_id=marker.record_id, url=url, reason=e.reason
            )
            return None

        metadata = self.extractor.extract(data)
        if metadata is None or not metadata.has_coordinates:
            logger.info("photo_without_gps", record_id=marker.record_id, url=url)
            return None
        return metadata

    def _build_result(
        self,
        marker: LowPrecisionMarker,
        url: str,
        position: GeoPoint,
        has_capture_time: bool,
        target_precision: int,
    ) -> UpgradeResult:
        corrected_geohash = encode(position.latitude, position.longitude, target_precision)
        corrected_point = decode_point(corrected_geohash)

        if has_capture_time:
            confidence = self.confidence_with_timestamp
        else:
            confidence = self.confidence_coordinates_only
        # Inside the marker cell when both geohashes agree on their common prefix
        shared = min(len(corrected_geohash), len(marker.geohash))
        if corrected_geohash[:shared] != marker.geohash.lower()[:shared]:
            confidence *= self.outside_cell_factor

        result = UpgradeResult(
            record_id=marker.record_id,
            original_geohash=marker.geohash,
            original_precision=marker.precision,
            corrected_point=corrected_point,
            corrected_precision=target_precision,
            corrected_geohash=corrected_geohash,
            confidence=max(0.0, min(1.0, confidence)),
            distance_correction_meters=haversine_meters(marker.point, corrected_point),
            strategy=UpgradeStrategy.PHOTO_GPS,
            evidence=f"photo:{url}",
        )
        logger.info(
            "photo_gps_corrected",
            record_id=marker.record_id,
            original_geohash=marker.geohash,
            corrected_geohash=corrected_geohash,
            distance_meters=round(result.distance_correction_meters, 1),
            confidence=result.confidence,
        )
        return result
