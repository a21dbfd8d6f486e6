"""EXIF positioning metadata extraction with Pillow."""

import io
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Optional

from PIL import ExifTags, Image, UnidentifiedImageError

from georecon.models.photo import PhotoMetadata
from georecon.photo.base import BaseMetadataExtractor

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None
    return value.strip("\x00 ").upper() or None


def dms_to_decimal(value: Any, ref: Any = None) -> Optional[float]:
    """Convert EXIF degrees/minutes/seconds to signed decimal degrees.

    Accepts a (degrees, minutes, seconds) sequence, a shorter sequence, or an
    already decimal number. South and west references negate the result.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        decimal = float(value)
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and value:
        try:
            parts = [float(part) for part in value[:3]]
        except (TypeError, ValueError, ZeroDivisionError):
            return None
        parts += [0.0] * (3 - len(parts))
        decimal = parts[0] + parts[1] / 60.0 + parts[2] / 3600.0
    else:
        try:
            decimal = float(value)
        except (TypeError, ValueError, ZeroDivisionError):
            return None

    if decimal != decimal:  # NaN from a 0/0 rational
        return None
    if _as_text(ref) in ("S", "W"):
        decimal = -abs(decimal)
    return decimal


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """Parse an EXIF "YYYY:MM:DD HH:MM:SS" timestamp."""
    text = _as_text(value)
    if not text:
        return None
    try:
        return datetime.strptime(text, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def metadata_from_exif(
    gps: Mapping[int, Any], exif_ifd: Mapping[int, Any], base: Mapping[int, Any]
) -> Optional[PhotoMetadata]:
    """Build PhotoMetadata from the GPS, Exif and base IFDs of an image."""
    latitude = dms_to_decimal(
        gps.get(ExifTags.GPS.GPSLatitude), gps.get(ExifTags.GPS.GPSLatitudeRef)
    )
    longitude = dms_to_decimal(
        gps.get(ExifTags.GPS.GPSLongitude), gps.get(ExifTags.GPS.GPSLongitudeRef)
    )

    captured_at = parse_exif_datetime(
        exif_ifd.get(ExifTags.Base.DateTimeOriginal)
    ) or parse_exif_datetime(base.get(ExifTags.Base.DateTime))

    if latitude is None and longitude is None and captured_at is None:
        return None

    return PhotoMetadata(
        latitude=latitude, longitude=longitude, captured_at=captured_at
    )


class ExifMetadataExtractor(BaseMetadataExtractor):
    """Reads GPS position and capture time from a photo's EXIF block."""

    def extract(self, data: bytes) -> Optional[PhotoMetadata]:
        """Return embedded positioning metadata, or None if there is none."""
        if not data:
            return None

        try:
            with Image.open(io.BytesIO(data)) as image:
                exif = image.getexif()
                gps = dict(exif.get_ifd(ExifTags.IFD.GPSInfo))
                exif_ifd = dict(exif.get_ifd(ExifTags.IFD.Exif))
                base = dict(exif)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            logger.debug(f"Could not read EXIF data: {type(e).__name__}: {e}")
            return None

        metadata = metadata_from_exif(gps, exif_ifd, base)
        if metadata is None:
            logger.debug("No positioning metadata found in photo")
        return metadata
