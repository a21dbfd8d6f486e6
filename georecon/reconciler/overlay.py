"""Overlay corrections onto decoded locations for rendering."""

from collections.abc import Iterable, Sequence

from georecon.core.exceptions import InvalidGeohash, OutOfRange
from georecon.core.geohash import accuracy_label, decode
from georecon.core.logging import get_logger
from georecon.models.location import (
    DecodedLocation,
    LocationRecord,
    ReconciledLocation,
    UpgradeResult,
    UpgradeStrategy,
)

logger = get_logger(__name__)


def decode_records(records: Iterable[LocationRecord]) -> list[DecodedLocation]:
    """Decode the primary geohash of each record.

    Records without a geohash, or whose geohash does not decode, are dropped
    and logged.
    """
    decoded = []
    for record in records:
        if not record.geohash:
            logger.debug("record_dropped", record_id=record.id, reason="no geohash")
            continue
        try:
            decoded.append(decode(record.geohash, record_id=record.id))
        except (InvalidGeohash, OutOfRange) as e:
            logger.warning("record_dropped", record_id=record.id, reason=str(e))
    return decoded


def reconcile(
    base: Sequence[DecodedLocation], upgrades: Iterable[UpgradeResult]
) -> list[ReconciledLocation]:
    """Apply corrections to decoded locations.

    A photo GPS correction takes precedence over a neighbor upgrade for the
    same record. Locations without a correction pass through unchanged.

    Args:
        base: Decoded locations in display order
        upgrades: Corrections from any strategy; for repeated record ids of
            the same strategy the last one wins

    Returns:
        One ReconciledLocation per base location, in the same order

    Raises:
        TypeError: If a base item is not a DecodedLocation
    """
    for item in base:
        if not isinstance(item, DecodedLocation):
            raise TypeError(
                f"reconcile() expects DecodedLocation items, got {type(item).__name__}"
            )

    photo_gps: dict[str, UpgradeResult] = {}
    neighbor: dict[str, UpgradeResult] = {}
    for result in upgrades:
        if result.strategy == UpgradeStrategy.PHOTO_GPS:
            photo_gps[result.record_id] = result
        else:
            neighbor[result.record_id] = result

    reconciled = []
    for location in base:
        correction = photo_gps.get(location.id) or neighbor.get(location.id)
        if correction is None:
            reconciled.append(
                ReconciledLocation(
                    id=location.id,
                    point=location.point,
                    precision=location.precision,
                    accuracy=location.accuracy,
                    source_geohash=location.source_geohash,
                )
            )
            continue

        reconciled.append(
            ReconciledLocation(
                id=location.id,
                point=correction.corrected_point,
                precision=correction.corrected_precision,
                accuracy=accuracy_label(correction.corrected_precision),
                source_geohash=location.source_geohash,
                upgraded=correction.strategy == UpgradeStrategy.NEIGHBOR_UPGRADE,
                gps_corrected=correction.strategy == UpgradeStrategy.PHOTO_GPS,
                confidence=correction.confidence,
            )
        )
    return reconciled
