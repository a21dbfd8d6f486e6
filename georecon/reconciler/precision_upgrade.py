"""Neighbor-based precision upgrades for coarse geohash locations.

A coarse record is upgraded only when finer location evidence for the same
place exists: either another geohash tag carried on the record itself, or a
finer record by the same author made close by in space and time. The
corrected point is never finer than that evidence.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from georecon.core.config import settings
from georecon.core.distance import cell_diagonal_meters, haversine_meters
from georecon.core.exceptions import InvalidGeohash, OutOfRange
from georecon.core.geohash import decode, decode_point, encode, validate_precision
from georecon.core.logging import get_logger
from georecon.models.location import (
    DecodedLocation,
    GeoPoint,
    LocationRecord,
    UpgradeResult,
    UpgradeStrategy,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class _DecodedRecord:
    """A record paired with its decoded primary geohash and input position."""

    index: int
    record: LocationRecord
    location: DecodedLocation

    @property
    def precision(self) -> int:
        return self.location.precision


@dataclass(frozen=True)
class _Evidence:
    point: GeoPoint
    precision: int
    source: str


def correction_confidence(
    original: GeoPoint, corrected: GeoPoint, original_precision: int
) -> float:
    """Score how well a correction stays inside the original coarse cell.

    1.0 when the corrected point is the original point, falling linearly to
    0.0 once the correction is a full cell diagonal away.
    """
    diagonal = cell_diagonal_meters(original_precision)
    distance = haversine_meters(original, corrected)
    return max(0.0, min(1.0, 1.0 - distance / diagonal))


def _decode_records(records: Sequence[LocationRecord]) -> list[_DecodedRecord]:
    decoded = []
    for index, record in enumerate(records):
        if not record.geohash:
            continue
        try:
            location = decode(record.geohash, record_id=record.id)
        except (InvalidGeohash, OutOfRange) as e:
            logger.debug("upgrade_record_skipped", record_id=record.id, reason=str(e))
            continue
        decoded.append(_DecodedRecord(index=index, record=record, location=location))
    return decoded


class PrecisionUpgradeMatcher:
    """Upgrades a bounded number of low-precision records from corroborating evidence."""

    def __init__(
        self,
        max_neighbor_distance_meters: Optional[float] = None,
        max_time_window_seconds: Optional[int] = None,
    ) -> None:
        """Initialize the matcher.

        Args:
            max_neighbor_distance_meters: How far a same-author record may be
                from the coarse point and still count as the same place
            max_time_window_seconds: How far apart in time a same-author
                record may be created
        """
        self.max_neighbor_distance_meters = (
            max_neighbor_distance_meters
            if max_neighbor_distance_meters is not None
            else settings.NEIGHBOR_MAX_DISTANCE_METERS
        )
        self.max_time_window_seconds = (
            max_time_window_seconds
            if max_time_window_seconds is not None
            else settings.NEIGHBOR_MAX_TIME_WINDOW_SECONDS
        )

    def select_for_upgrade(
        self,
        records: Sequence[LocationRecord],
        max_count: int,
        target_precision: int,
    ) -> list[DecodedLocation]:
        """Return the records an upgrade pass would attempt, in attempt order."""
        _check_limits(max_count, target_precision)
        return [
            entry.location
            for entry in self._select(_decode_records(records), max_count, target_precision)
        ]

    def upgrade_batch(
        self,
        records: Sequence[LocationRecord],
        max_count: Optional[int] = None,
        target_precision: Optional[int] = None,
    ) -> list[UpgradeResult]:
        """Upgrade at most *max_count* low-precision records.

        Args:
            records: Records to consider; also the pool of neighbor evidence
            max_count: Maximum number of records to attempt
            target_precision: Precision to upgrade towards

        Returns:
            One UpgradeResult per record for which evidence was found

        Raises:
            ValueError: If max_count is negative
            InvalidPrecision: If target_precision is not between 1 and 10
        """
        if max_count is None:
            max_count = settings.UPGRADE_MAX_COUNT
        if target_precision is None:
            target_precision = settings.UPGRADE_TARGET_PRECISION
        _check_limits(max_count, target_precision)

        decoded = _decode_records(records)
        selected = self._select(decoded, max_count, target_precision)

        by_author: dict[str, list[_DecodedRecord]] = defaultdict(list)
        for entry in decoded:
            if entry.record.author:
                by_author[entry.record.author].append(entry)

        results: list[UpgradeResult] = []
        for entry in selected:
            evidence = self._hint_evidence(entry) or self._neighbor_evidence(
                entry, by_author.get(entry.record.author, [])
            )
            if evidence is None:
                logger.debug("upgrade_no_evidence", record_id=entry.record.id)
                continue
            results.append(self._build_result(entry, evidence, target_precision))

        logger.info(
            "precision_upgrade_completed",
            records=len(records),
            attempted=len(selected),
            upgraded=len(results),
            target_precision=target_precision,
        )
        return results

    def _select(
        self,
        decoded: list[_DecodedRecord],
        max_count: int,
        target_precision: int,
    ) -> list[_DecodedRecord]:
        eligible = [entry for entry in decoded if entry.precision < target_precision]
        # Worst precision first, then newest; sorted() is stable so input order breaks ties
        eligible = sorted(
            eligible, key=lambda entry: (entry.precision, -entry.record.created_at)
        )

        selected: list[_DecodedRecord] = []
        seen: set[str] = set()
        for entry in eligible:
            if len(selected) >= max_count:
                break
            if entry.record.id in seen:
                continue
            seen.add(entry.record.id)
            selected.append(entry)
        return selected

    def _hint_evidence(self, entry: _DecodedRecord) -> Optional[_Evidence]:
        """Finest geohash hint on the record that is finer than its primary tag."""
        best: Optional[_Evidence] = None
        for hint in entry.record.geohash_hints:
            try:
                location = decode(hint)
            except (InvalidGeohash, OutOfRange):
                continue
            if location.precision <= entry.precision:
                continue
            if best is None or location.precision > best.precision:
                best = _Evidence(
                    point=location.point,
                    precision=location.precision,
                    source=f"hint:{location.source_geohash}",
                )
        return best

    def _neighbor_evidence(
        self, entry: _DecodedRecord, same_author: list[_DecodedRecord]
    ) -> Optional[_Evidence]:
        """Finest nearby record by the same author, closest first on ties."""
        origin = entry.location
        candidates = []
        for other in same_author:
            if other.record.id == entry.record.id or other.precision <= entry.precision:
                continue
            time_gap = abs(other.record.created_at - entry.record.created_at)
            if time_gap > self.max_time_window_seconds:
                continue
            distance = haversine_meters(origin.point, other.location.point)
            inside_cell = other.location.source_geohash.startswith(origin.source_geohash)
            if not inside_cell and distance > self.max_neighbor_distance_meters:
                continue
            candidates.append((-other.precision, distance, time_gap, other.index, other))

        if not candidates:
            return None

        best = min(candidates, key=lambda candidate: candidate[:4])[4]
        return _Evidence(
            point=best.location.point,
            precision=best.precision,
            source=f"neighbor:{best.record.id}",
        )

    def _build_result(
        self, entry: _DecodedRecord, evidence: _Evidence, target_precision: int
    ) -> UpgradeResult:
        original = entry.location
        corrected_precision = min(evidence.precision, target_precision)
        corrected_geohash = encode(
            evidence.point.latitude, evidence.point.longitude, corrected_precision
        )
        corrected_point = decode_point(corrected_geohash)

        return UpgradeResult(
            record_id=entry.record.id,
            original_geohash=original.source_geohash,
            original_precision=original.precision,
            corrected_point=corrected_point,
            corrected_precision=corrected_precision,
            corrected_geohash=corrected_geohash,
            confidence=correction_confidence(
                original.point, corrected_point, original.precision
            ),
            distance_correction_meters=haversine_meters(original.point, corrected_point),
            strategy=UpgradeStrategy.NEIGHBOR_UPGRADE,
            evidence=evidence.source,
        )


def _check_limits(max_count: int, target_precision: int) -> None:
    if max_count < 0:
        raise ValueError(f"max_count must be non-negative, got {max_count}")
    validate_precision(target_precision)


def upgrade_batch(
    records: Sequence[LocationRecord],
    max_count: Optional[int] = None,
    target_precision: Optional[int] = None,
) -> list[UpgradeResult]:
    """Upgrade low-precision records with a default-configured matcher."""
    return PrecisionUpgradeMatcher().upgrade_batch(records, max_count, target_precision)
