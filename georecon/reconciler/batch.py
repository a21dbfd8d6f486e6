"""Sequential photo GPS correction over a batch of markers."""

import asyncio
import uuid
from collections.abc import Callable, Sequence
from typing import Optional

from structlog.stdlib import BoundLogger

from georecon.core.config import settings
from georecon.core.geohash import validate_precision
from georecon.core.logging import get_batch_logger
from georecon.models.location import LowPrecisionMarker, UpgradeResult
from georecon.reconciler.metrics import PHOTO_GPS_ATTEMPTS, PHOTO_GPS_BATCHES
from georecon.reconciler.photo_gps import PhotoGpsCorrector

ProgressCallback = Callable[[float], None]


class PhotoGpsBatchRunner:
    """Runs photo GPS correction over the coarsest markers, one at a time."""

    def __init__(
        self,
        corrector: Optional[PhotoGpsCorrector] = None,
        cap: Optional[int] = None,
        attempt_timeout: Optional[float] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            corrector: Corrector used for each marker
            cap: Maximum markers per batch, defaults to settings.PHOTO_BATCH_CAP
            attempt_timeout: Seconds allowed per marker, defaults to
                settings.PHOTO_ATTEMPT_TIMEOUT
        """
        self.corrector = corrector or PhotoGpsCorrector()
        self.cap = cap if cap is not None else settings.PHOTO_BATCH_CAP
        if self.cap < 0:
            raise ValueError(f"cap must be non-negative, got {self.cap}")
        self.attempt_timeout = (
            attempt_timeout if attempt_timeout is not None else settings.PHOTO_ATTEMPT_TIMEOUT
        )

    def select(self, markers: Sequence[LowPrecisionMarker]) -> list[LowPrecisionMarker]:
        """Markers with photos, coarsest first, at most cap of them."""
        with_photos = [marker for marker in markers if marker.has_photos]
        return sorted(with_photos, key=lambda marker: marker.precision)[: self.cap]

    async def run(
        self,
        markers: Sequence[LowPrecisionMarker],
        target_precision: Optional[int] = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> list[UpgradeResult]:
        """Correct markers sequentially.

        Args:
            markers: Candidate markers
            target_precision: Precision of corrected geohashes, defaults to
                settings.PHOTO_TARGET_PRECISION
            on_progress: Called with the completed fraction after each attempt
            cancel_event: When set, no further markers are attempted

        Returns:
            Results for the markers that were corrected, in attempt order
        """
        if target_precision is None:
            target_precision = settings.PHOTO_TARGET_PRECISION
        validate_precision(target_precision)

        selected = self.select(markers)
        total = len(selected)
        logger = get_batch_logger(uuid.uuid4().hex)
        logger.info("photo_gps_batch_started", markers=total, target_precision=target_precision)

        results: list[UpgradeResult] = []
        attempted = 0
        for marker in selected:
            if cancel_event is not None and cancel_event.is_set():
                break

            result = await self._attempt(marker, target_precision, logger)
            attempted += 1
            if result is not None:
                results.append(result)

            if on_progress is not None:
                on_progress(attempted / total)

        cancelled = attempted < total
        if cancelled:
            PHOTO_GPS_ATTEMPTS.labels(outcome="cancelled").inc(total - attempted)
        PHOTO_GPS_BATCHES.labels(status="cancelled" if cancelled else "completed").inc()

        logger.info(
            "photo_gps_batch_finished",
            attempted=attempted,
            corrected=len(results),
            cancelled=cancelled,
        )
        return results

    async def _attempt(
        self,
        marker: LowPrecisionMarker,
        target_precision: int,
        logger: BoundLogger,
    ) -> Optional[UpgradeResult]:
        try:
            result = await asyncio.wait_for(
                self.corrector.correct_with_photo_gps(marker, target_precision),
                timeout=self.attempt_timeout,
            )
        except asyncio.TimeoutError:
            PHOTO_GPS_ATTEMPTS.labels(outcome="timeout").inc()
            logger.warning(
                "photo_gps_attempt_timeout",
                record_id=marker.record_id,
                timeout=self.attempt_timeout,
            )
            return None
        except Exception as e:
            PHOTO_GPS_ATTEMPTS.labels(outcome="error").inc()
            logger.error(
                "photo_gps_attempt_failed",
                record_id=marker.record_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        PHOTO_GPS_ATTEMPTS.labels(
            outcome="corrected" if result is not None else "no_result"
        ).inc()
        return result
