"""Tests for the photo GPS batch runner."""

import asyncio
from typing import Optional

import pytest
from prometheus_client import REGISTRY

from georecon.core.exceptions import InvalidPrecision
from georecon.core.geohash import decode_point, encode
from georecon.models.location import LowPrecisionMarker, UpgradeResult, UpgradeStrategy
from georecon.reconciler.batch import PhotoGpsBatchRunner


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class FakeCorrector:
    """Corrector stand-in with per-marker behaviour."""

    def __init__(self, behaviour: Optional[dict[str, str]] = None):
        self.behaviour = behaviour or {}
        self.calls: list[str] = []

    async def correct_with_photo_gps(
        self, marker: LowPrecisionMarker, target_precision: int
    ) -> Optional[UpgradeResult]:
        self.calls.append(marker.record_id)
        action = self.behaviour.get(marker.record_id, "correct")
        if action == "sleep":
            await asyncio.sleep(5)
        if action == "raise":
            raise RuntimeError("extractor crashed")
        if action == "none":
            return None

        geohash = encode(marker.point.latitude, marker.point.longitude, target_precision)
        return UpgradeResult(
            record_id=marker.record_id,
            original_geohash=marker.geohash,
            original_precision=marker.precision,
            corrected_point=decode_point(geohash),
            corrected_precision=target_precision,
            corrected_geohash=geohash,
            confidence=0.9,
            distance_correction_meters=0.0,
            strategy=UpgradeStrategy.PHOTO_GPS,
        )


@pytest.fixture
def markers(marker_factory):
    """Markers of mixed precision, one without photos."""
    return [
        marker_factory("p5", "9q8yy", photos=("https://p/5.jpg",)),
        marker_factory("p3", "9q8", photos=("https://p/3.jpg",)),
        marker_factory("p4-no-photo", "9q8y"),
        marker_factory("p2", "9q", photos=("https://p/2.jpg",)),
        marker_factory("p4", "9q8z", photos=("https://p/4.jpg",)),
    ]


class TestSelection:
    """Test which markers a batch attempts."""

    def test_select_filters_sorts_and_caps(self, markers):
        """Test markers with photos are taken coarsest first up to the cap."""
        runner = PhotoGpsBatchRunner(FakeCorrector(), cap=3)

        selected = runner.select(markers)

        assert [marker.record_id for marker in selected] == ["p2", "p3", "p4"]

    def test_select_is_stable(self, marker_factory):
        """Test equal precision markers keep input order."""
        markers = [
            marker_factory("b", "9q8yy", photos=("https://p/b.jpg",)),
            marker_factory("a", "9q8yz", photos=("https://p/a.jpg",)),
        ]

        selected = PhotoGpsBatchRunner(FakeCorrector()).select(markers)

        assert [marker.record_id for marker in selected] == ["b", "a"]

    def test_negative_cap_rejected(self):
        """Test a negative cap raises ValueError."""
        with pytest.raises(ValueError):
            PhotoGpsBatchRunner(FakeCorrector(), cap=-1)


class TestRun:
    """Test PhotoGpsBatchRunner.run."""

    @pytest.mark.asyncio
    async def test_runs_sequentially_in_order(self, markers):
        """Test every selected marker is attempted once, coarsest first."""
        corrector = FakeCorrector()
        runner = PhotoGpsBatchRunner(corrector)

        results = await runner.run(markers, 8)

        assert corrector.calls == ["p2", "p3", "p4", "p5"]
        assert [result.record_id for result in results] == ["p2", "p3", "p4", "p5"]
        assert all(result.corrected_precision == 8 for result in results)

    @pytest.mark.asyncio
    async def test_cap_bounds_attempts(self, markers):
        """Test no more than cap markers are attempted."""
        corrector = FakeCorrector()

        results = await PhotoGpsBatchRunner(corrector, cap=2).run(markers, 8)

        assert corrector.calls == ["p2", "p3"]
        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_progress_strictly_increasing_to_one(self, markers):
        """Test progress is reported after each attempt and ends at 1.0."""
        progress: list[float] = []

        await PhotoGpsBatchRunner(FakeCorrector(), cap=3).run(
            markers, 8, on_progress=progress.append
        )

        assert progress == pytest.approx([1 / 3, 2 / 3, 1.0])
        assert all(a < b for a, b in zip(progress, progress[1:]))

    @pytest.mark.asyncio
    async def test_cancellation_between_markers(self, markers):
        """Test setting the cancel event stops before the next marker."""
        corrector = FakeCorrector()
        cancel_event = asyncio.Event()
        progress: list[float] = []

        def on_progress(fraction: float) -> None:
            progress.append(fraction)
            cancel_event.set()

        results = await PhotoGpsBatchRunner(corrector).run(
            markers, 8, on_progress=on_progress, cancel_event=cancel_event
        )

        assert corrector.calls == ["p2"]
        assert len(results) == 1
        assert progress == [0.25]

    @pytest.mark.asyncio
    async def test_cancelled_before_start(self, markers):
        """Test a batch cancelled up front attempts nothing."""
        corrector = FakeCorrector()
        cancel_event = asyncio.Event()
        cancel_event.set()
        before = _sample("georecon_photo_gps_batches_total", {"status": "cancelled"})

        results = await PhotoGpsBatchRunner(corrector).run(
            markers, 8, cancel_event=cancel_event
        )

        assert results == []
        assert corrector.calls == []
        assert (
            _sample("georecon_photo_gps_batches_total", {"status": "cancelled"})
            == before + 1
        )

    @pytest.mark.asyncio
    async def test_timeout_is_no_result(self, markers):
        """Test a slow attempt times out and the batch continues."""
        corrector = FakeCorrector({"p3": "sleep"})
        before = _sample("georecon_photo_gps_attempts_total", {"outcome": "timeout"})

        results = await PhotoGpsBatchRunner(corrector, attempt_timeout=0.05).run(
            markers, 8
        )

        assert corrector.calls == ["p2", "p3", "p4", "p5"]
        assert [result.record_id for result in results] == ["p2", "p4", "p5"]
        assert (
            _sample("georecon_photo_gps_attempts_total", {"outcome": "timeout"})
            == before + 1
        )

    @pytest.mark.asyncio
    async def test_error_is_no_result(self, markers):
        """Test an exception in one attempt does not stop the batch."""
        corrector = FakeCorrector({"p2": "raise", "p4": "none"})
        errors = _sample("georecon_photo_gps_attempts_total", {"outcome": "error"})
        no_result = _sample("georecon_photo_gps_attempts_total", {"outcome": "no_result"})
        corrected = _sample("georecon_photo_gps_attempts_total", {"outcome": "corrected"})

        results = await PhotoGpsBatchRunner(corrector).run(markers, 8)

        assert [result.record_id for result in results] == ["p3", "p5"]
        assert (
            _sample("georecon_photo_gps_attempts_total", {"outcome": "error"})
            == errors + 1
        )
        assert (
            _sample("georecon_photo_gps_attempts_total", {"outcome": "no_result"})
            == no_result + 1
        )
        assert (
            _sample("georecon_photo_gps_attempts_total", {"outcome": "corrected"})
            == corrected + 2
        )

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        """Test an empty batch completes without progress callbacks."""
        progress: list[float] = []
        before = _sample("georecon_photo_gps_batches_total", {"status": "completed"})

        results = await PhotoGpsBatchRunner(FakeCorrector()).run(
            [], 8, on_progress=progress.append
        )

        assert results == []
        assert progress == []
        assert (
            _sample("georecon_photo_gps_batches_total", {"status": "completed"})
            == before + 1
        )

    @pytest.mark.asyncio
    async def test_invalid_target_precision(self, markers):
        """Test an invalid target precision raises before any attempt."""
        corrector = FakeCorrector()

        with pytest.raises(InvalidPrecision):
            await PhotoGpsBatchRunner(corrector).run(markers, 0)

        assert corrector.calls == []
