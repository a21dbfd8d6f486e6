"""Test configuration."""

import os

import pytest
from pytest import Config

from georecon.core.geohash import decode
from georecon.core.logging import configure_logging
from georecon.models.location import LocationRecord, LowPrecisionMarker

fixture = pytest.fixture


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    os.environ["TESTING"] = "true"
    # Configure logging for test environment
    configure_logging(testing=True)
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def _make_record(
    record_id: str,
    geohash: str | None,
    *,
    hints: tuple[str, ...] = (),
    photos: tuple[str, ...] = (),
    author: str = "",
    created_at: int = 1_700_000_000,
) -> LocationRecord:
    """Build a LocationRecord with sensible test defaults."""
    return LocationRecord(
        id=record_id,
        geohash=geohash,
        geohash_hints=hints,
        photo_urls=photos,
        author=author,
        created_at=created_at,
    )


def _make_marker(
    record_id: str, geohash: str, photos: tuple[str, ...] = ()
) -> LowPrecisionMarker:
    """Build a LowPrecisionMarker from a geohash."""
    location = decode(geohash, record_id=record_id)
    return LowPrecisionMarker(
        record_id=record_id,
        geohash=location.source_geohash,
        point=location.point,
        precision=location.precision,
        accuracy=location.accuracy,
        has_photos=bool(photos),
        photo_urls=photos,
    )


@fixture
def record_factory():
    """Factory for LocationRecords."""
    return _make_record


@fixture
def marker_factory():
    """Factory for LowPrecisionMarkers."""
    return _make_marker


@fixture
def coarse_record() -> LocationRecord:
    """A neighborhood-level record in San Francisco."""
    return _make_record("coarse", "9q8yy", author="alice", created_at=1_700_000_000)


@fixture
def fine_neighbor() -> LocationRecord:
    """A building-level record by the same author an hour later."""
    return _make_record("fine", "9q8yyk8y", author="alice", created_at=1_700_003_600)
