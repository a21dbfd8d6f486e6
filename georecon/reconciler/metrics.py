"""Prometheus metrics for photo GPS correction batches."""

from prometheus_client import REGISTRY, Counter

# Per-marker attempt metrics
PHOTO_GPS_ATTEMPTS = Counter(
    "georecon_photo_gps_attempts_total",
    "Total number of photo GPS correction attempts",
    ["outcome"],  # corrected, no_result, timeout, error, cancelled
)

# Batch metrics
PHOTO_GPS_BATCHES = Counter(
    "georecon_photo_gps_batches_total",
    "Total number of photo GPS correction batches run",
    ["status"],  # completed, cancelled
)


def register_metrics() -> None:
    """Register metrics with Prometheus."""
    metrics = [
        PHOTO_GPS_ATTEMPTS,
        PHOTO_GPS_BATCHES,
    ]
    for metric in metrics:
        try:
            REGISTRY.register(metric)
        except ValueError:
            # Metric already registered
            pass


# Register metrics on module import
register_metrics()
