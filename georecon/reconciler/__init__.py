"""Precision reconciliation: upgrades, photo GPS correction, overlay and stats."""

from georecon.reconciler.batch import PhotoGpsBatchRunner
from georecon.reconciler.overlay import decode_records, reconcile
from georecon.reconciler.photo_gps import (
    PhotoGpsCorrector,
    identify_low_precision_markers,
)
from georecon.reconciler.precision_upgrade import PrecisionUpgradeMatcher, upgrade_batch
from georecon.reconciler.stats import summarize

__all__ = [
    "PhotoGpsBatchRunner",
    "PhotoGpsCorrector",
    "PrecisionUpgradeMatcher",
    "decode_records",
    "identify_low_precision_markers",
    "reconcile",
    "summarize",
    "upgrade_batch",
]
