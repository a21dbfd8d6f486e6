"""Summary statistics over upgrade results."""

from collections import Counter
from collections.abc import Sequence

from georecon.models.location import UpgradeResult
from georecon.models.stats import UpgradeStats

HIGH_CONFIDENCE_THRESHOLD = 0.7


def summarize(results: Sequence[UpgradeResult]) -> UpgradeStats:
    """Summarize a set of corrections.

    Args:
        results: Corrections from any strategy

    Returns:
        UpgradeStats; all zeros for an empty input
    """
    if not results:
        return UpgradeStats()

    total = len(results)
    histogram = Counter(
        f"{result.original_precision}→{result.corrected_precision}" for result in results
    )
    strategies = Counter(result.strategy.value for result in results)

    return UpgradeStats(
        total_corrections=total,
        average_distance_correction_meters=sum(
            result.distance_correction_meters for result in results
        )
        / total,
        # Float summation can land a hair above 1.0
        average_confidence=min(1.0, sum(result.confidence for result in results) / total),
        high_confidence_count=sum(
            1 for result in results if result.confidence > HIGH_CONFIDENCE_THRESHOLD
        ),
        precision_improvement_histogram=dict(histogram),
        strategy_counts=dict(strategies),
    )
