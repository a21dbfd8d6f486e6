"""Summary statistics over upgrade results."""

from pydantic import BaseModel, ConfigDict, Field


class UpgradeStats(BaseModel):
    """Operator-facing summary of a set of corrections."""

    model_config = ConfigDict(frozen=True)

    total_corrections: int = Field(default=0, ge=0)
    average_distance_correction_meters: float = Field(default=0.0, ge=0.0)
    average_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    high_confidence_count: int = Field(default=0, ge=0)
    precision_improvement_histogram: dict[str, int] = Field(
        default_factory=dict,
        description='Counts keyed by "{original}→{corrected}" precision',
    )
    strategy_counts: dict[str, int] = Field(default_factory=dict)
