"""Engine configuration."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "Geospatial Precision Reconciliation Engine"
    version: str = "0.1.0"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Neighbor upgrade settings
    UPGRADE_MAX_COUNT: int = Field(default=15, ge=0)
    UPGRADE_TARGET_PRECISION: int = Field(default=8, ge=1, le=10)
    NEIGHBOR_MAX_DISTANCE_METERS: float = Field(default=2000.0, ge=0)
    NEIGHBOR_MAX_TIME_WINDOW_SECONDS: int = Field(
        default=86400, ge=0
    )  # 24 hours between records by the same author

    # Photo GPS correction settings
    PHOTO_PRECISION_THRESHOLD: int = Field(default=5, ge=1, le=10)
    PHOTO_TARGET_PRECISION: int = Field(default=8, ge=1, le=10)
    PHOTO_BATCH_CAP: int = Field(default=10, ge=0)
    PHOTO_ATTEMPTS_PER_MARKER: int = Field(default=1, ge=1)
    PHOTO_FETCH_TIMEOUT: float = Field(default=15.0, gt=0)
    PHOTO_ATTEMPT_TIMEOUT: float = Field(default=30.0, gt=0)
    PHOTO_MAX_BYTES: int = Field(default=25 * 1024 * 1024, gt=0)

    # Photo GPS confidence weights
    PHOTO_CONFIDENCE_WITH_TIMESTAMP: float = Field(default=0.9, ge=0, le=1)
    PHOTO_CONFIDENCE_COORDINATES_ONLY: float = Field(default=0.7, ge=0, le=1)
    PHOTO_OUTSIDE_CELL_FACTOR: float = Field(default=0.5, ge=0, le=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Normalize and validate the log level name."""
        level = self.LOG_LEVEL.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {self.LOG_LEVEL}")
        self.LOG_LEVEL = level
        return self


# Create settings instance
settings = Settings()
