"""Photo metadata model returned by metadata extractors."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PhotoMetadata(BaseModel):
    """Positioning metadata embedded in a photo."""

    model_config = ConfigDict(frozen=True)

    latitude: Optional[float] = Field(default=None, description="WGS84 latitude")
    longitude: Optional[float] = Field(default=None, description="WGS84 longitude")
    captured_at: Optional[datetime] = Field(
        default=None, description="Capture time recorded by the camera"
    )

    @property
    def has_coordinates(self) -> bool:
        """Both coordinates present and inside the valid range."""
        if self.latitude is None or self.longitude is None:
            return False
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180

    @property
    def has_capture_time(self) -> bool:
        """Whether the photo carries a capture timestamp."""
        return self.captured_at is not None
