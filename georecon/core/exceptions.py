"""Exception types raised by the reconciliation engine."""


class GeoReconError(Exception):
    """Base class for all georecon errors."""


class InvalidGeohash(GeoReconError, ValueError):  # noqa: N818
    """Raised when a string is not a decodable geohash."""

    def __init__(self, geohash: object, reason: str) -> None:
        self.geohash = geohash
        self.reason = reason
        super().__init__(f"Invalid geohash {geohash!r}: {reason}")


class InvalidPrecision(GeoReconError, ValueError):  # noqa: N818
    """Raised when a precision level is outside 1-10."""

    def __init__(self, precision: object) -> None:
        self.precision = precision
        super().__init__(f"Precision must be an integer between 1 and 10, got {precision!r}")


class OutOfRange(GeoReconError, ValueError):  # noqa: N818
    """Raised when a coordinate falls outside [-90, 90] x [-180, 180]."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Coordinate ({latitude}, {longitude}) is outside the valid range"
        )


class PhotoFetchError(GeoReconError):
    """Raised by photo fetchers when photo bytes cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch photo {url}: {reason}")
