"""Base classes for the photo collaborators used by photo GPS correction."""

from abc import ABC, abstractmethod
from typing import Optional

from georecon.models.photo import PhotoMetadata


class BasePhotoFetcher(ABC):
    """Retrieves raw photo bytes for a photo reference.

    Implementations raise PhotoFetchError for any transport failure.
    """

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Return the bytes of the photo at *url*.

        Raises:
            PhotoFetchError: If the photo cannot be retrieved
        """
        raise NotImplementedError


class BaseMetadataExtractor(ABC):
    """Reads embedded positioning metadata from photo bytes."""

    @abstractmethod
    def extract(self, data: bytes) -> Optional[PhotoMetadata]:
        """Return the photo's metadata, or None when it carries none."""
        raise NotImplementedError
