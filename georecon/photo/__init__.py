"""Photo collaborators: fetching photo bytes and reading their metadata."""

from georecon.photo.base import BaseMetadataExtractor, BasePhotoFetcher
from georecon.photo.exif import ExifMetadataExtractor
from georecon.photo.fetcher import HttpxPhotoFetcher

__all__ = [
    "BaseMetadataExtractor",
    "BasePhotoFetcher",
    "ExifMetadataExtractor",
    "HttpxPhotoFetcher",
]
