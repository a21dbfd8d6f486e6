"""HTTP photo fetcher."""

import logging
from typing import Optional

import httpx

from georecon.core.config import settings
from georecon.core.exceptions import PhotoFetchError
from georecon.photo.base import BasePhotoFetcher

logger = logging.getLogger(__name__)


def get_fetch_headers() -> dict[str, str]:
    """Get standard headers for photo requests.

    Returns:
        Dict with headers asking for image content
    """
    return {
        "User-Agent": f"georecon/{settings.version}",
        "Accept": "image/*",
    }


class HttpxPhotoFetcher(BasePhotoFetcher):
    """Downloads photos over HTTP(S) with httpx."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds, defaults to settings.PHOTO_FETCH_TIMEOUT
            max_bytes: Largest photo accepted, defaults to settings.PHOTO_MAX_BYTES
            client: Optional shared client; a short-lived one is created per
                fetch when omitted
        """
        self.timeout = timeout if timeout is not None else settings.PHOTO_FETCH_TIMEOUT
        self.max_bytes = max_bytes if max_bytes is not None else settings.PHOTO_MAX_BYTES
        self._client = client

    async def fetch(self, url: str) -> bytes:
        """Download the photo at *url*.

        Raises:
            PhotoFetchError: On HTTP errors, non-success status or oversized payloads
        """
        if self._client is not None:
            return await self._download(self._client, url)

        async with httpx.AsyncClient(
            headers=get_fetch_headers(),
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        ) as client:
            return await self._download(client, url)

    async def _download(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                chunks: list[bytes] = []
                size = 0
                async for chunk in response.aiter_bytes():
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise PhotoFetchError(
                            url, f"photo larger than {self.max_bytes} bytes"
                        )
                    chunks.append(chunk)
        except httpx.HTTPStatusError as e:
            logger.warning(f"Photo request failed for {url}: {e.response.status_code}")
            raise PhotoFetchError(url, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Error fetching photo {url}: {type(e).__name__}: {str(e)}")
            raise PhotoFetchError(url, f"{type(e).__name__}: {e}") from e

        return b"".join(chunks)
