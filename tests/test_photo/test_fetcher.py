"""Tests for the httpx photo fetcher."""

import httpx
import pytest

from georecon.core.exceptions import PhotoFetchError
from georecon.photo.fetcher import HttpxPhotoFetcher, get_fetch_headers

PHOTO_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-bytes"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpxPhotoFetcher:
    """Test HttpxPhotoFetcher."""

    @pytest.mark.asyncio
    async def test_fetch_returns_body(self):
        """Test a successful download returns the photo bytes."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, content=PHOTO_BYTES)

        async with _client(handler) as client:
            data = await HttpxPhotoFetcher(client=client).fetch("https://img.test/a.jpg")

        assert data == PHOTO_BYTES
        assert requested == ["https://img.test/a.jpg"]

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """Test a non-success status raises PhotoFetchError."""
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(PhotoFetchError) as exc_info:
                await HttpxPhotoFetcher(client=client).fetch("https://img.test/gone.jpg")

        assert exc_info.value.reason == "HTTP 404"
        assert exc_info.value.url == "https://img.test/gone.jpg"

    @pytest.mark.asyncio
    async def test_oversized_photo(self):
        """Test photos larger than max_bytes are rejected."""
        async with _client(lambda request: httpx.Response(200, content=PHOTO_BYTES)) as client:
            fetcher = HttpxPhotoFetcher(max_bytes=4, client=client)
            with pytest.raises(PhotoFetchError) as exc_info:
                await fetcher.fetch("https://img.test/big.jpg")

        assert "larger than 4 bytes" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test connection failures raise PhotoFetchError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(PhotoFetchError) as exc_info:
                await HttpxPhotoFetcher(client=client).fetch("https://img.test/a.jpg")

        assert "ConnectError" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_creates_client_when_none_given(self, mocker):
        """Test a short-lived client is created with timeout and headers."""
        client = _client(lambda request: httpx.Response(200, content=PHOTO_BYTES))
        client_class = mocker.patch(
            "georecon.photo.fetcher.httpx.AsyncClient", return_value=client
        )

        data = await HttpxPhotoFetcher(timeout=3.0).fetch("https://img.test/a.jpg")

        assert data == PHOTO_BYTES
        kwargs = client_class.call_args.kwargs
        assert kwargs["timeout"] == httpx.Timeout(3.0)
        assert kwargs["follow_redirects"] is True
        assert kwargs["headers"] == get_fetch_headers()

    def test_defaults_from_settings(self):
        """Test timeout and size limit default from settings."""
        fetcher = HttpxPhotoFetcher()

        assert fetcher.timeout == 15.0
        assert fetcher.max_bytes == 25 * 1024 * 1024


def test_get_fetch_headers():
    """Test request headers ask for images."""
    headers = get_fetch_headers()

    assert headers["Accept"] == "image/*"
    assert headers["User-Agent"].startswith("georecon/")
