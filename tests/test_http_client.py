"""Tests for HTTP client utility module."""

from typing import Any
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from shared.http_client import AsyncHTTPClient


class TestAsyncHTTPClient:
    """Test HTTP client functionality."""

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        """Test HTTP client as async context manager."""
        async with AsyncHTTPClient() as client:
            assert client.session is not None

    @pytest.mark.asyncio
    async def test_default_headers_are_merged(self) -> None:
        """Per-request headers extend and override the client defaults."""
        mock_response_data: dict[str, Any] = {"data": "test"}

        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = AsyncMock()
            mock_response = AsyncMock()
            mock_response.json.return_value = mock_response_data
            mock_response.raise_for_status.return_value = None
            mock_session.post.return_value.__aenter__.return_value = mock_response
            mock_session_class.return_value = mock_session

            async with AsyncHTTPClient(headers={"Authorization": "Bearer a", "X-Client": "slidesmith"}) as client:
                await client.post("https://api.example.com/test", data={}, headers={"Authorization": "Bearer b"})
                mock_session.post.assert_called_once_with(
                    "https://api.example.com/test",
                    json={},
                    headers={"Authorization": "Bearer b", "X-Client": "slidesmith"},
                )

    @pytest.mark.asyncio
    async def test_post_request(self) -> None:
        """Test POST request functionality."""
        mock_response_data: dict[str, Any] = {"title": "Deck", "slides": []}
        post_data: dict[str, Any] = {"notes": "test", "document": None}

        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = AsyncMock()
            mock_response = AsyncMock()
            mock_response.json.return_value = mock_response_data
            mock_response.raise_for_status.return_value = None
            mock_session.post.return_value.__aenter__.return_value = mock_response
            mock_session_class.return_value = mock_session

            async with AsyncHTTPClient() as client:
                result = await client.post("https://api.example.com/structure", data=post_data)
                assert result == mock_response_data
                mock_session.post.assert_called_once_with(
                    "https://api.example.com/structure", json=post_data, headers={}
                )

    @pytest.mark.asyncio
    async def test_not_initialized_error(self) -> None:
        """Test error when client not used as context manager."""
        client = AsyncHTTPClient()
        with pytest.raises(RuntimeError, match="HTTP client not initialized"):
            await client.post("https://api.example.com/test")

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        """Test HTTP error status handling."""
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = AsyncMock()
            mock_response = AsyncMock()
            mock_response.raise_for_status.side_effect = aiohttp.ClientResponseError(
                request_info=AsyncMock(), history=(), status=404
            )
            mock_session.post.return_value.__aenter__.return_value = mock_response
            mock_session_class.return_value = mock_session

            async with AsyncHTTPClient() as client:
                with pytest.raises(aiohttp.ClientResponseError):
                    await client.post("https://api.example.com/notfound")
