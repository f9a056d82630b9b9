"""Tests for HTTP helpers and error handling."""

import logging

from typing import TYPE_CHECKING

import httpx
import pytest

from voirewards.helpers.http import (
    UpstreamError,
    create_http_client,
    fetch_json,
    fetch_required_json,
    handle_http_errors,
    log_and_suppress_errors,
)


if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock


class TestFetchJson:
    """Tests for fetch_json function using pytest-httpx."""

    @pytest.mark.asyncio
    async def test_fetch_json_success(self, httpx_mock: "HTTPXMock") -> None:
        """Test successful JSON fetch."""
        httpx_mock.add_response(
            url="https://api.example.com/data",
            json={"key": "value", "count": 42},
        )

        async with httpx.AsyncClient() as client:
            result = await fetch_json(client, "https://api.example.com/data")

        assert result == {"key": "value", "count": 42}

    @pytest.mark.asyncio
    async def test_fetch_json_500_returns_none(self, httpx_mock: "HTTPXMock") -> None:
        """Test error status returns None."""
        httpx_mock.add_response(url="https://api.example.com/error", status_code=500)

        async with httpx.AsyncClient() as client:
            result = await fetch_json(client, "https://api.example.com/error")

        assert result is None

    @pytest.mark.asyncio
    async def test_fetch_json_timeout_returns_none(
        self, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test timeout returns None."""
        httpx_mock.add_exception(httpx.TimeoutException("Request timed out"))

        async with httpx.AsyncClient() as client:
            result = await fetch_json(client, "https://api.example.com/slow")

        assert result is None

    @pytest.mark.asyncio
    async def test_fetch_json_invalid_body_returns_none(
        self, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test undecodable JSON returns None."""
        httpx_mock.add_response(url="https://api.example.com/html", text="<html>")

        async with httpx.AsyncClient() as client:
            result = await fetch_json(client, "https://api.example.com/html")

        assert result is None

    @pytest.mark.asyncio
    async def test_fetch_json_no_raise_on_error(self, httpx_mock: "HTTPXMock") -> None:
        """Test error status bodies are returned when raise_for_status is off."""
        httpx_mock.add_response(
            url="https://api.example.com/error",
            status_code=400,
            json={"error": "Bad request"},
        )

        async with httpx.AsyncClient() as client:
            result = await fetch_json(
                client, "https://api.example.com/error", raise_for_status=False
            )

        assert result == {"error": "Bad request"}


class TestFetchRequiredJson:
    """Tests for fetch_required_json function."""

    @pytest.mark.asyncio
    async def test_returns_body(self, httpx_mock: "HTTPXMock") -> None:
        """Test successful fetch returns the decoded body."""
        httpx_mock.add_response(url="https://api.example.com/data", json=[1, 2])

        async with httpx.AsyncClient() as client:
            assert await fetch_required_json(client, "https://api.example.com/data") == [
                1,
                2,
            ]

    @pytest.mark.asyncio
    async def test_status_error_raises(self, httpx_mock: "HTTPXMock") -> None:
        """Test error status raises UpstreamError with the status code."""
        httpx_mock.add_response(url="https://api.example.com/data", status_code=503)

        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError, match="HTTP error! Status: 503"):
                await fetch_required_json(client, "https://api.example.com/data")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, httpx_mock: "HTTPXMock") -> None:
        """Test connection failures raise UpstreamError."""
        httpx_mock.add_exception(httpx.ConnectError("Connection failed"))

        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError, match="Connection failed"):
                await fetch_required_json(client, "https://api.example.com/data")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, httpx_mock: "HTTPXMock") -> None:
        """Test undecodable bodies raise UpstreamError."""
        httpx_mock.add_response(url="https://api.example.com/data", text="not json")

        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError, match="Invalid JSON"):
                await fetch_required_json(client, "https://api.example.com/data")


class TestCreateHttpClient:
    """Tests for create_http_client function."""

    def test_create_client_with_default_timeout(self) -> None:
        """Test client creation with default timeout."""
        client = create_http_client()
        assert client.timeout.read == 30.0
        assert client.follow_redirects is True

    def test_create_client_with_custom_headers(self) -> None:
        """Test extra kwargs are passed to the client."""
        client = create_http_client(timeout=5.0, headers={"X-Test": "1"})
        assert client.timeout.read == 5.0
        assert client.headers["X-Test"] == "1"


class TestHandleHttpErrors:
    """Tests for handle_http_errors decorator."""

    @pytest.mark.asyncio
    async def test_returns_default_on_500(self, httpx_mock: "HTTPXMock") -> None:
        """Test decorator returns default value on 500 error."""
        httpx_mock.add_response(url="https://api.example.com/error", status_code=500)

        @handle_http_errors(default_return={"error": True}, log_errors=False)
        async def fetch_data(client: httpx.AsyncClient) -> dict:
            response = await client.get("https://api.example.com/error")
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient() as client:
            assert await fetch_data(client) == {"error": True}

    @pytest.mark.asyncio
    async def test_success_returns_value(self, httpx_mock: "HTTPXMock") -> None:
        """Test decorator passes through successful results."""
        httpx_mock.add_response(url="https://api.example.com/data", json=[1])

        @handle_http_errors(default_return=[])
        async def fetch_data(client: httpx.AsyncClient) -> list:
            response = await client.get("https://api.example.com/data")
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient() as client:
            assert await fetch_data(client) == [1]

    @pytest.mark.asyncio
    async def test_logs_non_404_status_errors(
        self, httpx_mock: "HTTPXMock", caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test non-404 status errors are logged as warnings."""
        httpx_mock.add_response(url="https://api.example.com/error", status_code=502)

        @handle_http_errors()
        async def fetch_data(client: httpx.AsyncClient) -> dict:
            response = await client.get("https://api.example.com/error")
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient() as client:
            with caplog.at_level(logging.WARNING):
                assert await fetch_data(client) is None

        assert any("502" in record.message for record in caplog.records)


class TestLogAndSuppressErrors:
    """Tests for log_and_suppress_errors context manager."""

    @pytest.mark.asyncio
    async def test_suppresses_error_by_default(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test errors are logged and suppressed."""
        with caplog.at_level(logging.WARNING):
            async with log_and_suppress_errors("Closing client"):
                raise RuntimeError("boom")

        assert any("Closing client failed" in record.message for record in caplog.records)

    @pytest.mark.asyncio
    async def test_reraises_when_suppress_false(self) -> None:
        """Test errors propagate when suppress is False."""
        with pytest.raises(RuntimeError):
            async with log_and_suppress_errors("Closing client", suppress=False):
                raise RuntimeError("boom")
