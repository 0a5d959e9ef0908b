# tests/errors/test_base.py
"""Tests for app/errors/base.py module."""

from unittest.mock import MagicMock

import pytest
from fastapi.responses import ORJSONResponse
from orjson import loads

from app.errors import BaseAppError, create_exception_handler


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_custom_values(self) -> None:
        """Test custom initialization values."""
        error = BaseAppError(detail="Custom error", status_code=400)
        assert error.detail == "Custom error"
        assert error.status_code == 400

    def test_str_representation(self) -> None:
        """Test string representation returns message."""
        error = BaseAppError(detail="Test error")
        assert str(error) == "Test error"


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.fixture
    def request_mock(self) -> MagicMock:
        request = MagicMock()
        request.client.host = "192.168.1.1"
        request.url.path = "/api/test"
        return request

    @pytest.mark.asyncio
    async def test_handler_with_base_app_error(self, request_mock: MagicMock) -> None:
        """Test handler with BaseAppError exception."""
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(request_mock, BaseAppError(detail="Test error", status_code=400))

        assert isinstance(response, ORJSONResponse)
        assert response.status_code == 400
        assert response.body == b'{"detail":"Test error"}'
        logger.warning.assert_called_once_with(
            "Test error for ip: 192.168.1.1 for endpoint /api/test",
        )

    @pytest.mark.asyncio
    async def test_handler_merges_extra_attributes(self, request_mock: MagicMock) -> None:
        """Test extra exception attributes are added to the payload."""
        error = BaseAppError(detail="Bad", status_code=422)
        error.field = "slug"

        response = await create_exception_handler(MagicMock())(request_mock, error)

        assert loads(response.body) == {"detail": "Bad", "field": "slug"}

    @pytest.mark.asyncio
    async def test_handler_with_plain_exception(self, request_mock: MagicMock) -> None:
        """Test handler falls back to 500 for exceptions without status."""
        response = await create_exception_handler(MagicMock())(request_mock, ValueError("x"))

        assert response.status_code == 500
        assert loads(response.body) == {"detail": "Internal Server Error"}
