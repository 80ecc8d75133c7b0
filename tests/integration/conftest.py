"""
Integration Test Fixtures.

Fixtures for integration tests - uses real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.main import create_app


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(db_session: AsyncSession) -> Generator[FastAPI, None, None]:
    """
    Create the application with the database session overridden.

    Every request shares the test session, which is rolled back
    after the test.
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application = create_app()
    application.dependency_overrides[get_db_session] = override_get_db_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the application.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# Envelope Assertions
# =============================================================================


def _json(response: Response, expected_status: int) -> dict[str, Any]:
    assert response.status_code == expected_status, (
        f"{response.request.method} {response.request.url.path}: expected "
        f"{expected_status}, got {response.status_code}: {response.text}"
    )
    return response.json()


class ApiAssertions:
    """Checks for the ApiResponse / ErrorResponse envelopes."""

    @staticmethod
    def assert_success(response: Response, expected_status: int = 200) -> dict[str, Any]:
        body = _json(response, expected_status)
        assert body["success"] is True, body
        assert body["error"] is None, body
        return body

    @staticmethod
    def assert_error(
        response: Response,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        body = _json(response, expected_status)
        assert body["success"] is False, body
        assert body["data"] is None, body
        if expected_code is not None:
            assert body["error"]["code"] == expected_code, body["error"]
        return body

    @classmethod
    def assert_validation_error(cls, response: Response, field: str | None = None) -> dict[str, Any]:
        """422 envelope; `field` must appear in one of the reported locations."""
        body = cls.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field is not None:
            locations = [e["field"] for e in body["error"]["details"]["validation_errors"]]
            assert any(field in loc for loc in locations), locations
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
