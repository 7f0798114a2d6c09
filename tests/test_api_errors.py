"""Tests for the error envelopes returned by the app."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from pokebinder.db.database import get_session
from pokebinder.main import app


@pytest.fixture
async def failing_client():
    """Client whose database session breaks with an unexpected error."""
    broken = AsyncMock()
    broken.execute.side_effect = RuntimeError("connection pool exploded")

    async def override_get_session():
        yield broken

    app.dependency_overrides[get_session] = override_get_session

    # The server error middleware re-raises after responding; keep the response
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestErrorEnvelopes:
    async def test_known_failure_envelope(self, client: AsyncClient) -> None:
        response = await client.get("/binders/missing")

        assert response.status_code == 404
        assert response.json() == {
            "outcome": "known_failure",
            "failure": {
                "kind": "not_found",
                "message": "Binder not found.",
                "detail": "binder_id=missing",
                "suggestion": None,
            },
        }

    async def test_unexpected_error_is_unknown_failure(self, failing_client: AsyncClient) -> None:
        response = await failing_client.get("/binders/any")

        assert response.status_code == 500
        data = response.json()
        assert data["outcome"] == "unknown_failure"
        assert data["failure"]["kind"] == "unknown"
        assert data["failure"]["detail"] == "RuntimeError"
        assert "connection pool" not in response.text
