"""Shared fixtures for web route tests.

Provides a test FastAPI app backed by its own in-memory database and a
TestClient that runs the app lifespan, so the data context is registered
and the schema created exactly as in production.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from Restaurant_Guide.config import Settings
from Restaurant_Guide.web.app import create_app


@pytest.fixture()
def app(memory_connection_string: str, monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    """Create a test app over a fresh in-memory database."""
    # keep pytest's log capture handlers in place
    monkeypatch.setattr("Restaurant_Guide.web.app.configure_logging", lambda: None)
    return create_app(Settings(connection_string=memory_connection_string))


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create a synchronous test client with startup and shutdown run."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture()
def city_id(client: TestClient) -> int:
    """Id of a city created through the API."""
    response = client.post("/api/cities", json={"postal_code_prefix": 21})
    assert response.status_code == 201
    return int(response.json()["id"])
