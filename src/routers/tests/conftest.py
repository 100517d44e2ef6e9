"""Shared fixtures for the HTTP API tests.

Every test gets a fresh ``CycleState`` injected through FastAPI's dependency
overrides, so tests never share profile, period or symptom data.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from src.cycle_engine.config_loader import load_engine_config
from src.main import create_app
from src.services.state import CycleState, get_state

V1 = "/api/v1"


@pytest.fixture
def state() -> CycleState:
    return CycleState(load_engine_config())


@pytest.fixture
def client(state: CycleState) -> Iterator[TestClient]:
    app = create_app()
    app.dependency_overrides[get_state] = lambda: state
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anchored(client: TestClient) -> TestClient:
    """Client whose profile is anchored on 2026-02-01 (28/5 cycle)."""
    response = client.put(f"{V1}/cycle/profile", json={"anchor_date": "2026-02-01"})
    assert response.status_code == 200
    return client
