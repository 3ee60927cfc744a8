"""Unit tests for the payout weight service."""

import pytest
from fastapi.testclient import TestClient

from orbital.api.app import app


@pytest.fixture
def client():
    return TestClient(app)


def test_payouts_for_eight_epochs(client):
    response = client.get("/payouts/8")

    assert response.status_code == 200
    body = response.json()
    assert [item["token"] for item in body] == [1, 2, 4, 8]
    assert body[0]["weight"] == pytest.approx(1 / 15)
    assert sum(item["weight"] for item in body) == pytest.approx(1.0)


def test_payouts_empty_for_zero(client):
    response = client.get("/payouts/0")

    assert response.status_code == 200
    assert response.json() == []


def test_payouts_rejects_non_integer(client):
    response = client.get("/payouts/abc")
    assert response.status_code == 422


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["uptime_seconds"] >= 0
