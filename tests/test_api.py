import pytest
from fastapi.testclient import TestClient

import config
from main import app
from models.errors import DataFetchError
from routes import projections

USER = "api-user"


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "api.duckdb"))
    with TestClient(app) as client:
        yield client


def _seed(client):
    assert client.post(f"/accounts/{USER}", json={"name": "Checking", "initial_balance": "1,000.00"}).status_code == 201
    for body in (
        {"date": "2024-01-10", "type": "income", "amount": "500.00"},
        {"date": "2024-01-15", "type": "expense", "amount": 200},
        {"date": "2024-02-10", "type": "income", "amount": "800.00"},
        {"date": "2024-02-20", "type": "expense", "amount": "600.00"},
    ):
        assert client.post(f"/transactions/{USER}", json=body).status_code == 201


def test_month_projection(client):
    _seed(client)

    response = client.get(f"/projections/{USER}", params={"month": "2024-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["period_start"] == "2024-01-01"
    assert data["period_end"] == "2024-01-31"
    assert data["initial_balance"] == "1000.00"
    assert data["projected_income"] == "500.00"
    assert data["projected_expenses"] == "200.00"
    assert data["projected_balance"] == "1300.00"
    assert [t["date"] for t in data["income_transactions"]] == ["2024-01-10"]


def test_explicit_period_projection(client):
    _seed(client)

    response = client.get(f"/projections/{USER}", params={"start": "2024-01-12", "end": "2024-02-15"})

    data = response.json()
    assert data["initial_balance"] == "1500.00"
    assert data["projected_income"] == "800.00"
    assert data["projected_expenses"] == "200.00"


def test_chain_endpoint(client):
    _seed(client)

    response = client.post(f"/projections/{USER}/chain", json={
        "base_month": "2024-01",
        "target_month": "2024-02",
        "scenarios": [{"type": "income", "amount": "300.00", "description": "Raise"}],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["is_simulating"] is True
    assert [m["month"] for m in data["month_breakdown"]] == ["2024-01", "2024-02"]
    assert [m["projected_balance"] for m in data["month_breakdown"]] == ["1600.00", "2100.00"]
    assert data["original_projected_balance"] == "1500.00"


def test_recurrence_lifecycle(client):
    response = client.post(f"/recurrences/{USER}", json={
        "type": "expense", "amount": "100.00", "frequency": "monthly",
        "start_date": "2024-01-31", "description": "Gym",
    })
    assert response.status_code == 201
    recurrence_id = response.json()["id"]

    occurrences = client.get(
        f"/recurrences/{USER}/{recurrence_id}/occurrences",
        params={"start": "2024-02-01", "end": "2024-04-30"},
    ).json()
    assert occurrences["dates"] == ["2024-02-29", "2024-03-31", "2024-04-30"]

    first = client.post(f"/recurrences/{USER}/process", params={"months_ahead": 1}).json()
    second = client.post(f"/recurrences/{USER}/process", params={"months_ahead": 1}).json()
    assert first["inserted"] > 0
    assert second["inserted"] == 0

    toggled = client.patch(f"/recurrences/{USER}/{recurrence_id}/active", json={"is_active": False})
    assert toggled.json()["is_active"] is False


def test_invalid_rule_is_rejected(client):
    response = client.post(f"/recurrences/{USER}", json={
        "type": "expense", "amount": "10.00", "frequency": "monthly",
        "start_date": "2024-03-01", "end_date": "2024-02-01",
    })

    assert response.status_code == 422
    assert "end_date" in response.json()["error"]


def test_bad_month_and_unknown_recurrence(client):
    assert client.get(f"/projections/{USER}", params={"month": "March"}).status_code == 422
    assert client.get(f"/projections/{USER}", params={"start": "2024-01-01"}).status_code == 422
    missing = client.get(f"/recurrences/{USER}/404/occurrences",
                         params={"start": "2024-01-01", "end": "2024-01-31"})
    assert missing.status_code == 404


def test_store_failure_maps_to_503(client, monkeypatch):
    def unavailable(*args, **kwargs):
        raise DataFetchError("connection refused")

    monkeypatch.setattr(projections, "project_month", unavailable)

    response = client.get(f"/projections/{USER}", params={"month": "2024-01"})

    assert response.status_code == 503
    assert "connection refused" in response.json()["error"]


def test_amounts_beyond_storage_precision_are_rejected(client):
    too_big = "1e20"

    responses = [
        client.post(f"/accounts/{USER}", json={"name": "Checking", "initial_balance": too_big}),
        client.post(f"/transactions/{USER}",
                    json={"date": "2024-01-10", "type": "income", "amount": too_big}),
        client.post(f"/recurrences/{USER}", json={
            "type": "expense", "amount": too_big, "frequency": "monthly",
            "start_date": "2024-01-31",
        }),
        client.post(f"/projections/{USER}/chain", json={
            "base_month": "2024-01", "target_month": "2024-02",
            "scenarios": [{"type": "income", "amount": too_big}],
        }),
    ]

    assert [r.status_code for r in responses] == [422, 422, 422, 422]


def test_long_daily_occurrence_window(client):
    recurrence_id = client.post(f"/recurrences/{USER}", json={
        "type": "expense", "amount": "1.00", "frequency": "daily", "start_date": "2000-01-01",
    }).json()["id"]

    response = client.get(
        f"/recurrences/{USER}/{recurrence_id}/occurrences",
        params={"start": "2000-01-01", "end": "2030-12-31"},
    )

    assert response.status_code == 200
    assert response.json()["count"] == 11323


def test_chain_length_is_capped(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_CHAIN_MONTHS", 1)
    _seed(client)

    within = client.post(f"/projections/{USER}/chain",
                         json={"base_month": "2024-01", "target_month": "2024-02"})
    beyond = client.post(f"/projections/{USER}/chain",
                         json={"base_month": "2024-01", "target_month": "3000-01"})

    assert within.status_code == 200
    assert beyond.status_code == 422
