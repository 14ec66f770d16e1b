"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import patch
from fastapi.testclient import TestClient
from fraudwatch.api.dependencies import get_velocity_signal

pytestmark = pytest.mark.integration


def transaction_body(**overrides) -> dict:
    body = {
        "transaction_id": "TXN-100",
        "amount": "42.50",
        "merchant_name": "Starbucks",
        "merchant_category": "Restaurant",
        "location": "Chicago, IL",
        "card_number": "****-****-****-4321",
        "timestamp": "2024-05-15T14:00:00",
    }
    body.update(overrides)
    return body


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/analyze-transaction", json=transaction_body())

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "fraudwatch_assessment" in response.text


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health").headers["X-Request-ID"]
    assert generated and generated != "req-123"


def test_analyze_high_risk_transaction(client: TestClient):
    """Test POST /v1/analyze-transaction with every red flag"""
    response = client.post(
        "/v1/analyze-transaction",
        json=transaction_body(
            transaction_id="TXN-high",
            amount=10000,
            location="Lagos, Nigeria",
            merchant_category="Travel",
            timestamp="2024-05-15T03:10:00",
            card_number="****-****-****-1111",
            merchant_name="TempMerchant",
        ),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    analysis = data["analysis"]
    assert analysis["risk_level"] == "high"
    assert analysis["confidence"] == 0.95
    for factor in (
        "Extremely high transaction amount",
        "High-risk geographic location",
        "Very unusual transaction time (2-5 AM)",
        "High-risk merchant category",
        "Suspicious card number pattern",
        "Suspicious merchant name pattern",
    ):
        assert factor in analysis["risk_factors"]


def test_analyze_medium_risk_transaction(client: TestClient):
    response = client.post(
        "/v1/analyze-transaction",
        json=transaction_body(
            amount="2999.99",
            location="Austin, TX",
            merchant_category="Online Services",
            timestamp="2024-05-15T23:00:00",
        ),
    )

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["risk_level"] == "medium"
    assert analysis["risk_factors"] == [
        "High transaction amount",
        "Late night/early morning transaction",
        "High-risk merchant category",
    ]


def test_analyze_uses_injected_velocity_signal(client: TestClient):
    client.app.dependency_overrides[get_velocity_signal] = lambda: 0.05

    response = client.post("/v1/analyze-transaction", json=transaction_body())

    analysis = response.json()["analysis"]
    assert analysis["risk_factors"] == ["High transaction velocity detected"]
    assert analysis["risk_level"] == "medium"


def test_analyze_is_repeatable(client: TestClient):
    first = client.post("/v1/analyze-transaction", json=transaction_body(amount="0.50"))
    second = client.post("/v1/analyze-transaction", json=transaction_body(amount="0.50"))

    assert first.json() == second.json()


@pytest.mark.parametrize(
    "body",
    [
        {"amount": "10.00"},
        transaction_body(amount="-5.00"),
        transaction_body(card_number="****-****-****-ABCD"),
        transaction_body(timestamp="yesterday"),
        transaction_body(transaction_id=""),
        {k: v for k, v in transaction_body().items() if k != "location"},
    ],
)
def test_analyze_invalid_transaction(client: TestClient, body: dict):
    response = client.post("/v1/analyze-transaction", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid transaction data"}


@pytest.mark.parametrize("amount", ["0.999", "1000.004", "100.004", "0.001"])
def test_analyze_rejects_sub_cent_amounts(client: TestClient, amount: str):
    response = client.post("/v1/analyze-transaction", json=transaction_body(amount=amount))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid transaction data"}


@pytest.mark.parametrize("amount", ["1e20", "92233720368547758.08"])
def test_analyze_rejects_amounts_too_large_to_store(client: TestClient, amount: str):
    response = client.post("/v1/analyze-transaction", json=transaction_body(amount=amount))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid transaction data"}
    assert client.get("/v1/transactions/TXN-100").status_code == 404


@pytest.mark.parametrize(
    "amount,expected",
    [
        ("0.99", ["Micro-transaction (card testing pattern)"]),
        ("1000.01", ["Above-average transaction amount"]),
        ("100.01", []),
        ("100.00", ["Round amount transaction"]),
    ],
)
def test_analyze_amount_rules_at_cent_precision(client: TestClient, amount: str, expected: list):
    response = client.post("/v1/analyze-transaction", json=transaction_body(amount=amount))

    assert response.status_code == 200
    assert response.json()["analysis"]["risk_factors"] == expected


@patch("fraudwatch.api.v1.analyze.assess")
def test_analyze_unexpected_failure(mock_assess, client: TestClient):
    mock_assess.side_effect = RuntimeError("boom")

    response = client.post("/v1/analyze-transaction", json=transaction_body())

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to analyze transaction"}


def test_assessed_transaction_is_stored(client: TestClient):
    client.post("/v1/analyze-transaction", json=transaction_body(transaction_id="TXN-store", amount="200.00"))

    response = client.get("/v1/transactions/TXN-store")

    assert response.status_code == 200
    data = response.json()
    assert data["transaction_id"] == "TXN-store"
    assert Decimal(str(data["amount"])) == Decimal("200.00")
    assert data["status"] == "pending"
    assert data["analysis"]["risk_factors"] == ["Round amount transaction"]


def test_reanalysis_overwrites_record(client: TestClient):
    client.post("/v1/analyze-transaction", json=transaction_body(transaction_id="TXN-dup", amount="10.00"))
    client.post("/v1/analyze-transaction", json=transaction_body(transaction_id="TXN-dup", amount="0.50"))

    records = client.get("/v1/transactions").json()["transactions"]
    matching = [r for r in records if r["transaction_id"] == "TXN-dup"]

    assert len(matching) == 1
    assert matching[0]["analysis"]["risk_level"] == "medium"


def test_list_transactions_limit(client: TestClient):
    for i in range(3):
        client.post("/v1/analyze-transaction", json=transaction_body(transaction_id=f"TXN-{i}"))

    assert len(client.get("/v1/transactions").json()["transactions"]) == 3
    assert len(client.get("/v1/transactions?limit=2").json()["transactions"]) == 2
    assert client.get("/v1/transactions?limit=0").status_code == 422


def test_get_and_delete_missing_transaction(client: TestClient):
    assert client.get("/v1/transactions/TXN-missing").status_code == 404
    assert client.delete("/v1/transactions/TXN-missing").status_code == 404


def test_delete_transaction(client: TestClient):
    client.post("/v1/analyze-transaction", json=transaction_body(transaction_id="TXN-del"))

    assert client.delete("/v1/transactions/TXN-del").status_code == 204
    assert client.get("/v1/transactions/TXN-del").status_code == 404


def test_live_snapshot(client: TestClient):
    response = client.get("/v1/live/snapshot")

    assert response.status_code == 200
    data = response.json()
    assert data["running"] is False
    assert len(data["transactions"]) == 10
    assert data["stats"]["total_transactions"] == 10
    assert all(t["analysis"]["risk_level"] in ("high", "medium", "low") for t in data["transactions"])


def test_live_quick_actions(client: TestClient):
    transaction_id = client.get("/v1/live/snapshot").json()["transactions"][0]["transaction_id"]

    response = client.post(f"/v1/live/transactions/{transaction_id}/block")
    assert response.status_code == 200
    assert response.json() == {"success": True, "transaction_id": transaction_id, "alert_id": None}

    snapshot = client.get("/v1/live/snapshot").json()
    blocked = next(t for t in snapshot["transactions"] if t["transaction_id"] == transaction_id)
    assert blocked["status"] == "blocked"
    assert blocked["risk_level"] == "high"

    assert client.post("/v1/live/transactions/TXN-missing/approve").status_code == 404
    assert client.post(f"/v1/live/transactions/{transaction_id}/escalate").status_code == 400
    assert client.delete("/v1/live/alerts/ALT-missing").status_code == 404


def test_live_dismiss_alert(client: TestClient, live_engine, make_transaction):
    live_engine.ingest(make_transaction(location="Kyiv, Ukraine", merchant_name="TempMerchant"), velocity_signal=0.5)
    alert_id = client.get("/v1/live/snapshot").json()["alerts"][0]["alert_id"]

    response = client.delete(f"/v1/live/alerts/{alert_id}")

    assert response.status_code == 200
    assert response.json()["alert_id"] == alert_id
    assert client.get("/v1/live/snapshot").json()["alerts"] == []
