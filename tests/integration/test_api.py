"""Integration tests for API endpoints"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient
from savings_allocator.config import settings


def tier_ids(payload, key="tiers"):
    return [row["tier_id"] for row in payload[key]]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["tiers"] == 5


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/allocation", json={"cash_amount": 1000})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "savings_allocation_total" in response.text


def test_catalog_endpoint(client: TestClient):
    data = client.get("/v1/catalog").json()

    assert data["bank_count"] == 4
    assert tier_ids(data) == ["A", "B-1", "B-2", "C", "D"]
    assert data["tiers"][3]["new_customer"]["cap_amount"] is None


def test_banks_endpoint_lists_codes_with_status(client: TestClient):
    client.put("/v1/accounts/B/owned")
    banks = client.get("/v1/catalog/banks").json()["banks"]

    assert [b["code"] for b in banks] == ["A", "B", "C", "D"]
    assert banks[1] == {"code": "B", "name": "Bank B-1", "status": "owned"}


def test_ranking_puts_active_accounts_first(client: TestClient):
    client.put("/v1/accounts/C/considering")
    data = client.get("/v1/ranking").json()

    assert data["policy"] == "per_code"
    assert tier_ids(data) == ["C", "B-1", "A", "D", "B-2"]
    assert data["tiers"][0]["rank"] == 1
    assert data["tiers"][0]["active"] is True
    assert data["tiers"][0]["priority"] == 1
    assert data["tiers"][1]["active"] is False


def test_allocation_endpoint(client: TestClient):
    client.put("/v1/accounts/A/owned")
    client.put("/v1/accounts/B/considering")

    response = client.post("/v1/allocation", json={"cash_amount": 400_000})
    assert response.status_code == 200
    data = response.json()

    deposits = {row["tier_id"]: row["deposit"] for row in data["allocations"]}
    # B-1 8% new (50k cap), A 2% existing (300k cap), B-2 1.5% takes the rest
    assert deposits == {"B-1": 50_000, "A": 300_000, "B-2": 50_000, "D": 0, "C": 0}
    assert data["total_interest"] == pytest.approx(4_000 + 6_000 + 750)
    assert data["remaining_cash"] == 0
    assert data["allocated_cash"] == 400_000
    assert sum(deposits.values()) + data["remaining_cash"] == data["cash_amount"]


def test_allocation_reports_unallocated_remainder(client: TestClient):
    client.put("/v1/accounts/D/owned")
    data = client.post("/v1/allocation", json={"cash_amount": 250_000}).json()

    assert data["remaining_cash"] == 150_000
    assert data["total_interest"] == pytest.approx(1_000)
    assert data["blended_rate_percent"] == pytest.approx(0.4)


def test_allocation_accepts_ten_thousand_unit_input(client: TestClient):
    client.put("/v1/accounts/C/considering")
    data = client.post("/v1/allocation", json={"cash_input": "25"}).json()

    assert data["cash_amount"] == 250_000
    assert data["allocations"][0]["tier_id"] == "C"
    assert data["allocations"][0]["deposit"] == 250_000


def test_negative_cash_clamped(client: TestClient):
    data = client.post("/v1/allocation", json={"cash_amount": -5}).json()

    assert data["cash_amount"] == 0
    assert data["total_interest"] == 0
    assert all(row["deposit"] == 0 for row in data["allocations"])


def test_allocation_without_cash_uses_last_amount(client: TestClient):
    client.post("/v1/allocation", json={"cash_amount": 123_000})

    data = client.post("/v1/allocation", json={}).json()
    assert data["cash_amount"] == 123_000
    assert client.get("/v1/preferences").json()["cash_amount"] == 123_000


def test_default_cash_when_never_entered(client: TestClient):
    data = client.post("/v1/allocation", json={}).json()
    assert data["cash_amount"] == settings.default_cash_amount


def test_mark_owned_clears_considering(client: TestClient):
    data = client.put("/v1/accounts/A/considering").json()
    assert data["status"] == "considering"
    assert "A" in data["considering_codes"]

    data = client.put("/v1/accounts/A/owned").json()
    assert data["status"] == "owned"
    assert "A" in data["owned_codes"]
    assert "A" not in data["considering_codes"]


def test_considering_ignored_for_owned_account(client: TestClient):
    client.put("/v1/accounts/A/owned")
    data = client.put("/v1/accounts/A/considering").json()

    assert data["status"] == "owned"


def test_unmark_transitions(client: TestClient):
    client.put("/v1/accounts/A/owned")
    assert client.delete("/v1/accounts/A/owned").json()["status"] == "neither"

    client.put("/v1/accounts/B/considering")
    assert client.delete("/v1/accounts/B/considering").json()["status"] == "neither"


def test_unknown_code_is_a_noop(client: TestClient):
    response = client.put("/v1/accounts/ZZZ/owned")

    assert response.status_code == 200
    assert response.json()["status"] == "neither"
    assert "ZZZ" not in response.json()["owned_codes"]


def test_status_changes_are_persisted(client: TestClient):
    client.put("/v1/accounts/A/owned")
    client.put("/v1/accounts/C/considering")

    prefs = client.get("/v1/preferences").json()
    assert "A" in prefs["owned_codes"]
    assert prefs["considering_codes"] == ["C"]


def test_preferences_defaults(client: TestClient):
    prefs = client.get("/v1/preferences").json()

    assert prefs["setup_completed"] is False
    assert prefs["view_mode"] == "card"
    assert prefs["theme"] == "system"
    assert prefs["include_new"] is True
    assert prefs["policy"] == "per_code"


def test_setup_complete(client: TestClient):
    prefs = client.post("/v1/preferences/setup-complete").json()
    assert prefs["setup_completed"] is True
    assert client.get("/v1/preferences").json()["setup_completed"] is True


def test_patch_preferences(client: TestClient):
    prefs = client.patch("/v1/preferences", json={"view_mode": "compact", "theme": "dark"}).json()

    assert prefs["view_mode"] == "compact"
    assert prefs["theme"] == "dark"


def test_patch_rejects_unknown_theme(client: TestClient):
    response = client.patch("/v1/preferences", json={"theme": "purple"})
    assert response.status_code == 422


def test_blanket_policy_via_preferences(client: TestClient):
    client.patch("/v1/preferences", json={"policy": "blanket", "include_new": True})
    data = client.post("/v1/allocation", json={"cash_amount": 60_000}).json()

    deposits = {row["tier_id"]: row["deposit"] for row in data["allocations"]}
    assert deposits["B-1"] == 50_000
    assert deposits["A"] == 10_000

    client.patch("/v1/preferences", json={"include_new": False})
    data = client.post("/v1/allocation", json={"cash_amount": 60_000}).json()
    assert data["remaining_cash"] == 60_000


def test_preferences_include_cash_in_entry_units(client: TestClient):
    client.patch("/v1/preferences", json={"cash_amount": 250_000})
    prefs = client.get("/v1/preferences").json()

    assert prefs["cash_amount"] == 250_000
    assert prefs["cash_input"] == 25


def fail_commit():
    raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


def test_failed_status_save_leaves_live_statuses_unchanged(client: TestClient, db: Session, monkeypatch):
    monkeypatch.setattr(db, "commit", fail_commit)
    response = client.put("/v1/accounts/C/considering")
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["detail"] == "Preference store unavailable"

    ranking = client.get("/v1/ranking").json()
    row = next(row for row in ranking["tiers"] if row["tier_id"] == "C")
    assert row["status"] == "neither"
    assert row["active"] is False
    assert client.get("/v1/preferences").json()["considering_codes"] == []


def test_failed_preference_save_leaves_allocator_unchanged(client: TestClient, db: Session, monkeypatch):
    monkeypatch.setattr(db, "commit", fail_commit)
    response = client.patch("/v1/preferences", json={"policy": "blanket", "cash_amount": 9_000})
    monkeypatch.undo()

    assert response.status_code == 500
    assert client.get("/v1/ranking").json()["policy"] == "per_code"
    assert client.get("/v1/preferences").json()["policy"] == "per_code"
    assert client.post("/v1/allocation", json={}).json()["cash_amount"] == settings.default_cash_amount


def test_failed_allocation_save_restores_previous_cash(client: TestClient, db: Session, monkeypatch):
    client.post("/v1/allocation", json={"cash_amount": 5_000})

    monkeypatch.setattr(db, "commit", fail_commit)
    response = client.post("/v1/allocation", json={"cash_amount": 9_000})
    monkeypatch.undo()

    assert response.status_code == 500
    assert client.post("/v1/allocation", json={}).json()["cash_amount"] == 5_000
