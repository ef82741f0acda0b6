import csv
import io

import pytest

from loan_compare_web.app import app

LOAN = {"principal": 1_200_000, "rate": 12, "term": 12, "type": "equal_principal"}


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


class TestCalculate:
    def test_json_request(self, client):
        response = client.post("/api/calculate", json=LOAN)
        assert response.status_code == 200
        data = response.get_json()
        assert data["type"] == "equal_principal"
        assert data["total_interest"] == 78000
        assert data["total_payment"] == 1278000
        assert data["validation"]["is_valid"] is True
        assert "schedule" not in data

    def test_form_request(self, client):
        response = client.post(
            "/api/calculate",
            data={"principal": "1200000", "rate": "12", "term": "12", "type": "bullet"},
        )
        assert response.status_code == 200
        assert response.get_json()["bullet_warning"] == "Principal of 1,200,000 is due in full at maturity"

    def test_unknown_type_falls_back(self, client):
        response = client.post("/api/calculate", json={**LOAN, "type": "whatever"})
        assert response.get_json()["type"] == "equal_payment"

    def test_invalid_input(self, client):
        response = client.post("/api/calculate", json={**LOAN, "term": 0})
        assert response.status_code == 400
        assert "Loan term must be between 1 and 600 months." in response.get_json()["errors"]

    def test_missing_fields(self, client):
        response = client.post("/api/calculate", json={})
        assert response.status_code == 400
        assert "Loan amount must be a number." in response.get_json()["errors"]


def test_schedule(client):
    payload = {"principal": 1_000_000, "rate": 12, "term": 24, "grace": 12, "type": "grace_equal_payment"}
    data = client.post("/api/schedule", json=payload).get_json()
    assert len(data["schedule"]) == 24
    assert data["schedule"][0]["is_grace_period"] is True
    assert data["schedule"][12]["payment"] == 88849
    assert data["summary"]["repayment_months"] == 12


def test_schedule_csv(client):
    response = client.post("/api/schedule.csv", json=LOAN)
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "schedule_equal_principal.csv" in response.headers["Content-Disposition"]
    text = response.get_data(as_text=True)
    assert text.startswith("\ufeff")
    rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    assert rows[0] == ["period", "payment", "principal", "interest", "balance", "note"]
    assert rows[-1] == ["total", "1278000", "1200000", "78000", "0", ""]


def test_compare(client):
    payload = {"loan_a": {**LOAN, "type": "bullet"}, "loan_b": LOAN}
    data = client.post("/api/compare", json=payload).get_json()
    assert data["higher_interest"] == "A"
    assert data["total_interest_diff"] == 66000


def test_compare_requires_both_loans(client):
    response = client.post("/api/compare", json={"loan_a": LOAN})
    assert response.status_code == 400


def test_validate(client):
    data = client.post("/api/validate", json={"principal": 1_000_000, "rate": 5, "term": 12, "grace": 12, "type": "grace_equal_principal"}).get_json()
    assert data["valid"] is False
    assert data["errors"] == ["Grace period must be shorter than the loan term."]


def test_policies(client):
    data = client.get("/api/policies").get_json()
    assert [p["type"] for p in data] == [
        "equal_payment",
        "equal_principal",
        "bullet",
        "grace_equal_payment",
        "grace_equal_principal",
    ]
