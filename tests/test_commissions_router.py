"""HTTP tests for the commission endpoints."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.main import app
from app.services.commission import BulkCommissionCalculator

from factories import (
    PERIOD,
    build_calculator,
    financial_period,
    flat,
    make_employee,
    target_based,
)


@pytest.fixture
def client():
    calculator = build_calculator(
        [
            make_employee("e1", flat("10"), sales="1000"),
            make_employee("e2", target_based("4"), sales="12000", target="10000"),
            make_employee("e3", flat("10"), sales="5000", eligible=False),
        ],
        periods=[financial_period(net_profit="50000", revenue="200000")],
    )
    app.dependency_overrides[deps.get_commission_calculator] = lambda: calculator
    app.dependency_overrides[deps.get_bulk_calculator] = lambda: BulkCommissionCalculator(calculator)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_healthz(client):
    response = client.get("/api/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_calculate(client):
    response = client.post(
        "/api/commissions/calculate",
        json={"employee_id": "e1", "period": PERIOD, "bonuses": "25", "deductions": 5},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["employee_id"] == "e1"
    assert Decimal(body["base_commission"]) == Decimal("100")
    assert Decimal(body["final_commission"]) == Decimal("120")
    assert body["calculation_details"]["tier_breakdown"] is None


def test_calculate_ineligible_employee(client):
    response = client.post(
        "/api/commissions/calculate",
        json={"employee_id": "e3", "period": PERIOD, "bonuses": "25"},
    )

    assert response.status_code == 200
    assert Decimal(response.json()["final_commission"]) == Decimal("0")


def test_calculate_requires_employee(client):
    response = client.post("/api/commissions/calculate", json={"period": PERIOD})
    assert response.status_code == 422


def test_bulk(client):
    response = client.post("/api/commissions/bulk", json={"period": PERIOD})

    assert response.status_code == 200
    body = response.json()
    assert body["total_employees"] == 2
    assert Decimal(body["total_commissions"]) == Decimal("620")
    assert [p["employee_id"] for p in body["summary"]["top_performers"]] == ["e2", "e1"]


def test_projection(client):
    response = client.post(
        "/api/commissions/projections",
        json={"employee_id": "e1", "current_period": PERIOD, "projected_sales": "20000"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["period"] == f"{PERIOD}-projected"
    assert Decimal(body["final_commission"]) == Decimal("2000")


def test_validate_structure_reports_all_errors(client):
    response = client.post(
        "/api/commissions/structures/validate",
        json={"type": "tiered", "name": "Press sales", "base_rate": 150, "tiers": []},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert len(body["errors"]) == 2


def test_validate_structure_accepts_good_structure(client):
    response = client.post(
        "/api/commissions/structures/validate",
        json={"type": "target-based", "name": "Account managers", "base_rate": 4, "target_amount": 10000},
    )

    assert response.status_code == 200
    assert response.json() == {"valid": True, "errors": []}


def test_validate_structure_unknown_type(client):
    response = client.post(
        "/api/commissions/structures/validate",
        json={"type": "hourly", "name": "x", "base_rate": 5},
    )
    assert response.status_code == 422


def test_pool(client):
    response = client.get("/api/commissions/pool", params={"period": PERIOD})

    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["total_pool"]) == Decimal("5000")
    assert Decimal(body["allocated_amount"]) == Decimal("620")
    assert Decimal(body["remaining_pool"]) == Decimal("4380")


def test_pool_percentage_is_bounded(client):
    response = client.get("/api/commissions/pool", params={"period": PERIOD, "pool_percentage": 150})
    assert response.status_code == 422
