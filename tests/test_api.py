"""
Tests for the calculator API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from finappo.main import app
from finappo.api import CALCULATORS


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


# ============================================================================
# CATALOG AND HEALTH CHECK TESTS
# ============================================================================

class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_check(self, client, settings):
        """Test health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == settings.version


class TestCatalog:
    """Test calculator catalog."""

    def test_list_calculators(self, client):
        """Test every calculator is listed with its endpoint."""
        response = client.get("/api/calculators")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == len(CALCULATORS)
        slugs = {item["slug"] for item in data}
        assert {"mortgage", "irr", "take-home-pay"} <= slugs
        assert data[0]["endpoint"] == "/api/calculate/amortization"


# ============================================================================
# LOAN CALCULATOR TESTS
# ============================================================================

class TestLoanAPI:
    """Test loan calculator endpoints."""

    def test_calculate_amortization(self, client):
        """Test amortization schedule endpoint."""
        response = client.post(
            "/api/calculate/amortization",
            json={"loan_amount": 10000, "term_years": 2, "interest_rate": 6},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["schedule"]) == 24
        assert 443 < data["regular_payment"] < 444
        assert data["schedule"][0]["date"] == "2026-01-01"

    def test_amortization_with_extra_payments(self, client):
        """Test extra payments pass through to the schedule."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "loan_amount": 200000,
                "term_years": 30,
                "interest_rate": 6,
                "start_date": "2027-03-01",
                "extra_payments": {
                    "monthly_extra": 100,
                    "one_time_payments": [{"month": 6, "amount": 10000}],
                },
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["schedule"][0]["date"] == "2027-03-01"
        assert data["schedule"][5]["extra_payment"] == 10100
        assert len(data["schedule"]) < 360

    def test_amortization_validation_errors(self, client):
        """Test invalid inputs return every validation message."""
        response = client.post(
            "/api/calculate/amortization",
            json={"loan_amount": -5, "term_years": 0, "interest_rate": 5},
        )
        assert response.status_code == 400
        errors = response.json()["detail"]["errors"]
        assert "Loan amount must be greater than 0" in errors
        assert "Loan term must be at least one month" in errors

    def test_amortization_schema_error(self, client):
        """Test missing required fields fail schema validation."""
        response = client.post("/api/calculate/amortization", json={"loan_amount": 1000})
        assert response.status_code == 422

    def test_schedule_truncated(self, client, settings):
        """Test returned rows are capped while totals cover the full loan."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "loan_amount": 200000,
                "term_years": 50,
                "interest_rate": 6,
                "payment_frequency": "weekly",
                "compound_frequency": "weekly",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["schedule"]) == settings.max_schedule_rows
        assert abs(data["total_principal"] - 200000) < 0.02

    def test_calculate_tvm(self, client):
        """Test TVM payment solve with schedule."""
        response = client.post(
            "/api/calculate/tvm",
            json={"solve_for": "pmt", "n": 360, "iy": 6, "pv": 200000, "include_schedule": True},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["solve_for"] == "PMT"
        assert abs(data["results"]["pmt"] + 1199.10) < 0.01
        assert len(data["schedule"]) == 360

    def test_tvm_no_solution(self, client):
        """Test impossible TVM solve returns 400."""
        response = client.post(
            "/api/calculate/tvm",
            json={"solve_for": "N", "iy": 0, "pv": 1000, "fv": -2000},
        )
        assert response.status_code == 400

    def test_tvm_rate_without_root(self, client):
        """Test a rate solve with no sign change returns 400."""
        response = client.post(
            "/api/calculate/tvm",
            json={"solve_for": "IY", "n": 360, "pv": 100, "pmt": 100, "fv": 100},
        )
        assert response.status_code == 400
        assert "Cannot solve for interest rate" in response.json()["detail"]

    def test_tvm_future_value_overflow(self, client):
        """Test a future value too large for a float returns 400."""
        response = client.post(
            "/api/calculate/tvm",
            json={
                "solve_for": "FV",
                "n": 2000,
                "iy": 100,
                "pv": -1000,
                "payments_per_year": 1,
                "compounds_per_year": 1,
            },
        )
        assert response.status_code == 400

    def test_tvm_schedule_row_limit(self, client, settings):
        """Test the TVM schedule is built only up to the row limit."""
        response = client.post(
            "/api/calculate/tvm",
            json={
                "solve_for": "PMT",
                "n": 18000,
                "iy": 6,
                "pv": 200000,
                "payments_per_year": 365,
                "compounds_per_year": 365,
                "include_schedule": True,
            },
        )
        assert response.status_code == 200
        assert len(response.json()["schedule"]) == settings.max_schedule_rows

    def test_tvm_period_limit(self, client):
        """Test period counts beyond the limit are rejected."""
        response = client.post(
            "/api/calculate/tvm",
            json={"solve_for": "PMT", "n": 3000000, "iy": 6, "pv": 200000},
        )
        assert response.status_code == 400
        assert "Number of periods cannot exceed 18250" in response.json()["detail"]["errors"]

    def test_amortization_rate_and_term_limits(self, client):
        """Test extreme rates and terms are rejected before any schedule is built."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "loan_amount": 100000,
                "term_years": 5000,
                "interest_rate": 100000,
                "payment_frequency": "daily",
            },
        )
        assert response.status_code == 400
        errors = response.json()["detail"]["errors"]
        assert "Loan term cannot exceed 50 years" in errors
        assert "Interest rate cannot exceed 100%" in errors

    def test_calculate_mortgage(self, client):
        """Test mortgage endpoint."""
        response = client.post(
            "/api/calculate/mortgage",
            json={
                "home_price": 400000,
                "down_payment": 80000,
                "loan_term": 30,
                "interest_rate": 6.5,
                "property_tax": 4800,
                "home_insurance": 1500,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["loan_amount"] == 320000
        assert abs(data["monthly_payment"]["principal_and_interest"] - 2022.62) < 0.01
        assert data["pmi_removal_month"] is None
        assert data["payoff_date"] == "2056-01-01"

    def test_calculate_heloc(self, client):
        """Test HELOC endpoint with schedule."""
        response = client.post(
            "/api/calculate/heloc",
            json={"loan_amount": 50000, "interest_rate": 8},
        )
        assert response.status_code == 200
        data = response.json()
        assert abs(data["draw_period_payment"] - 333.33) < 0.01
        assert len(data["schedule"]) == 360

    def test_calculate_fha_loan(self, client):
        """Test FHA endpoint with conventional comparison."""
        response = client.post(
            "/api/calculate/fha-loan",
            json={
                "home_price": 300000,
                "down_payment": 10500,
                "interest_rate": 6.5,
                "compare_conventional": True,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["loan_details"]["mip_duration"] is None
        assert data["conventional"]["loan_amount"] == 240000

    def test_fha_minimum_down_payment(self, client):
        """Test FHA down payment rule."""
        response = client.post(
            "/api/calculate/fha-loan",
            json={"home_price": 300000, "down_payment": 1000, "interest_rate": 6.5},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == [
            "FHA loans require a minimum down payment of 3.5%"
        ]

    def test_calculate_va_loan(self, client):
        """Test VA endpoint with funding fee and conventional comparison."""
        response = client.post(
            "/api/calculate/va-loan",
            json={
                "home_price": 500000,
                "interest_rate": 6.5,
                "compare_conventional": True,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["loan_details"]["funding_fee_rate"] == 2.15
        assert abs(data["loan_details"]["total_loan_amount"] - 510750) < 0.001
        assert data["conventional"]["loan_amount"] == 400000

    def test_va_loan_validation(self, client):
        """Test VA service type check."""
        response = client.post(
            "/api/calculate/va-loan",
            json={"home_price": 300000, "interest_rate": 6.5, "service_type": "guard"},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Unknown service type: guard"]

    def test_calculate_auto_loan(self, client):
        """Test auto loan endpoint."""
        response = client.post(
            "/api/calculate/auto-loan",
            json={"auto_price": 30000, "down_payment": 5000, "sales_tax_rate": 7},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["loan_amount"] == 27100


# ============================================================================
# PLANNING CALCULATOR TESTS
# ============================================================================

class TestPlanningAPI:
    """Test planning calculator endpoints."""

    def test_calculate_roth_ira(self, client):
        """Test Roth IRA endpoint with eligibility."""
        response = client.post(
            "/api/calculate/roth-ira",
            json={
                "current_age": 30,
                "retirement_age": 65,
                "annual_contribution": 6500,
                "start_year": 2026,
                "modified_agi": 160000,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_principal"] == 227500
        assert data["eligibility"] == "partial"
        assert len(data["projection"]) == 36

    def test_roth_ira_over_limit(self, client):
        """Test contribution limit message."""
        response = client.post(
            "/api/calculate/roth-ira",
            json={"current_age": 30, "retirement_age": 65, "annual_contribution": 9000},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == [
            "Annual contribution exceeds 2025 IRS limit of $7,000"
        ]

    def test_calculate_budget(self, client):
        """Test budget endpoint."""
        response = client.post(
            "/api/calculate/budget",
            json={
                "income": {"salary": 5000},
                "expenses": {"housing": {"mortgage": 1500}},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["surplus_deficit"] == 3500
        assert data["benchmarks"]["housing"]["status"] == "good"

    def test_calculate_take_home_pay(self, client):
        """Test take-home pay endpoint."""
        response = client.post(
            "/api/calculate/take-home-pay",
            json={"gross_salary": 50000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["social_security_tax"] == 3100
        assert data["medicare_tax"] == 725
        assert "bi_weekly" in data["net_pay_by_period"]

    def test_take_home_pay_unknown_status(self, client):
        """Test unknown filing status is rejected."""
        response = client.post(
            "/api/calculate/take-home-pay",
            json={"gross_salary": 50000, "filing_status": "widowed"},
        )
        assert response.status_code == 400

    def test_calculate_compound_interest(self, client):
        """Test compound interest endpoint."""
        response = client.post(
            "/api/calculate/compound-interest",
            json={
                "initial_investment": 10000,
                "interest_rate": 6,
                "years": 5,
                "monthly_contribution": 200,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert abs(data["ending_balance"] - 27442.51) < 0.01
        assert len(data["schedule"]) == 5


# ============================================================================
# INVESTMENT CALCULATOR TESTS
# ============================================================================

class TestInvestmentAPI:
    """Test investment calculator endpoints."""

    def test_calculate_real_estate(self, client):
        """Test real estate endpoint."""
        response = client.post(
            "/api/calculate/real-estate",
            json={"home_price": 400000, "analysis_years": 10},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["loan_amount"] == 320000
        assert len(data["yearly_data"]) == 10
        assert data["investment"] is None

    def test_all_cash_rental_dscr(self, client):
        """Test DSCR without debt serializes as null."""
        response = client.post(
            "/api/calculate/real-estate",
            json={"home_price": 300000, "down_payment_percent": 100, "monthly_rent": 2000},
        )
        assert response.status_code == 200
        assert response.json()["investment"]["dscr"] is None

    def test_calculate_irr(self, client):
        """Test IRR calculation endpoint."""
        response = client.post(
            "/api/calculate/irr",
            json={
                "cash_flows": [
                    {"period": 0, "amount": -100000},
                    {"period": 1, "amount": 30000},
                    {"period": 2, "amount": 40000},
                    {"period": 3, "amount": 50000},
                    {"period": 4, "amount": 20000},
                ],
                "finance_rate": 8,
                "reinvestment_rate": 10,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert abs(data["irr"] - 15.32) < 0.05
        assert data["mirr"] is not None
        assert data["multiple"] == 1.4
        assert data["profit_loss"] == 40000

    def test_calculate_irr_monthly_flows(self, client):
        """Test monthly cash flows return an annualized IRR."""
        response = client.post(
            "/api/calculate/irr",
            json={
                "cash_flows": [
                    {"period": 0, "amount": -1000},
                    {"period": 1, "amount": 1010},
                ],
                "periods_per_year": 12,
            },
        )
        assert response.status_code == 200
        assert abs(response.json()["annualized_irr"] - 12.6825) < 0.001

    def test_calculate_xirr(self, client):
        """Test XIRR when dates are supplied."""
        response = client.post(
            "/api/calculate/irr",
            json={
                "cash_flows": [
                    {"period": 0, "amount": -100},
                    {"period": 1, "amount": 50},
                    {"period": 2, "amount": 60},
                ],
                "dates": ["2025-01-01", "2026-01-01", "2027-01-01"],
            },
        )
        assert response.status_code == 200
        assert 0 < response.json()["xirr"] < 20

    def test_calculate_irr_invalid_cash_flows(self, client):
        """Test IRR with invalid cash flows."""
        response = client.post(
            "/api/calculate/irr",
            json={
                "cash_flows": [
                    {"period": 0, "amount": 100},
                    {"period": 1, "amount": 100},
                ],
            },
        )
        assert response.status_code == 400
        assert (
            "At least one negative cash flow (investment) is required"
            in response.json()["detail"]["errors"]
        )

    def test_calculate_rent_vs_buy(self, client):
        """Test rent vs buy endpoint."""
        response = client.post(
            "/api/calculate/rent-vs-buy",
            json={"home_price": 500000, "monthly_rent": 3000, "years_to_stay": 5},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["loan_amount"] == 400000
        assert data["better_option"] in ("buying", "renting")
        assert len(data["yearly_breakdown"]) == 5
        assert data["buying_costs"]["down_payment"] == 100000

    def test_rent_vs_buy_validation(self, client):
        """Test rent vs buy requires a rent."""
        response = client.post(
            "/api/calculate/rent-vs-buy",
            json={"home_price": 500000, "monthly_rent": 0},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Monthly rent must be greater than 0"]
