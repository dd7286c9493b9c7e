"""
Tests for mortgage, HELOC, FHA, VA and auto loan calculators.
"""

import pytest
from datetime import date

from finappo.calculations.amortization import ExtraPayments, OneTimePayment
from finappo.calculations.mortgage import (
    MortgageInputs,
    calculate_monthly_breakdown,
    calculate_mortgage,
    is_pmi_required,
    validate_mortgage_inputs,
)
from finappo.calculations.heloc import (
    HELOCInputs,
    calculate_heloc,
    calculate_max_borrowing_amount,
    generate_heloc_schedule,
    validate_heloc_inputs,
)
from finappo.calculations.fha_loan import (
    FHALoanInputs,
    calculate_conventional_loan,
    calculate_fha_loan,
    get_annual_mip_rate,
    get_mip_duration,
    validate_fha_inputs,
)
from finappo.calculations.va_loan import (
    VALoanInputs,
    calculate_va_loan,
    get_funding_fee_rate,
    validate_va_inputs,
)
from finappo.calculations.auto_loan import (
    AutoLoanInputs,
    calculate_auto_loan,
    validate_auto_loan_inputs,
)


class TestMortgage:
    """Test mortgage calculations."""

    def test_principal_and_interest(self):
        """Test P&I and lifetime interest on a 30-year loan."""
        results = calculate_mortgage(
            MortgageInputs(home_price=400000, down_payment=80000, loan_term=30, interest_rate=6.5)
        )
        assert results.loan_amount == 320000
        assert abs(results.monthly_payment.principal_and_interest - 2022.62) < 0.01
        assert abs(results.totals.total_interest - 408142.36) < 1
        assert len(results.schedule) == 360

    def test_monthly_breakdown_with_escrow(self):
        """Test total monthly payment includes tax, insurance and other costs."""
        breakdown = calculate_monthly_breakdown(
            MortgageInputs(
                home_price=400000,
                down_payment=80000,
                loan_term=30,
                interest_rate=6.5,
                property_tax=4800,
                home_insurance=1500,
                other_costs=333.33,
            )
        )
        assert breakdown.pmi == 0
        assert abs(breakdown.total_monthly - 2880.95) < 0.01

    def test_pmi_with_small_down_payment(self):
        """Test PMI applies below 20% down and is removed at 78% of price."""
        inputs = MortgageInputs(
            home_price=300000,
            down_payment=30000,
            loan_term=30,
            interest_rate=6.75,
            property_tax=3600,
            home_insurance=1200,
            pmi=2700,
            hoa_fee=50,
            other_costs=200,
        )
        breakdown = calculate_monthly_breakdown(inputs)
        assert abs(breakdown.principal_and_interest - 1751.21) < 0.01
        assert breakdown.pmi == 225
        assert abs(breakdown.total_monthly - 2626.21) < 0.01

        results = calculate_mortgage(inputs)
        assert results.pmi_removal_month is not None
        assert 1 < results.pmi_removal_month < 360
        assert results.schedule[results.pmi_removal_month - 1]["balance"] <= 234000
        assert abs(results.totals.total_pmi - 225 * results.pmi_removal_month) < 0.01

    def test_pmi_not_required(self):
        """Test 20% down needs no PMI."""
        assert not is_pmi_required(400000, 80000)
        assert is_pmi_required(400000, 79999)
        assert not is_pmi_required(0, 0)

    def test_yearly_extra_payment(self):
        """Test yearly extra lands every twelfth month from the start month."""
        results = calculate_mortgage(
            MortgageInputs(home_price=400000, down_payment=80000, loan_term=30, interest_rate=6.5),
            ExtraPayments(yearly_extra=5000, yearly_extra_start_month=12),
        )
        assert results.schedule[10]["extra_payment"] == 0
        assert results.schedule[11]["extra_payment"] == 5000
        assert results.schedule[23]["extra_payment"] == 5000
        assert len(results.schedule) < 360

    def test_combined_extra_payments(self):
        """Test monthly, yearly and one-time extras add together."""
        results = calculate_mortgage(
            MortgageInputs(home_price=400000, down_payment=80000, loan_term=30, interest_rate=6.5),
            ExtraPayments(
                monthly_extra=100,
                yearly_extra=2000,
                yearly_extra_start_month=12,
                one_time_payments=[OneTimePayment(month=24, amount=5000)],
            ),
        )
        extras = [row["extra_payment"] for row in results.schedule]
        assert extras[0] == 100
        assert extras[11] == 2100
        assert extras[23] == 7100
        assert extras[24] == 100

    def test_payoff_date(self):
        """Test payoff date follows the number of months paid."""
        results = calculate_mortgage(
            MortgageInputs(
                home_price=200000,
                down_payment=40000,
                loan_term=15,
                interest_rate=5,
                start_date=date(2026, 1, 1),
            )
        )
        assert results.payoff_date == date(2041, 1, 1)

    def test_validate_mortgage_inputs(self):
        """Test validation messages."""
        errors = validate_mortgage_inputs(
            MortgageInputs(home_price=100000, down_payment=150000, loan_term=0, interest_rate=-1)
        )
        assert "Down payment cannot exceed home price" in errors
        assert "Loan term must be between 1 and 50 years" in errors
        assert "Interest rate cannot be negative" in errors


class TestHELOC:
    """Test HELOC calculations."""

    def test_standard_heloc(self):
        """Test 10-year draw and 20-year repayment."""
        results = calculate_heloc(
            HELOCInputs(loan_amount=50000, interest_rate=8, draw_period=10, repayment_period=20)
        )
        assert abs(results.draw_period_payment - 333.33) < 0.01
        assert abs(results.repayment_period_payment - 418.22) < 0.01
        assert abs(results.total_payment - (333.33 * 120 + 418.22 * 240)) < 2
        assert results.total_months == 360

    @pytest.mark.parametrize(
        "amount,rate,draw,repay,draw_payment,repay_payment",
        [
            (100000, 6.5, 5, 15, 541.67, 871.11),
            (75000, 7.25, 8, 12, 453.13, 781.32),
        ],
    )
    def test_heloc_payments(self, amount, rate, draw, repay, draw_payment, repay_payment):
        """Test draw and repayment payments for other terms."""
        results = calculate_heloc(HELOCInputs(amount, rate, draw, repay))
        assert abs(results.draw_period_payment - draw_payment) < 0.01
        assert abs(results.repayment_period_payment - repay_payment) < 0.01

    def test_large_line(self):
        """Test interest-only payment on a large line."""
        results = calculate_heloc(HELOCInputs(500000, 7, 10, 20))
        assert abs(results.draw_period_payment - 2916.67) < 0.01

    def test_zero_rate(self):
        """Test zero rate has no interest."""
        results = calculate_heloc(HELOCInputs(50000, 0, 10, 10))
        assert results.draw_period_payment == 0
        assert abs(results.repayment_period_payment - 416.67) < 0.01
        assert abs(results.total_payment - 50000) < 1e-6
        assert abs(results.total_interest) < 1e-6

    def test_schedule_phases(self):
        """Test schedule covers both phases and ends at zero."""
        results = calculate_heloc(HELOCInputs(50000, 8, 10, 20))
        schedule = generate_heloc_schedule(results)
        assert len(schedule) == 360
        assert schedule[119]["phase"] == "draw"
        assert schedule[119]["principal"] == 0
        assert schedule[120]["phase"] == "repayment"
        assert schedule[120]["month"] == 121
        assert schedule[-1]["balance"] == 0

    def test_max_borrowing_amount(self):
        """Test available credit against home equity."""
        assert calculate_max_borrowing_amount(500000, 300000, 0.85) == 125000
        assert calculate_max_borrowing_amount(300000, 300000, 0.85) == 0

    def test_validate_heloc_inputs(self):
        """Test validation messages."""
        errors = validate_heloc_inputs(HELOCInputs(0, -1, 10, 0))
        assert "Loan amount must be greater than 0" in errors
        assert "Interest rate cannot be negative" in errors
        assert "Repayment period must be at least 1 year" in errors

    def test_validate_heloc_limits(self):
        """Test period and rate ceilings."""
        errors = validate_heloc_inputs(HELOCInputs(50000, 500, 100, 1000))
        assert errors == [
            "Interest rate cannot exceed 100%",
            "Draw period cannot exceed 15 years",
            "Repayment period cannot exceed 30 years",
        ]


class TestFHALoan:
    """Test FHA loan calculations."""

    def test_minimum_down_payment_loan(self):
        """Test 3.5% down on a 30-year loan with financed UFMIP."""
        results = calculate_fha_loan(
            FHALoanInputs(
                home_price=500000,
                down_payment=17500,
                loan_term=30,
                interest_rate=6.5,
                property_tax=6000,
                home_insurance=1500,
            )
        )
        details = results.loan_details
        assert details.base_loan_amount == 482500
        assert abs(details.ufmip_amount - 8443.75) < 0.001
        assert abs(details.total_loan_amount - 490943.75) < 0.001
        assert details.annual_mip_rate == 0.55
        assert abs(details.monthly_mip_amount - 221.15) < 0.01
        assert details.mip_duration is None
        assert abs(results.monthly_payment.principal_and_interest - 3103.10) < 0.05
        assert abs(results.monthly_payment.total_monthly - 3949.24) < 0.05

    def test_fifteen_year_low_ltv(self):
        """Test 10% down on a 15-year loan gets the low rate and cancels."""
        results = calculate_fha_loan(
            FHALoanInputs(home_price=300000, down_payment=30000, loan_term=15, interest_rate=6)
        )
        details = results.loan_details
        assert details.annual_mip_rate == 0.15
        assert abs(details.monthly_mip_amount - 33.75) < 0.001
        assert details.mip_duration == 132
        assert results.schedule[131]["mip_payment"] > 0
        assert results.schedule[132]["mip_payment"] == 0

    def test_mip_rate_table(self):
        """Test MIP rates for high-balance and short-term loans."""
        assert get_annual_mip_rate(800000, 96.5, 30) == 0.75
        assert get_annual_mip_rate(800000, 90, 30) == 0.70
        assert get_annual_mip_rate(400000, 92, 15) == 0.40
        assert get_annual_mip_rate(800000, 75, 15) == 0.15
        assert get_annual_mip_rate(800000, 95, 15) == 0.65
        assert get_mip_duration(90) == 132
        assert get_mip_duration(90.1) is None

    def test_ufmip_paid_upfront(self):
        """Test upfront UFMIP is counted in totals instead of the loan."""
        financed = calculate_fha_loan(FHALoanInputs(300000, 10500, 30, 6.5))
        upfront = calculate_fha_loan(FHALoanInputs(300000, 10500, 30, 6.5, finance_ufmip=False))

        assert upfront.loan_details.total_loan_amount == upfront.loan_details.base_loan_amount
        assert (
            upfront.monthly_payment.principal_and_interest
            < financed.monthly_payment.principal_and_interest
        )
        schedule_mip = sum(row["mip_payment"] for row in upfront.schedule)
        assert abs(
            upfront.totals.total_mip - (schedule_mip + upfront.loan_details.ufmip_amount)
        ) < 1

    def test_conventional_comparison(self):
        """Test conventional loan for comparison."""
        conventional = calculate_conventional_loan(300000, 20, 30, 6.5)
        assert conventional.loan_amount == 240000
        assert abs(conventional.monthly_payment - 1516.96) < 0.01

    def test_validate_fha_inputs(self):
        """Test validation messages."""
        errors = validate_fha_inputs(FHALoanInputs(300000, 5000, 45, 35))
        assert "FHA loans require a minimum down payment of 3.5%" in errors
        assert "Loan term must be between 1 and 40 years" in errors
        assert "Interest rate must be between 0% and 30%" in errors


class TestAutoLoan:
    """Test auto loan calculations."""

    def test_tax_and_fees_financed(self):
        """Test tax and fees rolled into the loan."""
        results = calculate_auto_loan(
            AutoLoanInputs(
                auto_price=30000,
                loan_term=60,
                interest_rate=5,
                down_payment=5000,
                trade_in_value=2000,
                sales_tax_rate=7,
                other_fees=500,
            )
        )
        assert results.price_after_trade_in == 28000
        assert results.sales_tax == 1960
        assert results.loan_amount == 25460
        assert abs(results.monthly_payment - 480.46) < 0.01
        assert abs(results.total_cost - (results.total_payments + 5000)) < 1e-6

    def test_tax_and_fees_upfront(self):
        """Test tax and fees paid at purchase."""
        results = calculate_auto_loan(
            AutoLoanInputs(
                auto_price=30000,
                down_payment=5000,
                trade_in_value=2000,
                sales_tax_rate=7,
                other_fees=500,
                include_tax_fees_in_loan=False,
            )
        )
        assert results.loan_amount == 23000
        assert results.upfront_payment == 7460
        assert abs(results.total_cost - (results.total_payments + 7460)) < 1e-6

    def test_down_payment_covers_price(self):
        """Test no loan when the down payment covers everything."""
        results = calculate_auto_loan(AutoLoanInputs(auto_price=20000, down_payment=25000))
        assert results.loan_amount == 0
        assert results.monthly_payment == 0

    def test_validate_auto_loan_inputs(self):
        """Test validation messages."""
        errors = validate_auto_loan_inputs(AutoLoanInputs(auto_price=0, loan_term=0))
        assert "Auto price must be greater than 0" in errors
        assert "Loan term must be at least 1 month" in errors

    def test_validate_auto_loan_limits(self):
        """Test term and rate ceilings."""
        errors = validate_auto_loan_inputs(
            AutoLoanInputs(auto_price=30000, loan_term=600, interest_rate=250)
        )
        assert errors == [
            "Loan term cannot exceed 120 months",
            "Interest rate cannot exceed 100%",
        ]


class TestVALoan:
    """Test VA loan calculations."""

    def test_zero_down_first_use(self):
        """Test the 2.15% funding fee financed into a no-down loan."""
        results = calculate_va_loan(
            VALoanInputs(home_price=500000, loan_term=30, interest_rate=6.5)
        )
        details = results.loan_details
        assert details.base_loan_amount == 500000
        assert details.funding_fee_rate == 2.15
        assert abs(details.funding_fee_amount - 10750) < 0.001
        assert abs(details.total_loan_amount - 510750) < 0.001
        assert abs(results.monthly_payment.principal_and_interest - 3228.28) < 0.05

    def test_ten_percent_down(self):
        """Test the lowest fee tier at 10% down."""
        results = calculate_va_loan(
            VALoanInputs(home_price=400000, down_payment=40000, interest_rate=6.5)
        )
        details = results.loan_details
        assert abs(details.down_payment_percent - 10) < 0.001
        assert details.funding_fee_rate == 1.25
        assert abs(details.funding_fee_amount - 4500) < 0.001
        assert abs(details.total_loan_amount - 364500) < 0.001

    def test_funding_fee_tiers(self):
        """Test fee rates by down payment, prior use and disability."""
        assert get_funding_fee_rate(0, "regular", "first") == 2.15
        assert get_funding_fee_rate(0, "regular", "subsequent") == 3.3
        assert get_funding_fee_rate(5, "reserves", "subsequent") == 1.5
        assert get_funding_fee_rate(9.99, "regular", "first") == 1.5
        assert get_funding_fee_rate(10, "reserves", "first") == 1.25
        assert get_funding_fee_rate(0, "regular", "subsequent", is_disabled=True) == 0

    def test_fee_for_five_percent_down(self):
        """Test 5% down pays 1.5% of the base loan."""
        results = calculate_va_loan(
            VALoanInputs(home_price=300000, down_payment=15000, interest_rate=6)
        )
        assert abs(results.loan_details.funding_fee_amount - 4275) < 0.001

    def test_disabled_veteran_exempt(self):
        """Test no funding fee for exempt veterans."""
        results = calculate_va_loan(
            VALoanInputs(home_price=350000, interest_rate=6.5, is_disabled=True)
        )
        assert results.loan_details.funding_fee_amount == 0
        assert results.loan_details.total_loan_amount == 350000

    def test_fee_paid_at_closing(self):
        """Test an unfinanced fee is added to the total of all payments."""
        results = calculate_va_loan(
            VALoanInputs(
                home_price=500000,
                interest_rate=6.5,
                finance_funding_fee=False,
            )
        )
        totals = results.totals
        assert results.loan_details.total_loan_amount == 500000
        assert abs(
            totals.total_of_all_payments - totals.total_principal_and_interest - 10750
        ) < 0.01

    def test_escrow_and_schedule(self):
        """Test monthly escrow and a schedule that pays off on the final month."""
        results = calculate_va_loan(
            VALoanInputs(
                home_price=400000,
                interest_rate=6,
                property_tax=4800,
                home_insurance=1200,
                hoa_fee=50,
                start_date=date(2025, 1, 1),
            )
        )
        monthly = results.monthly_payment
        assert abs(monthly.property_tax - 400) < 0.001
        assert abs(monthly.home_insurance - 100) < 0.001
        assert abs(
            monthly.total_monthly - (monthly.principal_and_interest + 550)
        ) < 0.001
        assert len(results.schedule) == 360
        assert abs(results.schedule[-1]["balance"]) < 0.01
        assert results.payoff_date == date(2055, 1, 1)
        assert abs(results.totals.total_hoa - 18000) < 0.01

    def test_validate_va_inputs(self):
        """Test VA validation messages."""
        assert validate_va_inputs(VALoanInputs(home_price=300000, interest_rate=6.5)) == []
        errors = validate_va_inputs(
            VALoanInputs(
                home_price=0,
                down_payment=-1,
                loan_term=50,
                interest_rate=40,
                service_type="guard",
                loan_usage="third",
            )
        )
        assert len(errors) == 6
        assert "Down payment cannot exceed home price" in validate_va_inputs(
            VALoanInputs(home_price=300000, down_payment=400000, interest_rate=6.5)
        )
