"""
Mortgage Calculations

Monthly payment breakdown (P&I, escrow, PMI, HOA), full amortization with
extra payments, PMI removal at 78% of the original home price, and lifetime
cost totals.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from finappo.calculations.amortization import (
    DEFAULT_START_DATE,
    ExtraPayments,
    extra_payment_for_month,
)
from finappo.calculations.tvm import calculate_monthly_payment

PMI_DOWN_PAYMENT_THRESHOLD = 0.20
PMI_REMOVAL_LTV = 0.78


@dataclass
class MortgageInputs:
    home_price: float
    down_payment: float
    loan_term: int  # Years
    interest_rate: float  # Annual percentage
    property_tax: float = 0.0  # Annual
    home_insurance: float = 0.0  # Annual
    pmi: float = 0.0  # Annual
    hoa_fee: float = 0.0  # Monthly
    other_costs: float = 0.0  # Monthly
    start_date: Optional[date] = None


@dataclass
class MonthlyPaymentBreakdown:
    principal_and_interest: float
    property_tax: float
    home_insurance: float
    pmi: float
    hoa_fee: float
    other_costs: float
    total_monthly: float


@dataclass
class MortgageTotals:
    total_mortgage_payment: float
    total_interest: float
    total_of_all_payments: float
    total_property_tax: float
    total_home_insurance: float
    total_pmi: float
    total_hoa: float
    total_other_costs: float


@dataclass
class MortgageResults:
    loan_amount: float
    monthly_payment: MonthlyPaymentBreakdown
    totals: MortgageTotals
    pmi_removal_month: Optional[int]
    payoff_date: date
    schedule: List[Dict]


def calculate_loan_amount(home_price: float, down_payment: float) -> float:
    return max(0.0, home_price - down_payment)


def is_pmi_required(home_price: float, down_payment: float) -> bool:
    """PMI applies when the down payment is under 20% of the price."""
    if home_price <= 0:
        return False
    return down_payment / home_price < PMI_DOWN_PAYMENT_THRESHOLD


def calculate_pmi_removal_month(home_price: float, schedule: List[Dict]) -> Optional[int]:
    """First month the balance is at or below 78% of the original home price."""
    threshold = home_price * PMI_REMOVAL_LTV
    for index, row in enumerate(schedule):
        if row["balance"] <= threshold:
            return index + 1
    return None


def calculate_monthly_breakdown(inputs: MortgageInputs) -> MonthlyPaymentBreakdown:
    """Monthly housing payment including escrow, PMI, HOA and other costs."""
    loan_amount = calculate_loan_amount(inputs.home_price, inputs.down_payment)
    principal_and_interest = calculate_monthly_payment(
        loan_amount, inputs.interest_rate, inputs.loan_term
    )
    property_tax = inputs.property_tax / 12
    home_insurance = inputs.home_insurance / 12
    pmi = inputs.pmi / 12 if is_pmi_required(inputs.home_price, inputs.down_payment) else 0.0

    return MonthlyPaymentBreakdown(
        principal_and_interest=principal_and_interest,
        property_tax=property_tax,
        home_insurance=home_insurance,
        pmi=pmi,
        hoa_fee=inputs.hoa_fee,
        other_costs=inputs.other_costs,
        total_monthly=(
            principal_and_interest
            + property_tax
            + home_insurance
            + pmi
            + inputs.hoa_fee
            + inputs.other_costs
        ),
    )


def generate_mortgage_schedule(
    inputs: MortgageInputs, extra_payments: Optional[ExtraPayments] = None
) -> List[Dict]:
    """
    Generate the monthly amortization schedule.

    Rows keep unrounded values so PMI removal and totals are exact; callers
    round for display.
    """
    loan_amount = calculate_loan_amount(inputs.home_price, inputs.down_payment)
    monthly_rate = inputs.interest_rate / 100 / 12
    monthly_payment = calculate_monthly_payment(
        loan_amount, inputs.interest_rate, inputs.loan_term
    )
    start_date = inputs.start_date or DEFAULT_START_DATE

    schedule = []
    balance = loan_amount
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for month in range(1, inputs.loan_term * 12 + 1):
        if balance <= 0:
            break

        interest = balance * monthly_rate
        principal = monthly_payment - interest
        extra = extra_payment_for_month(extra_payments, month)

        if principal + extra > balance:
            principal = balance
            extra = 0.0

        balance = max(0.0, balance - principal - extra)
        cumulative_principal += principal + extra
        cumulative_interest += interest

        schedule.append(
            {
                "month": month,
                "date": (start_date + relativedelta(months=month - 1)).isoformat(),
                "payment": monthly_payment,
                "principal": principal,
                "interest": interest,
                "extra_payment": extra,
                "balance": balance,
                "cumulative_principal": cumulative_principal,
                "cumulative_interest": cumulative_interest,
            }
        )

    return schedule


def calculate_mortgage(
    inputs: MortgageInputs, extra_payments: Optional[ExtraPayments] = None
) -> MortgageResults:
    """
    Calculate the full mortgage picture.

    Escrow, HOA and other costs accrue for every month actually paid; PMI
    accrues until the removal month (or for the whole loan if the balance
    never reaches 78% of the price).
    """
    loan_amount = calculate_loan_amount(inputs.home_price, inputs.down_payment)
    breakdown = calculate_monthly_breakdown(inputs)
    schedule = generate_mortgage_schedule(inputs, extra_payments)

    total_interest = sum(row["interest"] for row in schedule)
    actual_months = len(schedule)

    pmi_removal_month = None
    if breakdown.pmi > 0:
        pmi_removal_month = calculate_pmi_removal_month(inputs.home_price, schedule)
    pmi_months = pmi_removal_month or actual_months

    total_mortgage_payment = loan_amount + total_interest
    total_property_tax = breakdown.property_tax * actual_months
    total_home_insurance = breakdown.home_insurance * actual_months
    total_pmi = breakdown.pmi * pmi_months
    total_hoa = inputs.hoa_fee * actual_months
    total_other_costs = inputs.other_costs * actual_months

    totals = MortgageTotals(
        total_mortgage_payment=total_mortgage_payment,
        total_interest=total_interest,
        total_of_all_payments=(
            total_mortgage_payment
            + total_property_tax
            + total_home_insurance
            + total_pmi
            + total_hoa
            + total_other_costs
        ),
        total_property_tax=total_property_tax,
        total_home_insurance=total_home_insurance,
        total_pmi=total_pmi,
        total_hoa=total_hoa,
        total_other_costs=total_other_costs,
    )

    start_date = inputs.start_date or DEFAULT_START_DATE

    return MortgageResults(
        loan_amount=loan_amount,
        monthly_payment=breakdown,
        totals=totals,
        pmi_removal_month=pmi_removal_month,
        payoff_date=start_date + relativedelta(months=actual_months),
        schedule=[_round_row(row) for row in schedule],
    )


def _round_row(row: Dict) -> Dict:
    return {
        key: value if key in ("month", "date") else round(value, 2)
        for key, value in row.items()
    }


def validate_mortgage_inputs(inputs: MortgageInputs) -> List[str]:
    errors = []

    if inputs.home_price <= 0:
        errors.append("Home price must be greater than 0")
    if inputs.down_payment < 0:
        errors.append("Down payment cannot be negative")
    elif inputs.down_payment > inputs.home_price:
        errors.append("Down payment cannot exceed home price")
    if not 1 <= inputs.loan_term <= 50:
        errors.append("Loan term must be between 1 and 50 years")
    if inputs.interest_rate < 0:
        errors.append("Interest rate cannot be negative")
    elif inputs.interest_rate > 100:
        errors.append("Interest rate cannot exceed 100%")
    for name in ("property_tax", "home_insurance", "pmi", "hoa_fee", "other_costs"):
        if getattr(inputs, name) < 0:
            errors.append(f"{name.replace('_', ' ').capitalize()} cannot be negative")

    return errors
