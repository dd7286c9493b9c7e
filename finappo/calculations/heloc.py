"""
HELOC Calculations

A home equity line of credit has two phases: an interest-only draw period
followed by a fully amortizing repayment period.
"""

from dataclasses import dataclass
from typing import List, Dict

from finappo.calculations.tvm import calculate_monthly_payment


@dataclass
class HELOCInputs:
    loan_amount: float
    interest_rate: float  # Annual percentage
    draw_period: int  # Years
    repayment_period: int  # Years


@dataclass
class HELOCResults:
    draw_period_payment: float
    repayment_period_payment: float
    total_payment: float
    total_interest: float
    total_months: int
    draw_months: int
    repayment_months: int
    loan_amount: float
    interest_rate: float


def calculate_draw_period_payment(loan_amount: float, interest_rate: float) -> float:
    """Interest-only monthly payment on the full line."""
    if loan_amount <= 0 or interest_rate <= 0:
        return 0.0
    return loan_amount * interest_rate / 100 / 12


def calculate_repayment_period_payment(
    loan_amount: float, interest_rate: float, repayment_years: int
) -> float:
    """Amortized monthly payment over the repayment period."""
    if loan_amount <= 0 or repayment_years <= 0:
        return 0.0
    return calculate_monthly_payment(loan_amount, interest_rate, repayment_years)


def calculate_heloc(inputs: HELOCInputs) -> HELOCResults:
    draw_payment = calculate_draw_period_payment(inputs.loan_amount, inputs.interest_rate)
    repayment_payment = calculate_repayment_period_payment(
        inputs.loan_amount, inputs.interest_rate, inputs.repayment_period
    )

    draw_months = inputs.draw_period * 12
    repayment_months = inputs.repayment_period * 12

    total_payment = draw_payment * draw_months + repayment_payment * repayment_months

    return HELOCResults(
        draw_period_payment=draw_payment,
        repayment_period_payment=repayment_payment,
        total_payment=total_payment,
        total_interest=total_payment - inputs.loan_amount,
        total_months=draw_months + repayment_months,
        draw_months=draw_months,
        repayment_months=repayment_months,
        loan_amount=inputs.loan_amount,
        interest_rate=inputs.interest_rate,
    )


def generate_heloc_schedule(results: HELOCResults) -> List[Dict]:
    """
    Month-by-month schedule across both phases.

    Month numbers continue from the draw period into the repayment period.
    """
    schedule = []
    monthly_rate = results.interest_rate / 100 / 12
    balance = results.loan_amount

    for month in range(1, results.draw_months + 1):
        schedule.append(
            {
                "month": month,
                "phase": "draw",
                "payment": round(results.draw_period_payment, 2),
                "principal": 0.0,
                "interest": round(balance * monthly_rate, 2),
                "balance": round(balance, 2),
            }
        )

    for month in range(1, results.repayment_months + 1):
        interest = balance * monthly_rate
        principal = results.repayment_period_payment - interest
        balance -= principal
        if balance < 0.01:
            balance = 0.0

        schedule.append(
            {
                "month": results.draw_months + month,
                "phase": "repayment",
                "payment": round(results.repayment_period_payment, 2),
                "principal": round(principal, 2),
                "interest": round(interest, 2),
                "balance": round(balance, 2),
            }
        )

    return schedule


def calculate_max_borrowing_amount(
    home_value: float, mortgage_balance: float, ltv_ratio: float
) -> float:
    """
    Credit available against a home.

    Args:
        home_value: Current appraised value
        mortgage_balance: Outstanding first-mortgage balance
        ltv_ratio: Maximum combined loan-to-value as decimal (e.g., 0.85)
    """
    if home_value <= 0 or ltv_ratio <= 0:
        return 0.0
    return max(0.0, home_value * ltv_ratio - mortgage_balance)


def validate_heloc_inputs(inputs: HELOCInputs) -> List[str]:
    errors = []

    if inputs.loan_amount <= 0:
        errors.append("Loan amount must be greater than 0")
    if inputs.interest_rate < 0:
        errors.append("Interest rate cannot be negative")
    elif inputs.interest_rate > 100:
        errors.append("Interest rate cannot exceed 100%")
    if inputs.draw_period < 0:
        errors.append("Draw period cannot be negative")
    elif inputs.draw_period > 15:
        errors.append("Draw period cannot exceed 15 years")
    if inputs.repayment_period < 1:
        errors.append("Repayment period must be at least 1 year")
    elif inputs.repayment_period > 30:
        errors.append("Repayment period cannot exceed 30 years")

    return errors
