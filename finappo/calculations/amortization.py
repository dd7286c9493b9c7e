"""
Loan Amortization Calculations

Implements loan payment and amortization schedule calculations for any
combination of compounding period and payment frequency, with optional
extra payments. Payment math matches Excel's PMT, IPMT, and PPMT functions.
"""

import math
from dataclasses import dataclass, field
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from finappo.calculations.tvm import (
    PAYOFF_THRESHOLD,
    PERIODS_PER_YEAR,
    calculate_payment,
    effective_periodic_rate,
    periods_per_year,
)

DEFAULT_START_DATE = date(2026, 1, 1)

MAX_TERM_YEARS = 50
MAX_INTEREST_RATE = 100


@dataclass
class OneTimePayment:
    month: int
    amount: float


@dataclass
class ExtraPayments:
    """Extra principal payments, keyed by (equivalent) month number."""

    monthly_extra: float = 0.0
    monthly_extra_start_month: int = 1
    yearly_extra: float = 0.0
    yearly_extra_start_month: int = 12
    one_time_payments: List[OneTimePayment] = field(default_factory=list)


@dataclass
class AmortizationInputs:
    loan_amount: float
    term_years: int
    term_months: int = 0
    interest_rate: float = 0.0  # Annual percentage
    compound_frequency: str = "monthly"
    payment_frequency: str = "monthly"
    start_date: Optional[date] = None


@dataclass
class AmortizationResults:
    loan_amount: float
    regular_payment: float
    total_paid: float
    total_interest: float
    total_principal: float
    payoff_date: date
    effective_rate: float
    schedule: List[Dict]
    annual_summary: List[Dict]


def total_payment_count(term_years: int, term_months: int, payment_frequency: str) -> int:
    """Number of payments for a term of years plus months."""
    total_months = term_years * 12 + term_months
    return int(round(total_months / 12 * periods_per_year(payment_frequency)))


def extra_payment_for_month(
    extra: Optional[ExtraPayments], month: int, payments_per_month: float = 1.0
) -> float:
    """
    Extra principal due in a given month.

    Args:
        extra: Extra payment plan, or None
        month: 1-based month number
        payments_per_month: Payments per month, used to prorate the monthly extra

    Returns:
        Total extra principal for the payment
    """
    if extra is None:
        return 0.0

    amount = 0.0

    if extra.monthly_extra > 0 and month >= extra.monthly_extra_start_month:
        amount += extra.monthly_extra / payments_per_month

    if (
        extra.yearly_extra > 0
        and month >= extra.yearly_extra_start_month
        and (month - extra.yearly_extra_start_month) % 12 == 0
    ):
        amount += extra.yearly_extra

    for payment in extra.one_time_payments:
        if payment.month == month:
            amount += payment.amount

    return amount


def calculate_payment_date(start_date: date, offset: int, payment_frequency: str) -> date:
    """Date of the payment `offset` periods after the first payment."""
    if payment_frequency == "monthly":
        return start_date + relativedelta(months=offset)
    if payment_frequency == "semi-monthly":
        # 1st and 15th of each month
        day = 15 if offset % 2 == 1 else 1
        return start_date + relativedelta(months=offset // 2, day=day)
    if payment_frequency == "bi-weekly":
        return start_date + relativedelta(days=14 * offset)
    if payment_frequency == "weekly":
        return start_date + relativedelta(days=7 * offset)
    if payment_frequency == "daily":
        return start_date + relativedelta(days=offset)
    if payment_frequency == "quarterly":
        return start_date + relativedelta(months=3 * offset)
    if payment_frequency == "semi-annually":
        return start_date + relativedelta(months=6 * offset)
    if payment_frequency == "annually":
        return start_date + relativedelta(years=offset)
    raise ValueError(f"Unknown payment frequency: {payment_frequency}")


def calculate_amortization(
    inputs: AmortizationInputs, extra_payments: Optional[ExtraPayments] = None
) -> AmortizationResults:
    """
    Generate a full amortization schedule with totals.

    Extra payments are keyed by month; for non-monthly frequencies each
    payment maps to the month it falls in, and the monthly extra is split
    across the payments in a month. The schedule stops once the balance is
    paid off.
    """
    rate = effective_periodic_rate(
        inputs.interest_rate, inputs.compound_frequency, inputs.payment_frequency
    )
    ppy = periods_per_year(inputs.payment_frequency)
    payments = total_payment_count(
        inputs.term_years, inputs.term_months, inputs.payment_frequency
    )
    regular_payment = calculate_payment(inputs.loan_amount, rate, payments)
    start_date = inputs.start_date or DEFAULT_START_DATE

    schedule = []
    balance = inputs.loan_amount
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for payment_number in range(1, payments + 1):
        if balance <= PAYOFF_THRESHOLD:
            break

        interest = balance * rate
        principal = regular_payment - interest

        equivalent_month = math.ceil(payment_number * 12 / ppy)
        extra = extra_payment_for_month(extra_payments, equivalent_month, ppy / 12)

        # Never pay more than the outstanding balance
        if principal + extra > balance:
            principal = balance
            extra = 0.0

        balance = max(0.0, balance - principal - extra)
        cumulative_principal += principal + extra
        cumulative_interest += interest

        payment_date = calculate_payment_date(
            start_date, payment_number - 1, inputs.payment_frequency
        )

        schedule.append(
            {
                "payment_number": payment_number,
                "date": payment_date.isoformat(),
                "payment": round(regular_payment, 2),
                "principal": round(principal, 2),
                "interest": round(interest, 2),
                "extra_payment": round(extra, 2),
                "balance": round(balance, 2),
                "cumulative_principal": round(cumulative_principal, 2),
                "cumulative_interest": round(cumulative_interest, 2),
            }
        )

    if schedule:
        payoff_date = date.fromisoformat(schedule[-1]["date"])
    else:
        payoff_date = start_date

    return AmortizationResults(
        loan_amount=inputs.loan_amount,
        regular_payment=regular_payment,
        total_paid=cumulative_principal + cumulative_interest,
        total_interest=cumulative_interest,
        total_principal=cumulative_principal,
        payoff_date=payoff_date,
        effective_rate=rate,
        schedule=schedule,
        annual_summary=summarize_by_year(schedule, ppy),
    )


def summarize_by_year(schedule: List[Dict], payments_per_year: float) -> List[Dict]:
    """Roll schedule rows up into loan years for charting."""
    years: Dict[int, Dict] = {}
    for row in schedule:
        year = math.ceil(row["payment_number"] / payments_per_year)
        summary = years.setdefault(
            year,
            {"year": year, "principal": 0.0, "interest": 0.0, "extra_payment": 0.0},
        )
        summary["principal"] += row["principal"]
        summary["interest"] += row["interest"]
        summary["extra_payment"] += row["extra_payment"]
        summary["ending_balance"] = row["balance"]

    return [
        {
            "year": s["year"],
            "principal": round(s["principal"], 2),
            "interest": round(s["interest"], 2),
            "extra_payment": round(s["extra_payment"], 2),
            "ending_balance": s["ending_balance"],
        }
        for s in years.values()
    ]


def calculate_dscr(noi: float, debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        noi: Net Operating Income for the period
        debt_service: Debt service for the period

    Returns:
        DSCR ratio
    """
    if debt_service == 0:
        return float("inf")
    return noi / debt_service


def calculate_loan_constant(
    principal: float, annual_rate: float, amortization_years: int
) -> float:
    """Calculate loan constant (annual debt service / loan amount)."""
    monthly_payment = calculate_payment(principal, annual_rate / 100 / 12, amortization_years * 12)
    return monthly_payment * 12 / principal if principal > 0 else 0.0


def validate_amortization_inputs(inputs: AmortizationInputs) -> List[str]:
    errors = []

    if inputs.loan_amount <= 0:
        errors.append("Loan amount must be greater than 0")
    if inputs.term_years < 0 or inputs.term_months < 0:
        errors.append("Loan term cannot be negative")
    elif inputs.term_years * 12 + inputs.term_months <= 0:
        errors.append("Loan term must be at least one month")
    elif inputs.term_years * 12 + inputs.term_months > MAX_TERM_YEARS * 12:
        errors.append(f"Loan term cannot exceed {MAX_TERM_YEARS} years")
    if inputs.interest_rate < 0:
        errors.append("Interest rate cannot be negative")
    elif inputs.interest_rate > MAX_INTEREST_RATE:
        errors.append(f"Interest rate cannot exceed {MAX_INTEREST_RATE}%")
    if inputs.payment_frequency not in PERIODS_PER_YEAR or inputs.payment_frequency == "continuously":
        errors.append(f"Unknown payment frequency: {inputs.payment_frequency}")
    if inputs.compound_frequency not in PERIODS_PER_YEAR:
        errors.append(f"Unknown compound frequency: {inputs.compound_frequency}")

    return errors
