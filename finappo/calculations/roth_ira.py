"""
Roth IRA Calculations

Compares a tax-free Roth IRA against a taxable brokerage account receiving
the same contributions, year by year until retirement.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Dict, Optional

from finappo.calculations.formatting import format_currency, round_half_up

# 2025 IRS limits
CONTRIBUTION_LIMIT_UNDER_50 = 7000
CONTRIBUTION_LIMIT_50_PLUS = 8000
CATCH_UP_AGE = 50
SINGLE_INCOME_LIMIT = 153000
SINGLE_INCOME_LIMIT_MAX = 168000
MARRIED_INCOME_LIMIT = 230000
MARRIED_INCOME_LIMIT_MAX = 240000


@dataclass
class RothIRAInputs:
    current_age: int
    retirement_age: int
    current_balance: float = 0.0
    annual_contribution: float = 0.0
    maximize_contributions: bool = False
    expected_return: float = 6.0  # Annual percentage
    marginal_tax_rate: float = 25.0  # Percentage
    start_year: Optional[int] = None


@dataclass
class RothIRAResults:
    years_to_retirement: int
    roth_ira_balance: float
    taxable_account_balance: float
    total_principal: float
    roth_ira_interest: float
    taxable_account_interest: float
    roth_ira_total_tax: float
    taxable_account_total_tax: float
    difference: float
    effective_tax_savings: float
    percentage_advantage: float
    projection: List[Dict]


def contribution_limit(age: int) -> int:
    """IRS annual contribution limit including the age-50 catch-up."""
    return CONTRIBUTION_LIMIT_50_PLUS if age >= CATCH_UP_AGE else CONTRIBUTION_LIMIT_UNDER_50


def contribution_eligibility(modified_agi: float, married: bool = False) -> str:
    """
    Roth eligibility for a modified AGI.

    Returns:
        "full", "partial" (inside the phase-out range) or "none"
    """
    low, high = (
        (MARRIED_INCOME_LIMIT, MARRIED_INCOME_LIMIT_MAX)
        if married
        else (SINGLE_INCOME_LIMIT, SINGLE_INCOME_LIMIT_MAX)
    )
    if modified_agi < low:
        return "full"
    if modified_agi < high:
        return "partial"
    return "none"


def validate_roth_ira_inputs(inputs: RothIRAInputs) -> List[str]:
    errors = []

    if inputs.current_age < 18 or inputs.current_age > 100:
        errors.append("Current age must be between 18 and 100")
    if inputs.retirement_age < 50 or inputs.retirement_age > 100:
        errors.append("Retirement age must be between 50 and 100")
    if inputs.current_age >= inputs.retirement_age:
        errors.append("Current age must be less than retirement age")

    if inputs.current_balance < 0:
        errors.append("Current balance cannot be negative")
    if inputs.annual_contribution < 0:
        errors.append("Annual contribution cannot be negative")

    if not inputs.maximize_contributions and inputs.annual_contribution > 0:
        limit = contribution_limit(inputs.current_age)
        if inputs.annual_contribution > limit:
            errors.append(
                f"Annual contribution exceeds 2025 IRS limit of {format_currency(limit)}"
            )

    if inputs.expected_return < 0:
        errors.append("Expected return cannot be negative")
    if inputs.expected_return > 50:
        errors.append("Expected return seems unrealistic (over 50%)")
    if inputs.marginal_tax_rate < 0:
        errors.append("Tax rate cannot be negative")
    if inputs.marginal_tax_rate > 50:
        errors.append("Tax rate cannot exceed 50%")

    return errors


def calculate_roth_ira(inputs: RothIRAInputs) -> RothIRAResults:
    """
    Project Roth and taxable balances from today through retirement.

    Year 0 is the current year: the existing balance earns a year of return
    but no contribution is made. In later years interest is earned on the
    beginning balance, taxable gains are taxed at the marginal rate, and the
    contribution is added at year end.
    """
    years_to_retirement = inputs.retirement_age - inputs.current_age
    return_rate = inputs.expected_return / 100
    tax_rate = inputs.marginal_tax_rate / 100
    start_year = inputs.start_year or date.today().year

    roth_balance = inputs.current_balance
    taxable_balance = inputs.current_balance
    total_principal = inputs.current_balance
    roth_interest_total = 0.0
    taxable_interest_total = 0.0
    taxable_tax_total = 0.0
    projection = []

    for year in range(years_to_retirement + 1):
        age = inputs.current_age + year

        contribution = 0.0
        if year > 0:
            if inputs.maximize_contributions:
                contribution = contribution_limit(age)
            else:
                contribution = inputs.annual_contribution

        roth_interest = roth_balance * return_rate
        taxable_interest = taxable_balance * return_rate
        tax_on_gain = taxable_interest * tax_rate

        roth_balance += roth_interest
        roth_interest_total += roth_interest

        taxable_balance += taxable_interest - tax_on_gain
        taxable_interest_total += taxable_interest - tax_on_gain
        taxable_tax_total += tax_on_gain

        roth_balance += contribution
        taxable_balance += contribution
        total_principal += contribution

        projection.append(
            {
                "age": age,
                "year": start_year + year,
                "annual_contribution": contribution,
                "roth_balance": round_half_up(roth_balance),
                "roth_interest": round_half_up(roth_interest),
                "taxable_balance": round_half_up(taxable_balance),
                "taxable_interest": round_half_up(taxable_interest),
                "taxable_annual_tax": round_half_up(tax_on_gain),
                "cumulative_principal": total_principal,
            }
        )

    difference = roth_balance - taxable_balance
    advantage = difference / taxable_balance * 100 if taxable_balance > 0 else 0.0

    return RothIRAResults(
        years_to_retirement=years_to_retirement,
        roth_ira_balance=round_half_up(roth_balance),
        taxable_account_balance=round_half_up(taxable_balance),
        total_principal=total_principal,
        roth_ira_interest=round_half_up(roth_interest_total),
        taxable_account_interest=round_half_up(taxable_interest_total),
        roth_ira_total_tax=0.0,
        taxable_account_total_tax=round_half_up(taxable_tax_total),
        difference=round_half_up(difference),
        effective_tax_savings=round_half_up(taxable_tax_total),
        percentage_advantage=advantage,
        projection=projection,
    )
