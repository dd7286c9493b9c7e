"""
Compound Interest Calculations

Growth of an initial investment plus regular contributions under periodic
or continuous compounding, with tax on interest and inflation adjustment.
"""

import math
from dataclasses import dataclass
from typing import List, Dict

from finappo.calculations.tvm import PERIODS_PER_YEAR, periods_per_year


@dataclass
class CompoundInterestInputs:
    initial_investment: float
    interest_rate: float  # Annual percentage
    years: int = 10
    months: int = 0
    compounding_frequency: str = "monthly"
    monthly_contribution: float = 0.0
    annual_contribution: float = 0.0  # Spread evenly across months
    contribution_timing: str = "end"  # "beginning" or "end" of period
    tax_rate: float = 0.0  # Percentage applied to interest
    inflation_rate: float = 0.0  # Percentage


@dataclass
class CompoundInterestResults:
    ending_balance: float
    total_principal: float
    total_contributions: float
    total_interest: float
    interest_from_initial: float
    interest_from_contributions: float
    after_tax_amount: float
    inflation_adjusted_amount: float
    effective_annual_rate: float
    total_return: float  # Percentage
    schedule: List[Dict]  # One row per year
    monthly_schedule: List[Dict]


def months_crossed(period: int, compounds_per_year: int) -> int:
    """Number of month boundaries that fall inside a compounding period."""
    return (period * 12) // compounds_per_year - ((period - 1) * 12) // compounds_per_year


def _row(period, month, year, deposit, interest, balance, deposits, total_interest) -> Dict:
    return {
        "period": period,
        "month": month,
        "year": year,
        "deposit": round(deposit, 2),
        "interest": round(interest, 2),
        "balance": round(balance, 2),
        "cumulative_deposits": round(deposits, 2),
        "cumulative_interest": round(total_interest, 2),
    }


def _summaries(
    inputs: CompoundInterestInputs,
    total_years: float,
    balance: float,
    contributions: float,
    interest: float,
) -> Dict:
    invested = contributions + inputs.initial_investment
    total_return = interest / invested * 100 if invested > 0 else 0.0
    return {
        "ending_balance": balance,
        "total_principal": inputs.initial_investment,
        "total_contributions": contributions,
        "total_interest": interest,
        # Tax is already taken out of interest as it accrues
        "after_tax_amount": balance,
        "inflation_adjusted_amount": balance / (1 + inputs.inflation_rate / 100) ** total_years,
        "effective_annual_rate": total_return / total_years if total_years > 0 else 0.0,
        "total_return": total_return,
    }


def calculate_compound_interest(inputs: CompoundInterestInputs) -> CompoundInterestResults:
    """
    Calculate compound growth.

    The monthly contribution (plus 1/12 of the annual contribution) is
    deposited in whichever compounding period each month ends in, so
    quarterly compounding receives three months of deposits at once and
    daily compounding one deposit per month. Interest is split between the
    initial and contributed portions in proportion to their balances.
    """
    total_years = inputs.years + inputs.months / 12

    if inputs.compounding_frequency == "continuously":
        return _calculate_continuous(inputs, total_years)

    compounds_per_year = int(periods_per_year(inputs.compounding_frequency))
    total_periods = math.floor(total_years * compounds_per_year)
    period_rate = inputs.interest_rate / 100 / compounds_per_year
    tax_rate = inputs.tax_rate / 100
    monthly_deposit = inputs.monthly_contribution + inputs.annual_contribution / 12

    balance = inputs.initial_investment
    from_initial = inputs.initial_investment
    from_contributions = 0.0
    interest_from_initial = 0.0
    interest_from_contributions = 0.0
    total_interest = 0.0
    total_contributions = 0.0

    detailed = []
    monthly = []

    for period in range(1, total_periods + 1):
        crossed = months_crossed(period, compounds_per_year)
        deposit = monthly_deposit * crossed if monthly_deposit else 0.0

        if inputs.contribution_timing == "beginning":
            balance += deposit
            from_contributions += deposit
            total_contributions += deposit

        net_interest = balance * period_rate * (1 - tax_rate)
        if balance > 0:
            initial_share = net_interest * from_initial / balance
            contribution_share = net_interest * from_contributions / balance
        else:
            initial_share = contribution_share = 0.0

        interest_from_initial += initial_share
        interest_from_contributions += contribution_share
        from_initial += initial_share
        from_contributions += contribution_share
        balance += net_interest
        total_interest += net_interest

        if inputs.contribution_timing != "beginning":
            balance += deposit
            from_contributions += deposit
            total_contributions += deposit

        month = math.ceil(period * 12 / compounds_per_year)
        year = math.ceil(period / compounds_per_year)
        deposits_to_date = inputs.initial_investment + total_contributions

        detailed.append(
            _row(period, month, year, deposit, net_interest, balance, deposits_to_date, total_interest)
        )
        if compounds_per_year >= 12 and crossed:
            monthly.append(
                _row(
                    len(monthly) + 1,
                    len(monthly) + 1,
                    math.ceil((len(monthly) + 1) / 12),
                    deposit,
                    net_interest,
                    balance,
                    deposits_to_date,
                    total_interest,
                )
            )

    annual: Dict[int, Dict] = {}
    for row in detailed:
        summary = annual.setdefault(
            row["year"], {"deposit": 0.0, "interest": 0.0}
        )
        summary["deposit"] += row["deposit"]
        summary["interest"] += row["interest"]
        summary["last"] = row

    schedule = [
        {
            "period": year,
            "month": year * 12,
            "year": year,
            "deposit": round(s["deposit"], 2),
            "interest": round(s["interest"], 2),
            "balance": s["last"]["balance"],
            "cumulative_deposits": s["last"]["cumulative_deposits"],
            "cumulative_interest": s["last"]["cumulative_interest"],
        }
        for year, s in annual.items()
    ]

    return CompoundInterestResults(
        interest_from_initial=interest_from_initial,
        interest_from_contributions=interest_from_contributions,
        schedule=schedule,
        monthly_schedule=monthly if compounds_per_year >= 12 else detailed,
        **_summaries(inputs, total_years, balance, total_contributions, total_interest),
    )


def _continuous_balance(inputs: CompoundInterestInputs, t: float):
    """
    Balance components after t years of continuous compounding.

    Returns:
        (initial_interest, contributions, contribution_interest)
    """
    r = inputs.interest_rate / 100
    keep = 1 - inputs.tax_rate / 100
    monthly_deposit = inputs.monthly_contribution + inputs.annual_contribution / 12

    initial_interest = inputs.initial_investment * (math.exp(r * t) - 1) * keep

    contributions = 0.0
    contribution_interest = 0.0
    for month in range(1, math.floor(t * 12 + 1e-9) + 1):
        remaining = max(0.0, t - month / 12)
        contributions += monthly_deposit
        contribution_interest += monthly_deposit * (math.exp(r * remaining) - 1) * keep

    return initial_interest, contributions, contribution_interest


def _calculate_continuous(
    inputs: CompoundInterestInputs, total_years: float
) -> CompoundInterestResults:
    """Continuous compounding: A = P·e^(rt), deposits made at each month end."""
    initial_interest, contributions, contribution_interest = _continuous_balance(
        inputs, total_years
    )
    total_interest = initial_interest + contribution_interest
    balance = inputs.initial_investment + initial_interest + contributions + contribution_interest

    schedule = []
    previous_interest = 0.0
    previous_deposits = 0.0
    for year in range(1, math.ceil(total_years) + 1):
        t = min(year, total_years)
        i_initial, deposits, i_contrib = _continuous_balance(inputs, t)
        interest_to_date = i_initial + i_contrib
        schedule.append(
            _row(
                year,
                year * 12,
                year,
                deposits - previous_deposits,
                interest_to_date - previous_interest,
                inputs.initial_investment + deposits + interest_to_date,
                inputs.initial_investment + deposits,
                interest_to_date,
            )
        )
        previous_interest = interest_to_date
        previous_deposits = deposits

    return CompoundInterestResults(
        interest_from_initial=initial_interest,
        interest_from_contributions=contribution_interest,
        schedule=schedule,
        monthly_schedule=[],
        **_summaries(inputs, total_years, balance, contributions, total_interest),
    )


def validate_compound_interest_inputs(inputs: CompoundInterestInputs) -> List[str]:
    errors = []

    if inputs.initial_investment < 0:
        errors.append("Initial investment cannot be negative")
    if inputs.interest_rate < 0:
        errors.append("Interest rate cannot be negative")
    elif inputs.interest_rate > 100:
        errors.append("Interest rate cannot exceed 100%")
    if inputs.years < 0 or inputs.months < 0:
        errors.append("Investment length cannot be negative")
    elif inputs.years == 0 and inputs.months == 0:
        errors.append("Investment length must be at least one month")
    elif inputs.years + inputs.months / 12 > 100:
        errors.append("Investment length cannot exceed 100 years")
    if inputs.monthly_contribution < 0 or inputs.annual_contribution < 0:
        errors.append("Contributions cannot be negative")
    if not 0 <= inputs.tax_rate <= 100:
        errors.append("Tax rate must be between 0% and 100%")
    if inputs.contribution_timing not in ("beginning", "end"):
        errors.append("Contribution timing must be 'beginning' or 'end'")
    if inputs.compounding_frequency not in PERIODS_PER_YEAR:
        errors.append(f"Unknown compounding frequency: {inputs.compounding_frequency}")

    return errors
